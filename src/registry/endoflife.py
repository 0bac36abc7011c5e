"""endoflife.date provider for GitLab release cycles."""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from constants import Constants
from common.errors import DatasetError
from common.http_client import robust_get
from versioning.models import EolRecord

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    return str(value)


def parse_eol_records(data: Any) -> List[EolRecord]:
    """Decode the endoflife.date product payload.

    Records without a cycle are dropped. The ``eol`` value is kept verbatim.

    Raises:
        DatasetError: If the payload is not a JSON list.
    """
    if not isinstance(data, list):
        raise DatasetError("the end-of-life dataset is not a JSON list")

    records: List[EolRecord] = []
    for item in data:
        if not isinstance(item, dict) or item.get("cycle") in (None, ""):
            continue
        eol = item.get("eol")
        if not isinstance(eol, (str, bool)):
            eol = None
        records.append(
            EolRecord(
                cycle=str(item["cycle"]),
                latest=_text(item.get("latest")) or "",
                eol=eol,
                latest_release_date=_text(item.get("latestReleaseDate")),
                release_date=_text(item.get("releaseDate")),
            )
        )
    return records


def fetch_eol_records(url: Optional[str] = None) -> List[EolRecord]:
    """Download GitLab release cycles from endoflife.date.

    Raises:
        DatasetError: On transport failure, non-200 status or invalid JSON.
    """
    url = url or Constants.ENDOFLIFE_URL
    status, _, text = robust_get(url)
    if status == 0:
        raise DatasetError(
            f"error retrieving GitLab product information from endoflife.date API: {text}"
        )
    if status != 200:
        raise DatasetError(f"{url} did not respond with a 200 OK (status {status})")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"{url} did not return valid json: {exc}") from exc

    records = parse_eol_records(data)
    logger.info("Loaded %d release cycles from %s", len(records), url)
    return records
