"""Webpack manifest probe producing a TargetObservation."""
from __future__ import annotations

import json
import logging
from datetime import timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict

from constants import Constants
from common.errors import TargetError
from common.http_client import robust_get
from versioning.models import TargetObservation
from .normalize import Target

logger = logging.getLogger(__name__)

NOT_GITLAB = "Target is not a GitLab installation"


def parse_last_modified(value: str):
    """Parse an HTTP-date header into an aware datetime, or None."""
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_manifest(target: Target, payload: Any, headers: Dict[str, str]) -> TargetObservation:
    """Validate a decoded manifest and its headers.

    Raises:
        TargetError: If the payload is not a GitLab webpack manifest or the
            Last-Modified header is missing or invalid.
    """
    url = target.manifest_url
    if not isinstance(payload, dict) or not isinstance(payload.get("hash"), str):
        raise TargetError(
            f"likely not a GitLab installation as {url} did not return a (GitLab) webpack Manifest"
        )

    output_path = str(payload.get("outputPath") or "")
    if Constants.MANIFEST_PRODUCT_MARKER not in output_path:
        raise TargetError(
            f"the outputPath in {url} has no mention of '{Constants.MANIFEST_PRODUCT_MARKER}' in it",
            summary=NOT_GITLAB,
        )

    raw_modified = headers.get("last-modified", "")
    last_modified = parse_last_modified(raw_modified)
    if last_modified is None:
        raise TargetError(f"{url} returned no valid Last-Modified header ({raw_modified!r})")

    return TargetObservation(
        target=target.host,
        build_hash=payload["hash"],
        last_modified=last_modified,
        output_path=output_path,
    )


def fetch_observation(target: Target) -> TargetObservation:
    """Fetch the manifest of ``target`` and turn it into an observation.

    Raises:
        TargetError: On any fetch, decoding or validation failure.
    """
    url = target.manifest_url
    status, headers, text = robust_get(url)
    if status == 0:
        raise TargetError(text)
    if status != 200:
        raise TargetError(
            f"likely not a GitLab installation as {url} did not respond with a 200 OK (status {status})"
        )
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TargetError(
            f"likely not a GitLab installation as {url} did not return valid json"
        ) from exc

    observation = parse_manifest(target, payload, headers)
    logger.debug("Manifest of %s has hash %s", target.host, observation.build_hash)
    return observation
