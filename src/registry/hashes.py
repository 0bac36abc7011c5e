"""Hash dictionary provider (righel/gitlab-version-nse).

Downloads the mapping of webpack manifest hashes to GitLab build labels and
candidate versions, and decodes it into HashDictionaryEntry objects.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from constants import Constants
from common.errors import DatasetError
from common.http_client import robust_get
from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import HashDictionary, HashDictionaryEntry

logger = logging.getLogger(__name__)


def parse_hash_dictionary(data: Any) -> HashDictionary:
    """Decode the raw JSON mapping.

    Malformed entries are skipped rather than failing the whole dataset.

    Raises:
        DatasetError: If the payload is not a JSON object.
    """
    if not isinstance(data, dict):
        raise DatasetError("the hash dictionary is not a JSON object")

    dictionary: HashDictionary = {}
    skipped = 0
    for build_hash, info in data.items():
        if not isinstance(info, dict):
            skipped += 1
            continue
        build = info.get("build")
        versions = info.get("versions")
        if not isinstance(build, str) or not isinstance(versions, list):
            skipped += 1
            continue
        # Ordered, de-duplicated
        unique = tuple(dict.fromkeys(str(v) for v in versions if v))
        dictionary[build_hash] = HashDictionaryEntry(build=build, versions=unique)

    if skipped and is_debug_enabled(logger):
        logger.debug(
            "Skipped malformed hash entries",
            extra=extra_context(
                event="parse",
                component="hashes",
                action="parse_hash_dictionary",
                count=skipped
            )
        )
    return dictionary


def fetch_hash_dictionary(url: Optional[str] = None) -> HashDictionary:
    """Download and decode the hash dictionary.

    Raises:
        DatasetError: On transport failure, non-200 status or invalid JSON.
    """
    url = url or Constants.HASHES_URL
    status, _, text = robust_get(url)
    if status == 0:
        raise DatasetError(f"failed to retrieve GitLab hash dictionary from {url}: {text}")
    if status != 200:
        raise DatasetError(f"{url} did not respond with a 200 OK (status {status})")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DatasetError(f"{url} did not return valid json: {exc}") from exc

    dictionary = parse_hash_dictionary(data)
    logger.info("Loaded %d hashes from %s", len(dictionary), url)
    return dictionary
