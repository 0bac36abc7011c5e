"""Classification of manifest hashes missing from the hash dictionary."""
import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from constants import Constants

STG = f"{Constants.ANALYSIS} "
logger = logging.getLogger(__name__)


class Freshness(Enum):
    """Why an unknown hash is unknown."""
    TOO_NEW = "too_new"
    STALE = "stale"


def default_threshold() -> timedelta:
    """Freshness window derived from the configured hour count."""
    return timedelta(hours=Constants.FRESHNESS_THRESHOLD_HOURS)


def classify_freshness(
    last_modified: datetime,
    now: datetime,
    threshold: Optional[timedelta] = None,
) -> Freshness:
    """Decide whether an unindexed build is simply too new or the dictionary is stale.

    The hash dictionary is regenerated once a day, so a manifest modified within
    the threshold has probably not been indexed yet.

    Args:
        last_modified: Manifest Last-Modified timestamp.
        now: Current time.
        threshold: Indexing window, defaults to the configured hours.

    Returns:
        Freshness.TOO_NEW or Freshness.STALE
    """
    window = threshold if threshold is not None else default_threshold()
    if last_modified > now - window:
        logger.info("%s.... manifest is younger than %s, hash likely not indexed yet.", STG, window)
        return Freshness.TOO_NEW
    logger.warning("%s.... [RISK] manifest is older than %s and its hash is unknown.", STG, window)
    return Freshness.STALE


def too_new_warning(hashes_url: str, threshold: timedelta) -> str:
    """Informational warning attached to a too-new result."""
    hours = int(threshold.total_seconds() // 3600)
    return (
        f"Could not fingerprint the version as the hash was not found in '{hashes_url}'. "
        f"However, the installed version seems to be less than {hours} hours old and is likely "
        "not indexed yet (which happens once a day). It's therefore safe to assume that it's "
        f"running a version released in the last {hours} hours."
    )


def stale_details(
    build_hash: str,
    hashes_url: str,
    last_modified: datetime,
    now: datetime,
    threshold: timedelta,
) -> str:
    """Error details for a hash that should have been indexed by now."""
    hours = int(threshold.total_seconds() // 3600)
    elapsed = now - last_modified
    return (
        f"A manifest file was found, but the hash in it ({build_hash}) was not found in "
        f"'{hashes_url}'. The Last-Modified date of the manifest file "
        f"({last_modified.isoformat()}, {_format_elapsed(elapsed)} ago) is not shorter than "
        f"{hours} hours. The most likely culprit for this error is that the hashes file is no "
        f"longer being updated. See: {Constants.HASHES_PROJECT_URL}"
    )


def _format_elapsed(elapsed: timedelta) -> str:
    total_hours = int(elapsed.total_seconds() // 3600)
    days, hours = divmod(total_hours, 24)
    if days:
        return f"{days}d {hours}h"
    return f"{hours}h"
