"""Per-run memo of GitLab release tags keyed by minor version."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, List

from .models import VersionTag

logger = logging.getLogger(__name__)


class TagCache:
    """Write-once cache of tag lists, safe for concurrent targets.

    A miss for a minor version triggers exactly one fetch even when several
    worker threads ask for it at the same time: each key has its own lock and
    check, fetch and store all happen while holding it. Failed fetches are not
    stored, so a later target may try again.
    """

    def __init__(self):
        self._entries: Dict[str, List[VersionTag]] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()
        self._fetches = 0

    def _lock_for(self, minor: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(minor)
            if lock is None:
                lock = threading.Lock()
                self._locks[minor] = lock
            return lock

    def get(self, minor: str):
        """Return the cached tag list or None."""
        entry = self._entries.get(minor)
        return list(entry) if entry is not None else None

    def get_or_fetch(
        self, minor: str, fetcher: Callable[[str], List[VersionTag]]
    ) -> List[VersionTag]:
        """Return cached tags for ``minor``, fetching them once on a miss.

        Args:
            minor: Minor version key, e.g. "16.8".
            fetcher: Callable returning the tags; exceptions propagate.

        Returns:
            A copy of the cached tag list.
        """
        cached = self._entries.get(minor)
        if cached is not None:
            logger.debug("Tag cache hit for %s", minor)
            return list(cached)

        with self._lock_for(minor):
            cached = self._entries.get(minor)
            if cached is not None:
                logger.debug("Tag cache hit for %s", minor)
                return list(cached)
            logger.debug("Tag cache miss for %s, fetching", minor)
            tags = list(fetcher(minor))
            self._fetches += 1
            self._entries[minor] = tags
            return list(tags)

    @property
    def fetch_count(self) -> int:
        """Number of fetches performed through this cache."""
        return self._fetches

    def __contains__(self, minor: str) -> bool:
        return minor in self._entries

    def __len__(self) -> int:
        return len(self._entries)
