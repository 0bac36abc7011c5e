"""GitLab API client for release tag history.

Provides a lightweight REST client for fetching the tags of the GitLab
project itself (gitlab-org/gitlab) scoped to one minor version.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from constants import Constants
from common.errors import TagFetchError
from common.http_client import get_json
from versioning.models import VersionTag

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp as returned by the GitLab API.

    Naive timestamps are assumed to be UTC. Returns None when unparseable.
    """
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class GitLabClient:
    """Lightweight REST client for GitLab release tags."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        project_id: Optional[int] = None,
        per_page: Optional[int] = None,
    ):
        """Initialize GitLab client.

        Args:
            base_url: Base URL for GitLab API (defaults to Constants.GITLAB_API_BASE)
            project_id: Project whose tags are listed (defaults to gitlab-org/gitlab)
            per_page: Page size for the tags query
        """
        self.base_url = (base_url or Constants.GITLAB_API_BASE).rstrip("/")
        self.project_id = project_id or Constants.GITLAB_PROJECT_ID
        self.per_page = per_page or Constants.TAGS_PER_PAGE

    def tags_url(self, minor: str) -> str:
        """URL listing enterprise release tags for ``minor``."""
        query = urlencode({"per_page": self.per_page, "search": f"v{minor}.*-ee"})
        return f"{self.base_url}/projects/{self.project_id}/repository/tags?{query}"

    def get_tags_for_minor(self, minor: str) -> List[VersionTag]:
        """Fetch release tags of one minor version.

        Args:
            minor: Minor version, e.g. "16.8"

        Returns:
            List of VersionTag; tags without a usable creation date are skipped.

        Raises:
            TagFetchError: On transport failure, non-200 status, a non-JSON
                response or an unexpected payload shape.
        """
        url = self.tags_url(minor)
        status, headers, data = get_json(url)

        if status == 0:
            raise TagFetchError(f"{url} could not be reached")
        if status != 200:
            raise TagFetchError(f"{url} did not respond with a 200 OK (status {status})")
        content_type = headers.get("content-type", "")
        if not content_type.startswith("application/json"):
            raise TagFetchError(f"{url} did not respond with JSON")
        if not isinstance(data, list):
            raise TagFetchError(f"{url} did not return a valid tag list")

        tags = []
        for item in data:
            tag = self._to_tag(item)
            if tag is not None:
                tags.append(tag)
        logger.debug("Fetched %d tags for minor version %s", len(tags), minor)
        return tags

    def _to_tag(self, item: Any) -> Optional[VersionTag]:
        """Build a VersionTag from an API tag object.

        Lightweight tags have no ``created_at``; the commit date stands in.
        """
        if not isinstance(item, dict) or not item.get("name"):
            return None
        created = parse_timestamp(item.get("created_at"))
        if created is None:
            commit: Dict[str, Any] = item.get("commit") or {}
            created = parse_timestamp(commit.get("created_at"))
        if created is None:
            logger.debug("Skipping tag %s without a creation date", item.get("name"))
            return None
        return VersionTag(name=str(item["name"]), created_at=created)
