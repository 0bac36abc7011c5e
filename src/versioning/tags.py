"""Nearest release-tag selection and tag name normalization."""

from datetime import datetime
from typing import Iterable, Optional

import semantic_version

from .models import VersionTag


def normalize_tag_name(name: str) -> str:
    """Turn a release tag name into a plain version, e.g. "v16.8.7-ee" -> "16.8.7"."""
    version = name.strip()
    if version.startswith("v"):
        version = version[1:]
    if version.endswith("-ee"):
        version = version[:-len("-ee")]
    return version


def is_concrete_version(version: Optional[str]) -> bool:
    """True for a plain MAJOR.MINOR.PATCH version string.

    Pre-release ("16.8.0-rc42") and build ("16.8.7+abc") suffixes are rejected.
    """
    if not version:
        return False
    try:
        parsed = semantic_version.Version(version)
    except ValueError:
        return False
    return not parsed.prerelease and not parsed.build


def is_release_tag(tag: VersionTag) -> bool:
    """True when the tag names a final release, e.g. "v16.8.7-ee" but not "v16.8.0-rc42-ee"."""
    return is_concrete_version(normalize_tag_name(tag.name))


def select_nearest_tag(reference: datetime, tags: Iterable[VersionTag]) -> Optional[VersionTag]:
    """Pick the tag created closest to, and strictly before, ``reference``.

    A build is always produced after its source tag is cut, so tags created at
    or after the reference time are ignored. Equal distances resolve to the
    lexicographically smallest tag name.

    Args:
        reference: Manifest Last-Modified timestamp.
        tags: Release tags of a single minor version.

    Returns:
        The selected tag or None when no tag precedes the reference.
    """
    eligible = [t for t in tags if t.created_at < reference]
    if not eligible:
        return None
    return min(eligible, key=lambda t: (reference - t.created_at, t.name))
