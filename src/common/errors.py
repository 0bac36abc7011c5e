"""Exception types shared by the dataset providers and the resolution engine."""

from __future__ import annotations

from typing import Optional


class FingerprintError(Exception):
    """Base error carrying a short summary and human-readable details.

    The summary/details pair maps directly onto the ``error``/``details``
    fields of a report error record.
    """

    summary = "Failed to fingerprint target"

    def __init__(self, details: str, summary: Optional[str] = None):
        super().__init__(details)
        self.details = details
        if summary is not None:
            self.summary = summary


class DatasetError(FingerprintError):
    """A shared upstream dataset (hash dictionary, EOL data) could not be loaded."""

    summary = "Failed to load upstream dataset"


class TagFetchError(FingerprintError):
    """Release tags for a minor version could not be retrieved."""

    summary = "Failed to retrieve GitLab release tags"


class TargetError(FingerprintError):
    """A target could not be probed or does not look like GitLab."""


class EolDataError(FingerprintError):
    """An end-of-life record carries a value that cannot be interpreted."""

    summary = "Could not evaluate end-of-life status"
