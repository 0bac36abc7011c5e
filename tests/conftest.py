"""Shared fixtures for fingerprinter tests."""

from datetime import datetime, timedelta, timezone

import pytest

from constants import Constants
from versioning.models import EolRecord, HashDictionaryEntry, TargetObservation, VersionTag

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
DAY0 = datetime(2024, 2, 1, 0, 0, 0, tzinfo=timezone.utc)


def day(n: int) -> datetime:
    """Timestamp n days after DAY0."""
    return DAY0 + timedelta(days=n)


def make_tag(name: str, n: int) -> VersionTag:
    return VersionTag(name=name, created_at=day(n))


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def hash_dictionary():
    return {
        "single": HashDictionaryEntry(build="gitlab-ee", versions=("16.8.7",)),
        "same-minor": HashDictionaryEntry(build="gitlab-ee", versions=("16.8.5", "16.8.6", "16.8.7")),
        "same-minor-ce": HashDictionaryEntry(build="gitlab-ce", versions=("16.8.5", "16.8.6")),
        "multi-minor": HashDictionaryEntry(build="gitlab-ee", versions=("16.7.9", "16.8.5")),
        "odd-build": HashDictionaryEntry(build="gitlab-xx", versions=("16.8.7",)),
        "old": HashDictionaryEntry(build="gitlab-ce", versions=("15.0.1",)),
    }


@pytest.fixture
def eol_records():
    return [
        EolRecord(cycle="16.8", latest="16.8.7", eol="2099-01-01"),
        EolRecord(cycle="16.7", latest="16.7.9", eol="2099-01-01"),
        EolRecord(cycle="15.0", latest="15.0.5", eol="2023-06-22"),
    ]


@pytest.fixture
def tags_16_8():
    return [
        make_tag("v16.8.5-ee", 1),
        make_tag("v16.8.6-ee", 5),
        make_tag("v16.8.7-ee", 10),
    ]


def observation(build_hash: str, last_modified: datetime, target: str = "gitlab.example.com") -> TargetObservation:
    return TargetObservation(target=target, build_hash=build_hash, last_modified=last_modified)


@pytest.fixture
def restore_constants(monkeypatch):
    """Snapshot runtime tunables so tests may mutate Constants freely."""
    for attr in (
        "HASHES_URL",
        "ENDOFLIFE_URL",
        "GITLAB_API_BASE",
        "GITLAB_PROJECT_ID",
        "TAGS_PER_PAGE",
        "REQUEST_TIMEOUT",
        "FRESHNESS_THRESHOLD_HOURS",
        "DEFAULT_WORKERS",
    ):
        monkeypatch.setattr(Constants, attr, getattr(Constants, attr))
    return Constants
