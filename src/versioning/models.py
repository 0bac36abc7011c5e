"""Data models for version fingerprinting and the JSON report."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


@dataclass(frozen=True)
class HashDictionaryEntry:
    """Build label and candidate versions sharing one manifest hash."""
    build: str
    versions: Tuple[str, ...]


# Manifest hash -> entry, loaded once per run.
HashDictionary = Dict[str, HashDictionaryEntry]


@dataclass(frozen=True)
class VersionTag:
    """A GitLab release tag and its creation timestamp (timezone aware)."""
    name: str
    created_at: datetime


@dataclass(frozen=True)
class EolRecord:
    """One endoflife.date release cycle.

    ``eol`` is kept as published: an ISO date string, or a boolean when the
    dataset has no concrete date. It is interpreted by the EOL evaluator.
    """
    cycle: str
    latest: str
    eol: Union[str, bool, None] = None
    latest_release_date: Optional[str] = None
    release_date: Optional[str] = None


@dataclass(frozen=True)
class TargetObservation:
    """What a target's webpack manifest revealed."""
    target: str
    build_hash: str
    last_modified: datetime
    output_path: str = ""


class DisambiguationKind(Enum):
    """Outcome of grouping hash candidates by minor version."""
    EXACT = "exact"
    SINGLE_MINOR = "single_minor"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class Disambiguation:
    """Minor-version grouping outcome and the data each branch needs."""
    kind: DisambiguationKind
    version: Optional[str] = None
    minor: Optional[str] = None
    minors: Tuple[str, ...] = ()
    warning: Optional[str] = None


@dataclass
class ResolutionResult:
    """Per-target success record."""
    target: str
    version: str
    edition: str
    end_of_life: bool = False
    outdated: bool = False
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "version": self.version,
            "edition": self.edition,
            "end_of_life": self.end_of_life,
            "outdated": self.outdated,
            "warnings": list(self.warnings),
        }


@dataclass
class ResolutionError:
    """Per-target failure record."""
    target: str
    error: str
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "error": self.error,
            "details": self.details,
        }


Outcome = Union[ResolutionResult, ResolutionError]


@dataclass
class FingerprintReport:
    """Results and errors for one run, in target order."""
    results: List[ResolutionResult] = field(default_factory=list)
    errors: List[ResolutionError] = field(default_factory=list)

    def add(self, outcome: Outcome) -> None:
        if isinstance(outcome, ResolutionError):
            self.errors.append(outcome)
        else:
            self.results.append(outcome)

    def has_warnings(self) -> bool:
        """True when any error exists or any result carries a warning."""
        return bool(self.errors) or any(r.warnings for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [r.to_dict() for r in self.results],
            "errors": [e.to_dict() for e in self.errors],
        }
