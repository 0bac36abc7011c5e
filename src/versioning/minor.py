"""Grouping of hash candidates by minor version."""

from typing import Dict, Iterable, List

from .models import Disambiguation, DisambiguationKind


def minor_version(version: str) -> str:
    """Return the release cycle of a version, i.e. its first two dot components."""
    return ".".join(version.strip().split(".")[:2])


def group_by_minor(versions: Iterable[str]) -> Dict[str, List[str]]:
    """Group versions by minor version, keeping first-seen order."""
    groups: Dict[str, List[str]] = {}
    for v in versions:
        groups.setdefault(minor_version(v), []).append(v)
    return groups


def disambiguate(versions: Iterable[str]) -> Disambiguation:
    """Decide how a set of candidate versions can be narrowed down.

    One candidate is the answer as-is. Candidates within a single minor
    version are narrowed by release-tag dates. Candidates spread over several
    minor versions cannot be narrowed, so no patch version is guessed.
    """
    candidates = [v for v in versions if v]
    if len(candidates) == 1:
        return Disambiguation(kind=DisambiguationKind.EXACT, version=candidates[0])

    if not candidates:
        return Disambiguation(
            kind=DisambiguationKind.AMBIGUOUS,
            warning="Could not determine exact version: the hash dictionary lists no versions for this hash",
        )

    groups = group_by_minor(candidates)
    if len(groups) > 1:
        minors = tuple(sorted(groups))
        return Disambiguation(
            kind=DisambiguationKind.AMBIGUOUS,
            minors=minors,
            warning=(
                "Could not determine exact version: multiple minor versions were "
                f"returned: {', '.join(candidates)}"
            ),
        )

    minor = next(iter(groups))
    return Disambiguation(kind=DisambiguationKind.SINGLE_MINOR, minor=minor, minors=(minor,))
