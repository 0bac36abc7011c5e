"""Version resolution service: turns manifest observations into report records."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence, TypeVar

from analysis.eol import evaluate_eol
from analysis.freshness import (
    Freshness,
    classify_freshness,
    default_threshold,
    stale_details,
    too_new_warning,
)
from common.errors import FingerprintError
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, Edition

from .cache import TagCache
from .hash_lookup import edition_for_build, lookup_hash
from .minor import disambiguate
from .models import (
    DisambiguationKind,
    EolRecord,
    FingerprintReport,
    HashDictionary,
    HashDictionaryEntry,
    Outcome,
    ResolutionError,
    ResolutionResult,
    TargetObservation,
    VersionTag,
)
from .tags import is_concrete_version, is_release_tag, normalize_tag_name, select_nearest_tag

logger = logging.getLogger(__name__)

T = TypeVar("T")

TagProvider = Callable[[str], List[VersionTag]]
Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ResolutionService:
    """Resolve version, edition and EOL status for observed targets.

    The hash dictionary and EOL records are read-only snapshots for the run.
    The tag cache is the only state shared between targets.
    """

    def __init__(
        self,
        hash_dictionary: HashDictionary,
        eol_records: Sequence[EolRecord],
        tag_provider: TagProvider,
        tag_cache: Optional[TagCache] = None,
        freshness_threshold: Optional[timedelta] = None,
        clock: Optional[Clock] = None,
        hashes_url: Optional[str] = None,
    ):
        self.hash_dictionary = hash_dictionary
        self.eol_records = list(eol_records)
        self.tag_provider = tag_provider
        self.tag_cache = tag_cache if tag_cache is not None else TagCache()
        self.freshness_threshold = (
            freshness_threshold if freshness_threshold is not None else default_threshold()
        )
        self.clock = clock or _utcnow
        self.hashes_url = hashes_url or Constants.HASHES_URL

    def resolve(self, observation: TargetObservation) -> Outcome:
        """Resolve one observation into a result or an error record."""
        target = observation.target
        entry = lookup_hash(observation.build_hash, self.hash_dictionary)
        if entry is None:
            return self._resolve_unindexed(observation)

        try:
            return self._resolve_entry(observation, entry)
        except FingerprintError as exc:
            logger.error("%s: %s: %s", target, exc.summary, exc.details)
            return ResolutionError(target=target, error=exc.summary, details=exc.details)

    def _resolve_entry(self, observation: TargetObservation, entry: HashDictionaryEntry) -> ResolutionResult:
        warnings: List[str] = []
        edition, edition_warning = edition_for_build(entry.build)
        if edition_warning:
            logger.warning("%s: %s", observation.target, edition_warning)
            warnings.append(edition_warning)

        version = self._resolve_version(observation, entry, warnings)

        assessment = evaluate_eol(version, self.eol_records, self.clock().date())
        warnings.extend(assessment.warnings)

        if is_debug_enabled(logger):
            logger.debug(
                "Resolved target",
                extra=extra_context(
                    event="decision",
                    component="resolution",
                    action="resolve",
                    target=observation.target,
                    outcome=version
                )
            )
        logger.info("%s: GitLab %s (%s)", observation.target, version, edition.value)
        return ResolutionResult(
            target=observation.target,
            version=version,
            edition=edition.value,
            end_of_life=assessment.end_of_life,
            outdated=assessment.outdated,
            warnings=warnings,
        )

    def _resolve_version(
        self, observation: TargetObservation, entry: HashDictionaryEntry, warnings: List[str]
    ) -> str:
        """Narrow the entry's candidates down to one version or "unknown"."""
        outcome = disambiguate(entry.versions)

        if outcome.kind is DisambiguationKind.EXACT:
            version = outcome.version
        elif outcome.kind is DisambiguationKind.AMBIGUOUS:
            warnings.append(outcome.warning)
            return Constants.UNKNOWN
        else:
            tags = self.tag_cache.get_or_fetch(outcome.minor, self.tag_provider)
            # rc tags match the minor search too
            tags = [t for t in tags if is_release_tag(t)]
            tag = select_nearest_tag(observation.last_modified, tags)
            if tag is None:
                warnings.append(
                    f"Could not determine exact version: no {outcome.minor} release tag was "
                    f"created before the manifest Last-Modified date "
                    f"({observation.last_modified.isoformat()})"
                )
                return Constants.UNKNOWN
            version = normalize_tag_name(tag.name)

        if not is_concrete_version(version):
            warnings.append(f"Could not determine exact version: '{version}' is not a release version")
            return Constants.UNKNOWN
        return version

    def _resolve_unindexed(self, observation: TargetObservation) -> Outcome:
        now = self.clock()
        freshness = classify_freshness(observation.last_modified, now, self.freshness_threshold)
        if freshness is Freshness.TOO_NEW:
            return ResolutionResult(
                target=observation.target,
                version=Constants.UNKNOWN,
                edition=Edition.UNKNOWN.value,
                warnings=[too_new_warning(self.hashes_url, self.freshness_threshold)],
            )
        return ResolutionError(
            target=observation.target,
            error="Unable to guess version of target",
            details=stale_details(
                observation.build_hash,
                self.hashes_url,
                observation.last_modified,
                now,
                self.freshness_threshold,
            ),
        )

    def fingerprint(self, target, observe: Callable[[T], TargetObservation]) -> Outcome:
        """Observe a target through ``observe`` and resolve it.

        Observation failures are reported as error records for that target.
        ``target`` needs a ``host`` attribute used to label errors.
        """
        try:
            observation = observe(target)
        except FingerprintError as exc:
            logger.error("%s: %s: %s", target.host, exc.summary, exc.details)
            return ResolutionError(target=target.host, error=exc.summary, details=exc.details)
        return self.resolve(observation)

    def resolve_all(self, observations: Sequence[TargetObservation], workers: int = 1) -> FingerprintReport:
        """Resolve many observations, keeping input order in the report."""
        return self._collect(self.resolve, observations, workers)

    def fingerprint_all(
        self, targets: Sequence[T], observe: Callable[[T], TargetObservation], workers: int = 1
    ) -> FingerprintReport:
        """Observe and resolve many targets, keeping input order in the report."""
        return self._collect(lambda t: self.fingerprint(t, observe), targets, workers)

    @staticmethod
    def _collect(func: Callable[[T], Outcome], items: Sequence[T], workers: int) -> FingerprintReport:
        report = FingerprintReport()
        if workers <= 1 or len(items) <= 1:
            for item in items:
                report.add(func(item))
            return report

        with ThreadPoolExecutor(max_workers=min(workers, len(items))) as executor:
            # map() yields in submission order
            for outcome in executor.map(func, items):
                report.add(outcome)
        return report
