"""End-of-life and outdated checks against endoflife.date release cycles."""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, List, Optional

from constants import Constants
from common.errors import EolDataError
from versioning.minor import minor_version
from versioning.models import EolRecord

STG = f"{Constants.ANALYSIS} "
logger = logging.getLogger(__name__)


@dataclass
class EolAssessment:
    """Flags and warnings for one resolved version."""
    end_of_life: bool = False
    outdated: bool = False
    warnings: List[str] = field(default_factory=list)


def find_cycle(cycle: str, records: Iterable[EolRecord]) -> Optional[EolRecord]:
    """Return the record for ``cycle`` or None."""
    for record in records:
        if record.cycle == cycle:
            return record
    return None


def parse_eol_date(record: EolRecord) -> Optional[date]:
    """Interpret the ``eol`` field of a record.

    Returns the EOL date, ``date.min`` when the cycle is flagged EOL without a
    date, or None when the cycle has no EOL yet.

    Raises:
        EolDataError: If the value is neither a boolean nor a YYYY-MM-DD date.
    """
    value = record.eol
    if value is None or value is False:
        return None
    if value is True:
        return date.min
    if isinstance(value, str):
        try:
            return datetime.strptime(value, "%Y-%m-%d").date()
        except ValueError as exc:
            raise EolDataError(
                f"the end-of-life date '{value}' of cycle {record.cycle} could not be parsed: {exc}"
            ) from exc
    raise EolDataError(
        f"the end-of-life value {value!r} of cycle {record.cycle} is not a date"
    )


def evaluate_eol(version: str, records: Iterable[EolRecord], today: date) -> EolAssessment:
    """Flag a resolved version as end-of-life and/or outdated.

    Both checks are independent and may each add a warning. Unknown versions
    and cycles missing from the dataset get no determination.

    Args:
        version: Resolved version or the "unknown" sentinel.
        records: endoflife.date release cycles.
        today: Current date.

    Returns:
        EolAssessment
    """
    assessment = EolAssessment()
    if not version or version == Constants.UNKNOWN:
        return assessment

    cycle = minor_version(version)
    record = find_cycle(cycle, records)
    if record is None:
        logger.debug("%s.... cycle %s not present in end-of-life data.", STG, cycle)
        return assessment

    eol_date = parse_eol_date(record)
    if eol_date is not None and eol_date < today:
        logger.warning("%s.... [RISK] %s.x is end-of-life.", STG, cycle)
        assessment.warnings.append(
            f"{cycle}.x is end-of-life (EOL), see {Constants.ENDOFLIFE_PAGE_URL}"
        )
        assessment.end_of_life = True
        assessment.outdated = True

    if record.latest and version != record.latest:
        logger.warning("%s.... [RISK] %s is behind latest %s.", STG, version, record.latest)
        assessment.warnings.append(
            f"{version} is outdated, latest {record.cycle} version is {record.latest}"
        )
        assessment.outdated = True

    return assessment
