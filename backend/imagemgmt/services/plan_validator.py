"""
Structural validation of rampup plans.

Runs at plan authoring time only. Checks are applied in order and the
first violation is raised, so an author editing a plan interactively sees
one reason at a time:

1. the plan has at least one entry
2. percentages add up to exactly 100
3. no version appears twice
4. UNSTABLE entries carry a percentage of 0
"""
from typing import Iterable, List

from imagemgmt.core.exceptions import (
    DuplicateRampupVersionError,
    EmptyRampupPlanError,
    InvalidRampupTotalError,
    UnstableRampupPercentageError,
)
from imagemgmt.models.enums import StabilityTag
from imagemgmt.schemas.rampup import RampupEntry

REQUIRED_TOTAL_PERCENTAGE = 100


def validate_rampup_plan(entries: Iterable[RampupEntry]) -> None:
    """
    Validate the entries of a rampup plan.

    Args:
        entries: Rampup entries in authoring order

    Raises:
        EmptyRampupPlanError: If there are no entries
        InvalidRampupTotalError: If percentages do not sum to 100
        DuplicateRampupVersionError: If a version is listed twice
        UnstableRampupPercentageError: If an UNSTABLE entry has a non-zero percentage
    """
    entries: List[RampupEntry] = list(entries or [])
    if not entries:
        raise EmptyRampupPlanError()

    total = sum(entry.rampup_percentage for entry in entries)
    if total != REQUIRED_TOTAL_PERCENTAGE:
        raise InvalidRampupTotalError(total)

    seen = set()
    for entry in entries:
        if entry.version in seen:
            raise DuplicateRampupVersionError(entry.version)
        seen.add(entry.version)

    for entry in entries:
        if entry.stability_tag == StabilityTag.UNSTABLE and entry.rampup_percentage != 0:
            raise UnstableRampupPercentageError(entry.version, entry.rampup_percentage)
