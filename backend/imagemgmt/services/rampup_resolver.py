"""
Rampup resolution for a single image type.

Given the active plan of an image type (if any) and a draw strategy, pick
one version through the weighted selector. The resolver does no I/O and
never falls back to the latest active version; the batch resolver owns
that policy.
"""
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union

from imagemgmt.core.config import settings
from imagemgmt.models.enums import SelectionStrategy, StabilityTag
from imagemgmt.schemas.rampup import RampupPlan
from imagemgmt.services.deterministic_key import derive_draw
from imagemgmt.services.weighted_selector import random_draw, select_version

logger = logging.getLogger(__name__)


# =============================================================================
# Draw strategies
# =============================================================================

class DrawStrategy(Protocol):
    """Source of the [1, 100] draw fed to the weighted selector."""

    def draw(self, image_type: str) -> int:
        ...


class RandomDraw:
    """
    Uniform random draw.

    Without an injected generator every draw uses a fresh random.Random, so
    concurrent resolutions share no generator state. Tests inject a seeded
    generator for reproducible outcomes.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def draw(self, image_type: str) -> int:
        return random_draw(self.rng)


class DeterministicDraw:
    """Draw derived from a workload key, identical for every image type."""

    def __init__(self, key: Union[str, bytes]):
        if not key:
            raise ValueError("Deterministic draw requires a non-empty key")
        self.key = key
        self._draw = derive_draw(key)

    def draw(self, image_type: str) -> int:
        return self._draw


def build_strategy(
    strategy: Union[SelectionStrategy, str, None] = None,
    key: Optional[Union[str, bytes]] = None,
    rng: Optional[random.Random] = None,
) -> DrawStrategy:
    """
    Build a draw strategy from its name.

    Without an explicit strategy settings.DEFAULT_SELECTION_STRATEGY applies.
    A deterministic default only takes effect when a key is given; keyless
    callers get a random draw.

    Args:
        strategy: "random" or "deterministic"; defaults to settings.DEFAULT_SELECTION_STRATEGY
        key: Workload key, required for explicit deterministic selection
        rng: Optional generator for random selection

    Raises:
        ValueError: If the strategy is unknown or an explicit deterministic strategy has no key
    """
    if strategy is None:
        strategy = SelectionStrategy(settings.DEFAULT_SELECTION_STRATEGY)
        if strategy == SelectionStrategy.DETERMINISTIC and not key:
            logger.debug("No workload key given, using random selection")
            return RandomDraw(rng)
    strategy = SelectionStrategy(strategy)
    if strategy == SelectionStrategy.DETERMINISTIC:
        return DeterministicDraw(key)
    return RandomDraw(rng)


# =============================================================================
# Resolution results
# =============================================================================

class UnresolvedReason(str, Enum):
    """Why a single image type could not be resolved from its plan."""
    NO_ACTIVE_PLAN = "no_active_plan"
    PLAN_INTEGRITY_VIOLATION = "plan_integrity_violation"


@dataclass(frozen=True)
class RampupResolution:
    """Outcome of resolving one image type against its rampup plan."""
    image_type: str
    version: Optional[str] = None
    reason: Optional[UnresolvedReason] = None
    draw: Optional[int] = None
    detail: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.version is not None


class RampupResolver:
    """Resolves one image type against its active rampup plan."""

    def resolve(
        self,
        image_type: str,
        plan: Optional[RampupPlan],
        strategy: DrawStrategy,
    ) -> RampupResolution:
        """
        Select a version for an image type.

        Args:
            image_type: Image type name
            plan: Active rampup plan, or None when there is none
            strategy: Draw strategy

        Returns:
            A resolved RampupResolution, or an unresolved one carrying
            NO_ACTIVE_PLAN or PLAN_INTEGRITY_VIOLATION
        """
        if plan is None:
            return RampupResolution(image_type=image_type, reason=UnresolvedReason.NO_ACTIVE_PLAN)

        draw = strategy.draw(image_type)
        entry = select_version(plan.entries, draw)

        if entry is None:
            return self._integrity_violation(
                image_type, draw, f"no rampup entry covers draw {draw}"
            )
        if entry.rampup_percentage == 0:
            return self._integrity_violation(
                image_type, draw, f"selected version {entry.version} has zero rampup percentage"
            )
        if entry.stability_tag == StabilityTag.UNSTABLE:
            return self._integrity_violation(
                image_type, draw, f"selected version {entry.version} is marked UNSTABLE"
            )

        logger.info(
            f"The image version {entry.version} is selected for image type {image_type} "
            f"with rampup percentage {entry.rampup_percentage} (draw {draw})"
        )
        return RampupResolution(image_type=image_type, version=entry.version, draw=draw)

    def _integrity_violation(self, image_type: str, draw: int, detail: str) -> RampupResolution:
        logger.error(f"Rampup plan integrity violation for image type {image_type}: {detail}")
        return RampupResolution(
            image_type=image_type,
            reason=UnresolvedReason.PLAN_INTEGRITY_VIOLATION,
            draw=draw,
            detail=detail,
        )
