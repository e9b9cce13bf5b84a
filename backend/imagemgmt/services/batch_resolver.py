"""
Batch version resolution for a set of image types.

Version selection process:
1. Fetch the active rampup plans of the requested image types in one call.
2. Resolve each image type that has a plan through the rampup resolver.
3. For the image types without a plan, or whose plan yielded no usable
   version, fetch the latest active version in one call.
4. If any image type is still unresolved, fail the whole call with one
   error naming all of them. A partial mapping is never returned.

Usage:
    resolver = BatchResolver(plan_store=rampup_repo, version_store=version_repo)
    versions = await resolver.resolve_versions({"spark", "hive"}, RandomDraw())
"""
import asyncio
import logging
from typing import Awaitable, Dict, Iterable, Optional, Set, TypeVar

from imagemgmt.core.config import settings
from imagemgmt.core.exceptions import (
    AggregateResolutionError,
    PlanIntegrityViolationError,
    StoreUnavailableError,
)
from imagemgmt.repositories.protocols import ImageTypeStore, ImageVersionStore, RampupPlanStore
from imagemgmt.schemas.resolution import ResolveVersionsRequest
from imagemgmt.services.rampup_resolver import (
    DrawStrategy,
    RampupResolver,
    UnresolvedReason,
    build_strategy,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BatchResolver:
    """Resolves image type versions against rampup plans and active versions."""

    def __init__(
        self,
        plan_store: RampupPlanStore,
        version_store: ImageVersionStore,
        image_type_store: Optional[ImageTypeStore] = None,
        resolver: Optional[RampupResolver] = None,
        store_timeout: Optional[float] = None,
        strict_integrity: Optional[bool] = None,
    ):
        """
        Args:
            plan_store: Source of active rampup plans
            version_store: Source of latest active versions
            image_type_store: Source of all image type names (only needed by resolve_all_image_types)
            resolver: Single image type resolver
            store_timeout: Seconds allowed per store call (default: settings.STORE_TIMEOUT_SECONDS)
            strict_integrity: Raise PlanIntegrityViolationError on a corrupt plan instead of
                falling back (default: settings.STRICT_PLAN_INTEGRITY)
        """
        self.plan_store = plan_store
        self.version_store = version_store
        self.image_type_store = image_type_store
        self.resolver = resolver or RampupResolver()
        self.store_timeout = store_timeout if store_timeout is not None else settings.STORE_TIMEOUT_SECONDS
        self.strict_integrity = (
            strict_integrity if strict_integrity is not None else settings.STRICT_PLAN_INTEGRITY
        )

    async def _call_store(self, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self.store_timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Store call {operation} timed out after {self.store_timeout}s")
            raise StoreUnavailableError(operation, self.store_timeout) from e

    async def resolve_all(self, image_types: Iterable[str], strategy: DrawStrategy) -> Dict[str, str]:
        """
        Resolve a version for every requested image type.

        Args:
            image_types: Image type names
            strategy: Draw strategy shared by all image types of this call

        Returns:
            Mapping of image type to version, sorted by image type

        Raises:
            AggregateResolutionError: If any image type has neither a usable rampup
                selection nor an active version
            PlanIntegrityViolationError: If strict integrity is enabled and a stored
                plan is corrupt
            StoreUnavailableError: If a store call times out
            DatabaseError: If a store call fails
        """
        requested: Set[str] = set(image_types)
        if not requested:
            return {}

        plans = await self._call_store("fetch_rampup_plans", self.plan_store.fetch_rampup_plans(requested))
        logger.info(f"Found active rampup for the image types {sorted(set(plans) & requested)}")

        resolved: Dict[str, str] = {}
        integrity_failures: Set[str] = set()
        for image_type in sorted(requested):
            outcome = self.resolver.resolve(image_type, plans.get(image_type), strategy)
            if outcome.resolved:
                resolved[image_type] = outcome.version
            elif outcome.reason == UnresolvedReason.PLAN_INTEGRITY_VIOLATION:
                if self.strict_integrity:
                    raise PlanIntegrityViolationError(image_type, outcome.detail or "")
                integrity_failures.add(image_type)

        remaining = requested - set(resolved)
        if remaining:
            active_versions = await self._call_store(
                "fetch_latest_active_versions",
                self.version_store.fetch_latest_active_versions(remaining),
            )
            for active in active_versions or []:
                if active.image_type in remaining:
                    resolved[active.image_type] = active.version
                    logger.info(
                        f"Using latest active version {active.version} for image type {active.image_type}"
                    )

        for image_type in sorted(integrity_failures & set(resolved)):
            logger.warning(
                f"Image type {image_type} fell back to its latest active version "
                f"{resolved[image_type]} after a rampup plan integrity violation"
            )

        unresolved = requested - set(resolved)
        if unresolved:
            logger.error(f"Could not resolve versions for image types {sorted(unresolved)}")
            raise AggregateResolutionError(unresolved, integrity_failures & unresolved)

        return dict(sorted(resolved.items()))

    async def resolve_versions(
        self,
        image_types: Iterable[str],
        strategy: Optional[DrawStrategy] = None,
    ) -> Dict[str, str]:
        """
        Resolve versions, defaulting to the configured selection strategy.

        Args:
            image_types: Image type names
            strategy: Draw strategy (default: build_strategy() from settings)
        """
        return await self.resolve_all(image_types, strategy or build_strategy())

    async def resolve_request(self, request: ResolveVersionsRequest) -> Dict[str, str]:
        """Resolve a validated ResolveVersionsRequest."""
        strategy = build_strategy(request.strategy, key=request.key)
        return await self.resolve_all(request.image_types, strategy)

    async def resolve_all_image_types(self, strategy: Optional[DrawStrategy] = None) -> Dict[str, str]:
        """
        Resolve versions for every registered image type.

        Raises:
            ValueError: If no image type store was configured
        """
        if self.image_type_store is None:
            raise ValueError("resolve_all_image_types requires an image_type_store")
        names = await self._call_store("list_image_type_names", self.image_type_store.list_image_type_names())
        return await self.resolve_versions(names, strategy)
