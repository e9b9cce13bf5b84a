"""
Collaborator interfaces consumed by the resolution engine.

The SQLAlchemy repositories implement these for production use and the
in-memory stores implement them for tests and embedding callers.
"""
from typing import Dict, Iterable, List, Optional, Protocol
from uuid import UUID

from imagemgmt.schemas.rampup import RampupEntry, RampupPlan
from imagemgmt.schemas.version import ActiveImageVersion


class RampupPlanStore(Protocol):
    """Read access to active rampup plans."""

    async def fetch_rampup_plans(self, image_types: Iterable[str]) -> Dict[str, RampupPlan]:
        """Return active plans keyed by image type; absent key means no active plan."""
        ...


class ImageVersionStore(Protocol):
    """Read access to image versions."""

    async def fetch_latest_active_versions(self, image_types: Iterable[str]) -> List[ActiveImageVersion]:
        """Return the latest ACTIVE version for each image type that has one."""
        ...


class ImageTypeStore(Protocol):
    """Read access to registered image types."""

    async def list_image_type_names(self) -> List[str]:
        ...


class RampupPlanWriter(Protocol):
    """Write access to rampup plans. Callers validate before writing."""

    async def create_rampup_plan(
        self,
        image_type: str,
        name: str,
        entries: List[RampupEntry],
        activate: bool = True,
        description: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> UUID:
        ...

    async def update_rampup_plan(
        self,
        image_type: str,
        entries: List[RampupEntry],
        modified_by: Optional[str] = None,
    ) -> UUID:
        ...

    async def get_active_rampup_plan(self, image_type: str) -> Optional[RampupPlan]:
        ...
