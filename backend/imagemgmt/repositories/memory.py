"""
In-memory image store.

Implements every collaborator protocol without a database. Used by unit
tests and by callers that embed the resolver with metadata loaded from
elsewhere.
"""
import itertools
import uuid
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from imagemgmt.core.exceptions import ImageTypeNotFoundError, RampupPlanNotFoundError
from imagemgmt.models.enums import ImageVersionState
from imagemgmt.schemas.rampup import RampupEntry, RampupPlan
from imagemgmt.schemas.version import ActiveImageVersion


@dataclass
class _StoredVersion:
    image_type: str
    version: str
    state: ImageVersionState
    sequence: int


class InMemoryImageStore:
    """Image types, versions and rampup plans held in dictionaries."""

    def __init__(self):
        self._image_types: Dict[str, Optional[str]] = {}
        self._versions: List[_StoredVersion] = []
        self._plans: Dict[str, List[RampupPlan]] = {}
        self._sequence = itertools.count()

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add_image_type(self, name: str, description: Optional[str] = None) -> None:
        self._image_types[name] = description

    def add_version(
        self,
        image_type: str,
        version: str,
        state: ImageVersionState = ImageVersionState.ACTIVE,
    ) -> None:
        """Register a version; later registrations count as more recently created."""
        self._image_types.setdefault(image_type, None)
        self._versions.append(
            _StoredVersion(image_type, version, ImageVersionState(state), next(self._sequence))
        )

    def set_version_state(self, image_type: str, version: str, state: ImageVersionState) -> None:
        for stored in self._versions:
            if stored.image_type == image_type and stored.version == version:
                stored.state = ImageVersionState(state)

    # -------------------------------------------------------------------------
    # Collaborator protocols
    # -------------------------------------------------------------------------

    async def list_image_type_names(self) -> List[str]:
        return sorted(self._image_types)

    async def fetch_rampup_plans(self, image_types: Iterable[str]) -> Dict[str, RampupPlan]:
        plans = {}
        for name in set(image_types):
            active = self._active_plan(name)
            if active is not None:
                plans[name] = active
        return plans

    async def fetch_latest_active_versions(self, image_types: Iterable[str]) -> List[ActiveImageVersion]:
        names = set(image_types)
        latest: Dict[str, _StoredVersion] = {}
        for stored in self._versions:
            if stored.image_type not in names or stored.state != ImageVersionState.ACTIVE:
                continue
            current = latest.get(stored.image_type)
            if current is None or stored.sequence > current.sequence:
                latest[stored.image_type] = stored
        return [
            ActiveImageVersion(image_type=name, version=latest[name].version)
            for name in sorted(latest)
        ]

    async def get_active_rampup_plan(self, image_type: str) -> Optional[RampupPlan]:
        return self._active_plan(image_type)

    async def create_rampup_plan(
        self,
        image_type: str,
        name: str,
        entries: List[RampupEntry],
        activate: bool = True,
        description: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> UUID:
        if image_type not in self._image_types:
            raise ImageTypeNotFoundError(image_type)

        plans = self._plans.setdefault(image_type, [])
        if activate:
            plans[:] = [plan.model_copy(update={"active": False}) for plan in plans]

        plan = RampupPlan(
            id=uuid.uuid4(),
            name=name,
            image_type=image_type,
            active=activate,
            entries=list(entries),
        )
        plans.append(plan)
        return plan.id

    async def update_rampup_plan(
        self,
        image_type: str,
        entries: List[RampupEntry],
        modified_by: Optional[str] = None,
    ) -> UUID:
        active = self._active_plan(image_type)
        if active is None:
            raise RampupPlanNotFoundError(image_type)

        plans = self._plans[image_type]
        for index, plan in enumerate(plans):
            if plan.active:
                plans[index] = plan.model_copy(update={"entries": list(entries)})
        return active.id

    def _active_plan(self, image_type: str) -> Optional[RampupPlan]:
        for plan in self._plans.get(image_type, []):
            if plan.active:
                return plan
        return None
