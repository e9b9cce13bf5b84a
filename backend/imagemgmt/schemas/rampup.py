"""
Pydantic schemas for rampup plans.

RampupEntry and RampupPlan are the immutable snapshots the resolution
engine reads; the *Request schemas carry plan authoring input.
"""
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, Field

from imagemgmt.models.enums import StabilityTag


def _normalize_tag(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


StabilityTagField = Annotated[StabilityTag, BeforeValidator(_normalize_tag)]


class RampupEntry(BaseModel):
    """One weighted version of a rampup plan."""
    version: str = Field(..., min_length=1, max_length=255)
    rampup_percentage: int = Field(..., ge=0, le=100)
    stability_tag: StabilityTagField = StabilityTag.EXPERIMENTAL
    created_by: Optional[str] = None
    modified_by: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_rampup(cls, rampup) -> "RampupEntry":
        """Convert an ImageRampup ORM instance."""
        return cls(
            version=rampup.image_version,
            rampup_percentage=rampup.rampup_percentage,
            stability_tag=rampup.stability_tag,
            created_by=rampup.created_by,
            modified_by=rampup.modified_by,
        )


class RampupPlan(BaseModel):
    """Read-only snapshot of a stored rampup plan."""
    image_type: str
    active: bool = True
    entries: List[RampupEntry] = Field(default_factory=list)
    id: Optional[UUID] = None
    name: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def from_plan(cls, plan, image_type: str) -> "RampupPlan":
        """Convert an ImageRampupPlan ORM instance with its rampups loaded."""
        return cls(
            id=plan.id,
            name=plan.name,
            image_type=image_type,
            active=plan.active,
            entries=[RampupEntry.from_rampup(r) for r in plan.rampups],
        )


class RampupEntryRequest(BaseModel):
    """Rampup entry as submitted by a plan author."""
    image_version: str = Field(..., min_length=1, max_length=255)
    rampup_percentage: int = Field(..., ge=0, le=100)
    stability_tag: StabilityTagField = StabilityTag.EXPERIMENTAL
    created_by: Optional[str] = None
    modified_by: Optional[str] = None

    def to_entry(self) -> RampupEntry:
        return RampupEntry(
            version=self.image_version,
            rampup_percentage=self.rampup_percentage,
            stability_tag=self.stability_tag,
            created_by=self.created_by,
            modified_by=self.modified_by,
        )


class RampupPlanRequest(BaseModel):
    """Schema for creating or updating a rampup plan."""
    image_type: str = Field(..., min_length=1, max_length=255)
    plan_name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    activate_plan: bool = True
    rampups: List[RampupEntryRequest] = Field(default_factory=list)
    created_by: Optional[str] = None
    modified_by: Optional[str] = None

    def to_entries(self) -> List[RampupEntry]:
        return [r.to_entry() for r in self.rampups]
