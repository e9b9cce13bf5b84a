"""
Repository for rampup plans and their entries.

Plans are written as a unit: creating or updating a plan replaces all of its
entries in one transaction. Activating a plan deactivates any other active
plan of the same image type so the store never holds two.
"""
import logging
from typing import Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import contains_eager, selectinload

from imagemgmt.core.exceptions import RampupPlanNotFoundError
from imagemgmt.models.image_type import ImageType
from imagemgmt.models.rampup import ImageRampup, ImageRampupPlan
from imagemgmt.repositories.base import BaseRepository
from imagemgmt.repositories.image_type_repository import ImageTypeRepository
from imagemgmt.schemas.rampup import RampupEntry, RampupPlan

logger = logging.getLogger(__name__)


def _build_rampups(entries: List[RampupEntry], user: Optional[str]) -> List[ImageRampup]:
    return [
        ImageRampup(
            position=position,
            image_version=entry.version,
            rampup_percentage=entry.rampup_percentage,
            stability_tag=entry.stability_tag.value,
            created_by=entry.created_by or user,
            modified_by=entry.modified_by or user,
        )
        for position, entry in enumerate(entries)
    ]


class RampupRepository(BaseRepository[ImageRampupPlan]):
    """Repository for ImageRampupPlan database operations."""

    model = ImageRampupPlan

    def _active_plans_query(self, names: List[str]):
        return (
            select(ImageRampupPlan)
            .join(ImageType, ImageRampupPlan.image_type_id == ImageType.id)
            .options(contains_eager(ImageRampupPlan.image_type), selectinload(ImageRampupPlan.rampups))
            .where(ImageType.name.in_(names), ImageRampupPlan.active.is_(True))
        )

    async def fetch_rampup_plans(self, image_types: Iterable[str]) -> Dict[str, RampupPlan]:
        """
        Get the active rampup plan of each image type.

        Args:
            image_types: Image type names

        Returns:
            Mapping of image type name to plan; types without an active plan are absent
        """
        names = sorted(set(image_types))
        if not names:
            return {}

        async with self.translate_errors("fetch rampup plans"):
            result = await self.db.execute(self._active_plans_query(names))
            plans = list(result.unique().scalars().all())

        rampup_plans = {}
        for plan in plans:
            rampup_plans[plan.image_type.name] = RampupPlan.from_plan(plan, plan.image_type.name)
        logger.debug(f"Active rampup plans loaded for image types {sorted(rampup_plans)}")
        return rampup_plans

    async def get_active_plan_or_raise(self, image_type: str) -> ImageRampupPlan:
        """
        Get the active plan ORM instance of an image type.

        Raises:
            RampupPlanNotFoundError: If the image type has no active plan
        """
        async with self.translate_errors("get active rampup plan"):
            result = await self.db.execute(self._active_plans_query([image_type]))
            plan = result.unique().scalars().first()
        if plan is None:
            raise RampupPlanNotFoundError(image_type)
        return plan

    async def get_active_rampup_plan(self, image_type: str) -> Optional[RampupPlan]:
        """Get the active plan of an image type, or None."""
        plans = await self.fetch_rampup_plans([image_type])
        return plans.get(image_type)

    async def create_rampup_plan(
        self,
        image_type: str,
        name: str,
        entries: List[RampupEntry],
        activate: bool = True,
        description: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> UUID:
        """
        Create a rampup plan with its entries.

        Args:
            image_type: Image type name
            name: Plan name
            entries: Validated rampup entries
            activate: Make this the active plan of the image type
            description: Optional description
            created_by: User creating the plan

        Returns:
            ID of the created plan

        Raises:
            ImageTypeNotFoundError: If the image type doesn't exist
            DatabaseError: If the write fails
        """
        image_type_row = await ImageTypeRepository(self.db).get_by_name_or_raise(image_type)

        plan = ImageRampupPlan(
            image_type_id=image_type_row.id,
            name=name,
            description=description,
            active=activate,
            created_by=created_by,
            modified_by=created_by,
            rampups=_build_rampups(entries, created_by),
        )

        try:
            async with self.translate_errors("create rampup plan"):
                if activate:
                    await self.db.execute(
                        update(ImageRampupPlan)
                        .where(
                            ImageRampupPlan.image_type_id == image_type_row.id,
                            ImageRampupPlan.active.is_(True),
                        )
                        .values(active=False, modified_by=created_by)
                    )
                self.db.add(plan)
                await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(plan)
        logger.info(f"Created rampup plan {plan.id} for image type {image_type} (active={activate})")
        return plan.id

    async def update_rampup_plan(
        self,
        image_type: str,
        entries: List[RampupEntry],
        modified_by: Optional[str] = None,
    ) -> UUID:
        """
        Replace the entries of the active plan of an image type.

        Args:
            image_type: Image type name
            entries: Validated rampup entries
            modified_by: User updating the plan

        Returns:
            ID of the updated plan

        Raises:
            RampupPlanNotFoundError: If the image type has no active plan
            DatabaseError: If the write fails
        """
        plan = await self.get_active_plan_or_raise(image_type)
        plan.rampups = _build_rampups(entries, modified_by)
        plan.modified_by = modified_by

        try:
            async with self.translate_errors("update rampup plan"):
                await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info(f"Updated rampup plan {plan.id} for image type {image_type}")
        return plan.id
