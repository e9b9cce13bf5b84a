"""
Service layer for authoring rampup plans.

Requests are stamped with the acting user and validated here before they
reach the repository; an invalid plan is never persisted.
"""
import logging
from typing import Optional
from uuid import UUID

from imagemgmt.repositories.protocols import RampupPlanWriter
from imagemgmt.schemas.rampup import RampupPlan, RampupPlanRequest
from imagemgmt.services.plan_validator import validate_rampup_plan

logger = logging.getLogger(__name__)


class RampupPlanService:
    """Creates, updates and reads rampup plans."""

    def __init__(self, plan_writer: RampupPlanWriter):
        self.plan_writer = plan_writer

    async def create_rampup_plan(self, request: RampupPlanRequest, user: str) -> UUID:
        """
        Validate and persist a new rampup plan.

        Args:
            request: Plan request
            user: User invoking the API, recorded as creator and modifier

        Returns:
            ID of the created plan

        Raises:
            RampupValidationError: If the plan violates a rampup invariant
            ImageTypeNotFoundError: If the image type doesn't exist
        """
        request = request.model_copy(update={
            "created_by": user,
            "modified_by": user,
            "rampups": [
                r.model_copy(update={"created_by": user, "modified_by": user})
                for r in request.rampups
            ],
        })
        entries = request.to_entries()
        validate_rampup_plan(entries)

        plan_name = request.plan_name or f"{request.image_type} rampup"
        plan_id = await self.plan_writer.create_rampup_plan(
            image_type=request.image_type,
            name=plan_name,
            entries=entries,
            activate=request.activate_plan,
            description=request.description,
            created_by=user,
        )
        logger.info(f"User {user} created rampup plan {plan_id} for image type {request.image_type}")
        return plan_id

    async def update_rampup_plan(self, image_type: str, request: RampupPlanRequest, user: str) -> UUID:
        """
        Validate and replace the entries of the active plan of an image type.

        The image type in the path wins over the one in the request body.

        Raises:
            RampupValidationError: If the plan violates a rampup invariant
            RampupPlanNotFoundError: If the image type has no active plan
        """
        request = request.model_copy(update={
            "image_type": image_type,
            "modified_by": user,
            "rampups": [r.model_copy(update={"modified_by": user}) for r in request.rampups],
        })
        entries = request.to_entries()
        validate_rampup_plan(entries)

        plan_id = await self.plan_writer.update_rampup_plan(image_type, entries, modified_by=user)
        logger.info(f"User {user} updated rampup plan {plan_id} for image type {image_type}")
        return plan_id

    async def get_active_rampup_plan(self, image_type: str) -> Optional[RampupPlan]:
        """Get the active plan of an image type, or None."""
        return await self.plan_writer.get_active_rampup_plan(image_type)
