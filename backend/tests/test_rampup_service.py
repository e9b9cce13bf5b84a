"""
Tests for RampupPlanService.
"""
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from imagemgmt.core.exceptions import (
    ImageTypeNotFoundError,
    InvalidRampupTotalError,
    RampupPlanNotFoundError,
    UnstableRampupPercentageError,
)
from imagemgmt.models.enums import StabilityTag
from imagemgmt.schemas.rampup import RampupPlanRequest
from imagemgmt.services.rampup_service import RampupPlanService


def plan_request(image_type="spark", rampups=None, **kwargs):
    """Build a RampupPlanRequest from (version, percentage, tag) tuples."""
    rampups = rampups if rampups is not None else [("1.0", 70, "stable"), ("1.1", 30, "experimental")]
    return RampupPlanRequest(
        image_type=image_type,
        rampups=[
            {"image_version": v, "rampup_percentage": p, "stability_tag": t}
            for v, p, t in rampups
        ],
        **kwargs,
    )


class TestCreateRampupPlan:
    """Tests for create_rampup_plan."""

    @pytest.fixture
    def mock_writer(self):
        writer = MagicMock()
        writer.create_rampup_plan = AsyncMock(return_value=uuid4())
        return writer

    @pytest.mark.asyncio
    async def test_create_stamps_user_and_persists(self, mock_writer):
        """Test the acting user is recorded on the plan and every entry."""
        service = RampupPlanService(mock_writer)

        plan_id = await service.create_rampup_plan(plan_request(plan_name="spark-q3"), user="alice")

        assert plan_id == mock_writer.create_rampup_plan.return_value
        kwargs = mock_writer.create_rampup_plan.call_args.kwargs
        assert kwargs["image_type"] == "spark"
        assert kwargs["name"] == "spark-q3"
        assert kwargs["created_by"] == "alice"
        assert kwargs["activate"] is True
        assert [e.version for e in kwargs["entries"]] == ["1.0", "1.1"]
        assert all(e.created_by == "alice" and e.modified_by == "alice" for e in kwargs["entries"])

    @pytest.mark.asyncio
    async def test_create_defaults_plan_name(self, mock_writer):
        """Test a plan without a name is named after its image type."""
        service = RampupPlanService(mock_writer)

        await service.create_rampup_plan(plan_request(), user="alice")

        assert mock_writer.create_rampup_plan.call_args.kwargs["name"] == "spark rampup"

    @pytest.mark.asyncio
    async def test_invalid_plan_not_persisted(self, mock_writer):
        """Test a plan failing validation never reaches the store."""
        service = RampupPlanService(mock_writer)

        with pytest.raises(InvalidRampupTotalError):
            await service.create_rampup_plan(plan_request(rampups=[("1.0", 90, "stable")]), user="alice")

        mock_writer.create_rampup_plan.assert_not_called()

    @pytest.mark.asyncio
    async def test_unstable_with_percentage_rejected(self, mock_writer):
        """Test an UNSTABLE entry with traffic is rejected."""
        service = RampupPlanService(mock_writer)
        request = plan_request(rampups=[("1.0", 90, "stable"), ("1.1", 10, "UNSTABLE")])

        with pytest.raises(UnstableRampupPercentageError):
            await service.create_rampup_plan(request, user="alice")

    @pytest.mark.asyncio
    async def test_create_against_memory_store(self, memory_store):
        """Test a created plan becomes the active plan of its image type."""
        memory_store.add_image_type("spark")
        service = RampupPlanService(memory_store)

        await service.create_rampup_plan(plan_request(), user="alice")
        plan = await service.get_active_rampup_plan("spark")

        assert [(e.version, e.rampup_percentage) for e in plan.entries] == [("1.0", 70), ("1.1", 30)]
        assert plan.entries[1].stability_tag == StabilityTag.EXPERIMENTAL

    @pytest.mark.asyncio
    async def test_new_active_plan_replaces_previous(self, memory_store):
        """Test only one plan per image type stays active."""
        memory_store.add_image_type("spark")
        service = RampupPlanService(memory_store)

        await service.create_rampup_plan(plan_request(), user="alice")
        second_id = await service.create_rampup_plan(plan_request(rampups=[("2.0", 100, "stable")]), user="bob")
        plan = await service.get_active_rampup_plan("spark")

        assert plan.id == second_id
        assert [e.version for e in plan.entries] == ["2.0"]

    @pytest.mark.asyncio
    async def test_unknown_image_type(self, memory_store):
        """Test creating a plan for an unregistered image type fails."""
        service = RampupPlanService(memory_store)

        with pytest.raises(ImageTypeNotFoundError):
            await service.create_rampup_plan(plan_request(image_type="nope"), user="alice")


class TestUpdateRampupPlan:
    """Tests for update_rampup_plan."""

    @pytest.mark.asyncio
    async def test_update_replaces_entries(self, memory_store):
        """Test updating swaps the entries of the active plan."""
        memory_store.add_image_type("spark")
        service = RampupPlanService(memory_store)
        plan_id = await service.create_rampup_plan(plan_request(), user="alice")

        updated_id = await service.update_rampup_plan(
            "spark", plan_request(rampups=[("1.0", 20, "stable"), ("1.1", 80, "stable")]), user="bob"
        )
        plan = await service.get_active_rampup_plan("spark")

        assert updated_id == plan_id
        assert [(e.version, e.rampup_percentage, e.modified_by) for e in plan.entries] == [
            ("1.0", 20, "bob"),
            ("1.1", 80, "bob"),
        ]

    @pytest.mark.asyncio
    async def test_update_uses_path_image_type(self):
        """Test the image type argument overrides the request body."""
        writer = MagicMock()
        writer.update_rampup_plan = AsyncMock(return_value=uuid4())
        service = RampupPlanService(writer)

        await service.update_rampup_plan("hive", plan_request(image_type="spark"), user="bob")

        assert writer.update_rampup_plan.call_args.args[0] == "hive"
        assert writer.update_rampup_plan.call_args.kwargs["modified_by"] == "bob"

    @pytest.mark.asyncio
    async def test_update_without_active_plan(self, memory_store):
        """Test updating an image type without an active plan fails."""
        memory_store.add_image_type("spark")
        service = RampupPlanService(memory_store)

        with pytest.raises(RampupPlanNotFoundError):
            await service.update_rampup_plan("spark", plan_request(), user="bob")

    @pytest.mark.asyncio
    async def test_update_validates_first(self):
        """Test an invalid update never reaches the store."""
        writer = MagicMock()
        writer.update_rampup_plan = AsyncMock()
        service = RampupPlanService(writer)

        request = plan_request(rampups=[("1.0", 60, "stable"), ("1.1", 41, "stable")])

        with pytest.raises(InvalidRampupTotalError):
            await service.update_rampup_plan("spark", request, user="bob")

        writer.update_rampup_plan.assert_not_called()
