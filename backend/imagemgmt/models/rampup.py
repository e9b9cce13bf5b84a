"""
Rampup plan and rampup entry models.

A plan is created and updated as a unit; its entries are never mutated
independently. The store keeps at most one active plan per image type.
"""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from imagemgmt.core.database import Base
from imagemgmt.models.enums import StabilityTag


class ImageRampupPlan(Base):
    """Rampup plan for one image type."""

    __tablename__ = "image_rampup_plans"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    image_type_id = Column(
        UUID(as_uuid=True),
        ForeignKey("image_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    active = Column(Boolean, default=False, nullable=False, server_default='false', index=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    modified_by = Column(String(255), nullable=True)
    modified_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    image_type = relationship("ImageType", back_populates="rampup_plans")
    rampups = relationship(
        "ImageRampup",
        back_populates="plan",
        cascade="all, delete-orphan",
        order_by="ImageRampup.position",
    )


class ImageRampup(Base):
    """One (version, percentage, stability tag) entry of a rampup plan."""

    __tablename__ = "image_rampups"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    plan_id = Column(
        UUID(as_uuid=True),
        ForeignKey("image_rampup_plans.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Insertion order within the plan; the weighted selector tie-breaks on it
    position = Column(Integer, nullable=False, default=0)
    image_version = Column(String(255), nullable=False)
    rampup_percentage = Column(Integer, nullable=False, default=0)
    stability_tag = Column(String(50), default=StabilityTag.EXPERIMENTAL.value, nullable=False)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    modified_by = Column(String(255), nullable=True)
    modified_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    plan = relationship("ImageRampupPlan", back_populates="rampups")
