"""
Image type model: a named category of job container image.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from imagemgmt.core.database import Base


class ImageType(Base):
    """Image type metadata (e.g. a job runtime flavor)."""

    __tablename__ = "image_types"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    versions = relationship("ImageVersion", back_populates="image_type", cascade="all, delete-orphan")
    rampup_plans = relationship("ImageRampupPlan", back_populates="image_type", cascade="all, delete-orphan")
