"""
Image version model.

Versions are never deleted; they are superseded by state changes. Several
versions of one image type may be ACTIVE at once, in which case the most
recently created one is the "latest active" version.
"""
import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from imagemgmt.core.database import Base
from imagemgmt.models.enums import ImageVersionState


class ImageVersion(Base):
    """A registered version of an image type."""

    __tablename__ = "image_versions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    image_type_id = Column(
        UUID(as_uuid=True),
        ForeignKey("image_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    version = Column(String(255), nullable=False, index=True)
    path = Column(String(1000), nullable=True)
    description = Column(Text, nullable=True)
    state = Column(String(50), default=ImageVersionState.NEW.value, nullable=False, index=True)
    release_tag = Column(String(255), nullable=True)
    created_by = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    modified_by = Column(String(255), nullable=True)
    modified_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    image_type = relationship("ImageType", back_populates="versions")

    __table_args__ = (
        Index("idx_image_versions_type_version", "image_type_id", "version", unique=True),
    )
