"""
Repository for ImageVersion entity database operations.
"""
import logging
from typing import Iterable, List

from sqlalchemy import desc, select

from imagemgmt.models.enums import ImageVersionState
from imagemgmt.models.image_type import ImageType
from imagemgmt.models.image_version import ImageVersion
from imagemgmt.repositories.base import BaseRepository
from imagemgmt.schemas.version import ActiveImageVersion

logger = logging.getLogger(__name__)


class ImageVersionRepository(BaseRepository[ImageVersion]):
    """Repository for ImageVersion database operations."""

    model = ImageVersion

    async def fetch_latest_active_versions(self, image_types: Iterable[str]) -> List[ActiveImageVersion]:
        """
        Get the latest ACTIVE version of each image type.

        "Latest" is the most recently created ACTIVE row; rows created at the
        same instant are ordered by id.

        Args:
            image_types: Image type names

        Returns:
            One ActiveImageVersion per image type that has an active version,
            sorted by image type
        """
        names = sorted(set(image_types))
        if not names:
            return []

        query = (
            select(ImageType.name, ImageVersion.version)
            .join(ImageType, ImageVersion.image_type_id == ImageType.id)
            .where(
                ImageType.name.in_(names),
                ImageVersion.state == ImageVersionState.ACTIVE.value,
            )
            .order_by(ImageType.name, desc(ImageVersion.created_at), desc(ImageVersion.id))
        )

        async with self.translate_errors("fetch latest active versions"):
            result = await self.db.execute(query)
            rows = result.all()

        latest = {}
        for image_type, version in rows:
            # Rows arrive newest first within each image type
            latest.setdefault(image_type, version)

        logger.debug(f"Active versions found for image types {sorted(latest)}")
        return [ActiveImageVersion(image_type=name, version=latest[name]) for name in sorted(latest)]
