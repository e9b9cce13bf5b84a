"""
Repository for ImageType entity database operations.
"""
from typing import List, Optional

from sqlalchemy import select

from imagemgmt.core.exceptions import ImageTypeNotFoundError
from imagemgmt.models.image_type import ImageType
from imagemgmt.repositories.base import BaseRepository


class ImageTypeRepository(BaseRepository[ImageType]):
    """Repository for ImageType database operations."""

    model = ImageType

    async def get_by_name(self, name: str) -> Optional[ImageType]:
        """
        Get an image type by its unique name.

        Args:
            name: Image type name

        Returns:
            ImageType if found, None otherwise
        """
        async with self.translate_errors("get image type"):
            result = await self.db.execute(
                select(ImageType).where(ImageType.name == name)
            )
            return result.scalar_one_or_none()

    async def get_by_name_or_raise(self, name: str) -> ImageType:
        """
        Get an image type by name, raising exception if not found.

        Raises:
            ImageTypeNotFoundError: If image type doesn't exist
        """
        image_type = await self.get_by_name(name)
        if not image_type:
            raise ImageTypeNotFoundError(name)
        return image_type

    async def list_image_type_names(self) -> List[str]:
        """List the names of all registered image types, sorted."""
        async with self.translate_errors("list image types"):
            result = await self.db.execute(
                select(ImageType.name).order_by(ImageType.name)
            )
            return list(result.scalars().all())
