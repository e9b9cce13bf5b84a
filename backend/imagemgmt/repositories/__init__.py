"""
Repository layer for database access.
"""
from imagemgmt.repositories.base import BaseRepository
from imagemgmt.repositories.image_type_repository import ImageTypeRepository
from imagemgmt.repositories.image_version_repository import ImageVersionRepository
from imagemgmt.repositories.memory import InMemoryImageStore
from imagemgmt.repositories.rampup_repository import RampupRepository

__all__ = [
    "BaseRepository",
    "ImageTypeRepository",
    "ImageVersionRepository",
    "InMemoryImageStore",
    "RampupRepository",
]
