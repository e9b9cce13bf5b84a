"""
Base repository class with common operations.

Provides a foundation for domain-specific repositories with:
- Consistent translation of SQLAlchemy failures into DatabaseError
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Generic, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase

from imagemgmt.core.exceptions import DatabaseError

T = TypeVar("T", bound=DeclarativeBase)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Generic base repository.

    Subclass this and set the `model` class attribute to your SQLAlchemy model.
    """

    model: Type[T]

    def __init__(self, db: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            db: SQLAlchemy async session
        """
        self.db = db

    @asynccontextmanager
    async def translate_errors(self, operation: str) -> AsyncIterator[None]:
        """
        Re-raise SQLAlchemy failures as DatabaseError.

        Args:
            operation: Short description used in the error message
        """
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"Database error during {operation}: {e}")
            raise DatabaseError(operation, str(e)) from e
