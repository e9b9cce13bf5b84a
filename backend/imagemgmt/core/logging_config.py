"""
Logging setup shared by services and embedding applications.
"""
import logging
from typing import Optional

from imagemgmt.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the image management package.

    Args:
        level: Log level name; defaults to settings.LOG_LEVEL
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)

    # SQLAlchemy engine logging is controlled by settings.DEBUG via echo=
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
