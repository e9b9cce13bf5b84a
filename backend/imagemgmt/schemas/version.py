"""
Pydantic schemas for image versions.
"""
from pydantic import BaseModel


class ActiveImageVersion(BaseModel):
    """Latest active version of an image type."""
    image_type: str
    version: str

    model_config = {"frozen": True}
