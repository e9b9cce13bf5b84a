"""
Pydantic schemas for version resolution requests.
"""
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from imagemgmt.models.enums import SelectionStrategy


class ResolveVersionsRequest(BaseModel):
    """Image types to resolve and how to draw among their rampup versions."""
    image_types: List[str] = Field(..., min_length=1)
    strategy: SelectionStrategy = SelectionStrategy.RANDOM
    # Workload identity for sticky selection, e.g. "<project>.<flow>"
    key: Optional[str] = None

    @model_validator(mode="after")
    def check_key(self) -> "ResolveVersionsRequest":
        if self.strategy == SelectionStrategy.DETERMINISTIC and not self.key:
            raise ValueError("key is required for deterministic selection")
        return self
