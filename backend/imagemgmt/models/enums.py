"""
Enumerations shared by ORM models, schemas and services.
"""
from enum import Enum


class ImageVersionState(str, Enum):
    """Lifecycle state of an image version."""
    NEW = "new"
    ACTIVE = "active"
    UNSTABLE = "unstable"
    DEPRECATED = "deprecated"


class StabilityTag(str, Enum):
    """Stability of a version within a rampup plan."""
    EXPERIMENTAL = "experimental"
    STABLE = "stable"
    UNSTABLE = "unstable"


class SelectionStrategy(str, Enum):
    """How the draw for weighted version selection is obtained."""
    RANDOM = "random"
    DETERMINISTIC = "deterministic"
