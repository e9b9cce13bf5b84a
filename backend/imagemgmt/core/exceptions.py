"""
Custom exception hierarchy for domain-specific errors.

Services raise domain exceptions; callers (a dispatch service, a plan
management API) decide how to surface them. Every exception carries a
human-readable message and a details dict suitable for structured logging.
"""
from typing import Any, Dict, Iterable, Optional


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Not Found Errors
# =============================================================================

class NotFoundError(DomainException):
    """Base class for resource not found errors."""
    pass


class ImageTypeNotFoundError(NotFoundError):
    """Image type does not exist."""

    def __init__(self, image_type: str):
        super().__init__(f"Image type not found: {image_type}", {"image_type": image_type})


class RampupPlanNotFoundError(NotFoundError):
    """No active rampup plan exists for the image type."""

    def __init__(self, image_type: str):
        super().__init__(
            f"No active rampup plan found for image type: {image_type}",
            {"image_type": image_type},
        )


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(DomainException):
    """Base class for validation errors."""
    pass


class RampupValidationError(ValidationError):
    """A rampup plan violates one of its structural invariants."""
    pass


class EmptyRampupPlanError(RampupValidationError):
    """Rampup plan has no entries."""

    def __init__(self):
        super().__init__("Missing rampup details", {"reason": "empty_plan"})


class InvalidRampupTotalError(RampupValidationError):
    """Rampup percentages do not add up to 100."""

    def __init__(self, total: int):
        super().__init__(
            f"Total rampup percentage for all the versions must be 100, got {total}",
            {"reason": "invalid_total", "total": total},
        )


class DuplicateRampupVersionError(RampupValidationError):
    """The same version appears twice in a rampup plan."""

    def __init__(self, version: str):
        super().__init__(
            f"Duplicate image version: {version}",
            {"reason": "duplicate_version", "version": version},
        )


class UnstableRampupPercentageError(RampupValidationError):
    """An UNSTABLE entry carries a non-zero rampup percentage."""

    def __init__(self, version: str, percentage: int):
        super().__init__(
            f"The image version {version} is marked as UNSTABLE and hence the "
            f"rampup percentage must be 0, got {percentage}",
            {"reason": "unstable_nonzero", "version": version, "rampup_percentage": percentage},
        )


# =============================================================================
# Operation Errors
# =============================================================================

class OperationError(DomainException):
    """Base class for operation failures."""
    pass


class PlanIntegrityViolationError(OperationError):
    """A stored rampup plan failed a resolution-time structural check."""

    def __init__(self, image_type: str, reason: str):
        super().__init__(
            f"Rampup plan integrity violation for image type {image_type}: {reason}",
            {"image_type": image_type, "reason": reason},
        )


class AggregateResolutionError(OperationError):
    """One or more image types have neither a usable rampup selection nor an active version."""

    def __init__(self, image_types: Iterable[str], integrity_failures: Iterable[str] = ()):
        self.image_types = sorted(set(image_types))
        self.integrity_failures = sorted(set(integrity_failures))
        details: Dict[str, Any] = {"image_types": self.image_types}
        if self.integrity_failures:
            details["integrity_failures"] = self.integrity_failures
        super().__init__(
            "Could not fetch version for image types. Reasons: 1. There is no active "
            "rampup plan or the plan yielded no usable version. 2. There is no active "
            f"version in the image versions table. Image types: {self.image_types}",
            details,
        )


class DatabaseError(OperationError):
    """Database operation failed."""

    def __init__(self, operation: str, reason: str):
        super().__init__(f"Database error during {operation}: {reason}", {"operation": operation, "reason": reason})


# =============================================================================
# Service Unavailable
# =============================================================================

class ServiceUnavailableError(DomainException):
    """External service is unavailable."""

    def __init__(self, service: str, reason: str = "Service unavailable"):
        super().__init__(f"{service}: {reason}", {"service": service, "reason": reason})


class StoreUnavailableError(ServiceUnavailableError):
    """The image metadata store did not answer in time."""

    def __init__(self, operation: str, timeout: float):
        super().__init__("image metadata store", f"{operation} timed out after {timeout}s")
        self.details["operation"] = operation
        self.details["timeout"] = timeout
