"""Domain exceptions.

All domain-level errors raised when an invariant is violated or an
invalid operation is attempted. User-caused violations (duplicate option
names and similar) are converted to field errors by the draft reducer;
everything else propagates to the caller.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching engine-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Platform Errors
# ============================================================================


class UnknownPlatformError(DomainError):
    """Raised when a platform id has no registered configuration."""

    def __init__(self, platform_id: str) -> None:
        """Initialize unknown platform error.

        Args:
            platform_id: The requested platform id.
        """
        super().__init__(
            f"Unknown platform '{platform_id}'",
            details={"platform_id": platform_id},
        )


# ============================================================================
# Variant Errors
# ============================================================================


class VariantError(DomainError):
    """Base class for variant-related errors."""

    pass


class DuplicateDimensionError(VariantError):
    """Raised when a dimension name already exists (case-insensitive)."""

    def __init__(self, name: str) -> None:
        """Initialize duplicate dimension error.

        Args:
            name: The rejected dimension name.
        """
        super().__init__(
            f"You may not have two variations named '{name}'",
            details={"name": name},
        )


class DuplicateVariantValueError(VariantError):
    """Raised when an option name already exists within its dimension."""

    def __init__(self, dimension_id: str, name: str) -> None:
        """Initialize duplicate value error.

        Args:
            dimension_id: Dimension the value was added to.
            name: The rejected option name.
        """
        super().__init__(
            "You may not have two options with same name",
            details={"dimension_id": dimension_id, "name": name},
        )


class DimensionNotFoundError(VariantError):
    """Raised when a dimension id is not part of the set."""

    def __init__(self, dimension_id: str) -> None:
        """Initialize dimension not found error.

        Args:
            dimension_id: The missing dimension id.
        """
        super().__init__(
            f"Dimension {dimension_id} not found",
            details={"dimension_id": dimension_id},
        )


class VariantValueNotFoundError(VariantError):
    """Raised when a value id is not part of its dimension."""

    def __init__(self, dimension_id: str, value_id: str) -> None:
        """Initialize value not found error.

        Args:
            dimension_id: Dimension that was searched.
            value_id: The missing value id.
        """
        super().__init__(
            f"Value {value_id} not found in dimension {dimension_id}",
            details={"dimension_id": dimension_id, "value_id": value_id},
        )


class CombinationNotFoundError(VariantError):
    """Raised when no combination has the requested identity."""

    def __init__(self, key: str) -> None:
        """Initialize combination not found error.

        Args:
            key: String form of the combination key.
        """
        super().__init__(
            f"Combination {key} not found",
            details={"key": key},
        )


class UnsupportedFieldError(VariantError):
    """Raised when a combination field cannot be edited."""

    def __init__(self, field_name: str, allowed: list[str]) -> None:
        """Initialize unsupported field error.

        Args:
            field_name: The rejected field name.
            allowed: Field names that may be edited.
        """
        super().__init__(
            f"Field '{field_name}' cannot be edited. Allowed fields: {allowed}",
            details={"field": field_name, "allowed": allowed},
        )


# ============================================================================
# Category Errors
# ============================================================================


class CategoryFetchError(DomainError):
    """Raised by a category data source when a fetch fails."""

    def __init__(
        self,
        marketplace_id: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        """Initialize category fetch error.

        Args:
            marketplace_id: Marketplace whose taxonomy was requested.
            message: Failure description.
            status_code: HTTP status code, if any.
        """
        super().__init__(
            f"[{marketplace_id}] {message}",
            details={"marketplace_id": marketplace_id, "status_code": status_code},
        )
        self.marketplace_id = marketplace_id
        self.status_code = status_code


# ============================================================================
# Collaborator Errors
# ============================================================================


class PersistenceError(DomainError):
    """Raised by a listing repository when a write fails."""

    pass


class MediaUploadError(DomainError):
    """Raised by media storage when an upload or removal fails."""

    def __init__(self, filename: str, reason: str) -> None:
        """Initialize media upload error.

        Args:
            filename: Name of the file being transferred.
            reason: Failure description.
        """
        super().__init__(
            f"Upload of {filename} failed: {reason}",
            details={"filename": filename, "reason": reason},
        )
        self.filename = filename
