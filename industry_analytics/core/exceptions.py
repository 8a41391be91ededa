"""
Industry Analytics Exception Hierarchy.

Centralized exception definitions for consistent error handling.
"""

from typing import List


class IndustryAnalyticsError(Exception):
    """Base exception for all Industry Analytics errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# -----------------------------------------------------------------------------
# Registry Errors
# -----------------------------------------------------------------------------

class RegistryError(IndustryAnalyticsError):
    """Base exception for registry-related errors."""
    pass


class DuplicatePackError(RegistryError):
    """Raised when a pack id is registered twice."""

    def __init__(self, pack_id: str):
        super().__init__(
            f"Industry pack '{pack_id}' is already registered",
            {"pack_id": pack_id}
        )
        self.pack_id = pack_id


class PackNotFoundError(RegistryError):
    """Raised when updating a pack that is not registered."""

    def __init__(self, pack_id: str):
        super().__init__(
            f"Industry pack '{pack_id}' not found",
            {"pack_id": pack_id}
        )
        self.pack_id = pack_id


# -----------------------------------------------------------------------------
# Pack Errors
# -----------------------------------------------------------------------------

class PackError(IndustryAnalyticsError):
    """Base exception for pack-related errors."""
    pass


class PackValidationError(PackError):
    """Raised when pack validation fails."""

    def __init__(self, pack_id: str, errors: List[str]):
        joined = "\n".join(f"  - {e}" for e in errors)
        super().__init__(
            f"Pack validation failed for '{pack_id}':\n{joined}",
            {"pack_id": pack_id, "errors": errors}
        )
        self.pack_id = pack_id
        self.errors = errors


class DuplicateSemanticTypeError(PackValidationError):
    """Raised when two semantic types in one pack share a type identifier."""

    def __init__(self, pack_id: str, semantic_type: str):
        super().__init__(pack_id, [f"Duplicate semantic type: {semantic_type}"])
        self.details["semantic_type"] = semantic_type
        self.semantic_type = semantic_type


class DuplicateMetricIdError(PackValidationError):
    """Raised when two metrics in one pack share an id."""

    def __init__(self, pack_id: str, metric_id: str):
        super().__init__(pack_id, [f"Duplicate metric id: {metric_id}"])
        self.details["metric_id"] = metric_id
        self.metric_id = metric_id


class PackLoadError(PackError):
    """Raised when a pack cannot be loaded."""

    def __init__(self, source: str, message: str):
        super().__init__(
            f"Failed to load pack from '{source}': {message}",
            {"source": source}
        )
        self.source = source
