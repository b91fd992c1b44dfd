"""
Domain exceptions for the Hunting Permits Registry.

This module defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns.
"""

from typing import Any


class RegistryException(Exception):
    """
    Base exception for all registry errors.

    All custom exceptions should inherit from this class to allow
    for consistent error handling and logging.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code for API responses
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(RegistryException):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(RegistryException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: int | str):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class UnknownTableException(ResourceNotFoundException):
    """Raised when a sequencing request names a table outside the known set."""

    def __init__(self, table: str):
        super().__init__("table", table)
        self.error_code = "UNKNOWN_TABLE"


class PreconditionFailedException(RegistryException):
    """Raised when a business rule blocks an operation before any mutation."""

    def __init__(self, message: str, resource_type: str, resource_id: int, **details: Any):
        super().__init__(
            message,
            "PRECONDITION_FAILED",
            {"resource_type": resource_type, "resource_id": resource_id, **details},
        )


class ConcurrentModificationException(RegistryException):
    """Raised when the root entity changed between snapshot and mutation."""

    def __init__(self, resource_type: str, resource_id: int, expected_version: int | None):
        super().__init__(
            f"{resource_type} {resource_id} was modified by another operation",
            "CONCURRENT_MODIFICATION",
            {
                "resource_type": resource_type,
                "resource_id": resource_id,
                "expected_version": expected_version,
            },
        )


class CascadeIntegrityException(RegistryException):
    """Raised when the root mutation of a cascade fails in the store."""

    def __init__(self, resource_type: str, resource_id: int, step: str, reason: str):
        super().__init__(
            f"Cascade on {resource_type} {resource_id} failed at step '{step}'",
            "CASCADE_INTEGRITY_ERROR",
            {"resource_type": resource_type, "resource_id": resource_id, "step": step, "reason": reason},
        )


class ReferentialIntegrityException(RegistryException):
    """Raised when resequencing would orphan rows of a dependent table."""

    def __init__(self, table: str, dependent: str, references: int):
        super().__init__(
            f"Cannot resequence {table}: {references} row(s) in {dependent} reference ids that would move",
            "REFERENTIAL_INTEGRITY_ERROR",
            {"table": table, "dependent": dependent, "references": references},
        )


class CampaignWindowException(RegistryException):
    """Raised when a date falls outside the active hunting campaign."""

    def __init__(self, reason: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(reason, "CAMPAIGN_WINDOW_ERROR", details)


class MaintenanceDisabledException(RegistryException):
    """Raised when a maintenance operation is requested outside maintenance mode."""

    def __init__(self, operation: str):
        super().__init__(
            f"Maintenance operation '{operation}' is disabled",
            "MAINTENANCE_DISABLED",
            {"operation": operation},
        )
