"""
Domain exceptions for BoxTrack.

This module defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns: they carry structured
context (entity kind, id, tenant) and leave message rendering and transport
mapping to the presentation layer.
"""

from typing import Any


class BoxTrackException(Exception):
    """
    Base exception for all BoxTrack application errors.

    Attributes:
        message: Developer-facing error description
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


# Not found
class NotFoundException(BoxTrackException):
    """Raised when a referenced entity is absent or outside the caller's tenant."""

    def __init__(self, resource_type: str, resource_id: str, tenant_id: str | None = None):
        details: dict[str, Any] = {"resource_type": resource_type, "resource_id": resource_id}
        if tenant_id:
            details["tenant_id"] = tenant_id
        super().__init__(f"{resource_type} not found: {resource_id}", "NOT_FOUND", details)


class TenantNotFoundException(NotFoundException):
    """Raised when tenant is not found."""

    def __init__(self, tenant_id: str):
        super().__init__("tenant", tenant_id)


class LocationNotFoundException(NotFoundException):
    """Raised when a location is missing, soft-deleted or in another tenant."""

    def __init__(self, location_id: str, tenant_id: str | None = None):
        super().__init__("location", location_id, tenant_id)


class ContainerNotFoundException(NotFoundException):
    """Raised when a container is missing or in another tenant."""

    def __init__(self, container_id: str, tenant_id: str | None = None):
        super().__init__("container", container_id, tenant_id)


class CodeNotFoundException(NotFoundException):
    """Raised when a code is missing or in another tenant."""

    def __init__(self, code_id: str, tenant_id: str | None = None):
        super().__init__("code", code_id, tenant_id)


# Location tree
class DepthExceededException(BoxTrackException):
    """Raised when a location create/move would exceed the maximum tree depth."""

    def __init__(self, location_id: str | None, depth: int, max_depth: int):
        super().__init__(
            f"Location depth {depth} exceeds maximum of {max_depth}",
            "DEPTH_EXCEEDED",
            {"location_id": location_id, "depth": depth, "max_depth": max_depth},
        )


class CycleDetectedException(BoxTrackException):
    """Raised when a move would make a location its own ancestor."""

    def __init__(self, location_id: str, new_parent_id: str):
        super().__init__(
            f"Location {location_id} cannot be moved under itself or its descendant {new_parent_id}",
            "CYCLE_DETECTED",
            {"location_id": location_id, "new_parent_id": new_parent_id},
        )


# Tenant scope
class WorkspaceMismatchException(BoxTrackException):
    """Raised when an entity references a location or code of another tenant."""

    def __init__(self, resource_type: str, resource_id: str, tenant_id: str):
        super().__init__(
            f"{resource_type} {resource_id} belongs to a different workspace",
            "WORKSPACE_MISMATCH",
            {"resource_type": resource_type, "resource_id": resource_id, "tenant_id": tenant_id},
        )


# Conflicts
class ConflictException(BoxTrackException):
    """Raised when a state transition is not allowed from the current state."""

    def __init__(self, message: str, error_code: str = "CONFLICT", details: dict[str, Any] | None = None):
        super().__init__(message, error_code, details)


class CodeAlreadyAssignedException(ConflictException):
    """Raised when binding a code that is already bound to another container."""

    def __init__(self, code_id: str, container_id: str, requested_container_id: str):
        super().__init__(
            f"Code {code_id} is already assigned to container {container_id}",
            "QR_CODE_ALREADY_ASSIGNED",
            {
                "code_id": code_id,
                "container_id": container_id,
                "requested_container_id": requested_container_id,
            },
        )


class LocationNameConflictException(ConflictException):
    """Raised when an active sibling location already uses the same name."""

    def __init__(self, name: str, parent_id: str | None, tenant_id: str):
        super().__init__(
            f"A location named '{name}' already exists at this level",
            "LOCATION_NAME_CONFLICT",
            {"name": name, "parent_id": parent_id, "tenant_id": tenant_id},
        )


# Caller-side input and sequencing errors
class ValidationException(BoxTrackException):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str | None = None, error_code: str = "VALIDATION_ERROR"):
        details = {"field": field} if field else {}
        super().__init__(message, error_code, details)


class InvalidBatchSizeException(ValidationException):
    """Raised when a code batch size falls outside the allowed range."""

    def __init__(self, count: int, minimum: int, maximum: int):
        super().__init__(
            f"Batch size {count} must be between {minimum} and {maximum}",
            "count",
            "INVALID_BATCH_SIZE",
        )
        self.details.update({"count": count, "min": minimum, "max": maximum})


class InvalidTransitionException(ValidationException):
    """Raised when a code status transition is not part of the lifecycle."""

    def __init__(self, code_id: str, current: str, target: str):
        super().__init__(
            f"Code {code_id} cannot move from {current} to {target}",
            "status",
            "INVALID_TRANSITION",
        )
        self.details.update({"code_id": code_id, "current": current, "target": target})


# Fatal
class MintExhaustedException(BoxTrackException):
    """Raised when every identifier candidate collided within the retry budget."""

    def __init__(self, kind: str, attempts: int):
        super().__init__(
            f"Could not mint a unique {kind} identifier after {attempts} attempts",
            "MINT_EXHAUSTED",
            {"kind": kind, "attempts": attempts},
        )


class AuthorizationException(BoxTrackException):
    """Raised when the authorization gate denies an operation."""

    def __init__(self, operation: str, tenant_id: str):
        super().__init__(
            f"Permission denied: {operation}",
            "AUTHORIZATION_ERROR",
            {"operation": operation, "tenant_id": tenant_id},
        )
