"""Domain exceptions for the VISITA review service.

Defines domain-level exceptions that represent business rule violations
and backend failures the core surfaces to its callers. Presentation layer
maps them to HTTP responses in exception handlers.
"""

from typing import Any


class VisitaException(Exception):
    """Base exception for all VISITA application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable error body (error, message, details)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(VisitaException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(VisitaException):
    """Raised when authentication fails (e.g. missing or invalid ID token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AuthorizationException(VisitaException):
    """Raised when the actor's role or scope does not allow the operation."""

    def __init__(
        self,
        resource: str | None = None,
        action: str | None = None,
        message: str = "Permission denied",
    ) -> None:
        """Initialize with optional resource, action, and message.

        Args:
            resource: Optional resource type (e.g. 'church', 'audit_log').
            action: Optional action that was attempted (e.g. 'approved', 'read').
            message: Human-readable message; default used when resource/action omitted.
        """
        if resource and action and message == "Permission denied":
            message = f"Permission denied: {action} on {resource}"
        details: dict[str, Any] = {}
        if resource:
            details["resource"] = resource
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(VisitaException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'church').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class InvalidTransitionException(VisitaException):
    """Raised when a status change is not reachable from the current status."""

    def __init__(
        self,
        current_status: str,
        target_status: str,
        reason: str | None = None,
        message: str | None = None,
        **details_extra: Any,
    ) -> None:
        """Initialize with the attempted transition.

        Args:
            current_status: Status the record is in.
            target_status: Status that was requested.
            reason: Optional short machine-readable reason (e.g. 'heritage_review_required').
            message: Optional message overriding the generated one.
            **details_extra: Extra context (e.g. classification).
        """
        if message is None:
            message = f"Transition from '{current_status}' to '{target_status}' is not allowed"
            if reason == "heritage_review_required":
                message += " (heritage-classified records must pass heritage review)"
        details: dict[str, Any] = {
            "current_status": current_status,
            "target_status": target_status,
            **details_extra,
        }
        if reason:
            details["reason"] = reason
        super().__init__(message, "INVALID_TRANSITION", details)


class ConcurrentModificationException(VisitaException):
    """Raised when a conditional write lost to a concurrent write of the same record."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} {resource_id} was modified by another request; reload and retry",
            "CONCURRENT_MODIFICATION",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class BackendUnavailableException(VisitaException):
    """Raised when the document store cannot be reached or answers with a server error."""

    def __init__(self, operation: str, reason: str | None = None) -> None:
        """Initialize with the failed operation.

        Args:
            operation: What was being attempted (e.g. 'runQuery churches').
            reason: Optional underlying error text.
        """
        details: dict[str, Any] = {"operation": operation}
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Document store unavailable during {operation}",
            "BACKEND_UNAVAILABLE",
            details,
        )


class AuditWriteFailedException(VisitaException):
    """Raised when an audit log entry could not be persisted."""

    def __init__(self, action: str, resource_id: str, reason: str | None = None) -> None:
        """Initialize with the audit entry that failed.

        Args:
            action: Audit action value (e.g. 'church.approve').
            resource_id: Resource the entry referred to.
            reason: Optional underlying error text.
        """
        details: dict[str, Any] = {"action": action, "resource_id": resource_id}
        if reason:
            details["reason"] = reason
        super().__init__(
            f"Failed to write audit entry {action} for {resource_id}",
            "AUDIT_WRITE_FAILED",
            details,
        )
