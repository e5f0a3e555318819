"""Domain exception hierarchy for type-safe error handling.

Every error raised by the control plane services derives from
:class:`DomainError`. The FastAPI layer maps each subclass to an HTTP
status and renders ``message`` as the client-facing ``{"message": ...}``
body; ``context`` is kept for logs only.

Example:
    >>> from tessera.foundation.domain.exceptions import NotFoundError
    >>> raise NotFoundError("TenantRegistration", "reg-1")
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConflictError",
    "DomainError",
    "MalformedEventError",
    "NotFoundError",
    "UpstreamServiceError",
    "UpstreamTransportError",
    "ValidationError",
]


class DomainError(Exception):
    """Base class for all domain errors.

    Attributes:
        error_code: Machine-readable error code, used in logs.
        message: Human-readable error description returned to callers.
        context: Structured debugging information (record ids, statuses).

    Example:
        >>> raise DomainError("Operation failed", context={"tenant_id": "123"})
        DomainError: Operation failed (tenant_id=123)
    """

    error_code: str = "DOMAIN_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize domain error with message and optional context.

        Args:
            message: Human-readable error description.
            context: Structured debugging information. Keys should be snake_case.
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """String representation including context for logging."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class NotFoundError(DomainError):
    """Raised when a requested record does not exist.

    Maps to HTTP 404. Also raised when a conditional write fails because
    the record it required is absent.

    Attributes:
        error_code: "RESOURCE_NOT_FOUND" (class constant).
        resource_type: Type of missing resource.
        resource_id: Identifier of missing resource.

    Example:
        >>> raise NotFoundError("Tenant", "t-1", message="Tenant t-1 not found.")
        NotFoundError: Tenant t-1 not found. (resource_type=Tenant, resource_id=t-1)
    """

    error_code: str = "RESOURCE_NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        *,
        message: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize not found error.

        Args:
            resource_type: Type of resource (e.g., "Tenant", "TenantRegistration").
            resource_id: Identifier of the missing resource.
            message: Client-facing message. Defaults to
                ``"<resource_type> not found: <resource_id>"``.
            **extra_context: Additional debugging context.
        """
        self.resource_type = resource_type
        self.resource_id = resource_id
        context = {
            "resource_type": resource_type,
            "resource_id": str(resource_id),
            **extra_context,
        }
        super().__init__(message or f"{resource_type} not found: {resource_id}", context)


class ValidationError(DomainError):
    """Raised when input fails validation.

    Maps to HTTP 400. Validation failures are never retried.

    Attributes:
        error_code: "VALIDATION_ERROR" (class constant).
        field: Field path that failed validation.
        reason: Human-readable validation failure reason.

    Example:
        >>> raise ValidationError("body", "Missing request body")
        ValidationError: Missing request body (field=body, reason=Missing request body)
    """

    error_code: str = "VALIDATION_ERROR"

    def __init__(
        self,
        field: str,
        reason: str,
        **extra_context: Any,
    ) -> None:
        """Initialize validation error.

        Args:
            field: Field path that failed validation.
            reason: Human-readable reason, returned to the caller as the message.
            **extra_context: Additional debugging context.
        """
        self.field = field
        self.reason = reason
        context = {
            "field": field,
            "reason": reason,
            **extra_context,
        }
        super().__init__(reason, context)


class MalformedEventError(ValidationError):
    """Raised when an asynchronous event lacks a required identifying field.

    Fatal for the invocation that received it. Redelivery, if any, is the
    responsibility of the event transport.
    """

    error_code: str = "MALFORMED_EVENT"


class ConflictError(DomainError):
    """Raised when a write conflicts with current store state.

    Maps to HTTP 409. Raised when a creation precondition fails, for
    example a generated id that already exists.

    Attributes:
        error_code: "CONFLICT" (class constant).
        reason: Description of the conflict.
    """

    error_code: str = "CONFLICT"

    def __init__(
        self,
        reason: str,
        **context: Any,
    ) -> None:
        """Initialize conflict error.

        Args:
            reason: Description of conflict (e.g., "Registration id already exists").
            **context: Additional debugging context.
        """
        self.reason = reason
        super().__init__(reason, context)


class UpstreamServiceError(DomainError):
    """Raised when a call to another internal service does not succeed.

    Maps to HTTP 500. Writes committed before the failing call are not
    rolled back.

    Attributes:
        error_code: "UPSTREAM_ERROR" (class constant).
        status_code: Status returned by the upstream service, or ``None``
            when no response was received.
    """

    error_code: str = "UPSTREAM_ERROR"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize upstream service error.

        Args:
            message: Client-facing message (e.g., "Failed to create tenant").
            status_code: Upstream HTTP status, if a response was received.
            **extra_context: Additional debugging context (url, method).
        """
        self.status_code = status_code
        context = {"status_code": status_code, **extra_context} if status_code else extra_context
        super().__init__(message, context)


class UpstreamTransportError(UpstreamServiceError):
    """Raised when a signed call fails before any response is received.

    There is no retry or backoff; callers that need resilience must
    implement it themselves.
    """

    error_code: str = "UPSTREAM_TRANSPORT_ERROR"
