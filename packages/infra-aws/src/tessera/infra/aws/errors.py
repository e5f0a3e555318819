"""AWS infrastructure error hierarchy."""

from __future__ import annotations


class AwsInfraError(Exception):
    """Base exception for AWS infrastructure errors."""

    #: Whether this error type is considered transient (retryable).
    transient: bool = False


class EventPublishError(AwsInfraError):
    """Raised when an event could not be placed on the bus.

    Covers both client/transport failures and entries rejected by the bus
    (``FailedEntryCount > 0``). Callers that treat publishing as
    best-effort log and drop it.
    """

    transient: bool = True

    def __init__(self, message: str, *, detail_type: str, error_code: str | None = None) -> None:
        super().__init__(message)
        self.detail_type = detail_type
        self.error_code = error_code
