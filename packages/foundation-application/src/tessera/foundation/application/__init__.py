"""Tessera Foundation Application -- contribution types and discovery."""

from tessera.foundation.application.contributions import (
    LIFESPAN_PRIORITY_AWS,
    LIFESPAN_PRIORITY_IDENTITY,
    LIFESPAN_PRIORITY_OBSERVABILITY,
    LIFESPAN_PRIORITY_REGISTRATION,
    LIFESPAN_PRIORITY_TENANCY,
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
)
from tessera.foundation.application.discovery import (
    DiscoveredContribution,
    discover,
)

__all__ = [
    "LIFESPAN_PRIORITY_AWS",
    "LIFESPAN_PRIORITY_IDENTITY",
    "LIFESPAN_PRIORITY_OBSERVABILITY",
    "LIFESPAN_PRIORITY_REGISTRATION",
    "LIFESPAN_PRIORITY_TENANCY",
    "DiscoveredContribution",
    "ErrorHandlerContribution",
    "LifespanContribution",
    "MiddlewareContribution",
    "discover",
]
