"""Tessera Foundation Domain -- pure Python domain primitives.

This package provides the building blocks shared by the control plane
services: the exception hierarchy and the lifecycle event vocabulary.
"""

from tessera.foundation.domain.events import (
    JOB_COMPLETION_EVENTS,
    SUPPORTED_EVENTS,
    DetailType,
    EventPlane,
    EventSources,
    LifecycleEvent,
    build_event,
)
from tessera.foundation.domain.exceptions import (
    ConflictError,
    DomainError,
    MalformedEventError,
    NotFoundError,
    UpstreamServiceError,
    UpstreamTransportError,
    ValidationError,
)

__all__ = [
    "JOB_COMPLETION_EVENTS",
    "SUPPORTED_EVENTS",
    "ConflictError",
    "DetailType",
    "DomainError",
    "EventPlane",
    "EventSources",
    "LifecycleEvent",
    "MalformedEventError",
    "NotFoundError",
    "UpstreamServiceError",
    "UpstreamTransportError",
    "ValidationError",
    "build_event",
]
