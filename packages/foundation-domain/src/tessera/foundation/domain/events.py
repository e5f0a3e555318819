"""Lifecycle event vocabulary shared by the control and application planes.

Events travel over a shared bus in a fixed ``{source, detailType, detail}``
envelope. ``detailType`` is drawn from the closed :class:`DetailType`
enumeration and every detail type has exactly one owning plane in
:data:`SUPPORTED_EVENTS`. The concrete source string of a plane is
deployment configuration; the detail type to plane assignment is not.

Example:
    >>> sources = EventSources()
    >>> build_event(DetailType.ONBOARDING_REQUEST, {"tenantId": "t-1"}, sources).source
    'controlPlaneEventSource'
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

DEFAULT_CONTROL_PLANE_SOURCE = "controlPlaneEventSource"
DEFAULT_APPLICATION_PLANE_SOURCE = "applicationPlaneEventSource"


class EventPlane(StrEnum):
    """Logical origin of an event."""

    CONTROL = "control"
    APPLICATION = "application"


class DetailType(StrEnum):
    """Closed enumeration of lifecycle event names.

    The string values are the ``detail-type`` carried on the bus.
    """

    ONBOARDING_REQUEST = "onboardingRequest"
    ONBOARDING_SUCCESS = "onboardingSuccess"
    ONBOARDING_FAILURE = "onboardingFailure"

    OFFBOARDING_REQUEST = "offboardingRequest"
    OFFBOARDING_SUCCESS = "offboardingSuccess"
    OFFBOARDING_FAILURE = "offboardingFailure"

    PROVISION_SUCCESS = "provisionSuccess"
    PROVISION_FAILURE = "provisionFailure"

    DEPROVISION_SUCCESS = "deprovisionSuccess"
    DEPROVISION_FAILURE = "deprovisionFailure"

    BILLING_SUCCESS = "billingSuccess"
    BILLING_FAILURE = "billingFailure"

    ACTIVATE_REQUEST = "activateRequest"
    ACTIVATE_SUCCESS = "activateSuccess"
    ACTIVATE_FAILURE = "activateFailure"

    DEACTIVATE_REQUEST = "deactivateRequest"
    DEACTIVATE_SUCCESS = "deactivateSuccess"
    DEACTIVATE_FAILURE = "deactivateFailure"

    # Emitted by the application plane's user flows, sourced as control plane.
    TENANT_USER_CREATED = "tenantUserCreated"
    TENANT_USER_DELETED = "tenantUserDeleted"

    INGEST_USAGE = "ingestUsage"


SUPPORTED_EVENTS: Mapping[DetailType, EventPlane] = MappingProxyType(
    {
        DetailType.ONBOARDING_REQUEST: EventPlane.CONTROL,
        DetailType.ONBOARDING_SUCCESS: EventPlane.APPLICATION,
        DetailType.ONBOARDING_FAILURE: EventPlane.APPLICATION,
        DetailType.OFFBOARDING_REQUEST: EventPlane.CONTROL,
        DetailType.OFFBOARDING_SUCCESS: EventPlane.APPLICATION,
        DetailType.OFFBOARDING_FAILURE: EventPlane.APPLICATION,
        DetailType.PROVISION_SUCCESS: EventPlane.APPLICATION,
        DetailType.PROVISION_FAILURE: EventPlane.APPLICATION,
        DetailType.DEPROVISION_SUCCESS: EventPlane.APPLICATION,
        DetailType.DEPROVISION_FAILURE: EventPlane.APPLICATION,
        DetailType.BILLING_SUCCESS: EventPlane.CONTROL,
        DetailType.BILLING_FAILURE: EventPlane.CONTROL,
        DetailType.ACTIVATE_REQUEST: EventPlane.CONTROL,
        DetailType.ACTIVATE_SUCCESS: EventPlane.APPLICATION,
        DetailType.ACTIVATE_FAILURE: EventPlane.APPLICATION,
        DetailType.DEACTIVATE_REQUEST: EventPlane.CONTROL,
        DetailType.DEACTIVATE_SUCCESS: EventPlane.APPLICATION,
        DetailType.DEACTIVATE_FAILURE: EventPlane.APPLICATION,
        DetailType.TENANT_USER_CREATED: EventPlane.CONTROL,
        DetailType.TENANT_USER_DELETED: EventPlane.CONTROL,
        DetailType.INGEST_USAGE: EventPlane.APPLICATION,
    }
)

#: Detail types that report the outcome of an asynchronous provisioning job.
JOB_COMPLETION_EVENTS: frozenset[DetailType] = frozenset(
    {
        DetailType.PROVISION_SUCCESS,
        DetailType.PROVISION_FAILURE,
        DetailType.DEPROVISION_SUCCESS,
        DetailType.DEPROVISION_FAILURE,
    }
)


@dataclass(frozen=True, slots=True)
class EventSources:
    """Concrete source strings for the two planes.

    Attributes:
        control_plane: Source used for control-plane-originated events.
        application_plane: Source used for application-plane-originated events.
    """

    control_plane: str = DEFAULT_CONTROL_PLANE_SOURCE
    application_plane: str = DEFAULT_APPLICATION_PLANE_SOURCE

    def source_for(self, detail_type: DetailType | str) -> str:
        """Return the source assigned to ``detail_type``.

        Raises:
            ValueError: If ``detail_type`` is not part of the enumeration.
        """
        plane = SUPPORTED_EVENTS[DetailType(detail_type)]
        if plane is EventPlane.CONTROL:
            return self.control_plane
        return self.application_plane


@dataclass(frozen=True, slots=True)
class LifecycleEvent:
    """A single event envelope as placed on the bus.

    Attributes:
        source: Source string of the owning plane.
        detail_type: Lifecycle event name.
        detail: Free-form JSON-serializable payload.
    """

    source: str
    detail_type: DetailType
    detail: dict[str, Any] = field(default_factory=dict)


def build_event(
    detail_type: DetailType | str,
    detail: Mapping[str, Any],
    sources: EventSources,
) -> LifecycleEvent:
    """Build an envelope whose source always comes from the static mapping.

    Args:
        detail_type: Lifecycle event name (enum member or its string value).
        detail: Event payload.
        sources: Source strings of the current deployment.

    Returns:
        The event envelope.

    Raises:
        ValueError: If ``detail_type`` is not part of the enumeration.
    """
    resolved = DetailType(detail_type)
    return LifecycleEvent(
        source=sources.source_for(resolved),
        detail_type=resolved,
        detail=dict(detail),
    )
