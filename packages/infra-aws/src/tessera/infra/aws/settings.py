"""AWS configuration using Pydantic settings.

Variable names match the Lambda environment the control plane functions
are deployed with, so no prefix is applied.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tessera.foundation.domain.events import (
    DEFAULT_APPLICATION_PLANE_SOURCE,
    DEFAULT_CONTROL_PLANE_SOURCE,
    EventSources,
)


class AwsSettings(BaseSettings):
    """Region, endpoint and request-signing configuration.

    Environment Variables:
        AWS_REGION: Region for every client and for SigV4 signing (default: us-east-1)
        AWS_ENDPOINT_URL: Optional endpoint override for local emulators
        TENANT_API_SIGNING_SERVICE: SigV4 service name of the internal API
            (default: execute-api)
        SIGNED_CALL_TIMEOUT: Timeout of a signed call in seconds (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    region: str = Field(default="us-east-1", alias="AWS_REGION")
    endpoint_url: str | None = Field(default=None, alias="AWS_ENDPOINT_URL")
    signing_service: str = Field(default="execute-api", alias="TENANT_API_SIGNING_SERVICE")
    signed_call_timeout: float = Field(
        default=10.0,
        gt=0,
        le=60,
        alias="SIGNED_CALL_TIMEOUT",
        description="Timeout of a signed call in seconds",
    )


class EventBusSettings(BaseSettings):
    """Event bus name and the source string of each plane.

    Environment Variables:
        EVENTBUS_NAME: Bus receiving lifecycle events (default: default)
        CONTROL_PLANE_EVENT_SOURCE: Source of control plane events
        APPLICATION_PLANE_EVENT_SOURCE: Source of application plane events

    Example:
        >>> EventBusSettings().sources().control_plane
        'controlPlaneEventSource'
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    event_bus_name: str = Field(default="default", alias="EVENTBUS_NAME")
    control_plane_source: str = Field(
        default=DEFAULT_CONTROL_PLANE_SOURCE,
        min_length=1,
        alias="CONTROL_PLANE_EVENT_SOURCE",
    )
    application_plane_source: str = Field(
        default=DEFAULT_APPLICATION_PLANE_SOURCE,
        min_length=1,
        alias="APPLICATION_PLANE_EVENT_SOURCE",
    )

    def sources(self) -> EventSources:
        return EventSources(
            control_plane=self.control_plane_source,
            application_plane=self.application_plane_source,
        )


@lru_cache(maxsize=1)
def get_aws_settings() -> AwsSettings:
    """Get cached AWS settings singleton."""
    return AwsSettings()


@lru_cache(maxsize=1)
def get_event_bus_settings() -> EventBusSettings:
    """Get cached event bus settings singleton."""
    return EventBusSettings()
