"""Event Publisher: places lifecycle events on the shared EventBridge bus.

The ``Source`` of every entry is taken from the static detail type to
plane mapping, never from the caller.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from tessera.foundation.domain.events import (
    DetailType,
    EventSources,
    LifecycleEvent,
    build_event,
)
from tessera.infra.aws.dynamodb import from_dynamo
from tessera.infra.aws.errors import EventPublishError
from tessera.infra.aws.settings import EventBusSettings, get_event_bus_settings

logger = logging.getLogger(__name__)


class EventPublisher:
    """Publishes :class:`LifecycleEvent` envelopes to one bus.

    Args:
        client: boto3 EventBridge client.
        bus_name: Name or ARN of the target bus.
        sources: Source strings of the two planes.
    """

    def __init__(self, client: Any, bus_name: str, sources: EventSources | None = None) -> None:
        self._client = client
        self._bus_name = bus_name
        self._sources = sources or EventSources()

    @classmethod
    def from_settings(cls, client: Any, settings: EventBusSettings | None = None) -> EventPublisher:
        settings = settings or get_event_bus_settings()
        return cls(client, settings.event_bus_name, settings.sources())

    @property
    def sources(self) -> EventSources:
        return self._sources

    def publish(self, detail_type: DetailType | str, detail: Mapping[str, Any]) -> LifecycleEvent:
        """Publish one event.

        Args:
            detail_type: Member of the closed detail type enumeration.
            detail: JSON-serializable payload.

        Returns:
            The envelope that was accepted by the bus.

        Raises:
            ValueError: If ``detail_type`` is unknown.
            EventPublishError: If the bus rejected the entry or the call failed.
        """
        event = build_event(detail_type, detail, self._sources)
        entry = {
            "Source": event.source,
            "DetailType": str(event.detail_type),
            "Detail": json.dumps(from_dynamo(event.detail)),
            "EventBusName": self._bus_name,
        }

        try:
            response = self._client.put_events(Entries=[entry])
        except (ClientError, BotoCoreError) as exc:
            raise EventPublishError(
                f"Failed to publish {event.detail_type}: {exc}",
                detail_type=str(event.detail_type),
            ) from exc

        if response.get("FailedEntryCount", 0) > 0:
            failed = (response.get("Entries") or [{}])[0]
            raise EventPublishError(
                f"Event bus rejected {event.detail_type}: {failed.get('ErrorMessage', 'unknown error')}",
                detail_type=str(event.detail_type),
                error_code=failed.get("ErrorCode"),
            )

        logger.info(
            "event_published",
            extra={
                "detail_type": str(event.detail_type),
                "source": event.source,
                "event_bus": self._bus_name,
                "event_id": (response.get("Entries") or [{}])[0].get("EventId"),
            },
        )
        return event
