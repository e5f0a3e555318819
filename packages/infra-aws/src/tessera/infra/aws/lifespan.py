"""Lifespan hook that builds the process-wide AWS collaborators.

On startup ``app.state`` receives:

- ``aws``: the :class:`AwsClients` bundle
- ``event_publisher``: an :class:`EventPublisher` for the configured bus
- ``signed_caller``: a :class:`SignedServiceCaller` using the session's
  credentials

Domain lifespan hooks (higher priority numbers) build their services from
these.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from tessera.foundation.application.contributions import (
    LIFESPAN_PRIORITY_AWS,
    LifespanContribution,
)
from tessera.infra.aws.clients import build_aws_clients
from tessera.infra.aws.events import EventPublisher
from tessera.infra.aws.settings import get_aws_settings, get_event_bus_settings
from tessera.infra.aws.signing import SignedServiceCaller

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def aws_lifespan(app: Any) -> AsyncIterator[None]:
    settings = get_aws_settings()
    clients = build_aws_clients(settings)
    signed_caller = SignedServiceCaller(
        clients.credentials(),
        settings.region,
        service=settings.signing_service,
        timeout=settings.signed_call_timeout,
    )

    app.state.aws = clients
    app.state.event_publisher = EventPublisher.from_settings(clients.events, get_event_bus_settings())
    app.state.signed_caller = signed_caller
    try:
        yield
    finally:
        signed_caller.close()
        logger.info("aws_lifespan_closed")


lifespan_contribution = LifespanContribution(
    hook=aws_lifespan,
    priority=LIFESPAN_PRIORITY_AWS,
)
