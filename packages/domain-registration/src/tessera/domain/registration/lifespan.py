"""Lifespan hook wiring the Registration Orchestrator into the app."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from tessera.domain.registration.infrastructure.registration_repository import (
    RegistrationRepository,
)
from tessera.domain.registration.orchestrator import RegistrationOrchestrator
from tessera.domain.registration.settings import RegistrationSettings, get_registration_settings
from tessera.domain.registration.tenant_directory import TenantDirectoryClient
from tessera.foundation.application.contributions import (
    LIFESPAN_PRIORITY_REGISTRATION,
    LifespanContribution,
)
from tessera.infra.aws.dynamodb import table_health_check
from tessera.infra.fastapi._health import register_health_check

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tessera.infra.aws.clients import AwsClients
    from tessera.infra.aws.events import EventPublisher
    from tessera.infra.aws.signing import SignedServiceCaller


def build_orchestrator(
    clients: AwsClients,
    caller: SignedServiceCaller,
    publisher: EventPublisher,
    settings: RegistrationSettings | None = None,
) -> RegistrationOrchestrator:
    settings = settings or get_registration_settings()
    return RegistrationOrchestrator(
        RegistrationRepository(clients.table(settings.table_name)),
        TenantDirectoryClient(caller, settings.tenant_api_url, settings.tenants_path),
        publisher,
    )


@asynccontextmanager
async def registration_lifespan(app: Any) -> AsyncIterator[None]:
    """Build the orchestrator from the AWS collaborators on ``app.state``."""
    orchestrator = build_orchestrator(
        app.state.aws,
        app.state.signed_caller,
        app.state.event_publisher,
    )
    app.state.registration_orchestrator = orchestrator
    register_health_check(
        app,
        "tenant_registration_table",
        table_health_check(orchestrator.repository.table),
    )
    yield


lifespan_contribution = LifespanContribution(
    hook=registration_lifespan,
    priority=LIFESPAN_PRIORITY_REGISTRATION,
)
