"""Lifespan hook wiring the Tenant Directory Service into the app."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from tessera.domain.tenancy.infrastructure.tenant_repository import TenantRepository
from tessera.domain.tenancy.settings import TenancySettings, get_tenancy_settings
from tessera.foundation.application.contributions import (
    LIFESPAN_PRIORITY_TENANCY,
    LifespanContribution,
)
from tessera.infra.aws.dynamodb import table_health_check
from tessera.infra.fastapi._health import register_health_check

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tessera.infra.aws.clients import AwsClients


def build_tenant_repository(
    clients: AwsClients,
    settings: TenancySettings | None = None,
) -> TenantRepository:
    settings = settings or get_tenancy_settings()
    return TenantRepository(
        clients.table(settings.table_name),
        config_index=settings.config_index_name,
        name_column=settings.name_column,
        config_column=settings.config_column,
    )


@asynccontextmanager
async def tenancy_lifespan(app: Any) -> AsyncIterator[None]:
    """Build the tenant repository from the AWS client bundle on ``app.state``."""
    repository = build_tenant_repository(app.state.aws)
    app.state.tenant_repository = repository
    register_health_check(app, "tenant_details_table", table_health_check(repository.table))
    yield


lifespan_contribution = LifespanContribution(
    hook=tenancy_lifespan,
    priority=LIFESPAN_PRIORITY_TENANCY,
)
