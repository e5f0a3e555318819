"""Lifespan hook wiring tenant user management into the app."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from tessera.domain.identity.infrastructure.user_repository import (
    UserRepository,
    user_pool_health_check,
)
from tessera.domain.identity.settings import IdentitySettings, get_identity_settings
from tessera.foundation.application.contributions import (
    LIFESPAN_PRIORITY_IDENTITY,
    LifespanContribution,
)
from tessera.infra.fastapi._health import register_health_check

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from tessera.infra.aws.clients import AwsClients


def build_user_repository(
    clients: AwsClients,
    settings: IdentitySettings | None = None,
) -> UserRepository:
    settings = settings or get_identity_settings()
    return UserRepository(
        clients.cognito_idp,
        settings.user_pool_id,
        role_attribute=settings.role_attribute,
    )


@asynccontextmanager
async def identity_lifespan(app: Any) -> AsyncIterator[None]:
    """Build the user repository from the AWS client bundle on ``app.state``."""
    repository = build_user_repository(app.state.aws)
    app.state.user_repository = repository
    register_health_check(
        app,
        "user_pool",
        user_pool_health_check(app.state.aws.cognito_idp, repository.user_pool_id),
    )
    yield


lifespan_contribution = LifespanContribution(
    hook=identity_lifespan,
    priority=LIFESPAN_PRIORITY_IDENTITY,
)
