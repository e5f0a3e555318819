"""Unit tests for tessera.infra.aws.lifespan."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from tessera.foundation.application.contributions import LIFESPAN_PRIORITY_AWS
from tessera.infra.aws.clients import AwsClients, build_aws_clients
from tessera.infra.aws.events import EventPublisher
from tessera.infra.aws.lifespan import aws_lifespan, lifespan_contribution
from tessera.infra.aws.settings import AwsSettings, get_aws_settings, get_event_bus_settings
from tessera.infra.aws.signing import SignedServiceCaller


@pytest.mark.unit
def test_contribution_priority() -> None:
    assert lifespan_contribution.priority == LIFESPAN_PRIORITY_AWS
    assert lifespan_contribution.hook is aws_lifespan


@pytest.mark.unit
def test_build_aws_clients(aws_session: Any) -> None:
    clients = build_aws_clients(AwsSettings(AWS_REGION="us-east-1"), session=aws_session)
    assert isinstance(clients, AwsClients)
    assert clients.table("registrations").name == "registrations"
    assert clients.credentials() is not None
    assert clients.cognito_idp.meta.service_model.service_name == "cognito-idp"


@pytest.mark.unit
@pytest.mark.asyncio(loop_scope="function")
async def test_lifespan_populates_app_state(aws_session: Any) -> None:
    get_aws_settings.cache_clear()
    get_event_bus_settings.cache_clear()
    app = MagicMock()
    async with aws_lifespan(app):
        assert isinstance(app.state.aws, AwsClients)
        assert isinstance(app.state.event_publisher, EventPublisher)
        assert isinstance(app.state.signed_caller, SignedServiceCaller)
    get_aws_settings.cache_clear()
    get_event_bus_settings.cache_clear()
