"""Shared fixtures for integration tests.

The app is built by :func:`create_app` from the installed entry points.
The ``aws`` lifespan is replaced by one that builds the same collaborators
against moto, with a mocked event bus client and a signed caller whose
transport loops back into the app itself, so the registration routes
reach the tenant routes exactly as they would through the internal API.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import boto3
import httpx
import pytest
from botocore.credentials import Credentials
from fastapi.testclient import TestClient
from moto import mock_aws

from tessera.domain.identity.settings import get_identity_settings
from tessera.domain.registration.settings import get_registration_settings
from tessera.domain.tenancy.settings import get_tenancy_settings
from tessera.foundation.application.contributions import (
    LIFESPAN_PRIORITY_AWS,
    LifespanContribution,
)
from tessera.infra.aws.clients import build_aws_clients
from tessera.infra.aws.events import EventPublisher
from tessera.infra.aws.settings import AwsSettings, get_aws_settings, get_event_bus_settings
from tessera.infra.aws.signing import SignedServiceCaller
from tessera.infra.fastapi.app_factory import create_app
from tessera.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from fastapi import FastAPI

INTERNAL_API_URL = "http://control-plane.internal"
TENANT_TABLE = "tenant-details"
REGISTRATION_TABLE = "tenant-registrations"
CREDENTIALS = Credentials("AKIDEXAMPLE", "secret", "session-token")

# Entry-point names excluded in integration tests (replaced or not needed).
TEST_EXCLUDE_NAMES = frozenset({"aws", "observability"})

_SETTINGS_CACHES = (
    get_aws_settings,
    get_event_bus_settings,
    get_tenancy_settings,
    get_registration_settings,
    get_identity_settings,
)


@pytest.fixture()
def control_plane_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.setenv("TENANT_DETAILS_TABLE_NAME", TENANT_TABLE)
    monkeypatch.setenv("TENANT_REGISTRATION_TABLE_NAME", REGISTRATION_TABLE)
    monkeypatch.setenv("TENANT_API_URL", INTERNAL_API_URL)
    for cached in _SETTINGS_CACHES:
        cached.cache_clear()
    yield
    for cached in _SETTINGS_CACHES:
        cached.cache_clear()


@pytest.fixture()
def dynamodb(control_plane_env: None) -> Iterator[Any]:
    with mock_aws():
        resource = boto3.resource("dynamodb", region_name="us-east-1")
        resource.create_table(
            TableName=TENANT_TABLE,
            KeySchema=[{"AttributeName": "tenantId", "KeyType": "HASH"}],
            AttributeDefinitions=[
                {"AttributeName": "tenantId", "AttributeType": "S"},
                {"AttributeName": "tenantName", "AttributeType": "S"},
            ],
            GlobalSecondaryIndexes=[
                {
                    "IndexName": "tenantConfigIndex",
                    "KeySchema": [{"AttributeName": "tenantName", "KeyType": "HASH"}],
                    "Projection": {"ProjectionType": "ALL"},
                }
            ],
            BillingMode="PAY_PER_REQUEST",
        )
        resource.create_table(
            TableName=REGISTRATION_TABLE,
            KeySchema=[{"AttributeName": "tenantRegistrationId", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "tenantRegistrationId", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )
        yield resource


@pytest.fixture()
def user_pool(dynamodb: Any, monkeypatch: pytest.MonkeyPatch) -> str:
    """A moto user pool, created inside the same mock as the tables."""
    cognito = boto3.client("cognito-idp", region_name="us-east-1")
    user_pool_id = cognito.create_user_pool(PoolName="tenant-users")["UserPool"]["Id"]
    monkeypatch.setenv("USER_POOL_ID", user_pool_id)
    return user_pool_id


@pytest.fixture()
def events_client() -> MagicMock:
    client = MagicMock()
    client.put_events.return_value = {"FailedEntryCount": 0, "Entries": [{"EventId": "evt-1"}]}
    return client


@pytest.fixture()
def internal_requests() -> list[httpx.Request]:
    """Every signed request the app sent to the internal API."""
    return []


@pytest.fixture()
def control_plane_app(
    dynamodb: Any,
    user_pool: str,
    events_client: MagicMock,
    internal_requests: list[httpx.Request],
) -> FastAPI:
    """Create a fresh control plane app for each test."""
    app_ref: dict[str, FastAPI] = {}

    def loopback(request: httpx.Request) -> httpx.Response:
        internal_requests.append(request)
        inner = TestClient(app_ref["app"], raise_server_exceptions=False)
        response = inner.request(
            request.method,
            request.url.path,
            params=request.url.params,
            content=request.content,
            headers={"Content-Type": "application/json"},
        )
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    @asynccontextmanager
    async def test_aws_lifespan(app: Any) -> AsyncIterator[None]:
        settings = AwsSettings()
        app.state.aws = build_aws_clients(settings)
        app.state.event_publisher = EventPublisher.from_settings(events_client)
        caller = SignedServiceCaller(
            CREDENTIALS,
            settings.region,
            client=httpx.Client(transport=httpx.MockTransport(loopback)),
        )
        app.state.signed_caller = caller
        try:
            yield
        finally:
            caller.close()

    app = create_app(
        AppSettings(),
        extra_lifespan_hooks=[LifespanContribution(hook=test_aws_lifespan, priority=LIFESPAN_PRIORITY_AWS)],
        exclude_names=TEST_EXCLUDE_NAMES,
    )
    app_ref["app"] = app
    return app


@pytest.fixture()
def client(control_plane_app: FastAPI) -> Iterator[TestClient]:
    """TestClient for the control plane app (lifespan hooks executed)."""
    with TestClient(control_plane_app, raise_server_exceptions=False) as c:
        yield c
