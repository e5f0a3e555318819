"""Shared fixtures for domain-registration tests.

The Tenant Directory Service is replaced by :class:`FakeTenantApi`, an
in-memory handler mounted on an ``httpx.MockTransport``; the registration
table is a moto table; the event bus client is a ``MagicMock``.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock
from uuid import uuid4

import boto3
import httpx
import pytest
from botocore.credentials import Credentials
from fastapi import FastAPI
from moto import mock_aws

from tessera.domain.registration.infrastructure.registration_repository import (
    RegistrationRepository,
)
from tessera.domain.registration.orchestrator import RegistrationOrchestrator
from tessera.domain.registration.router import router
from tessera.domain.registration.tenant_directory import TenantDirectoryClient
from tessera.infra.aws.events import EventPublisher
from tessera.infra.aws.signing import SignedServiceCaller
from tessera.infra.fastapi.error_handlers import register_exception_handlers

if TYPE_CHECKING:
    from collections.abc import Iterator

API_URL = "https://api.example.com/prod"
TABLE_NAME = "tenant-registrations"
CREDENTIALS = Credentials("AKIDEXAMPLE", "secret", "session-token")


class FakeTenantApi:
    """In-memory stand-in for the internal tenant API.

    ``fail_with`` forces the next matching method to answer with a status.
    Every request received is kept in ``requests``.
    """

    def __init__(self) -> None:
        self.tenants: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []
        self.fail_with: dict[str, int] = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.fail_with:
            return httpx.Response(self.fail_with[request.method], json={"message": "boom"})

        parts = request.url.path.strip("/").split("/")
        body = json.loads(request.content) if request.content else {}
        if parts[-1] == "tenants" and request.method == "POST":
            tenant = {**body, "tenantId": str(uuid4()), "active": True}
            self.tenants[tenant["tenantId"]] = tenant
            return httpx.Response(201, json={"data": tenant})

        tenant_id = parts[-1]
        if parts[-2] == "tenants" and tenant_id in self.tenants:
            if request.method == "PUT":
                self.tenants[tenant_id].update(body)
                return httpx.Response(200, json={"data": self.tenants[tenant_id]})
            if request.method == "DELETE":
                self.tenants[tenant_id]["active"] = False
                return httpx.Response(200, json={"data": self.tenants[tenant_id]})
        return httpx.Response(404, json={"message": f"Tenant not found for id {tenant_id}"})

    def last(self, method: str) -> httpx.Request:
        return [r for r in self.requests if r.method == method][-1]


@pytest.fixture
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


@pytest.fixture
def registration_table(aws_env: None) -> Iterator[Any]:
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        yield dynamodb.create_table(
            TableName=TABLE_NAME,
            KeySchema=[{"AttributeName": "tenantRegistrationId", "KeyType": "HASH"}],
            AttributeDefinitions=[{"AttributeName": "tenantRegistrationId", "AttributeType": "S"}],
            BillingMode="PAY_PER_REQUEST",
        )


@pytest.fixture
def repository(registration_table: Any) -> RegistrationRepository:
    return RegistrationRepository(registration_table)


@pytest.fixture
def tenant_api() -> FakeTenantApi:
    return FakeTenantApi()


@pytest.fixture
def signed_caller(tenant_api: FakeTenantApi) -> SignedServiceCaller:
    client = httpx.Client(transport=httpx.MockTransport(tenant_api))
    return SignedServiceCaller(CREDENTIALS, "us-east-1", client=client)


@pytest.fixture
def directory(signed_caller: SignedServiceCaller) -> TenantDirectoryClient:
    return TenantDirectoryClient(signed_caller, API_URL, "/tenants")


@pytest.fixture
def events_client() -> MagicMock:
    client = MagicMock()
    client.put_events.return_value = {"FailedEntryCount": 0, "Entries": [{"EventId": "evt-1"}]}
    return client


@pytest.fixture
def publisher(events_client: MagicMock) -> EventPublisher:
    return EventPublisher(events_client, "control-plane-bus")


@pytest.fixture
def orchestrator(
    repository: RegistrationRepository,
    directory: TenantDirectoryClient,
    publisher: EventPublisher,
) -> RegistrationOrchestrator:
    return RegistrationOrchestrator(repository, directory, publisher)


@pytest.fixture
def app(orchestrator: RegistrationOrchestrator) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(router)
    app.state.registration_orchestrator = orchestrator
    return app


def published(events_client: MagicMock) -> list[dict[str, Any]]:
    """Entries passed to ``put_events``, with ``Detail`` decoded."""
    entries = []
    for call in events_client.put_events.call_args_list:
        for entry in call.kwargs["Entries"]:
            entries.append({**entry, "Detail": json.loads(entry["Detail"])})
    return entries


@pytest.fixture
def published_events(events_client: MagicMock) -> Any:
    return lambda: published(events_client)
