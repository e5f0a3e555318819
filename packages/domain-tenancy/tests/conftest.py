"""Shared fixtures for domain-tenancy tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import boto3
import pytest
from fastapi import FastAPI
from moto import mock_aws

from tessera.domain.tenancy.infrastructure.tenant_repository import TenantRepository
from tessera.domain.tenancy.router import config_router, router
from tessera.infra.fastapi.error_handlers import register_exception_handlers

if TYPE_CHECKING:
    from collections.abc import Iterator

TABLE_NAME = "tenant-details"


@pytest.fixture
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


@pytest.fixture
def tenant_table(aws_env: None) -> Iterator[Any]:
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        yield dynamodb.create_table(
            TableName=TABLE_NAME,
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


@pytest.fixture
def repository(tenant_table: Any) -> TenantRepository:
    return TenantRepository(tenant_table)


@pytest.fixture
def app(repository: TenantRepository) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(router)
    app.include_router(config_router)
    app.state.tenant_repository = repository
    return app
