"""Shared fixtures for domain-identity tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import boto3
import pytest
from fastapi import FastAPI
from moto import mock_aws

from tessera.domain.identity.infrastructure.user_repository import UserRepository
from tessera.domain.identity.router import router
from tessera.infra.fastapi.error_handlers import register_exception_handlers

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


@pytest.fixture
def cognito(aws_env: None) -> Iterator[Any]:
    with mock_aws():
        yield boto3.client("cognito-idp", region_name="us-east-1")


@pytest.fixture
def user_pool_id(cognito: Any) -> str:
    return cognito.create_user_pool(PoolName="tenant-users")["UserPool"]["Id"]


@pytest.fixture
def repository(cognito: Any, user_pool_id: str) -> UserRepository:
    return UserRepository(cognito, user_pool_id)


@pytest.fixture
def app(repository: UserRepository) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(router)
    app.state.user_repository = repository
    return app
