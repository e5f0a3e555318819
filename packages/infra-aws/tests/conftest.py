"""Shared fixtures for tessera.infra.aws tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import boto3
import pytest
from moto import mock_aws

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def aws_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fake credentials so nothing can reach a real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def aws_session(aws_env: None) -> Iterator[boto3.session.Session]:
    with mock_aws():
        yield boto3.session.Session(region_name="us-east-1")


@pytest.fixture
def registrations_table(aws_session: boto3.session.Session):  # type: ignore[no-untyped-def]
    dynamodb = aws_session.resource("dynamodb")
    return dynamodb.create_table(
        TableName="registrations",
        KeySchema=[{"AttributeName": "tenantRegistrationId", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "tenantRegistrationId", "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )
