"""Process-wide boto3 client bundle.

Clients are built once per process (per Lambda container or per API
worker) from a single :class:`boto3.session.Session` and handed to the
services that need them. There is no teardown: boto3 clients hold no
resources that need explicit release.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import boto3
from botocore.config import Config

from tessera.infra.aws.settings import AwsSettings, get_aws_settings

logger = logging.getLogger(__name__)

# SDK retries cover throttling only; signed HTTP calls are never retried.
_BOTO_CONFIG = Config(retries={"max_attempts": 3, "mode": "standard"})


@dataclass(frozen=True, slots=True)
class AwsClients:
    """boto3 handles shared by the control plane services.

    Attributes:
        session: The session every client was created from; also the
            source of request-signing credentials.
        dynamodb: DynamoDB service resource.
        events: EventBridge client.
        cognito_idp: Cognito user pool admin client.
        region: Region the clients were built for.
    """

    session: boto3.session.Session
    dynamodb: Any
    events: Any
    cognito_idp: Any
    region: str

    def table(self, name: str) -> Any:
        """Return the DynamoDB ``Table`` resource for ``name``."""
        return self.dynamodb.Table(name)

    def credentials(self) -> Any:
        """Return the session's (possibly refreshable) credentials, or ``None``."""
        return self.session.get_credentials()


def build_aws_clients(
    settings: AwsSettings | None = None,
    *,
    session: boto3.session.Session | None = None,
) -> AwsClients:
    """Build the client bundle.

    Args:
        settings: AWS settings. Loaded from environment when omitted.
        session: Optional pre-built session (tests inject one).
    """
    settings = settings or get_aws_settings()
    session = session or boto3.session.Session(region_name=settings.region)
    kwargs: dict[str, Any] = {"config": _BOTO_CONFIG}
    if settings.endpoint_url:
        kwargs["endpoint_url"] = settings.endpoint_url

    clients = AwsClients(
        session=session,
        dynamodb=session.resource("dynamodb", **kwargs),
        events=session.client("events", **kwargs),
        cognito_idp=session.client("cognito-idp", **kwargs),
        region=settings.region,
    )
    logger.info(
        "aws_clients_built",
        extra={"region": settings.region, "endpoint_url": settings.endpoint_url},
    )
    return clients


@lru_cache(maxsize=1)
def get_aws_clients() -> AwsClients:
    """Process-wide client bundle for Lambda entry points.

    Clear with ``get_aws_clients.cache_clear()`` in tests.
    """
    return build_aws_clients()
