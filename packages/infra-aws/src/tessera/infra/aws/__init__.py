"""Tessera Infra AWS -- boto3 clients, DynamoDB helpers, event publishing and SigV4 calls."""

from tessera.infra.aws.clients import AwsClients, build_aws_clients, get_aws_clients
from tessera.infra.aws.dynamodb import (
    build_update_expression,
    from_dynamo,
    is_conditional_check_failure,
    scan_page,
    table_health_check,
    to_dynamo,
)
from tessera.infra.aws.errors import AwsInfraError, EventPublishError
from tessera.infra.aws.events import EventPublisher
from tessera.infra.aws.settings import (
    AwsSettings,
    EventBusSettings,
    get_aws_settings,
    get_event_bus_settings,
)
from tessera.infra.aws.signing import SignedResponse, SignedServiceCaller

__all__ = [
    "AwsClients",
    "AwsInfraError",
    "AwsSettings",
    "EventBusSettings",
    "EventPublishError",
    "EventPublisher",
    "SignedResponse",
    "SignedServiceCaller",
    "build_aws_clients",
    "build_update_expression",
    "from_dynamo",
    "get_aws_clients",
    "get_aws_settings",
    "get_event_bus_settings",
    "is_conditional_check_failure",
    "scan_page",
    "table_health_check",
    "to_dynamo",
]
