"""Repository for the tenant-registration table (partition key ``tenantRegistrationId``).

Creation is guarded by ``attribute_not_exists`` and every later write by
``attribute_exists``; these per-record preconditions are the only
concurrency control, turning race losers into :class:`ConflictError` or
:class:`NotFoundError` instead of silent overwrites.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from tessera.domain.registration.registration import TenantRegistration
from tessera.foundation.domain.exceptions import ConflictError, NotFoundError
from tessera.infra.aws.dynamodb import (
    build_update_expression,
    from_dynamo,
    is_conditional_check_failure,
    scan_page,
    to_dynamo,
)

logger = logging.getLogger(__name__)

KEY = "tenantRegistrationId"


def registration_not_found(registration_id: str) -> NotFoundError:
    return NotFoundError(
        "TenantRegistration",
        registration_id,
        message=f"Tenant registration not found for id {registration_id}",
    )


class RegistrationRepository:
    """Read/write access to registration records.

    Args:
        table: boto3 DynamoDB ``Table`` resource.
    """

    def __init__(self, table: Any) -> None:
        self._table = table

    @property
    def table(self) -> Any:
        return self._table

    def create(self, attributes: dict[str, Any] | None = None) -> TenantRegistration:
        """Store a new active registration without a ``tenantId``.

        Raises:
            ConflictError: If the generated id already exists.
        """
        registration = TenantRegistration.create(attributes)
        try:
            self._table.put_item(
                Item=to_dynamo(registration.to_item()),
                ConditionExpression="attribute_not_exists(#key)",
                ExpressionAttributeNames={"#key": KEY},
            )
        except ClientError as exc:
            if is_conditional_check_failure(exc):
                raise ConflictError(
                    "Registration id already exists",
                    registration_id=registration.registration_id,
                ) from exc
            raise
        logger.info("registration_created", extra={"registration_id": registration.registration_id})
        return registration

    def get(self, registration_id: str) -> dict[str, Any] | None:
        response = self._table.get_item(Key={KEY: registration_id})
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    def list_page(
        self, limit: int = 10, next_token: str | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Read one unordered page of registrations."""
        return scan_page(self._table, KEY, limit=limit, next_token=next_token)

    def update(self, registration_id: str, attributes: dict[str, Any]) -> dict[str, Any]:
        """Conditionally merge ``attributes`` into an existing registration.

        The partition key is never rewritten. Returns the full updated record.

        Raises:
            NotFoundError: If the registration does not exist; nothing is written.
            ValueError: If there is nothing to update.
        """
        changes = {k: v for k, v in attributes.items() if k != KEY}
        expression, names, values = build_update_expression(changes)
        names["#key"] = KEY
        try:
            response = self._table.update_item(
                Key={KEY: registration_id},
                UpdateExpression=expression,
                ConditionExpression="attribute_exists(#key)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as exc:
            if is_conditional_check_failure(exc):
                logger.info(
                    "registration_not_found_for_update",
                    extra={"registration_id": registration_id},
                )
                raise registration_not_found(registration_id) from exc
            raise
        logger.info(
            "registration_updated",
            extra={"registration_id": registration_id, "fields": sorted(changes)},
        )
        return from_dynamo(response["Attributes"])

    def link_tenant(self, registration_id: str, tenant_id: str) -> dict[str, Any]:
        return self.update(registration_id, {"tenantId": tenant_id})

    def deactivate(self, registration_id: str) -> dict[str, Any]:
        """Logically delete a registration; the record is kept for history."""
        return self.update(registration_id, {"active": False})
