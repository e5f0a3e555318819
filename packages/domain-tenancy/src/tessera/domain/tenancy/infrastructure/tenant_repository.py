"""Repository for the tenant-details table (partition key ``tenantId``).

Every mutation of an existing tenant is a conditional update requiring
the record to exist, so a tenant deleted out from under a writer surfaces
as :class:`NotFoundError` rather than being silently recreated.
"""

from __future__ import annotations

import logging
from typing import Any

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from tessera.domain.tenancy.tenant import Tenant
from tessera.foundation.domain.exceptions import ConflictError, NotFoundError
from tessera.infra.aws.dynamodb import (
    build_update_expression,
    from_dynamo,
    is_conditional_check_failure,
    scan_page,
    to_dynamo,
)

logger = logging.getLogger(__name__)

KEY = "tenantId"


class TenantRepository:
    """Read/write access to tenant records.

    Args:
        table: boto3 DynamoDB ``Table`` resource.
        config_index: Name of the index keyed by tenant name.
        name_column: Attribute holding the tenant name.
        config_column: Attribute holding the tenant configuration.
    """

    def __init__(
        self,
        table: Any,
        *,
        config_index: str = "tenantConfigIndex",
        name_column: str = "tenantName",
        config_column: str = "tenantConfig",
    ) -> None:
        self._table = table
        self._config_index = config_index
        self._name_column = name_column
        self._config_column = config_column

    @property
    def table(self) -> Any:
        return self._table

    def create(self, attributes: dict[str, Any]) -> dict[str, Any]:
        """Store a new active tenant and return it.

        Raises:
            ConflictError: If the generated id already exists.
        """
        tenant = Tenant.create(attributes)
        item = tenant.to_item()
        try:
            self._table.put_item(
                Item=to_dynamo(item),
                ConditionExpression="attribute_not_exists(#key)",
                ExpressionAttributeNames={"#key": KEY},
            )
        except ClientError as exc:
            if is_conditional_check_failure(exc):
                raise ConflictError("Tenant id already exists", tenant_id=tenant.tenant_id) from exc
            raise
        logger.info("tenant_created", extra={"tenant_id": tenant.tenant_id})
        return item

    def get(self, tenant_id: str) -> dict[str, Any] | None:
        """Read a single tenant, or ``None`` if absent."""
        response = self._table.get_item(Key={KEY: tenant_id})
        item = response.get("Item")
        return from_dynamo(item) if item is not None else None

    def list_page(
        self, limit: int = 10, next_token: str | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """Read one unordered page of tenants."""
        return scan_page(self._table, KEY, limit=limit, next_token=next_token)

    def update(self, tenant_id: str, attributes: dict[str, Any]) -> dict[str, Any]:
        """Merge ``attributes`` into an existing tenant.

        ``tenantId`` in ``attributes`` is ignored. With nothing left to
        update the current record is returned unchanged.

        Raises:
            NotFoundError: If the tenant does not exist.
        """
        changes = {k: v for k, v in attributes.items() if k != KEY}
        if not changes:
            current = self.get(tenant_id)
            if current is None:
                raise self._not_found(tenant_id)
            return current

        expression, names, values = build_update_expression(changes)
        names["#key"] = KEY
        try:
            response = self._table.update_item(
                Key={KEY: tenant_id},
                UpdateExpression=expression,
                ConditionExpression="attribute_exists(#key)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as exc:
            if is_conditional_check_failure(exc):
                logger.info("tenant_not_found_for_update", extra={"tenant_id": tenant_id})
                raise self._not_found(tenant_id) from exc
            raise
        logger.info("tenant_updated", extra={"tenant_id": tenant_id, "fields": sorted(changes)})
        return from_dynamo(response["Attributes"])

    def deactivate(self, tenant_id: str) -> dict[str, Any]:
        """Logically delete a tenant by setting ``active=false``.

        Raises:
            NotFoundError: If the tenant does not exist.
        """
        return self.update(tenant_id, {"active": False})

    def get_config_by_id(self, tenant_id: str) -> Any | None:
        """Return the config attribute of a tenant, or ``None``."""
        item = self.get(tenant_id)
        if item is None:
            return None
        return item.get(self._config_column)

    def get_config_by_name(self, tenant_name: str) -> Any | None:
        """Return the config attribute of the first tenant with ``tenant_name``."""
        response = self._table.query(
            IndexName=self._config_index,
            KeyConditionExpression=Key(self._name_column).eq(tenant_name),
        )
        items = response.get("Items") or []
        if not items:
            return None
        return from_dynamo(items[0].get(self._config_column))

    @staticmethod
    def _not_found(tenant_id: str) -> NotFoundError:
        return NotFoundError("Tenant", tenant_id, message=f"Tenant {tenant_id} not found.")
