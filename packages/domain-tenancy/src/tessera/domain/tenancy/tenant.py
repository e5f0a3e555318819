"""Tenant record: the tenant-of-record owned by the Tenant Directory Service.

A tenant has two known fields (``tenantId`` and ``active``); every other
attribute supplied by the caller (name, plan, tier, config blob) is kept
as an open-ended extra attribute and only has to be JSON-serializable.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def new_tenant_id() -> str:
    return str(uuid4())


class Tenant(BaseModel):
    """A tenant as stored in the tenant-details table.

    Example:
        >>> tenant = Tenant.create({"tenantName": "acme", "tier": "basic"})
        >>> tenant.active, tenant.attributes["tenantName"]
        (True, 'acme')
    """

    model_config = ConfigDict(extra="allow")

    tenant_id: str = Field(alias="tenantId", min_length=1)
    active: bool = True

    @classmethod
    def create(cls, attributes: dict[str, Any]) -> Tenant:
        """Build a new active tenant with a server-generated id.

        A caller-supplied ``tenantId`` or ``active`` is overridden.
        """
        extra = {k: v for k, v in attributes.items() if k not in ("tenantId", "tenant_id", "active")}
        return cls(tenantId=new_tenant_id(), active=True, **extra)

    @property
    def attributes(self) -> dict[str, Any]:
        """Open-ended attributes beyond the known fields."""
        return dict(self.model_extra or {})

    def to_item(self) -> dict[str, Any]:
        """Serialize to the stored (and wire) representation."""
        return self.model_dump(by_alias=True)
