"""TenantRegistration record: lifecycle bookkeeping for one onboarding.

A registration is distinct from the tenant it onboards. It knows its own
id, whether it is still active, and (once the Tenant Directory Service
has created the tenant) the ``tenantId`` it is linked to. Everything else
the caller supplies is kept as open-ended extra attributes.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

KNOWN_FIELDS = frozenset({"tenantRegistrationId", "active", "tenantId"})


def new_registration_id() -> str:
    return str(uuid4())


class TenantRegistration(BaseModel):
    """A registration as stored in the tenant-registration table.

    Example:
        >>> reg = TenantRegistration.create({"plan": "gold"})
        >>> reg.active, reg.tenant_id, reg.attributes
        (True, None, {'plan': 'gold'})
    """

    model_config = ConfigDict(extra="allow")

    registration_id: str = Field(alias="tenantRegistrationId", min_length=1)
    active: bool = True
    tenant_id: str | None = Field(default=None, alias="tenantId")

    @classmethod
    def create(cls, attributes: dict[str, Any] | None = None) -> TenantRegistration:
        """Build a new active, not yet linked registration with a fresh id."""
        extra = {k: v for k, v in (attributes or {}).items() if k not in KNOWN_FIELDS}
        return cls(tenantRegistrationId=new_registration_id(), active=True, **extra)

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def to_item(self) -> dict[str, Any]:
        """Serialize to the stored representation; an unset ``tenantId`` is omitted."""
        return self.model_dump(by_alias=True, exclude_none=True)
