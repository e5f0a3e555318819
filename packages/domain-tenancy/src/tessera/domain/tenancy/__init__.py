"""Tessera Domain Tenancy -- the Tenant Directory Service."""

from tessera.domain.tenancy.infrastructure.tenant_repository import TenantRepository
from tessera.domain.tenancy.settings import TenancySettings, get_tenancy_settings
from tessera.domain.tenancy.tenant import Tenant

__all__ = [
    "TenancySettings",
    "Tenant",
    "TenantRepository",
    "get_tenancy_settings",
]
