"""DynamoDB-backed persistence for tenants."""

from tessera.domain.tenancy.infrastructure.tenant_repository import TenantRepository

__all__ = ["TenantRepository"]
