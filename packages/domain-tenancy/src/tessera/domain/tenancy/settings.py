"""Tenant Directory configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TenancySettings(BaseSettings):
    """Tenant-details table and tenant configuration lookup settings.

    Environment Variables:
        TENANT_DETAILS_TABLE_NAME: Tenant-details table (required)
        TENANT_CONFIG_INDEX_NAME: Index keyed by tenant name (default: tenantConfigIndex)
        TENANT_NAME_COLUMN: Attribute holding the tenant name (default: tenantName)
        TENANT_CONFIG_COLUMN: Attribute holding the tenant config (default: tenantConfig)
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    table_name: str = Field(..., min_length=1, alias="TENANT_DETAILS_TABLE_NAME")
    config_index_name: str = Field(default="tenantConfigIndex", alias="TENANT_CONFIG_INDEX_NAME")
    name_column: str = Field(default="tenantName", alias="TENANT_NAME_COLUMN")
    config_column: str = Field(default="tenantConfig", alias="TENANT_CONFIG_COLUMN")


@lru_cache(maxsize=1)
def get_tenancy_settings() -> TenancySettings:
    """Get cached tenancy settings singleton."""
    return TenancySettings()  # type: ignore[call-arg]
