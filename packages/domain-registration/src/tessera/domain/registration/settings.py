"""Registration Orchestrator configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RegistrationSettings(BaseSettings):
    """Registration table and internal API location.

    Environment Variables:
        TENANT_REGISTRATION_TABLE_NAME: Tenant-registration table (required)
        TENANT_API_URL: Base URL of the internal API (required)
        TENANT_REGISTRATION_PATH: Path of the registration resource
            (default: /tenant-registrations)
        TENANTS_PATH: Path of the tenant resource (default: /tenants)
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    table_name: str = Field(..., min_length=1, alias="TENANT_REGISTRATION_TABLE_NAME")
    tenant_api_url: str = Field(..., min_length=1, alias="TENANT_API_URL")
    registration_path: str = Field(default="/tenant-registrations", alias="TENANT_REGISTRATION_PATH")
    tenants_path: str = Field(default="/tenants", alias="TENANTS_PATH")

    @field_validator("tenant_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("registration_path", "tenants_path")
    @classmethod
    def normalize_path(cls, v: str) -> str:
        return "/" + v.strip("/")


@lru_cache(maxsize=1)
def get_registration_settings() -> RegistrationSettings:
    """Get cached registration settings singleton."""
    return RegistrationSettings()  # type: ignore[call-arg]
