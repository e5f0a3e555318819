"""Identity provider configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class IdentitySettings(BaseSettings):
    """User pool settings for tenant user management.

    Environment Variables:
        USER_POOL_ID: Cognito user pool holding tenant users (required)
        USER_ROLE_ATTRIBUTE: Attribute holding the user's role (default: custom:userRole)
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    user_pool_id: str = Field(..., min_length=1, alias="USER_POOL_ID")
    role_attribute: str = Field(default="custom:userRole", alias="USER_ROLE_ATTRIBUTE")


@lru_cache(maxsize=1)
def get_identity_settings() -> IdentitySettings:
    """Get cached identity settings singleton."""
    return IdentitySettings()  # type: ignore[call-arg]
