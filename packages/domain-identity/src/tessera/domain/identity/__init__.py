"""Tessera Domain Identity -- tenant user management over the identity provider."""

from tessera.domain.identity.infrastructure.user_repository import UserRepository
from tessera.domain.identity.settings import IdentitySettings, get_identity_settings
from tessera.domain.identity.user import User

__all__ = [
    "IdentitySettings",
    "User",
    "UserRepository",
    "get_identity_settings",
]
