"""Cognito-backed persistence for tenant users."""

from tessera.domain.identity.infrastructure.user_repository import UserRepository

__all__ = ["UserRepository"]
