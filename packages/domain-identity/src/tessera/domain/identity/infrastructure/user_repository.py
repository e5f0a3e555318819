"""Repository for tenant users held in a Cognito user pool.

All calls go through the ``cognito-idp`` admin API with the pool id fixed
at construction. The pool is the only store: there is no local copy of
user records.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from tessera.domain.identity.user import DEFAULT_ROLE_ATTRIBUTE, User
from tessera.foundation.domain.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "UserNotFoundException"
USERNAME_EXISTS = "UsernameExistsException"
INVALID_PARAMETER = "InvalidParameterException"


def error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")


def user_not_found(user_name: str) -> NotFoundError:
    return NotFoundError("User", user_name, message=f"User {user_name} not found")


class UserRepository:
    """Admin operations on the users of one user pool.

    Args:
        client: boto3 ``cognito-idp`` client.
        user_pool_id: Pool the users live in.
        role_attribute: Attribute holding the user's role.
    """

    def __init__(
        self,
        client: Any,
        user_pool_id: str,
        *,
        role_attribute: str = DEFAULT_ROLE_ATTRIBUTE,
    ) -> None:
        self._client = client
        self._user_pool_id = user_pool_id
        self._role_attribute = role_attribute

    @property
    def user_pool_id(self) -> str:
        return self._user_pool_id

    def _to_user(self, record: dict[str, Any]) -> User:
        return User.from_cognito(record, role_attribute=self._role_attribute)

    def create(self, user_name: str, email: str, user_role: str) -> User:
        """Create a user with a verified email and the given role.

        The provider sends the invitation with a temporary password.

        Raises:
            ConflictError: If the user name is taken.
        """
        try:
            response = self._client.admin_create_user(
                UserPoolId=self._user_pool_id,
                Username=user_name,
                ForceAliasCreation=True,
                UserAttributes=[
                    {"Name": "email", "Value": email},
                    {"Name": "email_verified", "Value": "true"},
                    {"Name": self._role_attribute, "Value": user_role},
                ],
            )
        except ClientError as exc:
            if error_code(exc) == USERNAME_EXISTS:
                raise ConflictError(f"User {user_name} already exists", user_name=user_name) from exc
            raise
        logger.info("user_created", extra={"user_name": user_name, "user_role": user_role})
        return self._to_user(response["User"])

    def get(self, user_name: str) -> User | None:
        """Read a single user, or ``None`` if absent."""
        try:
            response = self._client.admin_get_user(
                UserPoolId=self._user_pool_id,
                Username=user_name,
            )
        except ClientError as exc:
            if error_code(exc) == USER_NOT_FOUND:
                return None
            raise
        return self._to_user(response)

    def list_page(
        self,
        *,
        limit: int = 10,
        next_token: str | None = None,
    ) -> tuple[list[User], str | None]:
        """Return one page of users and the token for the next page.

        Raises:
            ValidationError: If the provider rejects ``next_token``.
        """
        kwargs: dict[str, Any] = {"UserPoolId": self._user_pool_id, "Limit": limit}
        if next_token:
            kwargs["PaginationToken"] = next_token
        try:
            response = self._client.list_users(**kwargs)
        except ClientError as exc:
            if next_token and error_code(exc) == INVALID_PARAMETER:
                raise ValidationError("next_token", "Invalid next_token") from exc
            raise
        users = [self._to_user(record) for record in response.get("Users", [])]
        return users, response.get("PaginationToken")

    def update(
        self,
        user_name: str,
        *,
        email: str | None = None,
        user_role: str | None = None,
    ) -> None:
        """Replace the user's email and/or role.

        Raises:
            ValidationError: If neither field is given.
            NotFoundError: If the user does not exist.
        """
        attributes = []
        if email:
            attributes.append({"Name": "email", "Value": email})
        if user_role:
            attributes.append({"Name": self._role_attribute, "Value": user_role})
        if not attributes:
            raise ValidationError("body", "Nothing to update: provide email or userRole")
        self._admin_call(
            "admin_update_user_attributes",
            user_name,
            UserAttributes=attributes,
        )
        logger.info(
            "user_updated",
            extra={"user_name": user_name, "attributes": [a["Name"] for a in attributes]},
        )

    def disable(self, user_name: str) -> None:
        """Block sign-in without deleting the user.

        Raises:
            NotFoundError: If the user does not exist.
        """
        self._admin_call("admin_disable_user", user_name)
        logger.info("user_disabled", extra={"user_name": user_name})

    def enable(self, user_name: str) -> None:
        """Re-allow sign-in for a disabled user.

        Raises:
            NotFoundError: If the user does not exist.
        """
        self._admin_call("admin_enable_user", user_name)
        logger.info("user_enabled", extra={"user_name": user_name})

    def delete(self, user_name: str) -> bool:
        """Delete the user. Returns ``False`` if it was already absent."""
        try:
            self._admin_call("admin_delete_user", user_name)
        except NotFoundError:
            logger.info("user_delete_skipped", extra={"user_name": user_name})
            return False
        logger.info("user_deleted", extra={"user_name": user_name})
        return True

    def _admin_call(self, operation: str, user_name: str, **kwargs: Any) -> Any:
        try:
            return getattr(self._client, operation)(
                UserPoolId=self._user_pool_id,
                Username=user_name,
                **kwargs,
            )
        except ClientError as exc:
            if error_code(exc) == USER_NOT_FOUND:
                raise user_not_found(user_name) from exc
            raise


def user_pool_health_check(client: Any, user_pool_id: str) -> Any:
    """Return a blocking check that fails when the user pool is unreachable."""

    def check() -> None:
        client.describe_user_pool(UserPoolId=user_pool_id)

    return check
