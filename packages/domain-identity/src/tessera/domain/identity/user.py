"""Tenant user as exposed by the ``/users`` API.

The identity provider keeps email and role as name/value attribute pairs;
:meth:`User.from_cognito` flattens them into named fields.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ROLE_ATTRIBUTE = "custom:userRole"


class User(BaseModel):
    """A user of the tenant user pool.

    Example:
        >>> user = User.from_cognito(
        ...     {"Username": "jdoe", "Attributes": [{"Name": "email", "Value": "j@x.io"}]}
        ... )
        >>> user.to_wire()
        {'userName': 'jdoe', 'email': 'j@x.io'}
    """

    model_config = ConfigDict(populate_by_name=True)

    user_name: str = Field(alias="userName", min_length=1)
    email: str | None = None
    user_role: str | None = Field(default=None, alias="userRole")
    enabled: bool | None = None
    created: datetime | None = None
    modified: datetime | None = None
    status: str | None = None

    @classmethod
    def from_cognito(
        cls,
        record: dict[str, Any],
        *,
        role_attribute: str = DEFAULT_ROLE_ATTRIBUTE,
    ) -> User:
        """Build from an ``AdminGetUser``/``ListUsers``/``AdminCreateUser`` record.

        ``AdminGetUser`` names the attribute list ``UserAttributes``; the
        other two call it ``Attributes``.
        """
        pairs = record.get("UserAttributes") or record.get("Attributes") or []
        attributes = {pair["Name"]: pair.get("Value") for pair in pairs}
        return cls(
            userName=record["Username"],
            email=attributes.get("email"),
            userRole=attributes.get(role_attribute),
            enabled=record.get("Enabled"),
            created=record.get("UserCreateDate"),
            modified=record.get("UserLastModifiedDate"),
            status=record.get("UserStatus"),
        )

    def to_wire(self) -> dict[str, Any]:
        """JSON representation; unknown fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
