"""HTTP surface of tenant user management (``/users``).

- ``POST /users``: create a user
- ``GET /users``, ``GET /users/{user_name}``: list and read
- ``PUT /users/{user_name}``: change email and/or role
- ``PUT /users/{user_name}/enable``, ``DELETE /users/{user_name}/disable``
- ``DELETE /users/{user_name}``: delete (succeeds for an absent user)
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field

from tessera.domain.identity.infrastructure.user_repository import UserRepository, user_not_found

router = APIRouter(prefix="/users", tags=["users"])

UPDATED_MESSAGE = "User updated"
ENABLED_MESSAGE = "User enabled"
DISABLED_MESSAGE = "User disabled"
DELETED_MESSAGE = "User deleted"


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_name: str = Field(alias="userName", min_length=1)
    email: str = Field(min_length=1)
    user_role: str = Field(alias="userRole", min_length=1)


class UpdateUserRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    user_role: str | None = Field(default=None, alias="userRole")


def get_user_repository(request: Request) -> UserRepository:
    return request.app.state.user_repository


Repository = Annotated[UserRepository, Depends(get_user_repository)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: Annotated[CreateUserRequest, Body()],
    repository: Repository,
) -> dict[str, Any]:
    user = repository.create(payload.user_name, payload.email, payload.user_role)
    return {"data": {"userName": user.user_name}}


@router.get("")
def list_users(
    repository: Repository,
    limit: Annotated[int, Query(ge=1, le=60)] = 10,
    next_token: str | None = None,
) -> dict[str, Any]:
    users, token = repository.list_page(limit=limit, next_token=next_token)
    result: dict[str, Any] = {"data": [user.to_wire() for user in users]}
    if token:
        result["next_token"] = token
    return result


@router.get("/{user_name}")
def get_user(user_name: str, repository: Repository) -> dict[str, Any]:
    user = repository.get(user_name)
    if user is None:
        raise user_not_found(user_name)
    return {"data": user.to_wire()}


@router.put("/{user_name}")
def update_user(
    user_name: str,
    payload: Annotated[UpdateUserRequest, Body()],
    repository: Repository,
) -> dict[str, Any]:
    repository.update(user_name, email=payload.email, user_role=payload.user_role)
    return {"message": UPDATED_MESSAGE}


@router.put("/{user_name}/enable")
def enable_user(user_name: str, repository: Repository) -> dict[str, Any]:
    repository.enable(user_name)
    return {"message": ENABLED_MESSAGE}


@router.delete("/{user_name}/disable")
def disable_user(user_name: str, repository: Repository) -> dict[str, Any]:
    repository.disable(user_name)
    return {"message": DISABLED_MESSAGE}


@router.delete("/{user_name}")
def delete_user(user_name: str, repository: Repository) -> dict[str, Any]:
    repository.delete(user_name)
    return {"message": DELETED_MESSAGE}
