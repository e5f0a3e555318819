"""HTTP surface of the Tenant Directory Service.

- ``/tenants``: CRUD over tenant records with logical delete
- ``/tenant-config``: tenant configuration lookup by id, by name, or by
  the first DNS label of the caller's ``Origin``
"""

from __future__ import annotations

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Header, Query, Request, status
from fastapi.responses import JSONResponse

from tessera.domain.tenancy.infrastructure.tenant_repository import TenantRepository
from tessera.foundation.domain.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants", tags=["tenants"])
config_router = APIRouter(prefix="/tenant-config", tags=["tenant-config"])


def get_tenant_repository(request: Request) -> TenantRepository:
    return request.app.state.tenant_repository


Repository = Annotated[TenantRepository, Depends(get_tenant_repository)]
JsonObject = Annotated[dict[str, Any], Body()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_tenant(payload: JsonObject, repository: Repository) -> dict[str, Any]:
    return {"data": repository.create(payload)}


@router.get("")
def list_tenants(
    repository: Repository,
    limit: Annotated[int, Query(ge=1, le=1000)] = 10,
    next_token: str | None = None,
) -> dict[str, Any]:
    items, token = repository.list_page(limit=limit, next_token=next_token)
    result: dict[str, Any] = {"data": items}
    if token:
        result["next_token"] = token
    return result


@router.get("/{tenant_id}")
def get_tenant(tenant_id: str, repository: Repository) -> dict[str, Any]:
    item = repository.get(tenant_id)
    if item is None:
        raise NotFoundError("Tenant", tenant_id, message=f"Tenant not found for id {tenant_id}")
    return {"data": item}


@router.put("/{tenant_id}")
def update_tenant(tenant_id: str, payload: JsonObject, repository: Repository) -> dict[str, Any]:
    return {"data": repository.update(tenant_id, payload)}


@router.delete("/{tenant_id}")
def delete_tenant(tenant_id: str, repository: Repository) -> dict[str, Any]:
    return {"data": repository.deactivate(tenant_id)}


def tenant_name_from_origin(origin: str | None) -> str:
    """Extract the tenant name from an ``Origin`` such as ``https://acme.example.com``.

    Raises:
        ValidationError: If the header is missing or has no host part.
    """
    if not origin:
        raise ValidationError("Origin", "Origin header missing!")
    _, sep, host = origin.partition("://")
    tenant_name = host.split(".")[0] if sep else ""
    if not tenant_name:
        raise ValidationError("Origin", "Unable to parse tenant name!", origin=origin)
    return tenant_name


def _config_response(config: Any, lookup: str) -> JSONResponse:
    if config is None:
        logger.info("tenant_config_not_found", extra={"lookup": lookup})
        raise NotFoundError("TenantConfig", lookup, message=f"No tenant details found for {lookup}")
    return JSONResponse(content=config)


@config_router.get("/{tenant_name}")
def get_tenant_config_by_name(tenant_name: str, repository: Repository) -> JSONResponse:
    return _config_response(repository.get_config_by_name(tenant_name), tenant_name)


@config_router.get("")
def get_tenant_config(
    repository: Repository,
    tenant_id: Annotated[str | None, Query(alias="tenantId")] = None,
    tenant_name: Annotated[str | None, Query(alias="tenantName")] = None,
    origin: Annotated[str | None, Header()] = None,
) -> JSONResponse:
    if tenant_id:
        return _config_response(repository.get_config_by_id(tenant_id), tenant_id)
    name = tenant_name or tenant_name_from_origin(origin)
    return _config_response(repository.get_config_by_name(name), name)
