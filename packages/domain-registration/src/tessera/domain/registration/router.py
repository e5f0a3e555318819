"""HTTP surface of the Registration Orchestrator (``/tenant-registrations``).

``PATCH`` is also the internal endpoint the Status Reconciler calls with a
signed ``{jobOutput, timestamp}`` body; those top-level fields are merged
into the registration-level patch.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from tessera.domain.registration.orchestrator import RegistrationOrchestrator

router = APIRouter(prefix="/tenant-registrations", tags=["tenant-registrations"])

CREATED_MESSAGE = "Tenant registration initiated"
UPDATED_MESSAGE = "Tenant registration updated successfully"
DELETED_MESSAGE = "Tenant registration deletion initiated"

#: Top-level PATCH fields folded into the registration-level patch.
STATUS_FIELDS = ("jobOutput", "timestamp")


class _RegistrationPayload(BaseModel):
    tenant_data: dict[str, Any] | None = Field(default_factory=dict, alias="tenantData")
    tenant_registration_data: dict[str, Any] | None = Field(
        default_factory=dict, alias="tenantRegistrationData"
    )

    @field_validator("tenant_data", "tenant_registration_data", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class CreateRegistrationRequest(_RegistrationPayload):
    model_config = ConfigDict(extra="ignore")


class UpdateRegistrationRequest(_RegistrationPayload):
    model_config = ConfigDict(extra="allow")

    def registration_patch(self) -> dict[str, Any]:
        patch = dict(self.tenant_registration_data or {})
        extra = self.model_extra or {}
        for name in STATUS_FIELDS:
            if name in extra:
                patch[name] = extra[name]
        return patch


def get_orchestrator(request: Request) -> RegistrationOrchestrator:
    return request.app.state.registration_orchestrator


Orchestrator = Annotated[RegistrationOrchestrator, Depends(get_orchestrator)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_registration(
    payload: Annotated[CreateRegistrationRequest, Body()],
    orchestrator: Orchestrator,
) -> dict[str, Any]:
    created = orchestrator.create(
        payload.tenant_registration_data or {}, payload.tenant_data or {}
    )
    return {
        "data": {
            "tenantRegistrationId": created.registration_id,
            "tenantId": created.tenant_id,
            "message": CREATED_MESSAGE,
        }
    }


@router.get("")
def list_registrations(
    orchestrator: Orchestrator,
    limit: Annotated[int, Query(ge=1, le=1000)] = 10,
    next_token: str | None = None,
) -> dict[str, Any]:
    items, token = orchestrator.list_page(limit=limit, next_token=next_token)
    result: dict[str, Any] = {"data": items}
    if token:
        result["next_token"] = token
    return result


@router.get("/{registration_id}")
def get_registration(registration_id: str, orchestrator: Orchestrator) -> dict[str, Any]:
    return {"data": orchestrator.get(registration_id)}


@router.patch("/{registration_id}")
def update_registration(
    registration_id: str,
    payload: Annotated[UpdateRegistrationRequest, Body()],
    orchestrator: Orchestrator,
) -> dict[str, Any]:
    updated = orchestrator.update(
        registration_id,
        payload.registration_patch(),
        payload.tenant_data or {},
    )
    return {
        "data": {
            "tenantRegistration": updated.registration,
            "tenant": updated.tenant,
            "message": UPDATED_MESSAGE,
        }
    }


@router.delete("/{registration_id}")
def delete_registration(registration_id: str, orchestrator: Orchestrator) -> dict[str, Any]:
    orchestrator.delete(registration_id)
    return {"data": {"message": DELETED_MESSAGE}}
