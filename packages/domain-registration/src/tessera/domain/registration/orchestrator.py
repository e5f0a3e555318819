"""Registration Orchestrator.

Drives the tenant-registration lifecycle across two independently owned
resources: the registration record (this service's table) and the tenant
record (the Tenant Directory Service, reached over signed calls). There
is no transaction spanning the two; each step commits on its own and a
failure aborts at that point without compensating earlier writes.

Known intermediate state: when tenant creation fails after the
registration write, the registration stays ``active`` with no
``tenantId``. Nothing reaps it automatically.

Lifecycle events are best-effort notifications. A failed publish is
logged and never turns a successful operation into a failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from tessera.domain.registration.infrastructure.registration_repository import (
    KEY,
    RegistrationRepository,
    registration_not_found,
)
from tessera.domain.registration.tenant_directory import TenantDirectoryClient
from tessera.foundation.domain.events import DetailType
from tessera.foundation.domain.exceptions import NotFoundError
from tessera.infra.aws.errors import EventPublishError
from tessera.infra.aws.events import EventPublisher

logger = logging.getLogger(__name__)


class TenantNotLinkedError(NotFoundError):
    """The registration exists but was never linked to a tenant."""

    error_code: str = "TENANT_NOT_LINKED"

    def __init__(self, registration_id: str) -> None:
        super().__init__(
            "TenantRegistration",
            registration_id,
            message="Tenant ID not found for this registration",
        )


@dataclass(frozen=True, slots=True)
class RegistrationCreated:
    registration_id: str
    tenant_id: str


@dataclass(frozen=True, slots=True)
class RegistrationUpdated:
    registration: dict[str, Any]
    tenant: Any = None


class RegistrationOrchestrator:
    """Create, read, list, update and offboard tenant registrations.

    Args:
        repository: Registration table access.
        directory: Tenant Directory Service client.
        publisher: Lifecycle event publisher.
    """

    def __init__(
        self,
        repository: RegistrationRepository,
        directory: TenantDirectoryClient,
        publisher: EventPublisher,
    ) -> None:
        self._repository = repository
        self._directory = directory
        self._publisher = publisher

    @property
    def repository(self) -> RegistrationRepository:
        return self._repository

    def create(
        self,
        registration_data: dict[str, Any] | None = None,
        tenant_data: dict[str, Any] | None = None,
    ) -> RegistrationCreated:
        """Register a new tenant and request its onboarding.

        1. Write the registration (``active``, no ``tenantId``).
        2. Create the tenant through the Tenant Directory Service.
        3. Link the returned ``tenantId`` to the registration.
        4. Publish ``onboardingRequest``.

        Raises:
            ConflictError: If the generated registration id already exists.
            UpstreamServiceError: If tenant creation failed. The registration
                written in step 1 is left in place without a ``tenantId``.
            NotFoundError: If the registration vanished before step 3.
        """
        registration_data = dict(registration_data or {})
        tenant_data = dict(tenant_data or {})

        registration = self._repository.create(registration_data)
        registration_id = registration.registration_id

        try:
            tenant_id = self._directory.create_tenant(tenant_data)
        except Exception:
            logger.error(
                "registration_left_unlinked",
                extra={"registration_id": registration_id},
            )
            raise

        self._repository.link_tenant(registration_id, tenant_id)
        self._publish(
            DetailType.ONBOARDING_REQUEST,
            {
                **registration_data,
                **tenant_data,
                "tenantId": tenant_id,
                "tenantRegistrationId": registration_id,
            },
        )
        logger.info(
            "registration_onboarding_requested",
            extra={"registration_id": registration_id, "tenant_id": tenant_id},
        )
        return RegistrationCreated(registration_id=registration_id, tenant_id=tenant_id)

    def get(self, registration_id: str) -> dict[str, Any]:
        """Point lookup.

        Raises:
            NotFoundError: If the registration does not exist.
        """
        item = self._repository.get(registration_id)
        if item is None:
            raise registration_not_found(registration_id)
        return item

    def list_page(
        self, limit: int = 10, next_token: str | None = None
    ) -> tuple[list[dict[str, Any]], str | None]:
        """One unordered page of registrations and the token for the next one."""
        return self._repository.list_page(limit=limit, next_token=next_token)

    def update(
        self,
        registration_id: str,
        registration_patch: dict[str, Any] | None = None,
        tenant_patch: dict[str, Any] | None = None,
    ) -> RegistrationUpdated:
        """Apply a registration-level and/or tenant-level patch.

        With an empty ``registration_patch`` the record is only read, to
        find the linked tenant. A non-empty ``tenant_patch`` is forwarded to
        the Tenant Directory Service; if that fails the registration patch
        already applied stays in place.

        Raises:
            NotFoundError: If the registration does not exist.
            TenantNotLinkedError: If a tenant is needed but none is linked.
            UpstreamServiceError: If the tenant update failed.
        """
        registration_patch = {k: v for k, v in (registration_patch or {}).items() if k != KEY}
        if registration_patch:
            registration = self._repository.update(registration_id, registration_patch)
            tenant_id = registration.get("tenantId")
        else:
            registration = self.get(registration_id)
            tenant_id = registration.get("tenantId")
            if not tenant_id:
                raise TenantNotLinkedError(registration_id)

        tenant = None
        if tenant_patch:
            if not tenant_id:
                raise TenantNotLinkedError(registration_id)
            tenant = self._directory.update_tenant(tenant_id, tenant_patch)

        return RegistrationUpdated(registration=registration, tenant=tenant)

    def delete(self, registration_id: str) -> dict[str, Any]:
        """Offboard: delete the tenant, then deactivate the registration.

        Returns the registration as it was before deactivation.

        Raises:
            NotFoundError: If the registration does not exist.
            TenantNotLinkedError: If no tenant is linked.
            UpstreamServiceError: If the tenant delete failed; nothing is
                written in that case.
        """
        registration = self.get(registration_id)
        tenant_id = registration.get("tenantId")
        if not tenant_id:
            raise TenantNotLinkedError(registration_id)

        deleted_tenant = self._directory.delete_tenant(tenant_id)
        self._repository.deactivate(registration_id)
        self._publish(DetailType.OFFBOARDING_REQUEST, {**deleted_tenant, **registration})
        logger.info(
            "registration_offboarding_requested",
            extra={"registration_id": registration_id, "tenant_id": tenant_id},
        )
        return registration

    def _publish(self, detail_type: DetailType, detail: dict[str, Any]) -> None:
        try:
            self._publisher.publish(detail_type, detail)
        except EventPublishError as exc:
            logger.warning(
                "event_publish_dropped",
                extra={
                    "detail_type": exc.detail_type,
                    "error_code": exc.error_code,
                    "error": str(exc),
                    "registration_id": detail.get("tenantRegistrationId"),
                },
            )
