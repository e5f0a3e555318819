"""Client for the Tenant Directory Service, spoken to over signed calls.

The orchestrator never touches the tenant-details table directly; it goes
through the service's HTTP API with requests signed by its own execution
identity. Each operation expects one exact status code and raises
:class:`UpstreamServiceError` on anything else.
"""

from __future__ import annotations

import logging
from typing import Any

from tessera.foundation.domain.exceptions import UpstreamServiceError
from tessera.infra.aws.signing import SignedResponse, SignedServiceCaller

logger = logging.getLogger(__name__)


class TenantDirectoryClient:
    """Tenant create/update/delete over a :class:`SignedServiceCaller`.

    Args:
        caller: Signs and sends the requests.
        base_url: Base URL of the internal API (no trailing slash).
        tenants_path: Path of the tenant collection, e.g. ``/tenants``.
    """

    def __init__(self, caller: SignedServiceCaller, base_url: str, tenants_path: str = "/tenants") -> None:
        self._caller = caller
        self._collection_url = base_url.rstrip("/") + "/" + tenants_path.strip("/")

    def tenant_url(self, tenant_id: str | None = None) -> str:
        if tenant_id is None:
            return self._collection_url
        return f"{self._collection_url}/{tenant_id}"

    def create_tenant(self, attributes: dict[str, Any]) -> str:
        """Create a tenant and return its ``tenantId``.

        Raises:
            UpstreamServiceError: Unless the service answers 201 with a tenant id.
        """
        response = self._expect("POST", self.tenant_url(), attributes, 201, "Failed to create tenant")
        tenant_id = _data(response).get("tenantId")
        if not tenant_id:
            logger.error("tenant_create_missing_id", extra={"status_code": response.status})
            raise UpstreamServiceError("Failed to create tenant", status_code=response.status)
        return str(tenant_id)

    def update_tenant(self, tenant_id: str, attributes: dict[str, Any]) -> Any:
        """Apply ``attributes`` to a tenant and return the service's ``data``."""
        response = self._expect(
            "PUT", self.tenant_url(tenant_id), attributes, 200, "Failed to update tenant"
        )
        return response.data.get("data") if isinstance(response.data, dict) else response.data

    def delete_tenant(self, tenant_id: str) -> dict[str, Any]:
        """Deactivate a tenant and return the service's ``data`` (the tenant record)."""
        response = self._expect("DELETE", self.tenant_url(tenant_id), None, 200, "Failed to delete tenant")
        return _data(response)

    def _expect(
        self,
        method: str,
        url: str,
        body: dict[str, Any] | None,
        expected: int,
        failure: str,
    ) -> SignedResponse:
        response = self._caller.call(method, url, body)
        if response.status != expected:
            logger.error(
                "tenant_directory_call_failed",
                extra={
                    "method": method,
                    "url": url,
                    "status_code": response.status,
                    "expected_status": expected,
                    "response": response.data,
                },
            )
            raise UpstreamServiceError(failure, status_code=response.status, url=url, method=method)
        return response


def _data(response: SignedResponse) -> dict[str, Any]:
    body = response.data if isinstance(response.data, dict) else {}
    data = body.get("data")
    return data if isinstance(data, dict) else {}
