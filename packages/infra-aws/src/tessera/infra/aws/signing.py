"""Signed Service Caller: SigV4-signed HTTP calls between internal services.

Service-to-service calls are authorized by the caller's own execution
identity rather than an end-user token. The signature covers method,
path, query, headers and body; its validity window is enforced by the
receiving API.

There is no retry or backoff. A transport failure surfaces as
:class:`~tessera.foundation.domain.exceptions.UpstreamTransportError`.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest

from tessera.foundation.domain.exceptions import UpstreamTransportError
from tessera.infra.aws.dynamodb import from_dynamo

logger = logging.getLogger(__name__)

DEFAULT_SIGNING_SERVICE = "execute-api"


@dataclass(frozen=True, slots=True)
class SignedResponse:
    """Outcome of a signed call.

    Attributes:
        status: HTTP status code.
        data: Parsed JSON body, or the raw text when the body is not JSON.
    """

    status: int
    data: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class SignedServiceCaller:
    """Issues SigV4-signed JSON requests.

    Args:
        credentials: botocore credentials (refreshable credentials are
            frozen per call, so rotation is picked up).
        region: Region of the target API.
        service: SigV4 service name of the target API.
        timeout: Per-call timeout in seconds.
        client: Optional pre-configured ``httpx.Client`` (tests inject one
            with a mock transport).
    """

    def __init__(
        self,
        credentials: Any,
        region: str,
        *,
        service: str = DEFAULT_SIGNING_SERVICE,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._credentials = credentials
        self._region = region
        self._service = service
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Close the underlying HTTP client if this caller created it."""
        if self._owns_client:
            self._client.close()

    def sign(self, method: str, url: str, body: Any = None) -> AWSRequest:
        """Build and sign a request without sending it."""
        if self._credentials is None:
            msg = "No AWS credentials available to sign the request"
            raise UpstreamTransportError(msg, url=url, method=method)

        data = json.dumps(from_dynamo(body)) if body is not None else None
        request = AWSRequest(
            method=method.upper(),
            url=url,
            data=data,
            headers={"Content-Type": "application/json"},
        )
        frozen = self._credentials.get_frozen_credentials()
        SigV4Auth(frozen, self._service, self._region).add_auth(request)
        return request

    def call(self, method: str, url: str, body: Any = None) -> SignedResponse:
        """Send a signed request and return its status and parsed body.

        Args:
            method: HTTP method.
            url: Absolute URL of the target endpoint.
            body: Optional JSON-serializable body.

        Raises:
            UpstreamTransportError: If no response was received.
        """
        request = self.sign(method, url, body)
        try:
            response = self._client.request(
                request.method,
                url,
                content=request.body,
                headers=dict(request.headers.items()),
            )
        except httpx.TransportError as exc:
            logger.error(
                "signed_call_transport_error",
                extra={"method": request.method, "url": url, "error": str(exc)},
            )
            raise UpstreamTransportError(str(exc) or type(exc).__name__, url=url, method=request.method) from exc

        try:
            data: Any = response.json()
        except ValueError:
            data = response.text

        logger.info(
            "signed_call_completed",
            extra={"method": request.method, "url": url, "status_code": response.status_code},
        )
        return SignedResponse(status=response.status_code, data=data)
