"""Request ID middleware for correlation across services.

Pure ASGI middleware that extracts or generates a request id, keeps it in
a context variable for the duration of the request, binds it into the
structlog context, and echoes it on the response.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any

import structlog

from tessera.foundation.application import MiddlewareContribution

if TYPE_CHECKING:
    from collections.abc import Callable

REQUEST_ID_HEADER = "X-Request-ID"

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Return the current request id, or an empty string outside a request."""
    return request_id_ctx.get()


def _is_valid_request_id(value: str) -> bool:
    """Accept UUIDs (any version) and API Gateway style ids.

    API Gateway forwards its own request id, which is a UUID for REST
    APIs and a short base64-ish token for HTTP APIs.
    """
    if not value or len(value) > 128:
        return False
    try:
        uuid.UUID(value)
        return True
    except ValueError:
        return value.replace("-", "").replace("=", "").isalnum()


def _extract_header(headers: list[tuple[bytes, bytes]], name: bytes) -> str:
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1")
    return ""


class RequestIdMiddleware:
    """Pure ASGI middleware for X-Request-ID propagation.

    1. Extracts X-Request-ID from the incoming request
    2. Generates a UUID4 if the header is missing or malformed
    3. Stores it in :data:`request_id_ctx` and the structlog context
    4. Adds X-Request-ID to the response headers

    Malformed client ids are replaced rather than rejected.
    """

    def __init__(self, app: Any) -> None:
        self.app = app

    async def __call__(
        self,
        scope: dict[str, Any],
        receive: Callable[..., Any],
        send: Callable[..., Any],
    ) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = _extract_header(scope.get("headers", []), b"x-request-id")
        if not _is_valid_request_id(request_id):
            request_id = str(uuid.uuid4())

        token = request_id_ctx.set(request_id)
        structlog.contextvars.bind_contextvars(request_id=request_id)

        async def send_with_request_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode("latin-1")))
                message = {**message, "headers": headers}
            await send(message)

        try:
            await self.app(scope, receive, send_with_request_id)
        finally:
            request_id_ctx.reset(token)
            structlog.contextvars.unbind_contextvars("request_id")


# Module-level contribution for auto-discovery via entry points.
contribution = MiddlewareContribution(
    middleware_class=RequestIdMiddleware,
    priority=10,  # Outermost band (0-99)
)
