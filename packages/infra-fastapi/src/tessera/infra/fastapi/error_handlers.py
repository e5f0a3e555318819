"""Exception handlers that render domain errors as ``{"message": ...}`` bodies.

Every error response of the control plane services carries a single
human-readable ``message``. Structured ``context`` from the exception is
logged, never returned.

Mapping:

- NotFoundError -> 404
- ValidationError -> 400
- ConflictError -> 409
- UpstreamServiceError (and UpstreamTransportError) -> 500
- DomainError (fallback) -> 400
- RequestValidationError -> 400
- Exception -> 500 "Internal Server Error"

Usage:
    from tessera.infra.fastapi.error_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tessera.foundation.domain.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    UpstreamServiceError,
    ValidationError,
)
from tessera.infra.fastapi.middleware.request_id import get_request_id

if TYPE_CHECKING:
    from fastapi import FastAPI, Request

logger = logging.getLogger(__name__)

MISSING_BODY_MESSAGE = "Missing request body"
INVALID_BODY_MESSAGE = "Invalid request body"
INVALID_PARAMETERS_MESSAGE = "Invalid request parameters"
INTERNAL_ERROR_MESSAGE = "Internal Server Error"


class ErrorBody(BaseModel):
    """Error response model shared by every endpoint."""

    message: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["Tenant registration not found for id 0f1c..."],
    )


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorBody(message=message).model_dump(),
    )


def _log_domain_error(request: Request, exc: DomainError, status_code: int) -> None:
    level = logging.ERROR if status_code >= 500 else logging.INFO
    logger.log(
        level,
        "domain_error",
        extra={
            "error_code": exc.error_code,
            "status_code": status_code,
            "path": str(request.url.path),
            "method": request.method,
            "context": exc.context,
        },
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """Translate NotFoundError to 404."""
    _log_domain_error(request, exc, 404)
    return _error_response(404, exc.message)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Translate ValidationError to 400."""
    _log_domain_error(request, exc, 400)
    return _error_response(400, exc.message)


async def conflict_error_handler(request: Request, exc: ConflictError) -> JSONResponse:
    """Translate ConflictError to 409."""
    _log_domain_error(request, exc, 409)
    return _error_response(409, exc.message)


async def upstream_error_handler(request: Request, exc: UpstreamServiceError) -> JSONResponse:
    """Translate UpstreamServiceError to 500.

    The message names the failed operation (e.g. "Failed to create tenant");
    the upstream status and URL stay in the log entry.
    """
    _log_domain_error(request, exc, 500)
    return _error_response(500, exc.message)


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    """Fallback for domain errors without a more specific handler."""
    _log_domain_error(request, exc, 400)
    return _error_response(400, exc.message)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Translate FastAPI request validation failures to 400.

    An absent or null JSON body is reported as "Missing request body", any
    other body failure as "Invalid request body", and query, path or header
    failures as "Invalid request parameters".
    """
    errors = exc.errors()
    body_errors = [e for e in errors if tuple(e.get("loc", ()))[:1] == ("body",)]
    whole_body = [e for e in body_errors if tuple(e.get("loc", ())) == ("body",)]
    if any(e.get("type") == "missing" or e.get("input") is None for e in whole_body):
        message = MISSING_BODY_MESSAGE
    elif body_errors:
        message = INVALID_BODY_MESSAGE
    else:
        message = INVALID_PARAMETERS_MESSAGE
    logger.info(
        "request_validation_failed",
        extra={
            "path": str(request.url.path),
            "errors": [
                {"loc": list(e.get("loc", [])), "msg": e.get("msg", ""), "type": e.get("type", "")}
                for e in errors
            ],
        },
    )
    return _error_response(400, message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    Logs the full exception with the request id; the client only sees
    "Internal Server Error".
    """
    logger.exception(
        "unhandled_exception",
        extra={
            "correlation_id": get_request_id() or "unknown",
            "path": str(request.url.path),
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
    )
    return _error_response(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on a FastAPI application.

    Handlers are registered from most specific to least specific so that
    subclasses resolve before the DomainError fallback.

    Args:
        app: FastAPI application instance
    """
    # Type ignores needed due to Starlette's handler typing
    app.add_exception_handler(NotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ConflictError, conflict_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UpstreamServiceError, upstream_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
