"""Middleware components for the tessera FastAPI integration."""

from tessera.infra.fastapi.middleware.request_id import (
    RequestIdMiddleware,
    get_request_id,
)

__all__ = [
    "RequestIdMiddleware",
    "get_request_id",
]
