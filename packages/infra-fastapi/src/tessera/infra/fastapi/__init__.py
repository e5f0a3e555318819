"""Tessera Infra FastAPI -- error contract, middleware, health and app factory."""

from tessera.infra.fastapi._health import register_health_check
from tessera.infra.fastapi.app_factory import create_app
from tessera.infra.fastapi.error_handlers import (
    ErrorBody,
    register_exception_handlers,
)
from tessera.infra.fastapi.middleware.request_id import (
    RequestIdMiddleware,
    get_request_id,
)
from tessera.infra.fastapi.settings import AppSettings, CORSSettings

__all__ = [
    "AppSettings",
    "CORSSettings",
    "ErrorBody",
    "RequestIdMiddleware",
    "create_app",
    "get_request_id",
    "register_exception_handlers",
    "register_health_check",
]
