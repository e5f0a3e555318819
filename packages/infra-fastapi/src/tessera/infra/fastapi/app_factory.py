"""FastAPI application factory with entry-point auto-discovery.

:func:`create_app` wires the control plane HTTP surface: routers,
middleware and lifespan hooks contributed by installed tessera packages,
plus the ``{"message": ...}`` error contract which is always installed.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from tessera.foundation.application import (
    ErrorHandlerContribution,
    LifespanContribution,
    MiddlewareContribution,
    discover,
)
from tessera.infra.fastapi.error_handlers import register_exception_handlers
from tessera.infra.fastapi.lifespan import compose_lifespan
from tessera.infra.fastapi.settings import AppSettings

if TYPE_CHECKING:
    from fastapi import APIRouter

logger = logging.getLogger(__name__)

GROUP_ROUTERS = "tessera.routers"
GROUP_MIDDLEWARE = "tessera.middleware"
GROUP_ERROR_HANDLERS = "tessera.error_handlers"
GROUP_LIFESPAN = "tessera.lifespan"


def _collect_lifespan_hooks(
    extra: list[LifespanContribution] | None,
    exclude_groups: frozenset[str],
    exclude_names: frozenset[str],
) -> list[LifespanContribution]:
    hooks = list(extra or [])
    if GROUP_LIFESPAN in exclude_groups:
        return hooks
    for contrib in discover(GROUP_LIFESPAN, exclude_names=exclude_names):
        if isinstance(contrib.value, LifespanContribution):
            hooks.append(contrib.value)
        else:
            # Bare async context manager factory
            hooks.append(LifespanContribution(hook=contrib.value))
    return hooks


def _install_middleware(
    app: FastAPI,
    extra: list[MiddlewareContribution] | None,
    exclude_groups: frozenset[str],
    exclude_names: frozenset[str],
) -> None:
    contribs = list(extra or [])
    if GROUP_MIDDLEWARE not in exclude_groups:
        for contrib in discover(GROUP_MIDDLEWARE, exclude_names=exclude_names):
            if isinstance(contrib.value, MiddlewareContribution):
                contribs.append(contrib.value)
            else:
                logger.warning(
                    "Middleware entry point %r did not return a MiddlewareContribution",
                    contrib.name,
                )

    # Starlette wraps in reverse order of registration
    for mw in sorted(contribs, key=lambda m: m.priority, reverse=True):
        app.add_middleware(mw.middleware_class, **mw.kwargs)
        logger.info("Registered middleware %s (priority=%d)", mw.middleware_class.__name__, mw.priority)


def _install_error_handlers(
    app: FastAPI,
    extra: list[ErrorHandlerContribution] | None,
    exclude_groups: frozenset[str],
    exclude_names: frozenset[str],
) -> None:
    register_exception_handlers(app)

    contribs = list(extra or [])
    if GROUP_ERROR_HANDLERS not in exclude_groups:
        for contrib in discover(GROUP_ERROR_HANDLERS, exclude_names=exclude_names):
            if isinstance(contrib.value, ErrorHandlerContribution):
                contribs.append(contrib.value)
            elif callable(contrib.value):
                contrib.value(app)
            else:
                logger.warning(
                    "Error handler entry point %r is not an ErrorHandlerContribution or callable",
                    contrib.name,
                )

    for eh in contribs:
        app.add_exception_handler(eh.exception_class, eh.handler)
        logger.info("Registered error handler for %s", eh.exception_class.__name__)


def create_app(
    settings: AppSettings | None = None,
    *,
    extra_routers: list[APIRouter] | None = None,
    extra_middleware: list[MiddlewareContribution] | None = None,
    extra_lifespan_hooks: list[LifespanContribution] | None = None,
    extra_error_handlers: list[ErrorHandlerContribution] | None = None,
    exclude_groups: frozenset[str] | None = None,
    exclude_names: frozenset[str] | None = None,
) -> FastAPI:
    """Create the control plane FastAPI application.

    Args:
        settings: Application settings. If ``None``, loaded from environment.
        extra_routers: Additional routers to include beyond discovered ones.
        extra_middleware: Additional middleware beyond discovered ones.
        extra_lifespan_hooks: Additional lifespan hooks beyond discovered ones.
        extra_error_handlers: Additional error handlers beyond discovered ones.
        exclude_groups: Entry point groups to skip entirely.
        exclude_names: Specific entry point names to skip across all groups.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or AppSettings()
    groups = exclude_groups if exclude_groups is not None else settings.exclude_groups
    names = exclude_names if exclude_names is not None else settings.exclude_entry_points

    app = FastAPI(
        title=settings.title,
        version=settings.version,
        description=settings.description,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        debug=settings.debug,
        lifespan=compose_lifespan(_collect_lifespan_hooks(extra_lifespan_hooks, groups, names)),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
    )
    _install_middleware(app, extra_middleware, groups, names)
    _install_error_handlers(app, extra_error_handlers, groups, names)

    routers: list[APIRouter] = list(extra_routers or [])
    if GROUP_ROUTERS not in groups:
        routers.extend(c.value for c in discover(GROUP_ROUTERS, exclude_names=names))
    for router in routers:
        app.include_router(router)
        logger.info("Included router with prefix %r", router.prefix)

    return app
