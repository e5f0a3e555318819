"""Aggregated health check endpoint.

Lifespan hooks register named checks in ``app.state.health_checks``; each
check is a blocking callable that raises when its subsystem is unhealthy
(for example a ``describe_table`` call against a DynamoDB table).
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

router = APIRouter(tags=["health"])
logger = logging.getLogger(__name__)


async def _run_check(name: str, check: Any) -> dict[str, str]:
    try:
        await run_in_threadpool(check)
        return {"status": "ok"}
    except Exception as exc:
        logger.warning("health_check: %s unhealthy: %s", name, exc)
        return {"status": "error", "detail": str(exc)}


@router.get("/healthz")
async def healthz(request: Request) -> Any:
    """Return per-subsystem status and an overall status.

    HTTP 200 when every registered check passes, HTTP 503 otherwise.
    """
    registered: dict[str, Any] = getattr(request.app.state, "health_checks", {})
    checks = {name: await _run_check(name, check) for name, check in sorted(registered.items())}

    all_ok = all(c["status"] == "ok" for c in checks.values())
    return JSONResponse(
        content={"status": "ok" if all_ok else "degraded", "checks": checks},
        status_code=200 if all_ok else 503,
    )


def register_health_check(app: Any, name: str, check: Any) -> None:
    """Register ``check`` under ``name`` for the ``/healthz`` endpoint."""
    if not hasattr(app.state, "health_checks"):
        app.state.health_checks = {}
    app.state.health_checks[name] = check
