"""Lifespan composition for the tessera app factory."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

    from tessera.foundation.application import LifespanContribution

logger = logging.getLogger(__name__)


def compose_lifespan(
    hooks: list[LifespanContribution],
) -> object:
    """Create a composite lifespan from ordered :class:`LifespanContribution` hooks.

    Lower priority hooks start first and shut down last, so the AWS client
    bundle exists before the services that are built from it.

    Args:
        hooks: List of LifespanContribution instances.

    Returns:
        An async context manager factory for FastAPI's ``lifespan`` parameter.
    """
    ordered = sorted(hooks, key=lambda h: h.priority)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with AsyncExitStack() as stack:
            for contrib in ordered:
                logger.info(
                    "Entering lifespan hook (priority=%d): %r",
                    contrib.priority,
                    contrib.hook,
                )
                await stack.enter_async_context(contrib.hook(app))
            yield
        logger.info("All lifespan hooks exited")

    return lifespan
