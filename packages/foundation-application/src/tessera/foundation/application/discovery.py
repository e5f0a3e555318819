"""Entry-point-based auto-discovery utilities.

Loads contributions declared by installed distributions using
``importlib.metadata.entry_points()``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib.metadata import entry_points
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DiscoveredContribution:
    """A single discovered entry point contribution.

    Attributes:
        name: Entry point name (e.g., ``"registration"``).
        group: Entry point group (e.g., ``"tessera.routers"``).
        value: The loaded Python object.
    """

    name: str
    group: str
    value: Any


def discover(
    group: str,
    *,
    exclude_names: frozenset[str] = frozenset(),
) -> list[DiscoveredContribution]:
    """Discover and load all entry points for a given group.

    Entry points that fail to load are logged and skipped, so one broken
    distribution does not prevent the service from starting.

    Args:
        group: The entry point group name (e.g., ``"tessera.lifespan"``).
        exclude_names: Entry point names to skip.

    Returns:
        Loaded contributions, in entry point iteration order.
    """
    contributions: list[DiscoveredContribution] = []

    for ep in entry_points(group=group):
        if ep.name in exclude_names:
            logger.debug("Skipping excluded entry point %s:%s", group, ep.name)
            continue
        try:
            loaded = ep.load()
        except Exception:
            logger.exception("Failed to load entry point %s:%s", group, ep.name)
            continue
        contributions.append(DiscoveredContribution(name=ep.name, group=group, value=loaded))
        logger.debug("Loaded entry point %s:%s", group, ep.name)

    logger.info("Discovered %d contributions in group %r", len(contributions), group)
    return contributions
