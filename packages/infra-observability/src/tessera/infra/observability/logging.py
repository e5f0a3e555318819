"""Structured logging configuration using structlog.

Every service in the control plane logs through structlog. Modules keep
using ``logging.getLogger(__name__)`` with event-style messages and
``extra={...}``; those records are routed through a structlog
``ProcessorFormatter`` so stdlib and structlog output share one format.

- JSON output for production environments (one line per event for
  CloudWatch-style collectors)
- Console output with colors for development
- Request id and service name bound through context variables
- Redaction of credentials and signature material

Usage:
    from tessera.infra.observability.logging import configure_logging
    configure_logging()

    from tessera.infra.observability import get_logger
    logger = get_logger(__name__)
    logger.info("registration_created", tenant_registration_id="reg-1")
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import MutableMapping

Processor = structlog.types.Processor

SENSITIVE_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "token",
        "authorization",
        "secret",
        "secret_key",
        "aws_secret_access_key",
        "credential",
        "credentials",
        "signature",
        "x-amz-security-token",
    }
)

REDACTED_VALUE: str = "***REDACTED***"

# Attributes present on every LogRecord; anything else came from ``extra=``.
_RECORD_ATTRIBUTES: frozenset[str] = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


class LoggingSettings(BaseSettings):
    """Logging configuration settings from environment variables.

    - LOG_LEVEL: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment name (development, staging, production, test)
    - SERVICE_NAME: Bound into every log entry as ``service``

    Example:
        >>> LoggingSettings(environment="production").use_json_logs
        True
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = Field(
        default="INFO",
        alias="LOG_LEVEL",
        description="Minimum log level to output",
    )
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Environment name for format selection",
    )
    service_name: str = Field(
        default="tessera-control-plane",
        alias="SERVICE_NAME",
        description="Service name bound into every log entry",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return str(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a known level.

        Raises:
            ValueError: If log level is not a valid Python logging level.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v not in valid_levels:
            msg = f"log_level must be one of {valid_levels}"
            raise ValueError(msg)
        return v

    @property
    def use_json_logs(self) -> bool:
        """True for the production environment, False otherwise."""
        return self.environment == "production"

    @property
    def log_level_int(self) -> int:
        """Log level as a ``logging`` module constant."""
        return getattr(logging, self.log_level, logging.INFO)


class SensitiveDataProcessor:
    """Structlog processor to redact sensitive fields from log context.

    Redacts values for fields matching:
    1. Exact field names in SENSITIVE_FIELDS (case-insensitive)
    2. Field names containing "password", "token" or "secret" as substrings

    Example:
        >>> processor = SensitiveDataProcessor()
        >>> processor(None, "info", {"event": "x", "session_token": "abc"})["session_token"]
        '***REDACTED***'
    """

    def __call__(
        self,
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        for key in list(event_dict.keys()):
            if self._is_sensitive(key):
                event_dict[key] = REDACTED_VALUE
        return event_dict

    def _is_sensitive(self, key: str) -> bool:
        key_lower = key.lower()
        if key_lower in SENSITIVE_FIELDS:
            return True
        return any(part in key_lower for part in ("password", "token", "secret"))


def merge_record_extra(
    logger: Any,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Copy ``extra={...}`` attributes of a stdlib record into the event.

    Only applies to records that came through the stdlib ``logging`` module;
    structlog-native entries pass through unchanged.
    """
    record = event_dict.get("_record")
    if record is None:
        return event_dict
    for key, value in vars(record).items():
        if key not in _RECORD_ATTRIBUTES and not key.startswith("_"):
            event_dict.setdefault(key, value)
    return event_dict


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached LoggingSettings instance.

    Clear cache with ``get_logging_settings.cache_clear()`` for testing.
    """
    return LoggingSettings()


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Safe to call more than once: the root handler installed by a previous
    call is replaced rather than duplicated. Called from the observability
    lifespan hook and from the reconciler's Lambda entry point.

    Args:
        settings: Optional LoggingSettings instance. If not provided,
            settings are loaded from environment variables.
    """
    if settings is None:
        settings = get_logging_settings()

    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        SensitiveDataProcessor(),
    ]

    renderer: Processor
    if settings.use_json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[*shared, merge_record_extra],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers = [h for h in root.handlers if not isinstance(h.formatter, structlog.stdlib.ProcessorFormatter)]
    root.addHandler(handler)
    root.setLevel(settings.log_level_int)

    # boto logs request bodies at DEBUG
    for noisy in ("botocore", "boto3", "urllib3", "httpcore"):
        logging.getLogger(noisy).setLevel(max(settings.log_level_int, logging.INFO))

    structlog.contextvars.bind_contextvars(service=settings.service_name)


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger bound to the given name.

    The logger inherits context bound by RequestIdMiddleware (``request_id``)
    and the ``service`` bound by :func:`configure_logging`.

    Args:
        name: Logger name (typically ``__name__`` from calling module).

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("tenant_created", tenant_id="t-1")
    """
    return structlog.get_logger(name)
