"""Status Reconciler: records asynchronous job outcomes on registrations.

Subscribed to the provisioning job-completion detail types. The event
transport delivers at least once; repeated deliveries produce repeated
patches carrying the same ``jobOutput``, which overwrite rather than
accumulate. No idempotency token is attached.

The reconciler does not write the table itself. It sends a signed PATCH
to the registration API, which owns the record.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from tessera.domain.registration.settings import RegistrationSettings, get_registration_settings
from tessera.foundation.domain.exceptions import MalformedEventError, UpstreamServiceError
from tessera.infra.aws.clients import get_aws_clients
from tessera.infra.aws.settings import get_aws_settings
from tessera.infra.aws.signing import SignedServiceCaller
from tessera.infra.observability.logging import configure_logging

logger = logging.getLogger(__name__)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO 8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JobCompletion(BaseModel):
    """Job-completion signal projected from a lifecycle event."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    registration_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("tenantRegistrationId", "registrationId", "registration_id"),
    )
    job_output: Any = Field(
        default_factory=dict,
        validation_alias=AliasChoices("jobOutput", "job_output"),
    )

    @field_validator("job_output", mode="before")
    @classmethod
    def default_job_output(cls, v: Any) -> Any:
        return {} if v is None else v

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> JobCompletion:
        """Accept either the projected ``{tenantRegistrationId, jobOutput}``
        input or a raw bus event whose ``detail`` carries those fields.

        Raises:
            MalformedEventError: If no registration id is present or the
                payload does not validate.
        """
        payload = event.get("detail") if isinstance(event.get("detail"), Mapping) else event
        try:
            completion = cls.model_validate(dict(payload or {}))
        except PydanticValidationError as exc:
            logger.error(
                "job_completion_malformed",
                extra={"event_keys": sorted(event), "error_count": exc.error_count()},
            )
            raise MalformedEventError("tenantRegistrationId", "Invalid job completion event") from exc
        if not completion.registration_id:
            logger.error("job_completion_malformed", extra={"event_keys": sorted(event)})
            raise MalformedEventError("tenantRegistrationId", "Missing tenantRegistrationId in event")
        return completion


class StatusReconciler:
    """Patches a registration with the output of its provisioning job.

    Args:
        caller: Signs and sends the PATCH.
        base_url: Base URL of the internal API.
        registration_path: Path of the registration collection.
    """

    def __init__(
        self,
        caller: SignedServiceCaller,
        base_url: str,
        registration_path: str = "/tenant-registrations",
    ) -> None:
        self._caller = caller
        self._collection_url = base_url.rstrip("/") + "/" + registration_path.strip("/")

    @classmethod
    def from_settings(
        cls, caller: SignedServiceCaller, settings: RegistrationSettings | None = None
    ) -> StatusReconciler:
        settings = settings or get_registration_settings()
        return cls(caller, settings.tenant_api_url, settings.registration_path)

    def registration_url(self, registration_id: str) -> str:
        return f"{self._collection_url}/{registration_id}"

    def on_job_complete(self, event: Mapping[str, Any] | JobCompletion) -> dict[str, Any]:
        """Send ``{jobOutput, timestamp}`` to the registration's update endpoint.

        Returns:
            The payload that was sent.

        Raises:
            MalformedEventError: If the event carries no registration id.
            UpstreamServiceError: On a non-2xx response.
            UpstreamTransportError: If no response was received.
        """
        completion = event if isinstance(event, JobCompletion) else JobCompletion.from_event(event)
        registration_id = completion.registration_id or ""
        url = self.registration_url(registration_id)
        payload = {"jobOutput": completion.job_output, "timestamp": utc_timestamp()}

        response = self._caller.call("PATCH", url, payload)
        if not response.ok:
            logger.error(
                "registration_status_update_failed",
                extra={
                    "registration_id": registration_id,
                    "status_code": response.status,
                    "response": response.data,
                },
            )
            raise UpstreamServiceError(
                f"HTTP API call failed with status {response.status}",
                status_code=response.status,
                url=url,
            )

        logger.info(
            "registration_status_updated",
            extra={"registration_id": registration_id, "status_code": response.status},
        )
        return payload


@lru_cache(maxsize=1)
def get_status_reconciler() -> StatusReconciler:
    """Process-wide reconciler for the Lambda entry point.

    Built once per container; clear with ``get_status_reconciler.cache_clear()``.
    """
    configure_logging()
    aws_settings = get_aws_settings()
    clients = get_aws_clients()
    caller = SignedServiceCaller(
        clients.credentials(),
        aws_settings.region,
        service=aws_settings.signing_service,
        timeout=aws_settings.signed_call_timeout,
    )
    return StatusReconciler.from_settings(caller)


def handler(event: Mapping[str, Any], context: Any) -> None:
    """AWS Lambda entry point for job-completion events."""
    reconciler = get_status_reconciler()
    request_id = getattr(context, "aws_request_id", None) or "unknown"
    with structlog.contextvars.bound_contextvars(aws_request_id=request_id):
        logger.info("job_completion_received", extra={"job_event": dict(event)})
        reconciler.on_job_complete(event)
