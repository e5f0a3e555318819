"""Tessera Domain Registration -- tenant onboarding and offboarding.

The Registration Orchestrator drives a registration through tenant
creation, update and offboarding; the Status Reconciler records the
outcome of asynchronous provisioning jobs.
"""

from tessera.domain.registration.infrastructure.registration_repository import (
    RegistrationRepository,
)
from tessera.domain.registration.orchestrator import (
    RegistrationCreated,
    RegistrationOrchestrator,
    RegistrationUpdated,
    TenantNotLinkedError,
)
from tessera.domain.registration.reconciler import JobCompletion, StatusReconciler
from tessera.domain.registration.registration import TenantRegistration
from tessera.domain.registration.settings import RegistrationSettings, get_registration_settings
from tessera.domain.registration.tenant_directory import TenantDirectoryClient

__all__ = [
    "JobCompletion",
    "RegistrationCreated",
    "RegistrationOrchestrator",
    "RegistrationRepository",
    "RegistrationSettings",
    "RegistrationUpdated",
    "StatusReconciler",
    "TenantDirectoryClient",
    "TenantNotLinkedError",
    "TenantRegistration",
    "get_registration_settings",
]
