from roster.services.provider_assignments.resolvers.base import Resolver, run_resolver
from roster.services.provider_assignments.resolvers.hospitalization import (
    HOSPITALIZATION_RESOLVER,
)
from roster.services.provider_assignments.resolvers.hospitalization_status import (
    build_hospitalization_status_resolver,
)
from roster.services.provider_assignments.resolvers.patient import PATIENT_RESOLVER
from roster.services.provider_assignments.resolvers.providers import (
    NURSE_PRACTITIONER_RESOLVER,
    PHYSICIAN_RESOLVER,
)
from roster.services.provider_assignments.resolvers.visit import VISIT_RESOLVER

__all__ = [
    "HOSPITALIZATION_RESOLVER",
    "NURSE_PRACTITIONER_RESOLVER",
    "PATIENT_RESOLVER",
    "PHYSICIAN_RESOLVER",
    "VISIT_RESOLVER",
    "Resolver",
    "build_hospitalization_status_resolver",
    "run_resolver",
]
