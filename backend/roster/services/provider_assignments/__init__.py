from roster.services.provider_assignments.errors import (
    BatchFacilityMismatchError,
    BatchNotFoundError,
    ResolutionCancelled,
    ResolutionError,
)
from roster.services.provider_assignments.resolver import ProviderAssignmentsResolver
from roster.services.provider_assignments.types import ResolutionProgress, ResolutionStats

__all__ = [
    "BatchFacilityMismatchError",
    "BatchNotFoundError",
    "ProviderAssignmentsResolver",
    "ResolutionCancelled",
    "ResolutionError",
    "ResolutionProgress",
    "ResolutionStats",
]
