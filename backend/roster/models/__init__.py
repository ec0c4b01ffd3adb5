from roster.models.base import Base
from roster.models.facility import Facility
from roster.models.provider import Provider, ProviderType
from roster.models.patient import Patient, PatientFacility
from roster.models.hospitalization import (
    HOSPITALIZATION_STATUS_SEED,
    NO_PSYCH_EVAL_STATUS_ID,
    Hospitalization,
    HospitalizationStatus,
)
from roster.models.visit import Visit
from roster.models.staging import (
    ProviderAssignmentBatch,
    ProviderAssignmentBatchStatus,
    StagingProviderAssignment,
)

__all__ = [
    "Base",
    "Facility",
    "Provider",
    "ProviderType",
    "Patient",
    "PatientFacility",
    "HOSPITALIZATION_STATUS_SEED",
    "NO_PSYCH_EVAL_STATUS_ID",
    "Hospitalization",
    "HospitalizationStatus",
    "Visit",
    "ProviderAssignmentBatch",
    "ProviderAssignmentBatchStatus",
    "StagingProviderAssignment",
]
