from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict

from roster.models.provider import ProviderType


class _ReferenceRow(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class ProviderRow(_ReferenceRow):
    provider_id: int
    provider_last_name: str
    provider_first_name: str | None = None
    provider_type: ProviderType


class PatientRow(_ReferenceRow):
    patient_id: int
    patient_first_name: str | None = None
    patient_last_name: str | None = None
    patient_dob: date | None = None
    patient_mrn: str | None = None
    facility_id: int | None = None


class HospitalizationRow(_ReferenceRow):
    id: int
    case_id: int
    facility_id: int
    patient_id: int
    admission_date: datetime | None = None
    discharge_date: datetime | None = None
    hospitalization_status_id: int | None = None


class HospitalizationStatusRow(_ReferenceRow):
    id: int
    code: str
    name: str


class VisitRow(_ReferenceRow):
    id: int
    hospitalization_id: int
    date_serviced: date
    room: str | None = None
    bed: str | None = None


@dataclass(frozen=True)
class ResolutionProgress:
    stage: str
    processed_records: int
    total_records: int
    batch_id: uuid.UUID
    current_step: int
    total_steps: int

    @property
    def percent_complete(self) -> int:
        if self.total_steps <= 0:
            return 0
        return (self.current_step * 100) // self.total_steps

    def as_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["batch_id"] = str(self.batch_id)
        data["percent_complete"] = self.percent_complete
        return data


@dataclass
class StageStats:
    matched: int = 0
    unmatched: int = 0
    ambiguous: int = 0
    already_resolved: int = 0
    skipped: int = 0

    @property
    def processed(self) -> int:
        return (
            self.matched + self.unmatched + self.ambiguous + self.already_resolved + self.skipped
        )

    def as_dict(self) -> dict[str, int]:
        return asdict(self)


@dataclass
class ResolutionStats:
    batch_id: uuid.UUID
    facility_id: int
    service_date: date
    records_total: int = 0
    records_eligible: int = 0
    records_excluded: int = 0
    stages: dict[str, StageStats] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        return {
            "batch_id": str(self.batch_id),
            "facility_id": self.facility_id,
            "service_date": self.service_date.isoformat(),
            "records_total": self.records_total,
            "records_eligible": self.records_eligible,
            "records_excluded": self.records_excluded,
            "stages": {name: stage.as_dict() for name, stage in self.stages.items()},
        }
