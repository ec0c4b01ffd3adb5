from __future__ import annotations

import enum
import json
import uuid
from datetime import date, datetime
from typing import Iterable

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from roster.models.base import Base, TimestampMixin


class ProviderAssignmentBatchStatus(str, enum.Enum):
    pending = "pending"
    imported = "imported"
    resolved = "resolved"
    failed = "failed"


class ProviderAssignmentBatch(Base, TimestampMixin):
    __tablename__ = "staging_provider_assignment_batches"
    __table_args__ = (
        Index("ix_staging_provider_assignment_batches_facility_date", "facility_id", "service_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    facility_id: Mapped[int] = mapped_column(ForeignKey("facilities.id"), nullable=False)
    service_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[ProviderAssignmentBatchStatus] = mapped_column(
        Enum(ProviderAssignmentBatchStatus, name="provider_assignment_batch_status"),
        nullable=False,
        default=ProviderAssignmentBatchStatus.pending,
        index=True,
    )


class StagingProviderAssignment(Base, TimestampMixin):
    __tablename__ = "staging_provider_assignments"
    __table_args__ = (Index("ix_staging_provider_assignments_batch", "batch_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    batch_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    facility_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    service_date: Mapped[date] = mapped_column(Date, nullable=False)

    # Raw roster columns, trimmed by the import step.
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    attending_md: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    nurse_practitioner: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    hospital_number: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    mrn: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    admit: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    dob: Mapped[date | None] = mapped_column(Date, nullable=True)
    age: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    insurance: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    is_cleared: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    h_p: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    psych_eval: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    normalized_patient_last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    normalized_patient_first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    normalized_physician_last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    normalized_nurse_practitioner_last_name: Mapped[str | None] = mapped_column(
        String(100), nullable=True
    )
    room: Mapped[str | None] = mapped_column(String(20), nullable=True)
    bed: Mapped[str | None] = mapped_column(String(5), nullable=True)

    resolved_physician_id: Mapped[int | None] = mapped_column(ForeignKey("providers.id"), nullable=True)
    resolved_nurse_practitioner_id: Mapped[int | None] = mapped_column(
        ForeignKey("providers.id"), nullable=True
    )
    resolved_patient_id: Mapped[int | None] = mapped_column(ForeignKey("patients.id"), nullable=True)
    resolved_hospitalization_id: Mapped[int | None] = mapped_column(
        ForeignKey("hospitalizations.id"), nullable=True
    )
    resolved_hospitalization_status_id: Mapped[int | None] = mapped_column(
        ForeignKey("hospitalization_statuses.id"), nullable=True
    )
    resolved_visit_id: Mapped[int | None] = mapped_column(ForeignKey("visits.id"), nullable=True)

    # Written and read by the import and promotion steps.
    should_import: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    imported: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    validation_errors_json: Mapped[str | None] = mapped_column(
        "validation_errors", Text, nullable=True
    )
    exclusion_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)
    patient_was_created: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    patient_facility_was_created: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    physician_was_created: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    nurse_practitioner_was_created: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    hospitalization_was_created: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def validation_errors(self) -> list[str]:
        return deserialize_validation_errors(self.validation_errors_json)

    @validation_errors.setter
    def validation_errors(self, errors: list[str]) -> None:
        self.validation_errors_json = serialize_validation_errors(errors)

    @property
    def has_validation_errors(self) -> bool:
        return bool(self.validation_errors)

    def add_validation_error(self, error: str) -> None:
        self.add_validation_errors([error])

    def add_validation_errors(self, errors: Iterable[str]) -> None:
        current = self.validation_errors
        current.extend(errors)
        self.validation_errors = current


def serialize_validation_errors(errors: list[str] | None) -> str | None:
    if not errors:
        return None
    return json.dumps(list(errors))


def deserialize_validation_errors(raw: str | None) -> list[str]:
    if raw is None or not raw.strip():
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("validation_errors must contain a JSON list.")
    return [str(item) for item in data]
