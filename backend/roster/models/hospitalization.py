from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster.models.base import Base, TimestampMixin

NO_PSYCH_EVAL_STATUS_ID = 1

HOSPITALIZATION_STATUS_SEED = [
    {"id": NO_PSYCH_EVAL_STATUS_ID, "code": "NO_PSYCH_EVAL", "name": "No psych evaluation required", "display_order": 1},
    {"id": 2, "code": "PENDING_PSYCH_EVAL", "name": "Pending psych evaluation", "display_order": 2},
    {"id": 3, "code": "PSYCH_EVAL_COMPLETE", "name": "Psych evaluation complete", "display_order": 3},
    {"id": 4, "code": "DISCHARGED", "name": "Discharged", "display_order": 4},
]


class HospitalizationStatus(Base):
    __tablename__ = "hospitalization_statuses"
    __table_args__ = (UniqueConstraint("code", name="uq_hospitalization_statuses_code"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class Hospitalization(Base, TimestampMixin):
    __tablename__ = "hospitalizations"
    __table_args__ = (
        UniqueConstraint("facility_id", "case_id", name="uq_hospitalizations_facility_case"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    case_id: Mapped[int] = mapped_column(Integer, nullable=False)
    facility_id: Mapped[int] = mapped_column(ForeignKey("facilities.id"), nullable=False, index=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), nullable=False, index=True)
    admission_date: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)
    discharge_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=False), nullable=True)
    hospitalization_status_id: Mapped[int] = mapped_column(
        ForeignKey("hospitalization_statuses.id"), nullable=False, default=NO_PSYCH_EVAL_STATUS_ID
    )

    status = relationship("HospitalizationStatus", lazy="joined")
    visits = relationship("Visit", back_populates="hospitalization")
