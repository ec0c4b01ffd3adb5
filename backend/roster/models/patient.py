from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roster.models.base import Base, TimestampMixin


class Patient(Base, TimestampMixin):
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)

    facilities = relationship("PatientFacility", back_populates="patient", lazy="selectin")


class PatientFacility(Base, TimestampMixin):
    """Per-facility MRN for a patient.

    (facility_id, mrn) is not unique; a duplicated MRN shows up as an ambiguous
    patient match.
    """

    __tablename__ = "patient_facilities"
    __table_args__ = (Index("ix_patient_facilities_facility_mrn", "facility_id", "mrn"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(ForeignKey("patients.id"), nullable=False)
    facility_id: Mapped[int] = mapped_column(ForeignKey("facilities.id"), nullable=False)
    mrn: Mapped[str] = mapped_column(String(50), nullable=False)

    patient = relationship("Patient", back_populates="facilities")
