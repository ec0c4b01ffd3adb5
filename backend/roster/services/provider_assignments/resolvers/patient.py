from __future__ import annotations

from datetime import date
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from roster.models.patient import Patient, PatientFacility
from roster.models.staging import StagingProviderAssignment
from roster.services.provider_assignments.cache import CacheSlot
from roster.services.provider_assignments.resolvers.base import Resolver
from roster.services.provider_assignments.types import PatientRow


def load_patients(session: Session, facility_id: int, service_date: date) -> list[PatientRow]:
    rows = session.execute(
        select(
            Patient.id.label("patient_id"),
            Patient.date_of_birth.label("patient_dob"),
            Patient.first_name.label("patient_first_name"),
            Patient.last_name.label("patient_last_name"),
            PatientFacility.mrn.label("patient_mrn"),
            PatientFacility.facility_id.label("facility_id"),
        )
        .join(PatientFacility, PatientFacility.patient_id == Patient.id)
        .where(PatientFacility.facility_id == facility_id)
        .order_by(Patient.id, PatientFacility.id)
    ).all()
    return [PatientRow.model_validate(dict(row._mapping)) for row in rows]


def find_patients(
    record: StagingProviderAssignment, patients: Sequence[PatientRow]
) -> list[PatientRow]:
    if not record.facility_id or not record.mrn:
        return []
    return [
        p
        for p in patients
        if p.patient_mrn == record.mrn
        and p.facility_id is not None
        and p.facility_id == record.facility_id
    ]


PATIENT_RESOLVER = Resolver(
    stage="Patient",
    cache_slot=CacheSlot.patients,
    target_field="resolved_patient_id",
    load=load_patients,
    find_candidates=find_patients,
    id_of=lambda patient: patient.patient_id,
)
