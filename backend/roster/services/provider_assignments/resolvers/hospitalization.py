from __future__ import annotations

import re
from datetime import date
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from roster.models.hospitalization import Hospitalization
from roster.models.staging import StagingProviderAssignment
from roster.services.provider_assignments.cache import CacheSlot
from roster.services.provider_assignments.resolvers.base import Resolver
from roster.services.provider_assignments.types import HospitalizationRow

_CASE_ID_RE = re.compile(r"^[+-]?[0-9]+$")


def load_hospitalizations(
    session: Session, facility_id: int, service_date: date
) -> list[HospitalizationRow]:
    rows = session.execute(
        select(
            Hospitalization.id,
            Hospitalization.case_id,
            Hospitalization.facility_id,
            Hospitalization.patient_id,
            Hospitalization.admission_date,
            Hospitalization.discharge_date,
            Hospitalization.hospitalization_status_id,
        )
        .where(Hospitalization.facility_id == facility_id)
        .order_by(Hospitalization.id)
    ).all()
    return [HospitalizationRow.model_validate(dict(row._mapping)) for row in rows]


def parse_case_id(hospital_number: str | None) -> int | None:
    if not hospital_number:
        return None
    value = hospital_number.strip()
    if not _CASE_ID_RE.match(value):
        return None
    return int(value)


def find_hospitalizations(
    record: StagingProviderAssignment, hospitalizations: Sequence[HospitalizationRow]
) -> list[HospitalizationRow]:
    if not record.facility_id or record.resolved_patient_id is None:
        return []
    case_id = parse_case_id(record.hospital_number)
    if case_id is None:
        return []
    return [
        h
        for h in hospitalizations
        if h.case_id == case_id
        and h.facility_id == record.facility_id
        and h.patient_id == record.resolved_patient_id
    ]


HOSPITALIZATION_RESOLVER = Resolver(
    stage="Hospitalization",
    cache_slot=CacheSlot.hospitalizations,
    target_field="resolved_hospitalization_id",
    load=load_hospitalizations,
    find_candidates=find_hospitalizations,
    id_of=lambda hospitalization: hospitalization.id,
)
