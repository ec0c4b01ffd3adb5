from __future__ import annotations

from datetime import date
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from roster.models.hospitalization import Hospitalization
from roster.models.staging import StagingProviderAssignment
from roster.models.visit import Visit
from roster.services.provider_assignments.cache import CacheSlot
from roster.services.provider_assignments.resolvers.base import Resolver
from roster.services.provider_assignments.types import VisitRow


def load_visits(session: Session, facility_id: int, service_date: date) -> list[VisitRow]:
    rows = session.execute(
        select(Visit.id, Visit.hospitalization_id, Visit.date_serviced, Visit.room, Visit.bed)
        .join(Hospitalization, Hospitalization.id == Visit.hospitalization_id)
        .where(
            Visit.date_serviced == service_date,
            Hospitalization.facility_id == facility_id,
        )
        .order_by(Visit.id)
    ).all()
    return [VisitRow.model_validate(dict(row._mapping)) for row in rows]


def find_visits(record: StagingProviderAssignment, visits: Sequence[VisitRow]) -> list[VisitRow]:
    # Needs both earlier stages: patient, then hospitalization.
    if record.resolved_patient_id is None or record.resolved_hospitalization_id is None:
        return []
    return [
        v
        for v in visits
        if v.hospitalization_id == record.resolved_hospitalization_id
        and v.date_serviced == record.service_date
    ]


VISIT_RESOLVER = Resolver(
    stage="Visit",
    cache_slot=CacheSlot.visits,
    target_field="resolved_visit_id",
    load=load_visits,
    find_candidates=find_visits,
    id_of=lambda visit: visit.id,
)
