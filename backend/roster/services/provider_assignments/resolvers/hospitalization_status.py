from __future__ import annotations

from datetime import date
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from roster.models.hospitalization import NO_PSYCH_EVAL_STATUS_ID, HospitalizationStatus
from roster.models.staging import StagingProviderAssignment
from roster.services.provider_assignments.cache import CacheSlot
from roster.services.provider_assignments.resolvers.base import Resolver
from roster.services.provider_assignments.types import HospitalizationStatusRow


def load_hospitalization_statuses(
    session: Session, facility_id: int, service_date: date
) -> list[HospitalizationStatusRow]:
    rows = session.execute(
        select(HospitalizationStatus.id, HospitalizationStatus.code, HospitalizationStatus.name)
        .order_by(HospitalizationStatus.display_order, HospitalizationStatus.id)
    ).all()
    return [HospitalizationStatusRow.model_validate(dict(row._mapping)) for row in rows]


def build_hospitalization_status_resolver(
    default_status_id: int = NO_PSYCH_EVAL_STATUS_ID,
) -> Resolver[HospitalizationStatusRow]:
    """Default the status when the roster has no psych-eval entry.

    This is an assignment rule rather than a field match: rows with a psych
    eval, or with a status already set, get no candidates and are left for the
    promotion step.
    """

    def find_candidates(
        record: StagingProviderAssignment, statuses: Sequence[HospitalizationStatusRow]
    ) -> list[HospitalizationStatusRow]:
        if record.resolved_hospitalization_status_id is not None:
            return []
        if record.psych_eval and record.psych_eval.strip():
            return []
        return [s for s in statuses if s.id == default_status_id]

    return Resolver(
        stage="HospitalizationStatus",
        cache_slot=CacheSlot.hospitalization_statuses,
        target_field="resolved_hospitalization_status_id",
        load=load_hospitalization_statuses,
        find_candidates=find_candidates,
        id_of=lambda status: status.id,
    )
