"""Resolution cycle for one staged provider-assignment batch.

A cycle links every eligible staging row to existing providers, patients,
hospitalizations and visits. Stages run in a fixed order because later stages
read ids written by earlier ones (a hospitalization needs the patient, a visit
needs the hospitalization). The whole cycle is one transaction: rows are
mutated in memory, flushed once at the end and committed together, and any
failure rolls everything back. Transient database failures retry the complete
cycle from scratch.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import date
from typing import Callable, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from roster.core.settings import Settings, settings as default_settings
from roster.db.locking import acquire_resolution_lock, apply_statement_timeout
from roster.db.transaction import run_in_transaction
from roster.models.staging import (
    ProviderAssignmentBatch,
    ProviderAssignmentBatchStatus,
    StagingProviderAssignment,
)
from roster.services.provider_assignments.cache import ResolutionCache
from roster.services.provider_assignments.errors import (
    BatchFacilityMismatchError,
    BatchNotFoundError,
    ResolutionCancelled,
)
from roster.services.provider_assignments.resolvers import (
    HOSPITALIZATION_RESOLVER,
    NURSE_PRACTITIONER_RESOLVER,
    PATIENT_RESOLVER,
    PHYSICIAN_RESOLVER,
    VISIT_RESOLVER,
    Resolver,
    build_hospitalization_status_resolver,
    run_resolver,
)
from roster.services.provider_assignments.types import ResolutionProgress, ResolutionStats

logger = logging.getLogger(__name__)

BULK_UPDATE_STAGE = "BulkUpdate"

ProgressSink = Callable[[ResolutionProgress], None]


def build_default_resolvers(default_status_id: int) -> list[Resolver]:
    return [
        PHYSICIAN_RESOLVER,
        NURSE_PRACTITIONER_RESOLVER,
        PATIENT_RESOLVER,
        HOSPITALIZATION_RESOLVER,
        build_hospitalization_status_resolver(default_status_id),
        VISIT_RESOLVER,
    ]


class ProviderAssignmentsResolver:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        resolvers: Sequence[Resolver] | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._settings = settings or default_settings
        if resolvers is None:
            resolvers = build_default_resolvers(self._settings.default_hospitalization_status_id)
        self.resolvers: list[Resolver] = list(resolvers)

    def resolve(
        self,
        batch_id: uuid.UUID,
        facility_id: int,
        service_date: date,
        cancel_event: threading.Event | None = None,
        progress: ProgressSink | None = None,
    ) -> ResolutionStats:
        logger.info(
            "Batch %s: resolution started",
            batch_id,
            extra={
                "batch_id": str(batch_id),
                "facility_id": facility_id,
                "service_date": service_date.isoformat(),
            },
        )
        try:
            stats = run_in_transaction(
                self._session_factory,
                lambda session: self._resolve_in_session(
                    session, batch_id, facility_id, service_date, cancel_event, progress
                ),
                max_retries=self._settings.resolution_retry_max,
                base_sleep=self._settings.resolution_retry_base_sleep,
                max_sleep=self._settings.resolution_retry_max_sleep,
            )
        except Exception:
            logger.exception("Batch %s: resolution failed, rolled back", batch_id)
            raise
        logger.info(
            "Batch %s: resolution completed",
            batch_id,
            extra=stats.as_dict(),
        )
        return stats

    def _resolve_in_session(
        self,
        session: Session,
        batch_id: uuid.UUID,
        facility_id: int,
        service_date: date,
        cancel_event: threading.Event | None,
        progress: ProgressSink | None,
    ) -> ResolutionStats:
        def checkpoint() -> None:
            _raise_if_cancelled(cancel_event, batch_id)

        checkpoint()
        if self._settings.resolution_advisory_lock:
            acquire_resolution_lock(session, facility_id, service_date)
        apply_statement_timeout(session, self._settings.resolution_statement_timeout_seconds)

        stats = ResolutionStats(batch_id=batch_id, facility_id=facility_id, service_date=service_date)
        stats.records_total = _validate_batch(session, batch_id, facility_id)

        checkpoint()
        records = _load_eligible_records(session, batch_id)
        stats.records_eligible = len(records)
        stats.records_excluded = stats.records_total - len(records)
        logger.info(
            "Batch %s: loaded %s staging records (%s excluded by validation errors)",
            batch_id,
            stats.records_eligible,
            stats.records_excluded,
        )
        if not records:
            _mark_batch_resolved(session, batch_id)
            return stats

        cache = ResolutionCache()
        total_steps = len(self.resolvers) + 1
        for step, resolver in enumerate(self.resolvers, start=1):
            stats.stages[resolver.stage] = run_resolver(
                resolver,
                session,
                cache,
                facility_id,
                service_date,
                records,
                checkpoint=checkpoint,
            )
            _report(
                progress,
                ResolutionProgress(
                    stage=resolver.stage,
                    processed_records=len(records),
                    total_records=len(records),
                    batch_id=batch_id,
                    current_step=step,
                    total_steps=total_steps,
                ),
            )

        checkpoint()
        session.flush()
        _mark_batch_resolved(session, batch_id)
        _report(
            progress,
            ResolutionProgress(
                stage=BULK_UPDATE_STAGE,
                processed_records=len(records),
                total_records=len(records),
                batch_id=batch_id,
                current_step=total_steps,
                total_steps=total_steps,
            ),
        )
        return stats


def _validate_batch(session: Session, batch_id: uuid.UUID, facility_id: int) -> int:
    counts = session.execute(
        select(StagingProviderAssignment.facility_id, func.count())
        .where(StagingProviderAssignment.batch_id == batch_id)
        .group_by(StagingProviderAssignment.facility_id)
    ).all()
    if not counts:
        raise BatchNotFoundError(batch_id)
    found = sorted(int(row_facility) for row_facility, _ in counts)
    if found != [facility_id]:
        raise BatchFacilityMismatchError(batch_id, facility_id, found)
    return sum(int(count) for _, count in counts)


def _load_eligible_records(
    session: Session, batch_id: uuid.UUID
) -> list[StagingProviderAssignment]:
    records = session.scalars(
        select(StagingProviderAssignment)
        .where(
            StagingProviderAssignment.batch_id == batch_id,
            func.coalesce(func.trim(StagingProviderAssignment.validation_errors_json), "").in_(
                ["", "[]"]
            ),
        )
        .order_by(StagingProviderAssignment.id)
    ).all()
    return list(records)


def _mark_batch_resolved(session: Session, batch_id: uuid.UUID) -> None:
    batch = session.get(ProviderAssignmentBatch, batch_id)
    if batch is None:
        return
    if batch.status not in {
        ProviderAssignmentBatchStatus.imported,
        ProviderAssignmentBatchStatus.resolved,
    }:
        logger.warning(
            "Batch %s: status was '%s' when resolution finished (expected 'imported')",
            batch_id,
            batch.status.value,
        )
    batch.status = ProviderAssignmentBatchStatus.resolved
    session.flush()


def _raise_if_cancelled(cancel_event: threading.Event | None, batch_id: uuid.UUID) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ResolutionCancelled(f"Resolution of batch {batch_id} was cancelled.")


def _report(progress: ProgressSink | None, event: ResolutionProgress) -> None:
    if progress is None:
        return
    try:
        progress(event)
    except Exception:
        logger.exception(
            "Batch %s: progress sink failed at stage %s",
            event.batch_id,
            event.stage,
            extra={"stage": event.stage, "current_step": event.current_step},
        )
