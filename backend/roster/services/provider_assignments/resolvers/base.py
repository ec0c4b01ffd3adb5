from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Generic, Sequence, TypeVar

from sqlalchemy.orm import Session

from roster.models.staging import StagingProviderAssignment
from roster.services.provider_assignments.cache import CacheSlot, ResolutionCache
from roster.services.provider_assignments.types import StageStats

logger = logging.getLogger(__name__)

T = TypeVar("T")

Loader = Callable[[Session, int, date], Sequence[T]]
CandidateFinder = Callable[[StagingProviderAssignment, Sequence[T]], Sequence[T]]
IdOf = Callable[[T], int]


@dataclass(frozen=True)
class Resolver(Generic[T]):
    """One resolution stage.

    ``load`` reads the reference collection for a facility and service date,
    ``find_candidates`` returns every reference row matching a staging record
    and ``id_of`` gives the id written to ``target_field`` for a single match.
    """

    stage: str
    cache_slot: CacheSlot
    target_field: str
    load: Loader
    find_candidates: CandidateFinder
    id_of: IdOf

    def is_resolved(self, record: StagingProviderAssignment) -> bool:
        return getattr(record, self.target_field) is not None

    def apply(self, record: StagingProviderAssignment, candidate: T) -> None:
        setattr(record, self.target_field, self.id_of(candidate))


def run_resolver(
    resolver: Resolver[T],
    session: Session,
    cache: ResolutionCache,
    facility_id: int,
    service_date: date,
    records: Sequence[StagingProviderAssignment],
    checkpoint: Callable[[], None] | None = None,
) -> StageStats:
    stats = StageStats()
    if not records:
        return stats

    def _load() -> Sequence[T]:
        if checkpoint is not None:
            checkpoint()
        return resolver.load(session, facility_id, service_date)

    reference = cache.fill_cache(resolver.cache_slot, _load)

    for record in records:
        if record.has_validation_errors:
            stats.skipped += 1
            continue
        if resolver.is_resolved(record):
            stats.already_resolved += 1
            continue
        candidates = resolver.find_candidates(record, reference) or ()
        if len(candidates) == 1:
            resolver.apply(record, candidates[0])
            stats.matched += 1
        elif not candidates:
            stats.unmatched += 1
            logger.debug(
                "%s: no match for staging record %s (MRN: %s)",
                resolver.stage,
                record.id,
                record.mrn,
            )
        else:
            stats.ambiguous += 1
            logger.warning(
                "%s: %s matches for staging record %s (MRN: %s), leaving unresolved",
                resolver.stage,
                len(candidates),
                record.id,
                record.mrn,
                extra={
                    "stage": resolver.stage,
                    "staging_id": record.id,
                    "match_count": len(candidates),
                },
            )

    logger.info(
        "%s resolution finished",
        resolver.stage,
        extra={"stage": resolver.stage, **stats.as_dict()},
    )
    return stats
