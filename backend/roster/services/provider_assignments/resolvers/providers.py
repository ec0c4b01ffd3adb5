from __future__ import annotations

from datetime import date
from typing import Callable, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from roster.models.provider import Provider, ProviderType
from roster.models.staging import StagingProviderAssignment
from roster.services.provider_assignments.cache import CacheSlot
from roster.services.provider_assignments.resolvers.base import Resolver
from roster.services.provider_assignments.types import ProviderRow


def load_providers(session: Session, provider_type: ProviderType) -> list[ProviderRow]:
    rows = session.execute(
        select(
            Provider.id.label("provider_id"),
            Provider.last_name.label("provider_last_name"),
            Provider.first_name.label("provider_first_name"),
            Provider.type.label("provider_type"),
        )
        .where(Provider.type == provider_type)
        .order_by(Provider.id)
    ).all()
    return [ProviderRow.model_validate(dict(row._mapping)) for row in rows]


def match_providers_by_last_name(
    last_name: str | None, providers: Sequence[ProviderRow]
) -> list[ProviderRow]:
    if not last_name or not last_name.strip():
        return []
    wanted = last_name.strip().lower()
    return [p for p in providers if p.provider_last_name.strip().lower() == wanted]


def _provider_resolver(
    stage: str,
    slot: CacheSlot,
    provider_type: ProviderType,
    last_name_of: Callable[[StagingProviderAssignment], str | None],
    field: str,
) -> Resolver[ProviderRow]:
    def load(session: Session, facility_id: int, service_date: date) -> list[ProviderRow]:
        return load_providers(session, provider_type)

    def find_candidates(
        record: StagingProviderAssignment, providers: Sequence[ProviderRow]
    ) -> list[ProviderRow]:
        return match_providers_by_last_name(last_name_of(record), providers)

    return Resolver(
        stage=stage,
        cache_slot=slot,
        target_field=field,
        load=load,
        find_candidates=find_candidates,
        id_of=lambda provider: provider.provider_id,
    )


PHYSICIAN_RESOLVER = _provider_resolver(
    "Physician",
    CacheSlot.physicians,
    ProviderType.physician,
    lambda record: record.normalized_physician_last_name,
    "resolved_physician_id",
)

NURSE_PRACTITIONER_RESOLVER = _provider_resolver(
    "NursePractitioner",
    CacheSlot.nurse_practitioners,
    ProviderType.nurse_practitioner,
    lambda record: record.normalized_nurse_practitioner_last_name,
    "resolved_nurse_practitioner_id",
)
