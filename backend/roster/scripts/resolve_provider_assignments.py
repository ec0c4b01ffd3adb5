from __future__ import annotations

import argparse
import json
import sys
import uuid
from datetime import date

from roster.core.settings import settings, validate_settings
from roster.db.session import SessionLocal
from roster.services.provider_assignments.errors import (
    BatchFacilityMismatchError,
    BatchNotFoundError,
)
from roster.services.provider_assignments.resolver import ProviderAssignmentsResolver
from roster.services.provider_assignments.types import ResolutionProgress


def _parse_batch_id(value: str) -> uuid.UUID:
    try:
        return uuid.UUID(value.strip())
    except ValueError as exc:
        raise RuntimeError(f"Invalid --batch-id value: {value}") from exc


def _parse_date_arg(value: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise RuntimeError(f"Invalid --date value (expected YYYY-MM-DD): {value}") from exc


def _emit_progress(event: ResolutionProgress) -> None:
    payload = {"event": "provider_assignment_resolution_progress", **event.as_dict()}
    print(json.dumps(payload, sort_keys=True))


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Resolve staged provider assignments for one imported batch."
    )
    parser.add_argument("--batch-id", required=True, help="Batch UUID written by the import.")
    parser.add_argument("--facility-id", required=True, type=int, help="Facility id of the batch.")
    parser.add_argument("--date", required=True, help="Service date of the batch (YYYY-MM-DD).")
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Print one JSON line per completed stage.",
    )
    args = parser.parse_args()

    batch_id = _parse_batch_id(args.batch_id)
    service_date = _parse_date_arg(args.date)

    validate_settings(settings)
    resolver = ProviderAssignmentsResolver(SessionLocal, settings=settings)
    try:
        stats = resolver.resolve(
            batch_id,
            args.facility_id,
            service_date,
            progress=_emit_progress if args.progress else None,
        )
    except (BatchNotFoundError, BatchFacilityMismatchError) as exc:
        print(str(exc), file=sys.stderr)
        return 2

    print(json.dumps(stats.as_dict(), indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
