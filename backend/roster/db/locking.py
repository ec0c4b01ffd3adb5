from __future__ import annotations

import hashlib
import logging
from datetime import date

from sqlalchemy import text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def resolution_lock_key(facility_id: int, service_date: date) -> int:
    digest = hashlib.sha256(f"provider_assignments:{facility_id}:{service_date.isoformat()}".encode())
    # pg advisory keys are signed bigint.
    return int.from_bytes(digest.digest()[:8], "big", signed=True)


def _is_postgres(session: Session) -> bool:
    return session.get_bind().dialect.name == "postgresql"


def acquire_resolution_lock(session: Session, facility_id: int, service_date: date) -> bool:
    """Serialize resolution cycles for one facility and service date.

    The lock is transaction scoped and released on commit or rollback. Returns
    False when the backend has no advisory locks.
    """
    if not _is_postgres(session):
        return False
    key = resolution_lock_key(facility_id, service_date)
    session.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})
    logger.debug(
        "Resolution lock acquired",
        extra={"facility_id": facility_id, "service_date": service_date.isoformat(), "key": key},
    )
    return True


def apply_statement_timeout(session: Session, timeout_seconds: int) -> bool:
    if not _is_postgres(session) or timeout_seconds <= 0:
        return False
    session.execute(text(f"SET LOCAL statement_timeout = {int(timeout_seconds) * 1000}"))
    return True
