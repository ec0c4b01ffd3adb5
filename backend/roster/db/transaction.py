from __future__ import annotations

import logging
import time
from typing import Callable, TypeVar

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSACTION_RETRY_MAX = 3
TRANSACTION_RETRY_BASE_SLEEP = 0.5
TRANSACTION_RETRY_MAX_SLEEP = 8.0

# SQLSTATE 40001 serialization_failure, 40P01 deadlock_detected, SQL Server 1205 deadlock victim.
_TRANSIENT_MARKERS = ("40001", "40p01", "(1205)", "deadlock", "could not serialize access")


def is_transient_error(exc: BaseException) -> bool:
    if isinstance(exc, DBAPIError) and exc.connection_invalidated:
        return True
    if isinstance(exc, OperationalError):
        return True
    if not isinstance(exc, DBAPIError):
        return False
    code = getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)
    if code in {"40001", "40P01"}:
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _TRANSIENT_MARKERS)


def run_in_transaction(
    session_factory: Callable[[], Session],
    work: Callable[[Session], T],
    *,
    max_retries: int = TRANSACTION_RETRY_MAX,
    base_sleep: float = TRANSACTION_RETRY_BASE_SLEEP,
    max_sleep: float = TRANSACTION_RETRY_MAX_SLEEP,
) -> T:
    """Run ``work`` in one transaction, retrying the whole unit on transient errors.

    Every attempt gets a fresh session, so ``work`` must rebuild all of its state
    from the database. Partial work is never retried: a failed attempt is rolled
    back before the next one starts.
    """
    attempt = 0
    while True:
        session = session_factory()
        try:
            result = work(session)
            session.commit()
            return result
        except Exception as exc:
            session.rollback()
            if is_transient_error(exc) and attempt < max_retries:
                sleep_for = min(base_sleep * (2**attempt), max_sleep)
                attempt += 1
                logger.warning(
                    "Transient database error, retrying transaction",
                    extra={
                        "attempt": attempt,
                        "max_retries": max_retries,
                        "sleep_seconds": sleep_for,
                        "error": str(exc),
                    },
                )
                time.sleep(sleep_for)
                continue
            raise
        finally:
            session.close()
