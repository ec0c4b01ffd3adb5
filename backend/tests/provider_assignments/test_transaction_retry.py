import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from roster.db.transaction import is_transient_error, run_in_transaction


class FakeSession:
    def __init__(self, log):
        self._log = log

    def commit(self):
        self._log.append("commit")

    def rollback(self):
        self._log.append("rollback")

    def close(self):
        self._log.append("close")


class SerializationFailure(Exception):
    sqlstate = "40001"


def _operational_error():
    return OperationalError("UPDATE staging_provider_assignments", {}, Exception("connection reset"))


def test_transient_error_classification():
    assert is_transient_error(_operational_error())
    assert is_transient_error(IntegrityError("UPDATE", {}, SerializationFailure("conflict")))
    assert is_transient_error(
        IntegrityError("UPDATE", {}, Exception("deadlock detected while waiting for lock"))
    )
    assert not is_transient_error(IntegrityError("INSERT", {}, Exception("duplicate key")))
    assert not is_transient_error(ValueError("bad data"))


def test_retries_transient_error_with_fresh_session(monkeypatch):
    log = []
    sleeps = []
    monkeypatch.setattr("time.sleep", lambda s: sleeps.append(s))
    state = {"calls": 0}

    def work(session):
        state["calls"] += 1
        if state["calls"] <= 2:
            raise _operational_error()
        return "done"

    result = run_in_transaction(
        lambda: FakeSession(log), work, max_retries=3, base_sleep=0.5, max_sleep=0.75
    )

    assert result == "done"
    assert state["calls"] == 3
    assert sleeps == [0.5, 0.75]
    assert log == ["rollback", "close", "rollback", "close", "commit", "close"]


def test_gives_up_after_max_retries(monkeypatch):
    monkeypatch.setattr("time.sleep", lambda _s: None)
    state = {"calls": 0}

    def work(session):
        state["calls"] += 1
        raise _operational_error()

    with pytest.raises(OperationalError):
        run_in_transaction(lambda: FakeSession([]), work, max_retries=2)

    assert state["calls"] == 3


def test_non_transient_error_is_not_retried(monkeypatch):
    monkeypatch.setattr(
        "time.sleep", lambda _s: (_ for _ in ()).throw(AssertionError("should not sleep"))
    )
    log = []
    state = {"calls": 0}

    def work(session):
        state["calls"] += 1
        raise ValueError("bad data")

    with pytest.raises(ValueError):
        run_in_transaction(lambda: FakeSession(log), work)

    assert state["calls"] == 1
    assert log == ["rollback", "close"]
