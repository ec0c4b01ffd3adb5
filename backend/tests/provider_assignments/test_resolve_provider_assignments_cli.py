import json
import sys
import uuid
from datetime import date

import pytest

from roster.scripts import resolve_provider_assignments as cli_script
from roster.services.provider_assignments import BatchNotFoundError
from roster.services.provider_assignments.types import (
    ResolutionProgress,
    ResolutionStats,
    StageStats,
)

BATCH_ID = uuid.UUID("1b4e28ba-2fa1-11d2-883f-0016d3cca427")


class DummyResolver:
    calls = []

    def __init__(self, session_factory, settings=None):
        self._settings = settings

    def resolve(self, batch_id, facility_id, service_date, cancel_event=None, progress=None):
        DummyResolver.calls.append((batch_id, facility_id, service_date))
        if progress is not None:
            progress(
                ResolutionProgress(
                    stage="Physician",
                    processed_records=2,
                    total_records=2,
                    batch_id=batch_id,
                    current_step=1,
                    total_steps=7,
                )
            )
        return ResolutionStats(
            batch_id=batch_id,
            facility_id=facility_id,
            service_date=service_date,
            records_total=2,
            records_eligible=2,
            stages={"Physician": StageStats(matched=2)},
        )


class MissingBatchResolver(DummyResolver):
    def resolve(self, batch_id, facility_id, service_date, cancel_event=None, progress=None):
        raise BatchNotFoundError(batch_id)


def _argv(*extra):
    return [
        "resolve_provider_assignments.py",
        "--batch-id",
        str(BATCH_ID),
        "--facility-id",
        "5",
        "--date",
        "2026-03-02",
        *extra,
    ]


def test_cli_prints_stats(monkeypatch, capsys):
    DummyResolver.calls = []
    monkeypatch.setattr(cli_script, "ProviderAssignmentsResolver", DummyResolver)
    monkeypatch.setattr(cli_script, "validate_settings", lambda _settings: None)
    monkeypatch.setattr(sys, "argv", _argv())

    assert cli_script.main() == 0

    payload = json.loads(capsys.readouterr().out)
    assert DummyResolver.calls == [(BATCH_ID, 5, date(2026, 3, 2))]
    assert payload["records_total"] == 2
    assert payload["stages"]["Physician"]["matched"] == 2


def test_cli_progress_lines(monkeypatch, capsys):
    monkeypatch.setattr(cli_script, "ProviderAssignmentsResolver", DummyResolver)
    monkeypatch.setattr(cli_script, "validate_settings", lambda _settings: None)
    monkeypatch.setattr(sys, "argv", _argv("--progress"))

    assert cli_script.main() == 0

    first_line = capsys.readouterr().out.splitlines()[0]
    event = json.loads(first_line)
    assert event["event"] == "provider_assignment_resolution_progress"
    assert event["stage"] == "Physician"
    assert event["percent_complete"] == 14


def test_cli_missing_batch_exits_2(monkeypatch, capsys):
    monkeypatch.setattr(cli_script, "ProviderAssignmentsResolver", MissingBatchResolver)
    monkeypatch.setattr(cli_script, "validate_settings", lambda _settings: None)
    monkeypatch.setattr(sys, "argv", _argv())

    assert cli_script.main() == 2
    assert str(BATCH_ID) in capsys.readouterr().err


def test_parse_batch_id_invalid():
    with pytest.raises(RuntimeError, match="Invalid --batch-id value: nope"):
        cli_script._parse_batch_id("nope")


def test_parse_date_arg_invalid():
    with pytest.raises(RuntimeError, match="expected YYYY-MM-DD"):
        cli_script._parse_date_arg("03/02/2026")


def test_parse_date_arg_ok():
    assert cli_script._parse_date_arg(" 2026-03-02 ") == date(2026, 3, 2)
