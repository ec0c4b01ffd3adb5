import pytest

from roster.models.staging import (
    StagingProviderAssignment,
    deserialize_validation_errors,
    serialize_validation_errors,
)


def test_add_validation_errors_accumulates():
    row = StagingProviderAssignment()
    assert row.has_validation_errors is False

    row.add_validation_error("Missing MRN")
    row.add_validation_errors(["Invalid DOB"])

    assert row.validation_errors == ["Missing MRN", "Invalid DOB"]
    assert row.validation_errors_json == '["Missing MRN", "Invalid DOB"]'
    assert row.has_validation_errors is True


def test_empty_errors_serialize_to_null():
    assert serialize_validation_errors([]) is None
    assert serialize_validation_errors(None) is None
    assert deserialize_validation_errors(None) == []
    assert deserialize_validation_errors("  ") == []
    assert deserialize_validation_errors("[]") == []


def test_non_list_payload_rejected():
    with pytest.raises(ValueError):
        deserialize_validation_errors('{"error": "x"}')
