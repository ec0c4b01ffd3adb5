import types

import pytest

from roster.services.provider_assignments.name_parser import (
    extract_provider_last_name,
    normalize_case,
    normalize_staging_row,
    parse_location,
    split_patient_name,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Doe, Jane", ("Doe", "Jane")),
        ("  Doe ,  Jane Q ", ("Doe", "Jane Q")),
        ("Jane Doe", ("Doe", "Jane")),
        ("Jane Mary Doe", ("Mary Doe", "Jane")),
        ("Doe", ("Doe", "")),
        ("", ("", "")),
        (None, ("", "")),
        ("   ", ("", "")),
    ],
)
def test_split_patient_name(raw, expected):
    assert split_patient_name(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("SMITH", "Smith"),
        ("mcdonald", "McDonald"),
        ("MACDONALD", "MacDonald"),
        ("mackenzie", "Mackenzie"),
        ("macy", "Macy"),
        ("mac", "Mac"),
        ("o'brien", "O'Brien"),
        ("smith-jones", "Smith-Jones"),
        ("mary ann", "Mary Ann"),
        ("", ""),
        (None, ""),
    ],
)
def test_normalize_case(raw, expected):
    assert normalize_case(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Dr. Smith", "Smith"),
        ("Dr Smith", "Smith"),
        ("Dr. John Smith", "Smith"),
        ("doctor smith", "Smith"),
        ("NP Jones", "Jones"),
        ("Smith, MD", "Smith"),
        ("John Smith DO", "Smith"),
        ("Lee APRN", "Lee"),
        ("Dr. Alan McCoy, M.D.", "McCoy"),
        ("Smith, John", "Smith"),
        ("Mendo", "Mendo"),
        ("Dr. Mendo", "Mendo"),
        ("", None),
        ("   ", None),
        (None, None),
    ],
)
def test_extract_provider_last_name(raw, expected):
    assert extract_provider_last_name(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("101A", ("101", "A")),
        (" 12bb ", ("12", "bb")),
        ("A101", (None, None)),
        ("101", (None, None)),
        ("101 A", (None, None)),
        ("", (None, None)),
        (None, (None, None)),
    ],
)
def test_parse_location(raw, expected):
    assert parse_location(raw) == expected


def test_normalize_staging_row_fills_derived_fields():
    row = types.SimpleNamespace(
        name="  DOE, JANE ",
        attending_md="Dr. SMITH",
        nurse_practitioner="Jones, NP",
        hospital_number=" 1234 ",
        mrn=" M-1 ",
        location="204B",
        insurance=None,
        is_cleared="",
        h_p="",
        psych_eval=None,
    )

    normalize_staging_row(row)

    assert row.name == "DOE, JANE"
    assert row.mrn == "M-1"
    assert row.hospital_number == "1234"
    assert row.insurance == ""
    assert row.psych_eval == ""
    assert (row.room, row.bed) == ("204", "B")
    assert row.normalized_patient_last_name == "Doe"
    assert row.normalized_patient_first_name == "Jane"
    assert row.normalized_physician_last_name == "Smith"
    assert row.normalized_nurse_practitioner_last_name == "Jones"


def test_normalize_staging_row_blank_provider_columns():
    row = types.SimpleNamespace(
        name="",
        attending_md="",
        nurse_practitioner="   ",
        hospital_number="",
        mrn="",
        location="hall",
        insurance="",
        is_cleared="",
        h_p="",
        psych_eval="",
    )

    normalize_staging_row(row)

    assert row.room is None
    assert row.bed is None
    assert row.normalized_patient_last_name == ""
    assert row.normalized_physician_last_name is None
    assert row.normalized_nurse_practitioner_last_name is None
