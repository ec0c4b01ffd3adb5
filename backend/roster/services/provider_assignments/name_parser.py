"""Name and location parsing for roster rows.

Roster spreadsheets carry free text: patient names as "Last, First" or
"First Last", provider columns with titles ("Dr. Smith", "Jones, NP") and
locations such as "101A". These helpers turn that text into the normalized
fields the resolvers compare against. Every function accepts blank input and
returns an empty result instead of raising.
"""

from __future__ import annotations

import re

__all__ = [
    "extract_provider_last_name",
    "normalize_case",
    "normalize_staging_row",
    "parse_location",
    "split_patient_name",
]

_PROVIDER_PREFIX_RE = re.compile(r"^(?:Dr\.?|NP\.?|Doctor)\s+(.+)$", re.IGNORECASE)
# The credential must be its own word so "Mendo" is not read as "Men" + "DO".
_PROVIDER_SUFFIX_RE = re.compile(
    r"^(.+?)(?:,\s*|\s+)(?:MD|DO|NP|PA|APRN|CNP|FNP|DNP)\.?\s*$", re.IGNORECASE
)
_LOCATION_RE = re.compile(r"^(\d+)([A-Za-z]+)$")

# "Mack", "Mace", "Macy" are ordinary names, not a Mac prefix.
_MAC_EXCEPTIONS = ("mack", "mace", "macy")

_RAW_TEXT_FIELDS = (
    "name",
    "attending_md",
    "nurse_practitioner",
    "hospital_number",
    "mrn",
    "location",
    "insurance",
    "is_cleared",
    "h_p",
    "psych_eval",
)


def split_patient_name(full_name: str | None) -> tuple[str, str]:
    """Return (last, first) from "Last, First" or "First Last"."""
    if not full_name or not full_name.strip():
        return "", ""

    parts = full_name.split(",", 1)
    if len(parts) == 2:
        return parts[0].strip(), parts[1].strip()

    names = full_name.strip().split(" ", 1)
    if len(names) == 2:
        return names[1].strip(), names[0].strip()

    return full_name.strip(), ""


def normalize_case(name: str | None) -> str:
    if not name or not name.strip():
        return ""
    return " ".join(_normalize_name_part(part) for part in name.split())


def _normalize_name_part(part: str) -> str:
    if not part:
        return part

    if "-" in part:
        return "-".join(_normalize_name_part(piece) for piece in part.split("-"))

    apostrophe = part.find("'")
    if 0 < apostrophe < len(part) - 1:
        before = part[:apostrophe]
        after = part[apostrophe + 1 :]
        return f"{_title(before)}'{_title(after)}"

    lowered = part.lower()
    if len(part) > 2 and lowered.startswith("mc"):
        return "Mc" + part[2].upper() + part[3:].lower()

    if len(part) > 4 and lowered.startswith("mac") and not lowered.startswith(_MAC_EXCEPTIONS):
        return "Mac" + part[3].upper() + part[4:].lower()

    return _title(part)


def _title(value: str) -> str:
    if not value:
        return value
    return value[0].upper() + value[1:].lower()


def extract_provider_last_name(provider_field: str | None) -> str | None:
    """Pull a provider's last name out of a roster provider column.

    Handles prefixes ("Dr Smith", "Dr. Smith", "NP Jones", "Doctor Smith"),
    credential suffixes ("Smith, MD", "John Smith DO", "Lee APRN") and
    "Last, First" order; otherwise the last word wins.
    """
    if not provider_field or not provider_field.strip():
        return None

    name = provider_field.strip()

    prefix = _PROVIDER_PREFIX_RE.match(name)
    if prefix:
        name = prefix.group(1).strip()

    suffix = _PROVIDER_SUFFIX_RE.match(name)
    if suffix:
        name = suffix.group(1).strip()

    if "," in name:
        name = name.split(",", 1)[0]

    words = name.split()
    if not words:
        return None
    return normalize_case(words[-1]) or None


def parse_location(location: str | None) -> tuple[str | None, str | None]:
    """Split "101A" into ("101", "A"); anything else gives (None, None)."""
    if not location or not location.strip():
        return None, None
    match = _LOCATION_RE.match(location.strip())
    if not match:
        return None, None
    return match.group(1), match.group(2)


def normalize_staging_row(row) -> None:
    """Trim raw text columns and fill the derived name and location fields."""
    for field in _RAW_TEXT_FIELDS:
        value = getattr(row, field, None)
        setattr(row, field, value.strip() if value else "")

    room, bed = parse_location(row.location)
    last_name, first_name = split_patient_name(row.name)

    row.room = room
    row.bed = bed
    row.normalized_patient_last_name = normalize_case(last_name)
    row.normalized_patient_first_name = normalize_case(first_name)
    row.normalized_physician_last_name = extract_provider_last_name(row.attending_md)
    row.normalized_nurse_practitioner_last_name = extract_provider_last_name(
        row.nurse_practitioner
    )
