"""Attendance CSV normalization.

Exports from different student-management systems name the same columns in
different ways. Headers are reduced to lowercase alphanumerics and matched
against a fixed synonym table, so "Student ID", "student_id" and "STUDENTID"
all resolve to the identifier column.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from dataclasses import dataclass
from typing import Optional, Sequence

from ..core.constants import PCT_MAX, PCT_MIN
from ..core.exceptions import EmptyInputError, MissingColumnsError, ValidationError

logger = logging.getLogger(__name__)

EXTERNAL_ID = "external_id"
ROLL_CLASS = "roll_class"
PCT_PRESENT = "pct_present"

COLUMN_SYNONYMS: dict[str, tuple[str, ...]] = {
    EXTERNAL_ID: (
        "Student ID",
        "StudentID",
        "Student Number",
        "Student No",
        "External ID",
        "External id",
        "Sentral ID",
        "SRN",
        "ID",
    ),
    ROLL_CLASS: (
        "Roll Class",
        "Rollclass",
        "Roll",
        "Roll Group",
        "Roll Call",
        "Home Group",
        "Homeroom",
        "Form",
        "Class",
    ),
    PCT_PRESENT: (
        "% Present",
        "Pct Present",
        "Percent Present",
        "Percentage Present",
        "Percentage",
        "Attendance %",
        "Attendance Percentage",
        "Attendance",
        "Whole Day %",
    ),
}

_STORAGE_KEY_UNSAFE = re.compile(r"[/\\]")


def normalize_header(value: str) -> str:
    """Lowercase and drop everything that is not a letter or digit.

    `%` is kept as the word "pct" so "% Present" and "Pct Present" agree.
    """
    value = (value or "").replace("\ufeff", "").replace("%", " pct ").lower()
    value = value.replace("percentage", "pct").replace("percent", "pct")
    return re.sub(r"[^a-z0-9]", "", value)


def _synonym_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}
    for column, synonyms in COLUMN_SYNONYMS.items():
        for synonym in synonyms:
            lookup.setdefault(normalize_header(synonym), column)
    return lookup


_LOOKUP = _synonym_lookup()


def resolve_columns(headers: Sequence[str]) -> dict[str, str]:
    """Map each logical column to the first raw header that denotes it.

    Raises MissingColumnsError when any logical column is unmatched.
    """
    resolved: dict[str, str] = {}
    for raw in headers:
        column = _LOOKUP.get(normalize_header(raw))
        if column and column not in resolved:
            resolved[column] = raw

    missing = [c for c in COLUMN_SYNONYMS if c not in resolved]
    if missing:
        raise MissingColumnsError(
            required=[COLUMN_SYNONYMS[c][0] for c in COLUMN_SYNONYMS],
            found=[h for h in headers if h is not None],
        )
    return resolved


def sanitize_external_id(external_id: str) -> str:
    """Storage-safe key for a student id (path separators are replaced)."""
    return _STORAGE_KEY_UNSAFE.sub("_", external_id.strip())


def parse_percentage(value) -> Optional[float]:
    """Parse "92", "92.5 %" or " 60% " into a float clamped to [0, 100].

    Returns None when the value is not a finite number.
    """
    text = str(value if value is not None else "").strip()
    while text.endswith("%"):
        text = text[:-1].strip()
    if not text:
        return None
    try:
        pct = float(text)
    except ValueError:
        return None
    if not math.isfinite(pct):
        return None
    return max(PCT_MIN, min(PCT_MAX, pct))


@dataclass(frozen=True)
class AttendanceRow:
    external_id: str
    roll_class: str
    pct_present: float

    @property
    def key(self) -> str:
        return sanitize_external_id(self.external_id)


@dataclass(frozen=True)
class NormalizedCsv:
    rows: list[AttendanceRow]
    input_row_count: int
    columns: dict[str, str]

    @property
    def dropped_count(self) -> int:
        return self.input_row_count - len(self.rows)


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Spreadsheet exports on Windows are often cp1252.
        return raw.decode("cp1252", errors="replace")


def _is_blank(record: dict) -> bool:
    values = [v for k, v in record.items() if k is not None]
    values.extend(record.get(None) or [])
    return not any((v or "").strip() for v in values)


def normalize_csv(raw: bytes) -> NormalizedCsv:
    if raw is None:
        raise ValidationError("No CSV file provided")

    # Leading blank lines would otherwise be taken as an empty header row.
    reader = csv.DictReader(io.StringIO(_decode(raw).lstrip(), newline=""))
    headers = [h.strip() if h else h for h in (reader.fieldnames or [])]
    if not headers:
        raise EmptyInputError("CSV has no header row")
    reader.fieldnames = headers

    columns = resolve_columns(headers)

    rows: list[AttendanceRow] = []
    input_count = 0
    for record in reader:
        if _is_blank(record):
            continue
        input_count += 1
        external_id = (record.get(columns[EXTERNAL_ID]) or "").strip()
        roll_class = (record.get(columns[ROLL_CLASS]) or "").strip()
        pct = parse_percentage(record.get(columns[PCT_PRESENT]))
        if not external_id or not roll_class or pct is None:
            continue
        rows.append(AttendanceRow(external_id=external_id, roll_class=roll_class, pct_present=pct))

    if input_count == 0:
        raise EmptyInputError("CSV has no data rows")

    if len(rows) < input_count:
        logger.info("Dropped %d of %d CSV rows with missing id, roll class or percentage", input_count - len(rows), input_count)
    return NormalizedCsv(rows=rows, input_row_count=input_count, columns=columns)
