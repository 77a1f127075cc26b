from __future__ import annotations

import pytest

from src.attendance_trends.attendance_trends.core.exceptions import EmptyInputError, MissingColumnsError
from src.attendance_trends.attendance_trends.ingestion.csv_normalizer import (
    normalize_csv,
    normalize_header,
    parse_percentage,
    resolve_columns,
    sanitize_external_id,
)


def test_header_synonyms_are_case_and_punctuation_insensitive():
    cols = resolve_columns(["sentral_id", "ROLL", "Attendance %"])
    assert cols == {"external_id": "sentral_id", "roll_class": "ROLL", "pct_present": "Attendance %"}


def test_percent_sign_and_word_normalize_alike():
    assert normalize_header("% Present") == normalize_header("Pct. Present") == normalize_header("Percent present")


def test_missing_columns_lists_required_and_found():
    with pytest.raises(MissingColumnsError) as exc:
        normalize_csv(b"Student ID,Name\nS1,Alice\n")

    assert exc.value.found == ["Student ID", "Name"]
    assert len(exc.value.required) == 3


def test_header_only_csv_is_empty_input():
    with pytest.raises(EmptyInputError):
        normalize_csv(b"Student ID,Roll Class,% Present\n\n\n")


def test_zero_byte_file_is_empty_input():
    with pytest.raises(EmptyInputError):
        normalize_csv(b"")


def test_rows_without_id_roll_class_or_number_are_dropped():
    raw = (
        b"Student ID,Roll Class,% Present\n"
        b"S1,10A,92%\n"
        b",10A,70\n"
        b"S3,,70\n"
        b"S4,10B,n/a\n"
        b"S5,10B,nan\n"
        b"S6,10B,\n"
    )
    result = normalize_csv(raw)

    assert [r.external_id for r in result.rows] == ["S1"]
    assert result.input_row_count == 6
    assert result.dropped_count == 5


def test_values_are_trimmed_and_clamped():
    raw = b"Student ID,Roll Class,% Present\n  S1 , 10A ,120\nS2,10A,-3\nS3,10A, 88.5 % \n"
    rows = normalize_csv(raw).rows

    assert [(r.external_id, r.roll_class) for r in rows][0] == ("S1", "10A")
    assert [r.pct_present for r in rows] == [100.0, 0.0, 88.5]


def test_bom_and_blank_lines_are_tolerated():
    raw = b"\xef\xbb\xbfStudent ID,Roll Class,% Present\r\n\r\nS1,10A,90\r\n\r\nS2,10A,80\r\n"
    rows = normalize_csv(raw).rows
    assert [r.external_id for r in rows] == ["S1", "S2"]


@pytest.mark.parametrize(
    "raw,expected",
    [("92", 92.0), ("92%", 92.0), (" 92 % ", 92.0), ("101", 100.0), ("-0.5", 0.0), ("abc", None), ("inf", None), ("", None)],
)
def test_parse_percentage(raw, expected):
    assert parse_percentage(raw) == expected


def test_storage_key_replaces_path_separators():
    assert sanitize_external_id("2024/ABC\\7") == "2024_ABC_7"


def test_quoted_fields_may_span_lines():
    raw = b'Student ID,Roll Class,% Present\n"S1","Year 10\nGroup A",90\nS2,10A,"80 %"\n'
    rows = normalize_csv(raw).rows

    assert [(r.external_id, r.roll_class, r.pct_present) for r in rows] == [
        ("S1", "Year 10\nGroup A", 90.0),
        ("S2", "10A", 80.0),
    ]


def test_empty_records_are_not_counted_as_input():
    raw = b"\n\nStudent ID,Roll Class,% Present\nS1,10A,90\n,,\n  ,  ,  \nS2,10A,x\n"
    result = normalize_csv(raw)

    assert [r.external_id for r in result.rows] == ["S1"]
    assert result.input_row_count == 2


def test_unicode_line_separator_inside_a_value_does_not_split_the_row():
    raw = "Student ID,Roll Class,% Present\nS1,10\u2028A,90\nS2,10B,80\n".encode("utf-8")
    rows = normalize_csv(raw).rows

    assert [(r.external_id, r.roll_class) for r in rows] == [("S1", "10\u2028A"), ("S2", "10B")]
