import pytest
from pydantic import ValidationError

from prod_csv_api.errors import FieldParseError, MalformedRowError
from prod_csv_api.mapping import map_row, parse_int, parse_number, required_width
from prod_csv_api.models import DatasetKind, ProductionRecord, StatusRecord

from .conftest import TIMESTAMP, daily_row, status_row


def test_daily_row_maps_fixed_columns():
    record = map_row(DatasetKind.DAILY, daily_row(), "Trd20260113.csv")

    assert isinstance(record, ProductionRecord)
    assert record.model_dump() == {
        "file_used": "Trd20260113.csv",
        "partnumber": "PN-100",
        "shot_current_part": 5,
        "shot_ok": 120,
        "shot_ng": 3,
        "shot_total": 123,
        "ct": 1.5,
        "timestamp": TIMESTAMP,
    }


def test_monthly_row_maps_fixed_columns():
    record = map_row(DatasetKind.MONTHLY, status_row(status="2"), "Sts202601.csv")

    assert isinstance(record, StatusRecord)
    assert record.timestamp == TIMESTAMP
    assert record.status == 2
    assert record.partnumber == "PN-100"
    assert record.file_used == "Sts202601.csv"


def test_required_width_covers_highest_index():
    assert required_width(DatasetKind.DAILY) == 39
    assert required_width(DatasetKind.MONTHLY) == 4


def test_exact_width_row_is_accepted():
    record = map_row(DatasetKind.DAILY, daily_row(width=39), "Trd20260113.csv")
    assert record.timestamp == TIMESTAMP


@pytest.mark.parametrize(
    "kind, row",
    [
        (DatasetKind.DAILY, daily_row()[:38]),
        (DatasetKind.MONTHLY, ["M01", TIMESTAMP, "1"]),
    ],
)
def test_short_row_is_malformed(kind, row):
    with pytest.raises(MalformedRowError) as exc_info:
        map_row(kind, row, "x.csv")
    assert exc_info.value.actual == len(row)


@pytest.mark.parametrize("raw", ["", "  ", "abc", "NaN", "inf", "1,5"])
def test_bad_numbers_are_rejected(raw):
    with pytest.raises(FieldParseError) as exc_info:
        map_row(DatasetKind.DAILY, daily_row(ct=raw), "Trd20260113.csv")
    assert exc_info.value.field == "ct"
    assert exc_info.value.raw_value == raw


def test_fractional_value_in_integer_column_is_rejected():
    with pytest.raises(FieldParseError) as exc_info:
        map_row(DatasetKind.DAILY, daily_row(shot_ok="12.5"), "Trd20260113.csv")
    assert exc_info.value.field == "shot_ok"


@pytest.mark.parametrize("raw, expected", [("7", 7), (" 7 ", 7), ("7.0", 7), ("-3", -3), ("1e2", 100)])
def test_integral_values_are_accepted(raw, expected):
    assert parse_int("status", raw) == expected


def test_blank_timestamp_is_rejected():
    with pytest.raises(FieldParseError) as exc_info:
        map_row(DatasetKind.MONTHLY, status_row(timestamp="  "), "Sts202601.csv")
    assert exc_info.value.field == "timestamp"


def test_text_fields_are_trimmed():
    record = map_row(DatasetKind.DAILY, daily_row(partnumber=" PN-7 ", timestamp=" t1 "), "f.csv")
    assert record.partnumber == "PN-7"
    assert record.timestamp == "t1"


def test_inconsistent_counts_pass_through():
    record = map_row(
        DatasetKind.DAILY,
        daily_row(shot_ok="100", shot_ng="50", shot_total="10"),
        "Trd20260113.csv",
    )
    assert (record.shot_ok, record.shot_ng, record.shot_total) == (100, 50, 10)


def test_records_are_immutable():
    record = map_row(DatasetKind.MONTHLY, status_row(), "Sts202601.csv")
    with pytest.raises(ValidationError):
        record.status = 9


def test_float_overflow_is_rejected():
    with pytest.raises(FieldParseError) as exc_info:
        map_row(DatasetKind.DAILY, daily_row(ct="1e400"), "Trd20260113.csv")
    assert exc_info.value.field == "ct"
    assert exc_info.value.raw_value == "1e400"


@pytest.mark.parametrize("raw", ["2147483648", "-2147483649", "1e10", "1e5000000"])
def test_integers_outside_column_range_are_rejected(raw):
    with pytest.raises(FieldParseError) as exc_info:
        parse_int("shot_ok", raw)
    assert exc_info.value.field == "shot_ok"


def test_integer_column_bounds_are_accepted():
    assert parse_int("shot_ok", "2147483647") == 2147483647
    assert parse_int("shot_ok", "-2147483648") == -2147483648


@pytest.mark.parametrize("raw", ["1_000", "1_0.5"])
def test_digit_grouping_is_rejected(raw):
    with pytest.raises(FieldParseError):
        parse_number("ct", raw)
