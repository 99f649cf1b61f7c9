"""
Map raw CSV rows onto typed records.

Numeric policy: values are parsed with ``decimal.Decimal`` so the result
does not depend on locale. Empty, non-numeric, NaN and infinite values are
rejected with FieldParseError instead of being stored, as are digit
groupings (``"1_000"``) and floats that overflow to infinity. Integer
columns accept integral decimals such as ``"5.0"`` within the signed
32-bit range of the INTEGER columns.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Union

from .errors import FieldParseError, MalformedRowError
from .models import DatasetKind, ProductionRecord, StatusRecord
from .rules import DAILY_COLUMNS, INT_MAX, INT_MIN, MONTHLY_COLUMNS

Record = Union[ProductionRecord, StatusRecord]

COLUMNS: Dict[DatasetKind, Dict[str, int]] = {
    DatasetKind.DAILY: DAILY_COLUMNS,
    DatasetKind.MONTHLY: MONTHLY_COLUMNS,
}


def parse_number(field: str, raw: str) -> Decimal:
    text = raw.strip()
    # Decimal would accept digit grouping like "1_000"
    if "_" in text:
        raise FieldParseError(field, raw)
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise FieldParseError(field, raw) from None
    if not value.is_finite():
        raise FieldParseError(field, raw)
    return value


def parse_int(field: str, raw: str) -> int:
    value = parse_number(field, raw)
    if not INT_MIN <= value <= INT_MAX:
        raise FieldParseError(field, raw)
    if value != value.to_integral_value():
        raise FieldParseError(field, raw)
    return int(value)


def parse_float(field: str, raw: str) -> float:
    result = float(parse_number(field, raw))
    if not math.isfinite(result):
        raise FieldParseError(field, raw)
    return result


def parse_key(field: str, raw: str) -> str:
    value = raw.strip()
    if not value:
        raise FieldParseError(field, raw)
    return value


def required_width(kind: DatasetKind) -> int:
    return max(COLUMNS[kind].values()) + 1


def map_row(kind: DatasetKind, row: List[str], file_used: str) -> Record:
    """Build the typed record for ``kind`` from ``row``."""
    width = required_width(kind)
    if len(row) < width:
        raise MalformedRowError(kind.value, width, len(row))

    cols = COLUMNS[kind]

    def field(name: str) -> str:
        return row[cols[name]]

    if kind is DatasetKind.DAILY:
        return ProductionRecord(
            file_used=file_used,
            partnumber=field("partnumber").strip(),
            shot_current_part=parse_int("shot_current_part", field("shot_current_part")),
            shot_ok=parse_int("shot_ok", field("shot_ok")),
            shot_ng=parse_int("shot_ng", field("shot_ng")),
            shot_total=parse_int("shot_total", field("shot_total")),
            ct=parse_float("ct", field("ct")),
            timestamp=parse_key("timestamp", field("timestamp")),
        )

    return StatusRecord(
        timestamp=parse_key("timestamp", field("timestamp")),
        status=parse_int("status", field("status")),
        partnumber=field("partnumber").strip(),
        file_used=file_used,
    )
