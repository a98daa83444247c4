# cdp/sheets/cells.py

from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from .schema import DATE_COLUMN_TYPE
from .tables import Cell

log = logging.getLogger(__name__)

# Sheets day serials count from 1899-12-30, which is 25569 days before 1970-01-01.
SERIAL_EPOCH_OFFSET_DAYS = 25569
SECONDS_PER_DAY = 86400

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_DATE_CTOR_RE = re.compile(r"Date\((\d+),(\d+),(\d+)")


def stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def date_from_constructor(text: str) -> Optional[str]:
    """`Date(2024,0,15)` -> `2024-01-15`. Month is zero-based; overflow rolls over."""
    m = _DATE_CTOR_RE.match(text.strip())
    if not m:
        return None
    year, month, day = (int(x) for x in m.groups())
    try:
        first = date(year + month // 12, month % 12 + 1, 1)
        return (first + timedelta(days=day - 1)).isoformat()
    except (ValueError, OverflowError):
        log.debug("date constructor out of range: %s", text)
        return ""


def date_from_serial(serial: float) -> str:
    """Day serial (days since 1899-12-30) -> UTC calendar date as `YYYY-MM-DD`."""
    try:
        dt = _UNIX_EPOCH + timedelta(seconds=(serial - SERIAL_EPOCH_OFFSET_DAYS) * SECONDS_PER_DAY)
    except (OverflowError, ValueError):
        log.debug("date serial out of range: %s", serial)
        return ""
    return dt.date().isoformat()


def decode_date_cell(cell: Cell) -> str:
    if cell.f:
        return cell.f

    v = cell.v
    if isinstance(v, str) and v.startswith("Date("):
        decoded = date_from_constructor(v)
        return stringify(v) if decoded is None else decoded
    if _is_number(v):
        return date_from_serial(v)
    return stringify(v)


def clean_value(value: Any) -> str:
    if not value:
        return ""

    cleaned = str(value).strip()
    cleaned = cleaned.replace("\\n", "\n").replace("\r\n", "\n").replace("\r", "\n")
    return cleaned


def normalize_cell(cell: Optional[Cell], column_type: str = "string") -> str:
    """Canonical text for one cell.

    Date-typed columns prefer the formatted display value, then decode
    `Date(Y,M,D)` constructor text, then numeric day serials. Everything else
    is stringified. Absent cells and null values become "".
    """
    if cell is None or cell.v is None:
        return ""

    if column_type == DATE_COLUMN_TYPE:
        value = decode_date_cell(cell)
    else:
        value = stringify(cell.v)
    return clean_value(value)
