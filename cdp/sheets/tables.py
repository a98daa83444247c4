# cdp/sheets/tables.py

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any, Optional

from cdp.errors import ParseError


@dataclass(frozen=True)
class Cell:
    """One spreadsheet cell: raw value `v` and optional display string `f`."""

    v: Any = None
    f: Optional[str] = None


@dataclass(frozen=True)
class Column:
    label: str
    type: str = "string"


@dataclass
class Table:
    columns: list[Column] = field(default_factory=list)
    rows: list[list[Optional[Cell]]] = field(default_factory=list)

    @property
    def headers(self) -> list[str]:
        """Header labels, case-folded and trimmed, in physical order."""
        return [(c.label or "").strip().lower() for c in self.columns]


def table_from_csv(sheet: str, text: str) -> Table:
    """Tokenize a CSV body (first row is the header) into a Table of string columns.

    Quoting follows RFC 4180: `""` inside a quoted field is a literal quote and
    commas/newlines inside quotes do not split fields. Whitespace-only lines are
    dropped.
    """
    text = (text or "").lstrip("\ufeff")
    try:
        parsed = list(csv.reader(io.StringIO(text), strict=True))
    except csv.Error as e:
        raise ParseError(sheet, f"malformed CSV: {e}") from e

    lines = [r for r in parsed if any(x.strip() for x in r)]
    if not lines:
        return Table()

    columns = [Column(label=h) for h in lines[0]]
    rows = [[Cell(v=x) for x in r] for r in lines[1:]]
    return Table(columns=columns, rows=rows)


def table_from_gviz(sheet: str, envelope: Any) -> Table:
    """Convert a parsed gviz envelope `{table: {cols: [...], rows: [{c: [...]}]}}`."""
    table = envelope.get("table") if isinstance(envelope, dict) else None
    if not isinstance(table, dict) or not isinstance(table.get("rows"), list):
        raise ParseError(sheet, "Invalid JSON response format")

    cols = table.get("cols") or []
    if not isinstance(cols, list):
        raise ParseError(sheet, "Invalid JSON response format")

    columns = []
    for col in cols:
        col = col or {}
        if not isinstance(col, dict):
            raise ParseError(sheet, "Invalid JSON response format: column is not an object")
        columns.append(Column(label=str(col.get("label") or ""), type=str(col.get("type") or "string")))

    rows: list[list[Optional[Cell]]] = []
    for r in table["rows"]:
        r = r or {}
        if not isinstance(r, dict):
            raise ParseError(sheet, "Invalid JSON response format: row is not an object")
        cells = r.get("c") or []
        if not isinstance(cells, list):
            raise ParseError(sheet, "Invalid JSON response format: row cells are not a list")
        # rows without cells carry nothing to read
        if not cells:
            continue
        row: list[Optional[Cell]] = []
        for c in cells:
            if c is None:
                row.append(None)
            elif isinstance(c, dict):
                f = c.get("f")
                row.append(Cell(v=c.get("v"), f=None if f is None else str(f)))
            else:
                raise ParseError(sheet, "Invalid JSON response format: cell is not an object")
        rows.append(row)

    return Table(columns=columns, rows=rows)
