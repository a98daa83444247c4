# cdp/sheets/readers.py

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from cdp.errors import EmptyDatasetError, MissingColumnError

from .cells import normalize_cell
from .tables import Cell, Table

log = logging.getLogger(__name__)


def project_columns(
    header: list[str],
    columns: Sequence[str],
    optional: Iterable[str] = (),
    sheet: str = "",
) -> dict[str, Optional[int]]:
    """
    Maps each requested column name to its physical index in `header`.
    `header` is expected case-folded and trimmed (see Table.headers).
    Raises MissingColumnError on the first absent required column; absent
    optional columns map to None.
    """
    idx: dict[str, Optional[int]] = {}
    for name in columns:
        if name not in header:
            raise MissingColumnError(name, sheet)
        idx[name] = header.index(name)
    for name in optional:
        idx[name] = header.index(name) if name in header else None
    return idx


def _cell_at(row: list[Optional[Cell]], i: Optional[int]) -> Optional[Cell]:
    if i is None or i >= len(row):
        return None
    return row[i]


def build_rows(table: Table, index: dict[str, Optional[int]]) -> list[dict[str, str]]:
    """One dict per table row, keyed by the projected column names.

    Rows whose leading cell is blank are skipped.
    """
    types = [c.type for c in table.columns]
    out: list[dict[str, str]] = []
    skipped = 0

    for row in table.rows:
        lead = row[0] if row else None
        if not normalize_cell(lead, types[0] if types else "string"):
            skipped += 1
            continue

        d: dict[str, str] = {}
        for name, i in index.items():
            col_type = types[i] if i is not None and i < len(types) else "string"
            d[name] = normalize_cell(_cell_at(row, i), col_type)
        out.append(d)

    if skipped:
        log.debug("skipped %d blank rows", skipped)
    return out


def read_sheet_rows(
    table: Table,
    columns: Sequence[str],
    optional: Iterable[str] = (),
    sheet: str = "",
) -> list[dict[str, str]]:
    """
    Projects and normalizes a whole sheet. Fails on a missing required column
    or when no usable rows remain.
    """
    if not table.columns and not table.rows:
        raise EmptyDatasetError(sheet)

    optional = list(optional)
    index = project_columns(table.headers, columns, optional=optional, sheet=sheet)
    if table.headers and table.headers[0] in optional:
        log.warning(
            "leading column of %s is optional column %r; rows where it is blank will be skipped",
            sheet or "sheet",
            table.headers[0],
        )
    rows = build_rows(table, index)
    if not rows:
        raise EmptyDatasetError(sheet)

    log.debug("read %d rows from %s", len(rows), sheet or "sheet")
    return rows
