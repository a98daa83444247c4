# cdp/sheets/source.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Protocol

from cdp.config import DirectoryConfig
from cdp.errors import ConfigError, FetchError, ParseError

from .client import fetch_table
from .tables import Cell, Column, Table

log = logging.getLogger(__name__)


class DataSource(Protocol):
    def fetch_table(self, sheet_name: str) -> Table:
        ...


class RemoteSheetSource:
    """Reads sheets from the configured Google spreadsheet over HTTP."""

    def __init__(self, cfg: DirectoryConfig):
        self.cfg = cfg

    def fetch_table(self, sheet_name: str) -> Table:
        return fetch_table(self.cfg, sheet_name)


def _load_fixture_yml(path: Path) -> Dict:
    try:
        import yaml  # type: ignore
    except Exception as e:
        raise ConfigError("Missing dependency: PyYAML. Install with: pip install pyyaml") from e

    if not path.exists():
        raise ConfigError(f"fixture not found at: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ParseError(str(path), str(e)) from e
    except OSError as e:
        raise ConfigError(f"fixture not readable at: {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("sheets"), dict):
        raise ParseError(str(path), "fixture must contain top-level key: sheets: { name: [ ... ] }")
    return data


def rows_to_table(rows: List[Dict[str, Any]]) -> Table:
    """List of dicts -> Table of string columns; header is the union of keys in first-seen order."""
    header: List[str] = []
    for r in rows:
        for k in r:
            if k not in header:
                header.append(k)

    columns = [Column(label=str(h)) for h in header]
    table_rows = [[Cell(v=r.get(h)) for h in header] for r in rows]
    return Table(columns=columns, rows=table_rows)


class FixtureSource:
    """Serves sheets from a YAML fixture file (the demo dataset)."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._sheets: Dict[str, List[Dict[str, Any]]] | None = None

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if self._sheets is None:
            data = _load_fixture_yml(self.path)
            self._sheets = {str(k): list(v or []) for k, v in data["sheets"].items()}
            log.debug("loaded fixture %s sheets=%s", self.path, sorted(self._sheets))
        return self._sheets

    def fetch_table(self, sheet_name: str) -> Table:
        sheets = self._load()
        if sheet_name not in sheets:
            raise FetchError(sheet_name, 404, f"sheet not in fixture {self.path.name}")
        return rows_to_table([r for r in sheets[sheet_name] if isinstance(r, dict)])


def source_from_config(cfg: DirectoryConfig) -> DataSource:
    if cfg.data_source == "fixture":
        return FixtureSource(cfg.fixture_path)
    return RemoteSheetSource(cfg)
