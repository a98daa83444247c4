# cdp/config.py

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path

from dotenv import load_dotenv

from cdp.errors import ConfigError
from cdp.sheets.schema import CAMPAIGNS_SHEET_NAME_DEFAULT, DATA_SHEET_NAME_DEFAULT

TRANSPORTS = ("json", "csv")
DATA_SOURCES = ("remote", "fixture")


def _repo_root() -> Path:
    # .../cdp/config.py -> repo root
    return Path(__file__).resolve().parents[1]


DEFAULT_FIXTURE_PATH = _repo_root() / "config" / "demo.yml"
DEFAULT_CONTACTS_PATH = Path.home() / ".cdp" / "contacted.json"


@dataclass(frozen=True)
class DirectoryConfig:
    campaign_name: str
    spreadsheet_id: str = ""
    data_sheet_name: str = DATA_SHEET_NAME_DEFAULT
    campaigns_sheet_name: str = CAMPAIGNS_SHEET_NAME_DEFAULT
    transport: str = "json"
    data_source: str = "remote"
    fixture_path: str = str(DEFAULT_FIXTURE_PATH)
    contacts_path: str = str(DEFAULT_CONTACTS_PATH)
    http_timeout_s: float = 30.0


def load_directory_config(**overrides) -> DirectoryConfig:
    """Build the config from the environment (and `.env`, if present).

    Keyword overrides are applied before validation, so callers can e.g. force
    `data_source="fixture"` without a spreadsheet id.
    """
    load_dotenv()

    timeout_raw = os.getenv("DIRECTORY_HTTP_TIMEOUT", "30").strip() or "30"
    try:
        timeout_s = float(timeout_raw)
    except ValueError as e:
        raise ConfigError(f"Invalid DIRECTORY_HTTP_TIMEOUT: {timeout_raw!r}") from e

    cfg = DirectoryConfig(
        campaign_name=os.getenv("DIRECTORY_CAMPAIGN_NAME", "").strip(),
        spreadsheet_id=os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID", "").strip(),
        data_sheet_name=os.getenv("GOOGLE_SHEETS_DATA_SHEET_NAME", DATA_SHEET_NAME_DEFAULT).strip(),
        campaigns_sheet_name=os.getenv("GOOGLE_SHEETS_CAMPAIGNS_SHEET_NAME", CAMPAIGNS_SHEET_NAME_DEFAULT).strip(),
        transport=os.getenv("GOOGLE_SHEETS_TRANSPORT", "json").strip().lower(),
        data_source=os.getenv("DIRECTORY_DATA_SOURCE", "remote").strip().lower(),
        fixture_path=os.getenv("DIRECTORY_FIXTURE_PATH", "").strip() or str(DEFAULT_FIXTURE_PATH),
        contacts_path=os.getenv("DIRECTORY_CONTACTS_PATH", "").strip() or str(DEFAULT_CONTACTS_PATH),
        http_timeout_s=timeout_s,
    )
    if overrides:
        cfg = replace(cfg, **overrides)

    validate_config(cfg)
    return cfg


def validate_config(cfg: DirectoryConfig) -> None:
    if not cfg.campaign_name:
        raise ConfigError("Missing env var: DIRECTORY_CAMPAIGN_NAME")
    if cfg.transport not in TRANSPORTS:
        raise ConfigError(f"GOOGLE_SHEETS_TRANSPORT must be one of {TRANSPORTS}, got {cfg.transport!r}")
    if cfg.data_source not in DATA_SOURCES:
        raise ConfigError(f"DIRECTORY_DATA_SOURCE must be one of {DATA_SOURCES}, got {cfg.data_source!r}")
    if cfg.data_source == "remote" and not cfg.spreadsheet_id:
        raise ConfigError("Missing env var: GOOGLE_SHEETS_SPREADSHEET_ID")
    if cfg.http_timeout_s <= 0:
        raise ConfigError("DIRECTORY_HTTP_TIMEOUT must be positive")
