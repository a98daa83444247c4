# cdp/dataset.py

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Optional

from cdp.config import DirectoryConfig
from cdp.errors import CampaignNotFoundError
from cdp.identifiers import assign_identifiers
from cdp.models import Campaign, Record
from cdp.sheets.readers import read_sheet_rows
from cdp.sheets.schema import CAMPAIGN_COLUMNS_V1, DATA_COLUMNS_OPTIONAL_V1, DATA_COLUMNS_V1
from cdp.sheets.source import DataSource

log = logging.getLogger(__name__)

_DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%d.%m.%Y",
)


@dataclass
class Directory:
    """Everything one load produces; threaded through filtering and rendering."""

    config: DirectoryConfig
    campaign: Campaign
    campaigns: list[Campaign] = field(default_factory=list)
    records: list[Record] = field(default_factory=list)
    markets: list[str] = field(default_factory=list)


def parse_observed_on(value: str) -> Optional[date]:
    text = (value or "").strip()
    if not text:
        return None

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    try:
        if "T" in text and text.endswith("Z"):
            return datetime.fromisoformat(text[:-1] + "+00:00").date()
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def is_enabled(record: Record) -> bool:
    return (record.enabled or "").strip().lower() == "true"


def filter_enabled(records: list[Record]) -> list[Record]:
    out = [replace(r, enabled="true") for r in records if is_enabled(r)]
    dropped = len(records) - len(out)
    if dropped:
        log.debug("dropped %d disabled records", dropped)
    return out


def compute_markets(records: list[Record], campaign_name: str) -> list[str]:
    return sorted({r.market for r in records if r.market and r.campaign == campaign_name})


def sort_key(record: Record) -> tuple:
    """Dated records first, newest first; then company_name; then the rest for totality."""
    observed = parse_observed_on(record.observed_on)
    if observed is None:
        head: tuple = (1, 0)
    else:
        head = (0, -observed.toordinal())
    return head + (record.company_name, record.identifier) + tuple(record.as_dict().values())


def sort_records(records: list[Record]) -> list[Record]:
    return sorted(records, key=sort_key)


def sort_campaigns(campaigns: list[Campaign]) -> list[Campaign]:
    return sorted(campaigns, key=lambda c: c.name)


def find_campaign(campaigns: list[Campaign], name: str) -> Campaign:
    matches = [c for c in campaigns if c.name == name]
    if not matches:
        raise CampaignNotFoundError(name)
    if len(matches) > 1:
        log.warning("campaign %r appears %d times in campaigns sheet; using the first", name, len(matches))
    return matches[0]


def read_campaigns(source: DataSource, sheet_name: str) -> list[Campaign]:
    rows = read_sheet_rows(source.fetch_table(sheet_name), CAMPAIGN_COLUMNS_V1, sheet=sheet_name)
    return [Campaign.from_row(r) for r in rows]


def read_records(source: DataSource, sheet_name: str) -> list[Record]:
    rows = read_sheet_rows(
        source.fetch_table(sheet_name),
        DATA_COLUMNS_V1,
        optional=DATA_COLUMNS_OPTIONAL_V1,
        sheet=sheet_name,
    )
    return [Record.from_row(r) for r in rows]


def process_records(records: list[Record], campaign_name: str) -> tuple[list[Record], list[str]]:
    """enabled filter -> identifiers -> markets -> sort. Returns (records, markets)."""
    kept = assign_identifiers(filter_enabled(records))
    return sort_records(kept), compute_markets(kept, campaign_name)


def load_directory(cfg: DirectoryConfig, source: DataSource) -> Directory:
    """Loads campaigns and data concurrently and builds the Directory.

    Both sheets must load; the first failure (campaigns before data) is raised
    and nothing partial is returned.
    """
    with ThreadPoolExecutor(max_workers=2) as ex:
        campaigns_fut = ex.submit(read_campaigns, source, cfg.campaigns_sheet_name)
        records_fut = ex.submit(read_records, source, cfg.data_sheet_name)
        try:
            campaigns = campaigns_fut.result()
            raw_records = records_fut.result()
        except Exception:
            records_fut.cancel()
            raise

    campaigns = sort_campaigns(campaigns)
    campaign = find_campaign(campaigns, cfg.campaign_name)
    records, markets = process_records(raw_records, campaign.name)

    log.info(
        "loaded campaign=%r records=%d markets=%d",
        campaign.name,
        len(records),
        len(markets),
    )
    return Directory(config=cfg, campaign=campaign, campaigns=campaigns, records=records, markets=markets)
