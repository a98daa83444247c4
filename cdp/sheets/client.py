# cdp/sheets/client.py

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote, urlencode

import requests

from cdp.config import DirectoryConfig
from cdp.errors import FetchError, ParseError

from .tables import Table, table_from_csv, table_from_gviz

log = logging.getLogger(__name__)

SHEETS_BASE_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/gviz/tq"


def sheet_url(spreadsheet_id: str, sheet_name: str, transport: str = "json") -> str:
    base = SHEETS_BASE_URL.format(spreadsheet_id=quote(spreadsheet_id, safe=""))
    if transport == "csv":
        params = {"tqx": "out:csv", "sheet": sheet_name}
    else:
        params = {"tqx": "out:json", "headers": "1", "sheet": sheet_name}
    return f"{base}?{urlencode(params, safe=':')}"


def _get(url: str, sheet_name: str, timeout_s: float) -> str:
    log.debug("GET %s", url)
    try:
        r = requests.get(url, timeout=timeout_s)
    except requests.RequestException as e:
        raise FetchError(sheet_name, None, str(e)) from e

    if not r.ok:
        raise FetchError(sheet_name, r.status_code, r.reason or "")
    return r.text


def extract_padded_json(sheet_name: str, text: str) -> Any:
    """
    Strips the callback padding around a gviz JSON body
    (`/*O_o*/ google.visualization.Query.setResponse({...});`) and parses it.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise ParseError(sheet_name, "no JSON object in response body")
    try:
        return json.loads(text[start : end + 1])
    except ValueError as e:
        raise ParseError(sheet_name, str(e)) from e


def fetch_sheet_json(cfg: DirectoryConfig, sheet_name: str) -> Any:
    url = sheet_url(cfg.spreadsheet_id, sheet_name, transport="json")
    return extract_padded_json(sheet_name, _get(url, sheet_name, cfg.http_timeout_s))


def fetch_sheet_csv(cfg: DirectoryConfig, sheet_name: str) -> str:
    url = sheet_url(cfg.spreadsheet_id, sheet_name, transport="csv")
    return _get(url, sheet_name, cfg.http_timeout_s)


def fetch_table(cfg: DirectoryConfig, sheet_name: str) -> Table:
    """Fetches one named sheet over the configured transport as a generic Table."""
    if cfg.transport == "csv":
        return table_from_csv(sheet_name, fetch_sheet_csv(cfg, sheet_name))
    return table_from_gviz(sheet_name, fetch_sheet_json(cfg, sheet_name))
