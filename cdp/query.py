# cdp/query.py

from __future__ import annotations

import re
from typing import Optional, Protocol

from cdp.dataset import Directory
from cdp.models import Record

CONTACT_FILTERS = ("any", "contacted", "not-contacted")

_PLACEHOLDER_RE = re.compile(r"\{(.*?)\}")


class ContactLookup(Protocol):
    def is_contacted(self, identifier: str) -> bool:
        ...


def filter_records(
    directory: Directory,
    market: str = "",
    contact_status: str = "any",
    store: Optional[ContactLookup] = None,
) -> list[Record]:
    """The current view: active campaign, optional market, optional contact status.

    Returns a new list; an empty list means no matches.
    """
    status = (contact_status or "any").strip().lower()
    if status not in CONTACT_FILTERS:
        raise ValueError(f"contact_status must be one of {CONTACT_FILTERS}, got {contact_status!r}")
    if status != "any" and store is None:
        raise ValueError("a contact store is required to filter by contact status")

    campaign_name = directory.campaign.name
    out = [r for r in directory.records if r.campaign == campaign_name]

    if market:
        out = [r for r in out if r.market == market]

    if status == "contacted":
        out = [r for r in out if store.is_contacted(r.identifier)]
    elif status == "not-contacted":
        out = [r for r in out if not store.is_contacted(r.identifier)]

    return out


def find_record(directory: Directory, identifier: str) -> Optional[Record]:
    for r in directory.records:
        if r.identifier == identifier:
            return r
    return None


def render_template(template: str, record: Record | dict) -> str:
    """Replaces every `{field}` with the record's value for it, or "" if absent."""
    lookup = record.as_dict() if isinstance(record, Record) else record

    def _sub(m: re.Match) -> str:
        return lookup.get(m.group(1)) or ""

    return _PLACEHOLDER_RE.sub(_sub, template or "")


def contact_message(directory: Directory, record: Record) -> str:
    return render_template(directory.campaign.contact_template, record)
