# cdp/identifiers.py

from __future__ import annotations

import hashlib
import logging
import re
from dataclasses import replace

from cdp.models import Record

log = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

FALLBACK_PREFIX = "record-"


def slugify(text: str) -> str:
    return _NON_ALNUM_RE.sub("-", (text or "").lower()).strip("-")


def _fallback_identifier(parts: list[str]) -> str:
    # names with no ASCII letters or digits slug to ""; hash the raw parts instead
    digest = hashlib.sha1("\x1f".join(parts).encode("utf-8")).hexdigest()
    return FALLBACK_PREFIX + digest[:12]


def derive_identifier(record: Record) -> str:
    """campaign + market + company_name -> `free-jimmy-kimmel-downtown-food-bank`.

    Never empty: when the slug is empty a `record-<hash>` id is derived from
    the same three fields.
    """
    parts = [record.campaign or "", record.market or "", record.company_name or ""]
    slug = slugify(" ".join(parts))
    if slug:
        return slug

    ident = _fallback_identifier(parts)
    log.warning("no slug for campaign=%r market=%r company_name=%r; using %s", *parts, ident)
    return ident


def assign_identifier(record: Record) -> Record:
    if record.identifier:
        return record
    return replace(record, identifier=derive_identifier(record))


def assign_identifiers(records: list[Record]) -> list[Record]:
    return [assign_identifier(r) for r in records]
