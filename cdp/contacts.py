# cdp/contacts.py

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Dict, Optional

from cdp.errors import ContactStoreError

log = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class ContactStore:
    """Per-viewer record of which organizations were contacted, and when.

    Backed by one JSON file: {identifier: millisecond_timestamp}. An identifier
    that is absent has not been contacted.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def contacted_at_map(self) -> Dict[str, int]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError):
            log.exception("Error reading contact map from %s", self.path)
            return {}
        if not isinstance(data, dict):
            log.error("Contact map at %s is not a JSON object; ignoring it", self.path)
            return {}
        return data

    def contacted_at(self, identifier: str) -> Optional[int]:
        return self.contacted_at_map().get(identifier) or None

    def is_contacted(self, identifier: str) -> bool:
        return bool(self.contacted_at_map().get(identifier))

    def set_contacted(self, identifier: str, contacted_at: Optional[int] = None) -> None:
        """Stores `contacted_at` for `identifier`; a falsy timestamp removes the entry."""
        contact_map = self.contacted_at_map()
        if contacted_at:
            contact_map[identifier] = contacted_at
        else:
            contact_map.pop(identifier, None)
        self._write(contact_map)

    def mark_contacted(self, identifier: str) -> int:
        ts = now_ms()
        self.set_contacted(identifier, ts)
        return ts

    def unmark_contacted(self, identifier: str) -> None:
        self.set_contacted(identifier, None)

    def _write(self, contact_map: Dict[str, int]) -> None:
        tmp = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".contacted-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(contact_map, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as e:
            if tmp and os.path.exists(tmp):
                os.unlink(tmp)
            raise ContactStoreError(str(self.path), str(e)) from e
