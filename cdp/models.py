# cdp/models.py

from __future__ import annotations

from dataclasses import asdict, dataclass, fields


@dataclass(frozen=True)
class Record:
    """One normalized row of the data sheet."""

    identifier: str = ""
    campaign: str = ""
    company_name: str = ""
    market: str = ""
    url: str = ""
    contact_email: str = ""
    contact_phone: str = ""
    contact_url: str = ""
    observed_on: str = ""
    observed_source_url: str = ""
    enabled: str = ""

    @classmethod
    def from_row(cls, row: dict[str, str]) -> "Record":
        names = {f.name for f in fields(cls)}
        return cls(**{k: (v or "") for k, v in row.items() if k in names})

    def get(self, name: str, default: str = "") -> str:
        if name not in self.field_names():
            return default
        return getattr(self, name)

    def as_dict(self) -> dict[str, str]:
        return asdict(self)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


@dataclass(frozen=True)
class Campaign:
    name: str
    description_html: str = ""
    contact_template: str = ""

    @classmethod
    def from_row(cls, row: dict[str, str]) -> "Campaign":
        return cls(
            name=row.get("name", "") or "",
            description_html=row.get("description_html", "") or "",
            contact_template=row.get("contact_template", "") or "",
        )
