# File: partnermap/scripts/records.py
"""Typed views over partner rows."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

import pandas as pd

from partnermap.scripts.styles import Category


def _maybe(value: Any) -> str | None:
    """Trimmed string, or None for missing / NaN / blank cells."""
    if value is None:
        return None
    if not isinstance(value, str) and pd.isna(value):
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class PartnerRecord:
    name: str
    longitude: float
    latitude: float
    address: str | None = None
    address_line_2: str | None = None
    city: str | None = None
    state: str | None = None
    zip5: str | None = None
    category: str | None = None
    dates: str | None = None
    days: str | None = None
    hours: str | None = None
    link: str | None = None
    notes: str | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "PartnerRecord":
        optional = {
            f.name: _maybe(row.get(f.name))
            for f in fields(cls)
            if f.name not in ("name", "longitude", "latitude")
        }
        return cls(
            name=_maybe(row.get("name")) or "",
            longitude=float(row["longitude"]),
            latitude=float(row["latitude"]),
            **optional,
        )


@dataclass(frozen=True)
class StyledPartner:
    record: PartnerRecord
    category: Category
    color: str
    icon: str
    directions: str | None
    popup: str

    @property
    def group(self) -> str:
        return self.category.value

    @property
    def location(self) -> tuple[float, float]:
        return self.record.latitude, self.record.longitude


def records_from_frame(df: pd.DataFrame) -> list[PartnerRecord]:
    return [PartnerRecord.from_row(row) for row in df.to_dict(orient="records")]


__all__ = ["PartnerRecord", "StyledPartner", "records_from_frame"]
