# File: partnermap/scripts/directions.py
from __future__ import annotations

from urllib.parse import quote_plus

DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1&destination="


def build_directions_link(
    address: str | None,
    city: str | None,
    region: str,
    base_url: str = DIRECTIONS_URL,
) -> str:
    """Directions deep link for "<address> <city> <region>".

    Each part is URL-encoded with whitespace collapsed to ``+``; absent parts
    are skipped.
    """
    parts = [" ".join(str(p).split()) for p in (address, city, region) if p and str(p).strip()]
    return base_url + "+".join(quote_plus(p) for p in parts)
