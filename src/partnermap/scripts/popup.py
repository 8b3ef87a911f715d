# File: partnermap/scripts/popup.py
"""Popup markup for partner markers.

The popup is an ordered list of section builders. Each builder returns its
fragment (already terminated with ``<br/>``) or an empty string when the
fields it needs are absent; the fragments are joined as-is.
"""
from __future__ import annotations

import html
import logging
from typing import Callable, NamedTuple
from urllib.parse import urlsplit

from partnermap.scripts.records import PartnerRecord
from partnermap.scripts.styles import Category

logger = logging.getLogger(__name__)

BR = "<br/>"


class PopupContext(NamedTuple):
    record: PartnerRecord
    category: Category
    directions: str | None


Section = Callable[[PopupContext], str]


def _esc(text: str) -> str:
    return html.escape(text, quote=True)


def safe_link(link: str | None) -> str | None:
    """http(s) URL for a partner website; scheme-less links get https://."""
    if not link:
        return None
    parts = urlsplit(link)
    if parts.scheme.lower() in ("http", "https"):
        return link
    if not parts.scheme and not link.startswith("//"):
        return f"https://{link}"
    logger.warning("Dropping website link with unsupported scheme: %r", link)
    return None


def name_section(ctx: PopupContext) -> str:
    return f"<b>{_esc(ctx.record.name)}</b>{BR}"


def address_section(ctx: PopupContext) -> str:
    r = ctx.record
    out = ""
    if r.address:
        out += f"{_esc(r.address)}{BR}"
    if r.address_line_2:
        out += f"{_esc(r.address_line_2)}{BR}"
    return out


def locality_section(ctx: PopupContext) -> str:
    r = ctx.record
    if not r.city:
        return ""
    line = _esc(r.city)
    if r.state:
        line += f", {_esc(r.state)}"
    if r.zip5:
        line += f"  {_esc(r.zip5)}"
    return line + BR


def directions_section(ctx: PopupContext) -> str:
    # Keyed on city only: a city-level link is still useful without a street.
    # The link is built from quote_plus'd parts, so it needs no escaping.
    if not ctx.record.city or not ctx.directions:
        return ""
    return f"<b><a href='{ctx.directions}' target='_blank'>Get Directions</a></b>{BR}"


def category_section(ctx: PopupContext) -> str:
    return f"{BR}Type: {_esc(ctx.category.value)}{BR}{BR}"


def _labelled(label: str, attr: str) -> Section:
    def section(ctx: PopupContext) -> str:
        value = getattr(ctx.record, attr)
        return f"{label}: {_esc(value)}{BR}" if value else ""

    section.__name__ = f"{attr}_section"
    return section


dates_section = _labelled("Dates", "dates")
days_section = _labelled("Days", "days")
hours_section = _labelled("Hours", "hours")


def website_section(ctx: PopupContext) -> str:
    link = safe_link(ctx.record.link)
    if not link:
        return ""
    return f"<a href='{_esc(link)}' target='_blank'>Website</a>{BR}"


def notes_section(ctx: PopupContext) -> str:
    if not ctx.record.notes:
        return ""
    return f"{BR}{_esc(ctx.record.notes)}"


SECTIONS: tuple[Section, ...] = (
    name_section,
    address_section,
    locality_section,
    directions_section,
    category_section,
    dates_section,
    days_section,
    hours_section,
    website_section,
    notes_section,
)


def render_popup(record: PartnerRecord, category: Category, directions: str | None = None) -> str:
    ctx = PopupContext(record, category, directions)
    return "".join(section(ctx) for section in SECTIONS)


__all__ = ["SECTIONS", "render_popup", "safe_link"]
