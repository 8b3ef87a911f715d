# File: partnermap/scripts/derive.py
"""PartnerRecord -> StyledPartner.

Every record is styled on its own: category, colour, icon, directions link
and popup depend only on that record plus the read-only tables/settings.
"""
from __future__ import annotations

import logging

import geopandas as gpd

from partnermap.scripts.directions import build_directions_link
from partnermap.scripts.popup import render_popup
from partnermap.scripts.records import PartnerRecord, StyledPartner
from partnermap.scripts.settings import MapSettings
from partnermap.scripts.styles import StyleTables, resolve_style

logger = logging.getLogger(__name__)

STYLE_COLUMNS = ["category", "color", "icon", "group", "directions", "popup"]


def derive_partner(record: PartnerRecord, tables: StyleTables, settings: MapSettings) -> StyledPartner:
    style = resolve_style(record.category, tables)
    directions = None
    if record.city:
        directions = build_directions_link(
            record.address, record.city, settings.state_code, settings.directions_url
        )
    return StyledPartner(
        record=record,
        category=style.category,
        color=style.color,
        icon=style.icon,
        directions=directions,
        popup=render_popup(record, style.category, directions),
    )


def derive_partners(records, tables: StyleTables, settings: MapSettings) -> list[StyledPartner]:
    return [derive_partner(r, tables, settings) for r in records]


def style_partners(gdf: gpd.GeoDataFrame, tables: StyleTables, settings: MapSettings) -> gpd.GeoDataFrame:
    """Add category/color/icon/group/directions/popup columns, keeping row order."""
    gdf = gdf.copy()
    styled = [
        derive_partner(PartnerRecord.from_row(row), tables, settings)
        for row in gdf.to_dict(orient="records")
    ]
    gdf["category"] = [s.category.value for s in styled]
    gdf["color"] = [s.color for s in styled]
    gdf["icon"] = [s.icon for s in styled]
    gdf["group"] = [s.group for s in styled]
    gdf["directions"] = [s.directions for s in styled]
    gdf["popup"] = [s.popup for s in styled]

    counts = gdf["group"].value_counts().to_dict()
    logger.info("Styled %d partners: %s", len(gdf), counts)
    return gdf


__all__ = ["STYLE_COLUMNS", "derive_partner", "derive_partners", "style_partners"]
