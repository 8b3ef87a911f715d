# File: partnermap/scripts/settings.py
"""Map configuration.

Values come from ``config/map.yml``; a few can be overridden from the
environment (``PARTNER_MAP_PARTNERS``, ``PARTNER_MAP_BOUNDARY``,
``PARTNER_MAP_OUTPUT``, ``PARTNER_MAP_STATE``).
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"

SCHEMA = CONFIG_DIR / "schema.yml"
CATEGORIES = CONFIG_DIR / "categories.yml"
MAP_CONFIG = CONFIG_DIR / "map.yml"
EXPORTS = CONFIG_DIR / "export_profiles.yml"


@dataclass(frozen=True)
class View:
    label: str
    zoom: int
    lat: float | None = None
    lon: float | None = None


@dataclass(frozen=True)
class MapSettings:
    state_code: str
    partners_path: Path
    boundary_path: Path
    output_dir: Path
    directions_url: str
    mask_buffer: float
    pad_lat: float
    pad_lon: float
    tiles: str
    zoom_start: int
    min_zoom: int
    popup_max_width: int
    reset_view: View
    subregion_view: View


def _view(raw: dict | None, default_label: str, default_zoom: int) -> View:
    raw = raw or {}
    lat = raw.get("lat")
    lon = raw.get("lon")
    return View(
        label=str(raw.get("label", default_label)),
        zoom=int(raw.get("zoom", default_zoom)),
        lat=float(lat) if lat is not None else None,
        lon=float(lon) if lon is not None else None,
    )


def load_settings(path: str | Path = MAP_CONFIG) -> MapSettings:
    with open(path, "r", encoding="utf-8") as f:
        conf = yaml.safe_load(f) or {}

    padding = conf.get("pan_padding", {})
    views = conf.get("views", {})
    zoom_start = int(conf.get("zoom_start", 7))

    subregion = _view(views.get("subregion"), "Sub-region", zoom_start + 3)
    if subregion.lat is None or subregion.lon is None:
        raise KeyError("views.subregion needs both 'lat' and 'lon'")

    return MapSettings(
        state_code=os.getenv("PARTNER_MAP_STATE", conf.get("state_code", "IL")).strip().upper(),
        partners_path=Path(os.getenv("PARTNER_MAP_PARTNERS", conf.get("partners_path", "data/partners.csv"))),
        boundary_path=Path(os.getenv("PARTNER_MAP_BOUNDARY", conf.get("boundary_path", "data/boundary.geojson"))),
        output_dir=Path(os.getenv("PARTNER_MAP_OUTPUT", conf.get("output_dir", "output"))),
        directions_url=conf.get("directions_url", "https://www.google.com/maps/dir/?api=1&destination="),
        mask_buffer=float(conf.get("mask_buffer", 10.0)),
        pad_lat=float(padding.get("lat", 1.0)),
        pad_lon=float(padding.get("lon", 2.5)),
        tiles=conf.get("tiles", "CartoDB positron"),
        zoom_start=zoom_start,
        min_zoom=int(conf.get("min_zoom", max(zoom_start - 1, 0))),
        popup_max_width=int(conf.get("popup_max_width", 300)),
        reset_view=_view(views.get("reset"), "Full state", zoom_start),
        subregion_view=subregion,
    )
