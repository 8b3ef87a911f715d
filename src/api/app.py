#!/usr/bin/env python3
"""
Partner Map: FastAPI front for the built partner map

- /partners         -> styled partners (name/lat/lon/category/color/icon/popup)
- /partners.geojson -> same, as a FeatureCollection for Leaflet
- /boundary/mask    -> outside-the-state mask polygon
- /map              -> the rendered folium map
"""

import json
import typing as t
from pathlib import Path

import geopandas as gpd
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from partnermap.scripts.assemble_map import build_map
from partnermap.scripts.boundary import BoundaryGeometry, GeometryError, derive_boundary, load_boundary
from partnermap.scripts.derive import style_partners
from partnermap.scripts.load_partners import read_partners, to_geodataframe
from partnermap.scripts.settings import MapSettings, load_settings
from partnermap.scripts.styles import Category, load_style_tables, resolve_category
from partnermap.scripts.validate import basic_validate

# ----------------------------------------------------------------------------- #
# Config
# ----------------------------------------------------------------------------- #

ALLOWED_ORIGINS = [
    "http://127.0.0.1:1313", "http://localhost:1313",
    "http://127.0.0.1:8000", "http://localhost:8000",
]

PARTNER_FIELDS = [
    "name", "address", "address_line_2", "city", "state", "zip5",
    "dates", "days", "hours", "link", "notes",
]

# ----------------------------------------------------------------------------- #
# App
# ----------------------------------------------------------------------------- #

app = FastAPI(title="Partner Map API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# ----------------------------------------------------------------------------- #
# Tiny in-memory cache (one build per inputs + settings)
# ----------------------------------------------------------------------------- #

class Built(t.TypedDict):
    settings: MapSettings
    styled: gpd.GeoDataFrame
    boundary: BoundaryGeometry
    map_html: str | None

_CACHE: dict[tuple, Built] = {}

def _cache_key(settings: MapSettings) -> tuple:
    # Relative paths resolve against the cwd, so key on both forms.
    return (Path(settings.partners_path).resolve(), Path(settings.boundary_path).resolve(), settings)

def _build() -> Built:
    settings = load_settings()
    key = _cache_key(settings)
    item = _CACHE.get(key)
    if item is not None:
        return item

    try:
        frame = load_boundary(settings.boundary_path)
        raw = read_partners(settings.partners_path)
    except FileNotFoundError as exc:
        raise HTTPException(503, str(exc))
    except KeyError as exc:
        raise HTTPException(422, f"bad partner sheet: {exc.args[0] if exc.args else exc}")
    try:
        boundary = derive_boundary(frame, settings.mask_buffer, settings.pad_lat, settings.pad_lon)
    except GeometryError as exc:
        raise HTTPException(500, f"bad boundary: {exc}")

    valid, _ = basic_validate(raw)
    styled = style_partners(to_geodataframe(valid), load_style_tables(), settings)
    item = {"settings": settings, "styled": styled, "boundary": boundary, "map_html": None}
    _CACHE[key] = item
    return item

def _clean(value: t.Any) -> t.Any:
    if value is None:
        return None
    try:
        if value != value:  # NaN / NA
            return None
    except (TypeError, ValueError):
        return None
    return value

# ----------------------------------------------------------------------------- #
# Routes
# ----------------------------------------------------------------------------- #

@app.get("/health")
def health():
    settings = load_settings()
    return {
        "ok": True,
        "state": settings.state_code,
        "has_partners": Path(settings.partners_path).exists(),
        "has_boundary": Path(settings.boundary_path).exists(),
    }

@app.get("/partners")
def partners(category: str | None = None):
    """Styled partners, optionally limited to one category (Other for unknown labels)."""
    styled = _build()["styled"]
    if category:
        wanted: Category = resolve_category(category, load_style_tables().aliases)
        styled = styled[styled["group"] == wanted.value]

    items: list[dict[str, t.Any]] = []
    for _, row in styled.iterrows():
        item = {f: _clean(row.get(f)) for f in PARTNER_FIELDS}
        item.update({
            "lat": float(row["latitude"]), "lon": float(row["longitude"]),
            "category": row["group"],
            "color": row["color"],
            "icon": row["icon"],
            "directions": _clean(row["directions"]),
            "popup": row["popup"],
        })
        items.append(item)
    return {"count": len(items), "items": items}

@app.get("/partners.geojson")
def partners_geojson():
    styled = _build()["styled"]
    cols = ["name", "group", "color", "icon", "popup", styled.geometry.name]
    return JSONResponse(content=json.loads(styled[cols].to_json()))

@app.get("/boundary/mask")
def boundary_mask():
    return JSONResponse(content=_build()["boundary"].mask_geojson())

@app.get("/map", response_class=HTMLResponse)
def partner_map():
    built = _build()
    if built["map_html"] is None:
        m = build_map(built["styled"], built["boundary"], built["settings"])
        built["map_html"] = m.get_root().render()
    return HTMLResponse(built["map_html"])

# ----------------------------------------------------------------------------- #
# Entrypoint
# ----------------------------------------------------------------------------- #

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.app:app", host="127.0.0.1", port=8001, reload=True)
