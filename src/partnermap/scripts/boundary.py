# File: partnermap/scripts/boundary.py
"""State boundary helpers.

Derives everything the map needs from the boundary polygon: bounding box,
the "outside the state" mask (buffered box minus the state), the centre of
the box, and the padded extent the user is allowed to pan to.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import geopandas as gpd
from shapely.geometry import MultiPolygon, Polygon, box, mapping
from shapely.geometry.base import BaseGeometry
from shapely.validation import explain_validity

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"
WORLD = (-180.0, -90.0, 180.0, 90.0)


class GeometryError(ValueError):
    """Boundary geometry is empty, not polygonal, zero-area or invalid."""


@dataclass(frozen=True)
class BoundaryGeometry:
    polygon: BaseGeometry
    bounds: tuple[float, float, float, float]  # minx, miny, maxx, maxy
    outside_mask: BaseGeometry
    center: tuple[float, float]  # lat, lon
    pan_bounds: tuple[tuple[float, float], tuple[float, float]]  # (south, west), (north, east)

    def mask_geojson(self) -> dict:
        return {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "properties": {"name": "outside"}, "geometry": mapping(self.outside_mask)}],
        }

    def outline_geojson(self) -> dict:
        return {
            "type": "FeatureCollection",
            "features": [{"type": "Feature", "properties": {"name": "boundary"}, "geometry": mapping(self.polygon)}],
        }


def load_boundary(path: str | Path) -> gpd.GeoDataFrame:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Boundary file not found: {path}")

    gdf = gpd.read_file(path)
    if gdf.crs is None:
        gdf = gdf.set_crs(WGS84)
    return gdf.to_crs(WGS84)


def _check(geom: BaseGeometry) -> None:
    if geom is None or geom.is_empty:
        raise GeometryError("Boundary geometry is empty")
    if not isinstance(geom, (Polygon, MultiPolygon)):
        raise GeometryError(f"Boundary must be a polygon or multipolygon, got {geom.geom_type}")
    if not geom.is_valid:
        raise GeometryError(f"Boundary geometry is invalid: {explain_validity(geom)}")
    if geom.area <= 0:
        raise GeometryError("Boundary geometry has zero area")


def outside_mask(geom: BaseGeometry, buffer: float) -> BaseGeometry:
    minx, miny, maxx, maxy = geom.bounds
    frame = box(
        max(minx - buffer, WORLD[0]),
        max(miny - buffer, WORLD[1]),
        min(maxx + buffer, WORLD[2]),
        min(maxy + buffer, WORLD[3]),
    )
    return frame.difference(geom)


def derive_boundary(
    boundary: BaseGeometry | gpd.GeoDataFrame | gpd.GeoSeries,
    mask_buffer: float = 10.0,
    pad_lat: float = 1.0,
    pad_lon: float = 2.5,
) -> BoundaryGeometry:
    if isinstance(boundary, (gpd.GeoDataFrame, gpd.GeoSeries)):
        parts = boundary.geometry if isinstance(boundary, gpd.GeoDataFrame) else boundary
        if parts.empty:
            raise GeometryError("Boundary dataset has no features")
        # Check parts before dissolving; GEOS may fail or silently repair on bad input.
        for part in parts:
            _check(part)
        geom = parts.iloc[0] if len(parts) == 1 else parts.union_all()
    else:
        geom = boundary

    _check(geom)

    minx, miny, maxx, maxy = (float(v) for v in geom.bounds)
    mask = outside_mask(geom, mask_buffer)
    logger.info("Boundary bounds=(%.4f, %.4f, %.4f, %.4f) mask area=%.2f", minx, miny, maxx, maxy, mask.area)

    return BoundaryGeometry(
        polygon=geom,
        bounds=(minx, miny, maxx, maxy),
        outside_mask=mask,
        center=((miny + maxy) / 2, (minx + maxx) / 2),
        pan_bounds=((miny - pad_lat, minx - pad_lon), (maxy + pad_lat, maxx + pad_lon)),
    )


def write_mask(boundary: BoundaryGeometry, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    gpd.GeoDataFrame(geometry=[boundary.outside_mask], crs=WGS84).to_file(path, driver="GeoJSON")
    return path


__all__ = ["BoundaryGeometry", "GeometryError", "derive_boundary", "load_boundary", "outside_mask", "write_mask"]
