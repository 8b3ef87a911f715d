# File: partnermap/scripts/export_artifacts.py
from __future__ import annotations
from typing import Dict
from pathlib import Path
import json
import yaml
import geopandas as gpd
import pandas as pd

from partnermap.scripts.settings import EXPORTS

# Popup markup is a rendering detail; it never leaves the map.
NEVER_EXPORT = ["popup"]
GEO_DRIVERS = {".geojson": "GeoJSON", ".gpkg": "GPKG"}

def _ensure_parent(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)

def _select(gdf: gpd.GeoDataFrame, fields: list) -> pd.DataFrame:
    if fields == ["*"]:
        keep = [c for c in gdf.columns if c != gdf.geometry.name]
    else:
        keep = [f for f in fields if f in gdf.columns]
    return gdf[[c for c in keep if c not in NEVER_EXPORT]]

def _plain(data: pd.DataFrame) -> pd.DataFrame:
    # OGR writers want object columns with None, not pandas' string/NA.
    data = data.copy()
    for col in data.select_dtypes(include="string").columns:
        data[col] = data[col].astype(object).where(data[col].notna(), None)
    return data

def export_from_profile(gdf: gpd.GeoDataFrame, profile_path: str | Path = EXPORTS, out_dir: str | Path = ".") -> Dict[str, str]:
    with open(profile_path, "r", encoding="utf-8") as f:
        profiles = yaml.safe_load(f) or {}

    written = {}
    for name, spec in profiles.items():
        path = Path(out_dir) / spec["path"]
        fields = spec.get("fields", ["*"])

        _ensure_parent(path)
        data = _select(gdf, fields)

        if spec.get("geometry") or path.suffix in GEO_DRIVERS:
            geo = gpd.GeoDataFrame(_plain(data), geometry=gdf.geometry.values, crs=gdf.crs)
            geo.to_file(path, driver=GEO_DRIVERS.get(path.suffix, "GeoJSON"))
        elif path.suffix == ".json":
            # Write JSON (minified for web)
            with open(path, "w", encoding="utf-8") as out:
                json.dump(json.loads(data.to_json(orient="records")), out, ensure_ascii=False, separators=(",", ":"))
        elif path.suffix == ".parquet":
            data.to_parquet(path, index=False)
        else:
            # Default to CSV
            data.to_csv(path, index=False)

        written[name] = str(path)

    return written
