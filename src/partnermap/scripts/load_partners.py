# File: partnermap/scripts/load_partners.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import geopandas as gpd
import pandas as pd
import yaml

from partnermap.scripts.settings import SCHEMA

logger = logging.getLogger(__name__)

FIELDS = [
    "name", "address", "address_line_2", "city", "state", "zip5", "category",
    "dates", "days", "hours", "link", "notes", "longitude", "latitude",
]


def load_schema(schema_path: str | Path = SCHEMA) -> Tuple[list, dict, dict]:
    with open(schema_path, "r", encoding="utf-8") as f:
        conf = yaml.safe_load(f) or {}
    required = conf.get("required", [])
    rename = conf.get("rename", {})
    dtypes = conf.get("dtypes", {})
    return required, rename, dtypes


def _read_table(path: Path) -> pd.DataFrame:
    # dtype=str keeps leading zeros on ZIPs; coordinates are re-typed below.
    if path.suffix.lower() in (".xlsx", ".xls"):
        return pd.read_excel(path, dtype=str, engine="openpyxl")
    return pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")


def read_partners(raw_path: str | Path, schema_path: str | Path = SCHEMA) -> pd.DataFrame:
    path = Path(raw_path)
    if not path.exists():
        raise FileNotFoundError(f"Partner file not found: {path}")

    required, rename, dtypes = load_schema(schema_path)
    df = _read_table(path)
    df.columns = [str(c).strip() for c in df.columns]

    # Ensure required columns exist
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise KeyError(f"Missing required columns in input: {missing}")

    # Rename
    to_rename = {k: v for k, v in rename.items() if k in df.columns}
    df = df.rename(columns=to_rename)
    df = df.loc[:, ~df.columns.duplicated()]

    for col in FIELDS:
        if col not in df.columns:
            df[col] = pd.NA

    # Type coercions
    for col, typ in dtypes.items():
        if col not in df.columns:
            continue
        if typ == "float":
            df[col] = pd.to_numeric(df[col], errors="coerce")
        elif typ == "str":
            df[col] = df[col].astype("string").str.strip().replace("", pd.NA)

    logger.info("Read %d partner rows from %s", len(df), path)
    return df


def to_geodataframe(df: pd.DataFrame) -> gpd.GeoDataFrame:
    return gpd.GeoDataFrame(
        df.copy(),
        geometry=gpd.points_from_xy(df["longitude"], df["latitude"]),
        crs="EPSG:4326",
    )


__all__ = ["FIELDS", "load_schema", "read_partners", "to_geodataframe"]
