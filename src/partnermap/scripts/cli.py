# File: partnermap/scripts/cli.py
import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from hashlib import sha256
from pathlib import Path
from typing import Optional, Tuple

import geopandas as gpd
import pandas as pd
import typer

from partnermap.scripts.assemble_map import build_map, save_map
from partnermap.scripts.boundary import BoundaryGeometry, GeometryError, derive_boundary, load_boundary, write_mask
from partnermap.scripts.derive import style_partners
from partnermap.scripts.export_artifacts import export_from_profile
from partnermap.scripts.load_partners import read_partners, to_geodataframe
from partnermap.scripts.settings import EXPORTS, SCHEMA, MapSettings, load_settings
from partnermap.scripts.styles import load_style_tables
from partnermap.scripts.validate import basic_validate

APP = typer.Typer(help="Food-assistance partner map builder.")

MAP_NAME = "partner_map.html"
MASK_NAME = "state_mask.geojson"


def _sha256_file(path: Path) -> str:
    h = sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def _settings(partners: Optional[Path], boundary: Optional[Path], out_dir: Optional[Path]) -> MapSettings:
    settings = load_settings()
    overrides = {}
    if partners:
        overrides["partners_path"] = partners
    if boundary:
        overrides["boundary_path"] = boundary
    if out_dir:
        overrides["output_dir"] = out_dir
    if not overrides:
        return settings
    return replace(settings, **overrides)


def _load_partners(settings: MapSettings) -> Tuple[pd.DataFrame, pd.DataFrame]:
    try:
        raw = read_partners(settings.partners_path, SCHEMA)
    except FileNotFoundError as exc:
        raise typer.BadParameter(str(exc))
    except KeyError as exc:
        typer.echo(f"[error] {exc}", err=True)
        raise typer.Exit(code=2)

    valid, rejects = basic_validate(raw)
    if len(rejects):
        typer.echo(f"[warn] {len(rejects)} partner rows rejected", err=True)
    return valid, rejects


def _load_boundary(settings: MapSettings) -> BoundaryGeometry:
    try:
        frame = load_boundary(settings.boundary_path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(str(exc))
    try:
        return derive_boundary(frame, settings.mask_buffer, settings.pad_lat, settings.pad_lon)
    except GeometryError as exc:
        typer.echo(f"[error] {exc}", err=True)
        raise typer.Exit(code=4)


def _styled(settings: MapSettings) -> Tuple[gpd.GeoDataFrame, pd.DataFrame]:
    valid, rejects = _load_partners(settings)
    if valid.empty:
        typer.echo("[error] No valid partner records to map", err=True)
        raise typer.Exit(code=3)
    styled = style_partners(to_geodataframe(valid), load_style_tables(), settings)
    return styled, rejects


def _write_artifacts(settings: MapSettings, styled: gpd.GeoDataFrame, rejects: pd.DataFrame, map_path: Path, exports: dict) -> dict:
    out_dir = settings.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    rejects_path = out_dir / "rejects.csv"
    rejects.to_csv(rejects_path, index=False)

    manifest = {
        "schema_version": "1.0.0",
        "built_at": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "state": settings.state_code,
        "records_total": int(len(styled) + len(rejects)),
        "records_valid": int(len(styled)),
        "records_rejected": int(len(rejects)),
        "groups": {str(k): int(v) for k, v in styled["group"].value_counts().sort_index().items()},
        "sources": [
            {"kind": "partners", "path": str(settings.partners_path), "sha256": _sha256_file(settings.partners_path)},
            {"kind": "boundary", "path": str(settings.boundary_path), "sha256": _sha256_file(settings.boundary_path)},
        ],
        "map": str(map_path),
        "rejects_path": str(rejects_path),
        "exports": exports,
    }

    with open(out_dir / "manifest.json", "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2)

    return manifest


@APP.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline progress")):
    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


@APP.command("build")
def cmd_build(
    partners: Optional[Path] = typer.Option(None, help="Partner CSV/Excel (defaults to map.yml)"),
    boundary: Optional[Path] = typer.Option(None, help="State boundary file (GeoJSON, shapefile, ...)"),
    out_dir: Optional[Path] = typer.Option(None, help="Directory for the map, exports and manifest"),
):
    settings = _settings(partners, boundary, out_dir)
    geometry = _load_boundary(settings)
    styled, rejects = _styled(settings)

    m = build_map(styled, geometry, settings)
    map_path = save_map(m, settings.output_dir / MAP_NAME)
    exports = export_from_profile(styled, EXPORTS, settings.output_dir)
    manifest = _write_artifacts(settings, styled, rejects, map_path, exports)

    typer.echo(json.dumps(manifest, indent=2))


@APP.command("validate")
def cmd_validate(
    partners: Optional[Path] = typer.Option(None, help="Partner CSV/Excel (defaults to map.yml)"),
):
    valid, rejects = _load_partners(_settings(partners, None, None))
    typer.echo(f"valid={len(valid)} rejects={len(rejects)}")


@APP.command("export")
def cmd_export(
    partners: Optional[Path] = typer.Option(None, help="Partner CSV/Excel (defaults to map.yml)"),
    out_dir: Optional[Path] = typer.Option(None, help="Directory for the exports"),
):
    settings = _settings(partners, None, out_dir)
    styled, _ = _styled(settings)
    exports = export_from_profile(styled, EXPORTS, settings.output_dir)
    for name, path in exports.items():
        typer.echo(f"{name}: {path}")


@APP.command("mask")
def cmd_mask(
    boundary: Optional[Path] = typer.Option(None, help="State boundary file"),
    out: Optional[Path] = typer.Option(None, help="Where to write the outside mask GeoJSON"),
):
    settings = _settings(None, boundary, None)
    geometry = _load_boundary(settings)
    path = write_mask(geometry, out or settings.output_dir / MASK_NAME)
    typer.echo(str(path))


if __name__ == "__main__":
    APP()
