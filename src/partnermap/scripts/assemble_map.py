# File: partnermap/scripts/assemble_map.py
"""Build the folium map from styled partners and the state boundary."""
from __future__ import annotations

import html
import json
import logging
from pathlib import Path

import folium
import geopandas as gpd
from branca.element import MacroElement
from folium.plugins import MiniMap, Search
from jinja2 import Template

from partnermap.scripts.boundary import BoundaryGeometry
from partnermap.scripts.settings import MapSettings
from partnermap.scripts.styles import Category

logger = logging.getLogger(__name__)

MASK_STYLE = {"fillColor": "#4a4a4a", "fillOpacity": 0.45, "color": "#4a4a4a", "weight": 0}
OUTLINE_STYLE = {"color": "#333333", "weight": 2, "fillOpacity": 0}


class ViewButtons(MacroElement):
    """Leaflet control with one button per (label, lat, lon, zoom) view."""

    _template = Template(
        """
        {% macro script(this, kwargs) %}
        var {{ this.get_name() }} = L.Control.extend({
            options: {position: {{ this.position|tojson }}},
            onAdd: function(map) {
                var div = L.DomUtil.create('div', 'leaflet-bar leaflet-control partner-views');
                {%- for view in this.views %}
                var btn{{ loop.index }} = L.DomUtil.create('a', '', div);
                btn{{ loop.index }}.href = '#';
                btn{{ loop.index }}.title = {{ view.label|tojson }};
                btn{{ loop.index }}.innerHTML = {{ view.label|tojson }};
                btn{{ loop.index }}.style.width = 'auto';
                btn{{ loop.index }}.style.padding = '0 8px';
                L.DomEvent.on(btn{{ loop.index }}, 'click', function(e) {
                    L.DomEvent.preventDefault(e);
                    map.setView([{{ view.lat }}, {{ view.lon }}], {{ view.zoom }});
                });
                {%- endfor %}
                L.DomEvent.disableClickPropagation(div);
                return div;
            }
        });
        new {{ this.get_name() }}().addTo({{ this._parent.get_name() }});
        {% endmacro %}
        """
    )

    def __init__(self, views: list[dict], position: str = "topleft"):
        super().__init__()
        self._name = "ViewButtons"
        self.views = views
        self.position = position


def named_views(boundary: BoundaryGeometry, settings: MapSettings) -> list[dict]:
    reset, sub = settings.reset_view, settings.subregion_view
    lat, lon = boundary.center
    return [
        {"label": reset.label, "lat": reset.lat if reset.lat is not None else lat,
         "lon": reset.lon if reset.lon is not None else lon, "zoom": reset.zoom},
        {"label": sub.label, "lat": sub.lat, "lon": sub.lon, "zoom": sub.zoom},
    ]


def _legend_html(groups: list[tuple[str, str, int]]) -> str:
    rows = "".join(
        f"<div><span style='color:{color};'>&#9679;</span> {label} ({count})</div>"
        for label, color, count in groups
    )
    return (
        "<div style='position: fixed; bottom: 30px; left: 30px; z-index: 1000;"
        " background: white; padding: 10px; border-radius: 6px;"
        " box-shadow: 0 2px 5px rgba(0,0,0,0.3); font-family: Arial; font-size: 12px;'>"
        "<b>Partner type</b>"
        f"{rows}"
        "</div>"
    )


def build_map(styled: gpd.GeoDataFrame, boundary: BoundaryGeometry, settings: MapSettings) -> folium.Map:
    (south, west), (north, east) = boundary.pan_bounds
    m = folium.Map(
        location=list(boundary.center),
        zoom_start=settings.zoom_start,
        tiles=settings.tiles,
        min_zoom=settings.min_zoom,
        max_bounds=True,
        min_lat=south,
        max_lat=north,
        min_lon=west,
        max_lon=east,
    )

    folium.GeoJson(
        boundary.mask_geojson(),
        name="Outside state",
        style_function=lambda _: MASK_STYLE,
        control=False,
    ).add_to(m)
    folium.GeoJson(
        boundary.outline_geojson(),
        name="State boundary",
        style_function=lambda _: OUTLINE_STYLE,
        control=False,
    ).add_to(m)

    legend: list[tuple[str, str, int]] = []
    for category in Category:
        rows = styled[styled["group"] == category.value]
        if rows.empty:
            continue
        fg = folium.FeatureGroup(name=f"{category.value} ({len(rows)})", show=True)
        for _, row in rows.iterrows():
            name = row["name"] if isinstance(row["name"], str) else ""
            folium.Marker(
                location=[row["latitude"], row["longitude"]],
                popup=folium.Popup(row["popup"], max_width=settings.popup_max_width),
                tooltip=html.escape(name) if name else None,
                icon=folium.Icon(color=row["color"], icon=row["icon"], prefix="fa"),
            ).add_to(fg)
        fg.add_to(m)
        legend.append((category.value, rows["color"].iloc[0], len(rows)))

    searchable = styled[styled["name"].fillna("").astype(str).str.len() > 0]
    if not searchable.empty:
        search_layer = folium.GeoJson(
            json.loads(searchable[["name", "group", "geometry"]].to_json()),
            name="Partner search",
            marker=folium.CircleMarker(radius=1, opacity=0, fill_opacity=0),
            control=False,
        ).add_to(m)
        Search(
            layer=search_layer,
            search_label="name",
            geom_type="Point",
            placeholder="Search partners",
            collapsed=False,
            search_zoom=14,
            position="topleft",
        ).add_to(m)

    ViewButtons(named_views(boundary, settings)).add_to(m)
    MiniMap(toggle_display=True, position="bottomright").add_to(m)
    m.get_root().html.add_child(folium.Element(_legend_html(legend)))
    folium.LayerControl(collapsed=False, position="topright").add_to(m)

    logger.info("Map assembled with %d markers in %d groups", len(styled), len(legend))
    return m


def save_map(m: folium.Map, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    m.save(str(path))
    return path


__all__ = ["ViewButtons", "build_map", "named_views", "save_map"]
