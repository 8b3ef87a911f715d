# Ensure src/ is importable (so `import partnermap.scripts...` and `import api.app` work under pytest).
import sys, pathlib
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from partnermap.scripts.settings import load_settings
from partnermap.scripts.styles import load_style_tables

PARTNER_HEADER = (
    "Name,Address,Address_Line_2,City,State,Zip5,Type,Dates,Day(s) of the Week,"
    "Hours,Link,Notes,Longitude,Latitude\n"
)

SQUARE = {
    "type": "FeatureCollection",
    "features": [{
        "type": "Feature",
        "properties": {"NAME": "Square"},
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[-91.0, 37.0], [-87.0, 37.0], [-87.0, 42.0], [-91.0, 42.0], [-91.0, 37.0]]],
        },
    }],
}


@pytest.fixture
def settings():
    return load_settings()


@pytest.fixture
def tables():
    return load_style_tables()


@pytest.fixture
def partners_csv(tmp_path):
    path = tmp_path / "partners.csv"
    path.write_text(
        PARTNER_HEADER
        + "Downtown Farmers Market,100 Main St,,Springfield,IL,62701,Farmers Market,,,,,,-89.65,39.78\n"
        + "Prairie Roots CSA,,,Urbana,IL,61801,CSA / Delivery,June - September,Thursday,3pm - 6pm,,Pickup at dock,-88.2073,40.1106\n"
        + "Corner Store,1 Elm St,,Normal,IL,01761,Store,,,,,,-88.99,40.51\n"
        + "Nowhere Market,,,,,,Farmers Market,,,,,,,\n"
        + "Mystery Stand,,,Peoria,IL,61602,Pop-Up Market,,,,,,-89.589,40.6936\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def boundary_file(tmp_path):
    import json
    path = tmp_path / "boundary.geojson"
    path.write_text(json.dumps(SQUARE), encoding="utf-8")
    return path
