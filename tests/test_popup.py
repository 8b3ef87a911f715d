from partnermap.scripts.derive import derive_partner
from partnermap.scripts.directions import build_directions_link
from partnermap.scripts.popup import render_popup, safe_link
from partnermap.scripts.records import PartnerRecord
from partnermap.scripts.styles import Category

DIRECTIONS = "https://www.google.com/maps/dir/?api=1&destination="


def make_record(**kw):
    base = {"name": "Test Market", "longitude": -89.65, "latitude": 39.78}
    base.update(kw)
    return PartnerRecord(**base)


def test_springfield_scenario(tables, settings):
    record = make_record(
        name="Downtown Farmers Market", address="100 Main St", city="Springfield",
        state="IL", zip5="62701", category="Farmers Market",
    )
    styled = derive_partner(record, tables, settings)

    assert styled.color == tables.colors[Category.FARMERS_MARKET]
    assert styled.popup == (
        "<b>Downtown Farmers Market</b><br/>"
        "100 Main St<br/>"
        "Springfield, IL  62701<br/>"
        f"<b><a href='{DIRECTIONS}100+Main+St+Springfield+IL' target='_blank'>Get Directions</a></b><br/>"
        "<br/>Type: Farmers Market<br/><br/>"
    )


def test_name_only_has_name_and_category():
    popup = render_popup(make_record(), Category.OTHER)
    assert popup == "<b>Test Market</b><br/><br/>Type: Other<br/><br/>"


def test_empty_category_reads_other(tables, settings):
    styled = derive_partner(make_record(category=None), tables, settings)
    assert styled.category is Category.OTHER
    assert styled.icon == tables.icons[Category.OTHER]
    assert "Type: Other<br/>" in styled.popup


def test_city_without_address_still_gets_directions(tables, settings):
    # Directions hinge on the city alone.
    styled = derive_partner(make_record(city="Urbana", state="IL"), tables, settings)
    assert "Get Directions" in styled.popup
    assert styled.directions == f"{DIRECTIONS}Urbana+IL"
    assert "Urbana, IL<br/>" in styled.popup


def test_address_without_city_has_no_directions(tables, settings):
    styled = derive_partner(make_record(address="1 Elm St"), tables, settings)
    assert styled.directions is None
    assert "Get Directions" not in styled.popup
    assert "1 Elm St<br/>" in styled.popup


def test_sections_in_order():
    record = make_record(
        address="1 Elm St", address_line_2="Suite 2", city="Normal", state="IL", zip5="61761",
        dates="May - Oct", days="Saturday", hours="8am - noon",
        link="https://market.example.org", notes="SNAP accepted",
    )
    popup = render_popup(record, Category.STORE, "https://dir.example/x")
    markers = [
        "<b>Test Market</b>", "1 Elm St<br/>", "Suite 2<br/>", "Normal, IL  61761<br/>",
        "Get Directions", "Type: Store", "Dates: May - Oct<br/>", "Days: Saturday<br/>",
        "Hours: 8am - noon<br/>", "<a href='https://market.example.org' target='_blank'>Website</a><br/>",
        "<br/>SNAP accepted",
    ]
    positions = [popup.index(m) for m in markers]
    assert positions == sorted(positions)
    assert popup.endswith("<br/>SNAP accepted")


def test_each_optional_section_independent():
    assert "Dates:" not in render_popup(make_record(days="Monday"), Category.OTHER)
    assert "Days: Monday<br/>" in render_popup(make_record(days="Monday"), Category.OTHER)
    assert "Hours: 9-5<br/>" in render_popup(make_record(hours="9-5"), Category.OTHER)
    assert "Website" not in render_popup(make_record(hours="9-5"), Category.OTHER)
    # state/zip missing are dropped from the locality line individually
    assert "Peoria<br/>" in render_popup(make_record(city="Peoria"), Category.OTHER)
    assert "Peoria  61602<br/>" in render_popup(make_record(city="Peoria", zip5="61602"), Category.OTHER)


def test_free_text_is_escaped():
    record = make_record(name="<script>alert(1)</script>", notes="Tom & Jerry's <b>stand</b>")
    popup = render_popup(record, Category.OTHER)
    assert "<script>" not in popup
    assert "&lt;script&gt;" in popup
    assert "Tom &amp; Jerry&#x27;s &lt;b&gt;stand&lt;/b&gt;" in popup


def test_website_links_are_limited_to_http():
    assert safe_link("www.example.org") == "https://www.example.org"
    assert safe_link("http://example.org/a?b=1") == "http://example.org/a?b=1"
    assert safe_link("javascript:alert(1)") is None
    assert "Website" not in render_popup(make_record(link="javascript:alert(1)"), Category.OTHER)


def test_derivation_is_idempotent(tables, settings):
    record = make_record(city="Chicago", address="4410 S Halsted St", notes="Line 1", category="Store")
    first = derive_partner(record, tables, settings)
    second = derive_partner(record, tables, settings)
    assert first.popup == second.popup
    assert (first.color, first.icon) == (second.color, second.icon)


def test_directions_link_encodes_parts():
    assert build_directions_link("100  Main St", "Springfield", "IL") == f"{DIRECTIONS}100+Main+St+Springfield+IL"
    assert build_directions_link("5 O'Hare & Co", "Chicago", "IL") == f"{DIRECTIONS}5+O%27Hare+%26+Co+Chicago+IL"
    assert build_directions_link(None, "Chicago", "IL", base_url="x=") == "x=Chicago+IL"
