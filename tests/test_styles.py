import pandas as pd
import pytest
import yaml

from partnermap.scripts.styles import Category, load_style_tables, resolve_category, resolve_style

EXPECTED = {
    "Farmers Market": ("green", "shopping-basket"),
    "CSA / Delivery": ("orange", "truck"),
    "Store": ("blue", "shopping-cart"),
    "Mobile Market": ("purple", "bus"),
}


@pytest.mark.parametrize("label", sorted(EXPECTED))
def test_known_categories_match_tables(label, tables):
    style = resolve_style(label, tables)
    assert style.category.value == label
    assert (style.color, style.icon) == EXPECTED[label]
    # stable across calls
    assert resolve_style(label, tables) == style


@pytest.mark.parametrize("label", [None, "", "   ", float("nan"), pd.NA, "Pop-Up Market", "Food Pantry"])
def test_absent_or_unknown_falls_back_to_other(label, tables):
    style = resolve_style(label, tables)
    assert style.category is Category.OTHER
    assert style.color == tables.colors[Category.OTHER] == "gray"
    assert style.icon == tables.icons[Category.OTHER] == "map-marker"


def test_labels_match_case_and_whitespace_insensitively(tables):
    assert resolve_category("  farmers   MARKET ") is Category.FARMERS_MARKET
    assert resolve_category("csa / delivery") is Category.CSA_DELIVERY


def test_aliases_map_legacy_labels(tables):
    assert resolve_category("CSA", tables.aliases) is Category.CSA_DELIVERY
    assert resolve_category("CSA") is Category.OTHER  # aliases are opt-in


def test_tables_are_read_only(tables):
    with pytest.raises(TypeError):
        tables.colors[Category.STORE] = "red"


def test_missing_table_entry_is_rejected(tmp_path):
    conf = {
        "colors": {"Farmers Market": "green", "CSA / Delivery": "orange", "Store": "blue", "Other": "gray"},
        "icons": {c.value: "leaf" for c in Category},
    }
    path = tmp_path / "categories.yml"
    path.write_text(yaml.safe_dump(conf), encoding="utf-8")

    with pytest.raises(KeyError, match="Mobile Market"):
        load_style_tables(path)


def test_unknown_table_entry_is_rejected(tmp_path):
    conf = {
        "colors": {**{c.value: "gray" for c in Category}, "Pop-Up Market": "red"},
        "icons": {c.value: "leaf" for c in Category},
    }
    path = tmp_path / "categories.yml"
    path.write_text(yaml.safe_dump(conf), encoding="utf-8")

    with pytest.raises(KeyError, match="Pop-Up Market"):
        load_style_tables(path)
