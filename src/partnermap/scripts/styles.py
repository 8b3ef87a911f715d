# File: partnermap/scripts/styles.py
"""Category -> marker colour / icon lookup.

The tables live in ``config/categories.yml`` and are loaded once; callers pass
the resulting ``StyleTables`` around instead of reaching for a global.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

import pandas as pd
import yaml

from partnermap.scripts.settings import CATEGORIES


class Category(str, Enum):
    FARMERS_MARKET = "Farmers Market"
    CSA_DELIVERY = "CSA / Delivery"
    STORE = "Store"
    MOBILE_MARKET = "Mobile Market"
    OTHER = "Other"


@dataclass(frozen=True)
class StyleTables:
    colors: Mapping[Category, str]
    icons: Mapping[Category, str]
    aliases: Mapping[str, Category]


@dataclass(frozen=True)
class CategoryStyle:
    category: Category
    color: str
    icon: str


def _key(label: str) -> str:
    return re.sub(r"\s+", " ", label).strip().casefold()


_BY_KEY = {_key(c.value): c for c in Category}


def _lookup(label: str) -> Category | None:
    return _BY_KEY.get(_key(label))


def _table(raw: dict, name: str) -> Mapping[Category, str]:
    table: dict[Category, str] = {}
    for label, value in (raw or {}).items():
        category = _lookup(str(label))
        if category is None:
            raise KeyError(f"{name}: unknown category '{label}'")
        table[category] = str(value)

    missing = [c.value for c in Category if c not in table]
    if missing:
        raise KeyError(f"{name}: no entry for categories {missing}")
    return MappingProxyType(table)


def load_style_tables(path: str | Path = CATEGORIES) -> StyleTables:
    with open(path, "r", encoding="utf-8") as f:
        conf = yaml.safe_load(f) or {}

    aliases: dict[str, Category] = {}
    for alias, target in (conf.get("aliases") or {}).items():
        category = _lookup(str(target))
        if category is None:
            raise KeyError(f"aliases: '{alias}' points at unknown category '{target}'")
        aliases[_key(str(alias))] = category

    return StyleTables(
        colors=_table(conf.get("colors"), "colors"),
        icons=_table(conf.get("icons"), "icons"),
        aliases=MappingProxyType(aliases),
    )


def resolve_category(label: str | None, aliases: Mapping[str, Category] | None = None) -> Category:
    """Absent, blank or unrecognised labels resolve to ``Category.OTHER``."""
    if label is None or (not isinstance(label, str) and pd.isna(label)):
        return Category.OTHER
    text = str(label)
    if not text.strip():
        return Category.OTHER

    category = _lookup(text)
    if category is not None:
        return category
    return (aliases or {}).get(_key(text), Category.OTHER)


def resolve_style(label: str | None, tables: StyleTables) -> CategoryStyle:
    category = resolve_category(label, tables.aliases)
    return CategoryStyle(
        category=category,
        color=tables.colors[category],
        icon=tables.icons[category],
    )


__all__ = ["Category", "CategoryStyle", "StyleTables", "load_style_tables", "resolve_category", "resolve_style"]
