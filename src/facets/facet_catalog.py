"""
Facet value catalog.

Where each dimension's legal values come from. Most dimensions are lookup
tables in Supabase; colors are a fixed palette that never hits the database
(product rows store the color id, e.g. "red", directly).
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from facets.models import Dimension, NameEntry


@dataclass(frozen=True)
class LookupTable:
    """Supabase table holding the {id, name} rows of one dimension."""
    table: str
    order_by: str = "name"


@dataclass(frozen=True)
class ColorShade:
    id: str
    name: str
    hex: str


COLOR_SHADES: List[ColorShade] = [
    ColorShade("red", "Red", "#C21807"),
    ColorShade("green", "Green", "#1B5E20"),
    ColorShade("yellow", "Yellow", "#FBC02D"),
    ColorShade("blue", "Blue", "#1565C0"),
    ColorShade("golden", "Golden", "#D4AF37"),
    ColorShade("silver", "Silver", "#C0C0C0"),
    ColorShade("white", "White", "#FFFFFF"),
    ColorShade("black", "Black", "#000000"),
]


LOOKUP_TABLES: Dict[Dimension, LookupTable] = {
    Dimension.DRESS_TYPE: LookupTable("dress_type", order_by="id"),
    Dimension.FABRIC: LookupTable("fabric_types", order_by="sort_order"),
    Dimension.WORK: LookupTable("work_types"),
    Dimension.WORK_DENSITY: LookupTable("work_densities"),
    Dimension.ORIGIN_CITY: LookupTable("origin_cities"),
    Dimension.WEAR_STATE: LookupTable("wear_states"),
}


# Labels used in the one-line filter summary next to results
SUMMARY_LABELS: Dict[Dimension, str] = {
    Dimension.DRESS_TYPE: "Dress",
    Dimension.FABRIC: "Fabric",
    Dimension.COLOR: "Color",
    Dimension.WORK: "Work",
    Dimension.WORK_DENSITY: "Density",
    Dimension.ORIGIN_CITY: "Origin",
    Dimension.WEAR_STATE: "Wear",
    Dimension.PRICE_BAND: "Price",
    Dimension.VENDOR: "Vendor",
}


def lookup_table_for(dimension: Dimension) -> Optional[LookupTable]:
    """Return the lookup table for a dimension, or None if it has none."""
    return LOOKUP_TABLES.get(dimension)


def color_entries() -> List[NameEntry]:
    """The static color palette as name entries."""
    return [NameEntry(id=shade.id, name=shade.name) for shade in COLOR_SHADES]
