"""
Catalog row normalization.

The single boundary between raw Supabase rows and typed models. Product rows
store attributes in a loosely-typed ``spec`` JSON column and prices in a
``price`` JSON column; ids arrive as numbers or strings depending on the
table. Everything is coerced here once, so the match engine and name
resolver never see a raw row.

Wire format (``products`` table):
    spec:  {"dressTypeIds": [3], "fabricTypeIds": ["silk"], ..., "made_on_order": false}
    price: {"currency": "PKR", "mode": "stitched_total" | "unstitched_per_meter",
            "cost_pkr_total": 5000, "cost_pkr_per_meter": null, "available_sizes": ["M"]}
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from core.logging import get_logger
from core.utils import normalize_id, normalize_ids, safe_get, safe_text, to_flag, to_number
from facets.models import (
    CatalogAttributes,
    CatalogItem,
    Dimension,
    NameEntry,
    Price,
    PriceBand,
    PriceMode,
    Vendor,
)

logger = get_logger(__name__)


# spec JSON key per attribute dimension
SPEC_KEYS: Dict[Dimension, str] = {
    Dimension.DRESS_TYPE: "dressTypeIds",
    Dimension.FABRIC: "fabricTypeIds",
    Dimension.COLOR: "colorShadeIds",
    Dimension.WORK: "workTypeIds",
    Dimension.WORK_DENSITY: "workDensityIds",
    Dimension.ORIGIN_CITY: "originCityIds",
    Dimension.WEAR_STATE: "wearStateIds",
}

WIRE_PRICE_MODES: Dict[str, PriceMode] = {
    "stitched_total": PriceMode.TOTAL,
    "unstitched_per_meter": PriceMode.PER_UNIT_AREA,
    "total": PriceMode.TOTAL,
    "per_unit_area": PriceMode.PER_UNIT_AREA,
}

_MODE_TO_WIRE: Dict[PriceMode, str] = {
    PriceMode.TOTAL: "stitched_total",
    PriceMode.PER_UNIT_AREA: "unstitched_per_meter",
}


# =============================================================================
# Scalars
# =============================================================================

_TIMESTAMP = TypeAdapter(datetime)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a Postgres/ISO timestamp string. Returns None when unparseable.

    PostgREST trims trailing zeros from the fraction, so
    ``2024-05-03T10:00:00.12345+00:00`` is as valid as the six-digit form.
    """
    if isinstance(value, datetime):
        return value
    text = safe_text(value)
    if not text:
        return None
    try:
        return _TIMESTAMP.validate_python(text)
    except ValidationError:
        return None


# =============================================================================
# Price
# =============================================================================

def price_from_wire(raw: Any, default_currency: str = "PKR") -> Price:
    """
    Build a Price from the ``price`` JSON column.

    An unknown or missing mode is inferred from whichever amount is present
    (total wins), defaulting to total mode.
    """
    if not isinstance(raw, dict):
        return Price(currency=default_currency)

    total = to_number(raw.get("cost_pkr_total"))
    per_unit = to_number(raw.get("cost_pkr_per_meter"))

    mode = WIRE_PRICE_MODES.get(safe_text(raw.get("mode")))
    if mode is None:
        mode = PriceMode.PER_UNIT_AREA if total is None and per_unit is not None else PriceMode.TOTAL

    sizes = raw.get("available_sizes")
    return Price(
        mode=mode,
        currency=safe_text(raw.get("currency")) or default_currency,
        amount_total=total,
        amount_per_unit=per_unit,
        available_sizes=[safe_text(s) for s in sizes if safe_text(s)] if isinstance(sizes, list) else [],
    )


def price_to_wire(price: Price) -> Dict[str, Any]:
    """Serialize a Price back to the ``price`` JSON column shape."""
    return {
        "currency": price.currency,
        "mode": _MODE_TO_WIRE[price.mode],
        "cost_pkr_total": price.amount_total,
        "cost_pkr_per_meter": price.amount_per_unit,
        "available_sizes": list(price.available_sizes),
    }


# =============================================================================
# Products
# =============================================================================

def attributes_from_spec(spec: Any) -> CatalogAttributes:
    """Build the attribute id arrays from the ``spec`` JSON column."""
    return CatalogAttributes(
        dress_type_ids=normalize_ids(safe_get(spec, SPEC_KEYS[Dimension.DRESS_TYPE])),
        fabric_ids=normalize_ids(safe_get(spec, SPEC_KEYS[Dimension.FABRIC])),
        color_ids=normalize_ids(safe_get(spec, SPEC_KEYS[Dimension.COLOR])),
        work_ids=normalize_ids(safe_get(spec, SPEC_KEYS[Dimension.WORK])),
        work_density_ids=normalize_ids(safe_get(spec, SPEC_KEYS[Dimension.WORK_DENSITY])),
        origin_city_ids=normalize_ids(safe_get(spec, SPEC_KEYS[Dimension.ORIGIN_CITY])),
        wear_state_ids=normalize_ids(safe_get(spec, SPEC_KEYS[Dimension.WEAR_STATE])),
    )


def catalog_item_from_row(row: Dict[str, Any], default_currency: str = "PKR") -> Optional[CatalogItem]:
    """
    Convert a ``products`` row to a CatalogItem.

    Args:
        row: Raw row with id, vendor_id, product_code, title, created_at,
             inventory_qty, spec and price columns
        default_currency: Currency assumed when the price column omits it

    Returns:
        CatalogItem, or None if the row has no usable id
    """
    if not isinstance(row, dict):
        return None
    item_id = normalize_id(row.get("id"))
    if item_id is None:
        return None

    spec = row.get("spec") if isinstance(row.get("spec"), dict) else {}
    qty = to_number(row.get("inventory_qty"))

    return CatalogItem(
        id=item_id,
        vendor_id=normalize_id(row.get("vendor_id")),
        title=safe_text(row.get("title")),
        product_code=safe_text(row.get("product_code")) or None,
        created_at=parse_timestamp(row.get("created_at")),
        inventory_qty=max(0, int(qty)) if qty is not None else 0,
        made_on_order=to_flag(spec.get("made_on_order")),
        attributes=attributes_from_spec(spec),
        price=price_from_wire(row.get("price"), default_currency),
    )


def catalog_items_from_rows(rows: Optional[Iterable[Any]], default_currency: str = "PKR") -> List[CatalogItem]:
    """Convert product rows, dropping rows without an id. Input order is kept."""
    items = []
    skipped = 0
    for row in rows or []:
        item = catalog_item_from_row(row, default_currency)
        if item is None:
            skipped += 1
            continue
        items.append(item)
    if skipped:
        logger.warning("Dropped product rows without id", skipped=skipped)
    return items


# =============================================================================
# Lookups
# =============================================================================

def name_entries_from_rows(rows: Optional[Iterable[Any]]) -> List[NameEntry]:
    """Convert {id, name} lookup rows. Rows with a blank id or name are dropped."""
    entries = []
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        entry_id = normalize_id(row.get("id"))
        name = safe_text(row.get("name"))
        if entry_id and name:
            entries.append(NameEntry(id=entry_id, name=name))
    return entries


def price_band_from_row(row: Any) -> Optional[PriceBand]:
    """Convert a ``price_bands`` row (min_pkr/max_pkr bounds)."""
    if not isinstance(row, dict):
        return None
    band_id = normalize_id(row.get("id"))
    if band_id is None:
        return None
    sort_order = to_number(row.get("sort_order"))
    return PriceBand(
        id=band_id,
        name=safe_text(row.get("name")),
        min_amount=to_number(row.get("min_pkr")),
        max_amount=to_number(row.get("max_pkr")),
        sort_order=int(sort_order) if sort_order is not None else 0,
    )


def price_bands_from_rows(rows: Optional[Iterable[Any]]) -> List[PriceBand]:
    """Convert price band rows, ordered by sort_order (stable for ties)."""
    bands = [band for band in (price_band_from_row(row) for row in rows or []) if band is not None]
    return sorted(bands, key=lambda band: band.sort_order)


def vendor_from_row(row: Any) -> Optional[Vendor]:
    """Convert a ``vendor`` row."""
    if not isinstance(row, dict):
        return None
    vendor_id = normalize_id(row.get("id"))
    if vendor_id is None:
        return None
    return Vendor(
        id=vendor_id,
        name=safe_text(row.get("name")),
        shop_name=safe_text(row.get("shop_name")),
        location=safe_text(row.get("location")),
    )
