"""
Match Engine.

Pure predicates deciding whether a catalog item satisfies the current filter
state. Semantics:
- within a dimension: ANY overlap (empty selection = no constraint)
- across dimensions: AND
- price bands: the item's comparable price must fall inside at least one
  selected band, bounds inclusive, None bounds unbounded

Nothing here mutates its inputs, so it is safe to re-run on every filter
change. Cost is O(items x dimensions).

Result ordering (cost / date) and price display formatting live here as
well since they read the same comparable price.
"""

from datetime import datetime, timezone
from typing import AbstractSet, Dict, Iterable, List, Mapping, Optional, Sequence

from facets.filter_state import FilterState
from facets.models import ATTRIBUTE_DIMENSIONS, CatalogItem, Price, PriceBand, PriceMode, SortMode


# =============================================================================
# Dimension Predicates
# =============================================================================

def matches_dimension(selected_ids: AbstractSet[str], item_ids: Sequence[str]) -> bool:
    """
    At-least-one-overlap match for a multi-valued dimension.

    Examples:
        >>> matches_dimension(set(), [])
        True
        >>> matches_dimension({"a", "b"}, ["b"])
        True
        >>> matches_dimension({"a", "b"}, ["c"])
        False
    """
    if not selected_ids:
        return True
    return any(item_id in selected_ids for item_id in item_ids)


def matches_dress_type(dress_type_id: Optional[str], item_ids: Sequence[str]) -> bool:
    """Unset matches everything; otherwise the item must carry that dress type."""
    if dress_type_id is None:
        return True
    return dress_type_id in item_ids


def matches_vendor(selected_ids: AbstractSet[str], vendor_id: Optional[str]) -> bool:
    """Vendor filter: empty selection matches; otherwise the item's vendor must be selected."""
    if not selected_ids:
        return True
    return vendor_id is not None and vendor_id in selected_ids


# =============================================================================
# Price Bands
# =============================================================================

def comparable_price(price: Price) -> Optional[float]:
    """
    Number used for band matching and cost sorting.

    Prefers the total amount, then the per-unit amount; None if unpriced.
    """
    if price.amount_total is not None:
        return price.amount_total
    if price.amount_per_unit is not None:
        return price.amount_per_unit
    return None


def matches_price_band(
    selected_band_ids: AbstractSet[str],
    bands_by_id: Mapping[str, PriceBand],
    value: Optional[float],
) -> bool:
    """
    True if ``value`` lies in any selected band.

    Selected ids with no band in ``bands_by_id`` are skipped, so an empty
    band table makes any non-empty selection match nothing.
    """
    if not selected_band_ids:
        return True
    if value is None:
        return False
    for band_id in selected_band_ids:
        band = bands_by_id.get(band_id)
        if band is not None and band.contains(value):
            return True
    return False


def index_bands(bands: Iterable[PriceBand]) -> Dict[str, PriceBand]:
    """Map band id -> band."""
    return {band.id: band for band in bands}


# =============================================================================
# Items
# =============================================================================

def matches_item(
    state: FilterState,
    bands_by_id: Mapping[str, PriceBand],
    item: CatalogItem,
) -> bool:
    """An item passes only if every active constraint passes."""
    if not matches_vendor(state.vendor, item.vendor_id):
        return False
    if not matches_dress_type(state.dress_type_id, item.attributes.dress_type_ids):
        return False
    for dimension in ATTRIBUTE_DIMENSIONS:
        if not matches_dimension(state.selected(dimension), item.attributes.ids_for(dimension)):
            return False
    return matches_price_band(state.price_band, bands_by_id, comparable_price(item.price))


def filter_catalog(
    items: Iterable[CatalogItem],
    state: FilterState,
    bands_by_id: Mapping[str, PriceBand],
) -> List[CatalogItem]:
    """Matching items in input order."""
    return [item for item in items if matches_item(state, bands_by_id, item)]


# =============================================================================
# Ordering & Display
# =============================================================================

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _timestamp(item: CatalogItem) -> Optional[float]:
    if item.created_at is None:
        return None
    created = item.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return (created - _EPOCH).total_seconds()


def sort_items(items: Iterable[CatalogItem], mode: SortMode) -> List[CatalogItem]:
    """
    Order results for display. Stable, so ties keep their filtered order.

    COST: cheapest first, unpriced last. DATE: newest first, undated last.
    """
    items = list(items)
    mode = SortMode(mode)
    if mode is SortMode.COST:
        def cost_key(item: CatalogItem):
            value = comparable_price(item.price)
            return (value is None, value if value is not None else 0.0)
        return sorted(items, key=cost_key)

    def date_key(item: CatalogItem):
        ts = _timestamp(item)
        return (ts is None, -ts if ts is not None else 0.0)
    return sorted(items, key=date_key)


def _format_amount(value: float) -> str:
    return f"{value:,.0f}" if float(value).is_integer() else f"{value:,.2f}"


def format_price(price: Price) -> str:
    """
    Display string for a price.

    Examples: "PKR 5,000", "PKR 1,200 / meter", "Price not set".
    """
    currency = price.currency
    if price.mode is PriceMode.TOTAL and price.amount_total is not None:
        return f"{currency} {_format_amount(price.amount_total)}"
    if price.mode is PriceMode.PER_UNIT_AREA and price.amount_per_unit is not None:
        return f"{currency} {_format_amount(price.amount_per_unit)} / meter"
    if price.amount_total is not None:
        return f"{currency} {_format_amount(price.amount_total)}"
    if price.amount_per_unit is not None:
        return f"{currency} {_format_amount(price.amount_per_unit)} / meter"
    return "Price not set"
