"""
Pydantic models for the facet catalog.

Models cover:
- Attribute dimensions and their cardinality
- Price value object and price bands
- Catalog items (read-only snapshot rows)
- Lookup rows (facet names, vendors)
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================

class Dimension(str, Enum):
    """One attribute axis products can be tagged with."""
    DRESS_TYPE = "dress_type"      # single-valued
    FABRIC = "fabric"
    COLOR = "color"
    WORK = "work"
    WORK_DENSITY = "work_density"
    ORIGIN_CITY = "origin_city"
    WEAR_STATE = "wear_state"
    PRICE_BAND = "price_band"
    VENDOR = "vendor"

    @property
    def is_multi_valued(self) -> bool:
        return self is not Dimension.DRESS_TYPE


class PriceMode(str, Enum):
    """How a product is priced."""
    PER_UNIT_AREA = "per_unit_area"   # unstitched cloth, priced per meter
    TOTAL = "total"                   # stitched / ready-to-wear


class SortMode(str, Enum):
    """Result orderings offered next to the filtered catalog."""
    COST = "cost"   # cheapest first, unpriced last
    DATE = "date"   # newest first, undated last


# Attribute dimensions carried on every catalog item (dress type excluded)
ATTRIBUTE_DIMENSIONS: Tuple[Dimension, ...] = (
    Dimension.FABRIC,
    Dimension.COLOR,
    Dimension.WORK,
    Dimension.WORK_DENSITY,
    Dimension.ORIGIN_CITY,
    Dimension.WEAR_STATE,
)

# Cleared whenever the dress type changes; vendor is orthogonal and survives
CASCADE_DIMENSIONS: Tuple[Dimension, ...] = ATTRIBUTE_DIMENSIONS + (Dimension.PRICE_BAND,)

MULTI_VALUED_DIMENSIONS: Tuple[Dimension, ...] = CASCADE_DIMENSIONS + (Dimension.VENDOR,)


# =============================================================================
# Price
# =============================================================================

class Price(BaseModel):
    """
    Price value object.

    Only the amount belonging to ``mode`` is meaningful; the draft container
    clears the other one on mode switches so stale values never get saved.
    """
    mode: PriceMode = PriceMode.TOTAL
    currency: str = "PKR"
    amount_total: Optional[float] = None
    amount_per_unit: Optional[float] = None
    available_sizes: List[str] = Field(default_factory=list)  # total mode only


class PriceBand(BaseModel):
    """A named price range. ``None`` bounds are unbounded on that side."""
    id: str
    name: str
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    sort_order: int = 0

    @property
    def is_valid(self) -> bool:
        """False when both bounds are set and inverted (such a band never matches)."""
        if self.min_amount is None or self.max_amount is None:
            return True
        return self.min_amount <= self.max_amount

    def contains(self, value: float) -> bool:
        """Inclusive on both ends."""
        if self.min_amount is not None and value < self.min_amount:
            return False
        if self.max_amount is not None and value > self.max_amount:
            return False
        return True


# =============================================================================
# Catalog Items
# =============================================================================

class CatalogAttributes(BaseModel):
    """Attribute id arrays attached to one product."""
    model_config = ConfigDict(frozen=True)

    dress_type_ids: List[str] = Field(default_factory=list)
    fabric_ids: List[str] = Field(default_factory=list)
    color_ids: List[str] = Field(default_factory=list)
    work_ids: List[str] = Field(default_factory=list)
    work_density_ids: List[str] = Field(default_factory=list)
    origin_city_ids: List[str] = Field(default_factory=list)
    wear_state_ids: List[str] = Field(default_factory=list)

    def ids_for(self, dimension: Dimension) -> List[str]:
        """Return the item's ids for an attribute dimension."""
        field_name = _ATTRIBUTE_FIELDS.get(dimension)
        if field_name is None:
            raise ValueError(f"{dimension.value} is not a product attribute")
        return getattr(self, field_name)


_ATTRIBUTE_FIELDS: Dict[Dimension, str] = {
    Dimension.DRESS_TYPE: "dress_type_ids",
    Dimension.FABRIC: "fabric_ids",
    Dimension.COLOR: "color_ids",
    Dimension.WORK: "work_ids",
    Dimension.WORK_DENSITY: "work_density_ids",
    Dimension.ORIGIN_CITY: "origin_city_ids",
    Dimension.WEAR_STATE: "wear_state_ids",
}


class CatalogItem(BaseModel):
    """
    One product from the catalog snapshot.

    Only ever built by ``facets.catalog_factory``; the matching code treats
    it as read-only.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    vendor_id: Optional[str] = None
    title: str = ""
    product_code: Optional[str] = None
    created_at: Optional[datetime] = None
    inventory_qty: int = 0
    made_on_order: bool = False
    attributes: CatalogAttributes = Field(default_factory=CatalogAttributes)
    price: Price = Field(default_factory=Price)


# =============================================================================
# Lookup Rows
# =============================================================================

class NameEntry(BaseModel):
    """One legal value of a facet dimension."""
    id: str
    name: str


class Vendor(BaseModel):
    """Vendor row used by the vendor picker."""
    id: str
    name: str = ""
    shop_name: str = ""
    location: str = ""

    @property
    def display_name(self) -> str:
        return self.shop_name or self.name or self.id


# =============================================================================
# API Schemas
# =============================================================================

class ProductResult(BaseModel):
    """One matching product as returned by the catalog API."""
    id: str
    vendor_id: Optional[str] = None
    title: str = ""
    product_code: Optional[str] = None
    created_at: Optional[datetime] = None
    price_display: str
    comparable_price: Optional[float] = None
    attributes: CatalogAttributes


class ProductListResponse(BaseModel):
    """Filtered catalog plus the human-readable filter summary."""
    count: int
    summary: str
    filters: Dict[str, Any]
    products: List[ProductResult] = Field(default_factory=list)


class ProductDraftRequest(BaseModel):
    """Body for creating a product from a vendor draft."""
    vendor_id: str
    title: str = ""
    inventory_qty: int = 0
    made_on_order: bool = False
    price_mode: PriceMode = PriceMode.TOTAL
    amount_total: Optional[float] = None
    amount_per_unit: Optional[float] = None
    available_sizes: List[str] = Field(default_factory=list)
    dress_type_ids: List[str] = Field(default_factory=list)
    fabric_ids: List[str] = Field(default_factory=list)
    color_ids: List[str] = Field(default_factory=list)
    work_ids: List[str] = Field(default_factory=list)
    work_density_ids: List[str] = Field(default_factory=list)
    origin_city_ids: List[str] = Field(default_factory=list)
    wear_state_ids: List[str] = Field(default_factory=list)


class CreateProductResponse(BaseModel):
    id: str
    product_code: Optional[str] = None
