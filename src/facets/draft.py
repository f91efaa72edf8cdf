"""
Vendor product draft.

The in-progress attribute set a vendor builds for one product before it is
saved to the catalog. Fields are private and change only through the named
setters, so a price mode switch can clear the amount that no longer applies.
"""

import math
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

from core.utils import normalize_id, normalize_ids, safe_text
from facets.catalog_factory import SPEC_KEYS, price_to_wire
from facets.models import ATTRIBUTE_DIMENSIONS, CatalogItem, Dimension, Price, PriceMode


# Dimensions a vendor tags a product with, in guided-chain order
DRAFT_DIMENSIONS = (Dimension.DRESS_TYPE,) + ATTRIBUTE_DIMENSIONS


class DraftIncompleteError(ValueError):
    """Raised when a draft is serialized before its required fields are set."""

    def __init__(self, missing: List[str]):
        self.missing = missing
        super().__init__(f"Draft is incomplete: missing {', '.join(missing)}")


def _clamp_count(value: Any) -> int:
    """Non-negative integer; anything unusable becomes 0."""
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(0, math.trunc(number))


def _clamp_amount(value: Any) -> Optional[int]:
    """Like _clamp_count, but None stays None (amount not entered)."""
    if value is None:
        return None
    return _clamp_count(value)


class DraftAttributes:
    """
    One product under construction.

    Lifecycle: created empty when authoring starts, filled in by the guided
    chain's pickers and the form setters, serialized with ``to_payload`` on
    save, then ``reset``.
    """

    def __init__(self, currency: str = "PKR"):
        self._currency = currency
        self.reset()

    def reset(self) -> None:
        """Restore the empty draft (after a successful save or a cancel)."""
        self._title = ""
        self._inventory_qty = 0
        self._made_on_order = False
        self._price = Price(mode=PriceMode.TOTAL, currency=self._currency)
        self._ids: Dict[Dimension, Set[str]] = {dimension: set() for dimension in DRAFT_DIMENSIONS}

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def title(self) -> str:
        return self._title

    @property
    def inventory_qty(self) -> int:
        return self._inventory_qty

    @property
    def made_on_order(self) -> bool:
        return self._made_on_order

    @property
    def price(self) -> Price:
        return self._price.model_copy(deep=True)

    def selected(self, dimension: Dimension) -> FrozenSet[str]:
        return frozenset(self._ids_for(dimension))

    # -------------------------------------------------------------------------
    # Scalar setters
    # -------------------------------------------------------------------------

    def set_title(self, title: Any) -> None:
        self._title = safe_text(title)

    def set_inventory_qty(self, qty: Any) -> None:
        self._inventory_qty = _clamp_count(qty)

    def set_made_on_order(self, made_on_order: bool) -> None:
        self._made_on_order = bool(made_on_order)

    # -------------------------------------------------------------------------
    # Price setters
    # -------------------------------------------------------------------------

    def set_price_mode(self, mode: PriceMode) -> None:
        """
        Switch pricing mode, clearing the other mode's fields.

        per_unit_area clears amount_total and available_sizes; total clears
        amount_per_unit. Re-selecting the current mode changes nothing.
        """
        mode = PriceMode(mode)
        if mode is self._price.mode:
            return
        if mode is PriceMode.PER_UNIT_AREA:
            self._price = self._price.model_copy(
                update={"mode": mode, "amount_total": None, "available_sizes": []}
            )
        else:
            self._price = self._price.model_copy(update={"mode": mode, "amount_per_unit": None})

    def set_amount_total(self, value: Any) -> None:
        self._price = self._price.model_copy(update={"amount_total": _clamp_amount(value)})

    def set_amount_per_unit(self, value: Any) -> None:
        self._price = self._price.model_copy(update={"amount_per_unit": _clamp_amount(value)})

    def set_available_sizes(self, sizes: Iterable[Any]) -> None:
        """Sizes for total-mode products. Not validated here."""
        cleaned = [safe_text(size) for size in sizes or []]
        self._price = self._price.model_copy(update={"available_sizes": [s for s in cleaned if s]})

    # -------------------------------------------------------------------------
    # Attribute setters
    # -------------------------------------------------------------------------

    def set_ids(self, dimension: Dimension, ids: Iterable[Any]) -> None:
        """Replace the ids on one attribute dimension."""
        self._ids[self._check(dimension)] = set(normalize_ids(list(ids or [])))

    def toggle(self, dimension: Dimension, item_id: Any) -> None:
        selected = self._ids_for(dimension)
        key = normalize_id(item_id)
        if key is None:
            return
        if key in selected:
            selected.discard(key)
        else:
            selected.add(key)

    # -------------------------------------------------------------------------
    # Validation and serialization
    # -------------------------------------------------------------------------

    def missing_fields(self) -> List[str]:
        """Names of required fields that are not filled in yet."""
        missing = []
        if not self._title:
            missing.append("title")
        if self._price.mode is PriceMode.TOTAL:
            if not self._price.amount_total:
                missing.append("amount_total")
        elif not self._price.amount_per_unit:
            missing.append("amount_per_unit")
        if not self._ids[Dimension.DRESS_TYPE]:
            missing.append("dress_type")
        return missing

    @property
    def can_save(self) -> bool:
        return not self.missing_fields()

    def to_payload(self, vendor_id: Any) -> Dict[str, Any]:
        """
        Serialize to the ``products`` row shape for the persistence layer.

        Made-on-order products are stored with inventory 0.

        Raises:
            DraftIncompleteError: If required fields are missing
        """
        missing = self.missing_fields()
        if normalize_id(vendor_id) is None:
            missing.append("vendor_id")
        if missing:
            raise DraftIncompleteError(missing)

        spec: Dict[str, Any] = {
            SPEC_KEYS[dimension]: sorted(self._ids[dimension]) for dimension in DRAFT_DIMENSIONS
        }
        spec["made_on_order"] = self._made_on_order

        return {
            "vendor_id": vendor_id,
            "title": self._title,
            "inventory_qty": 0 if self._made_on_order else self._inventory_qty,
            "spec": spec,
            "price": price_to_wire(self._price),
        }

    @classmethod
    def from_item(cls, item: CatalogItem) -> "DraftAttributes":
        """Hydrate a draft from a saved product (edit flow)."""
        draft = cls(currency=item.price.currency)
        draft.set_title(item.title)
        draft.set_inventory_qty(item.inventory_qty)
        draft.set_made_on_order(item.made_on_order)
        draft._price = item.price.model_copy(deep=True)
        for dimension in DRAFT_DIMENSIONS:
            draft.set_ids(dimension, item.attributes.ids_for(dimension))
        return draft

    def _check(self, dimension: Dimension) -> Dimension:
        dimension = Dimension(dimension)
        if dimension not in self._ids:
            raise ValueError(f"{dimension.value} is not a product attribute")
        return dimension

    def _ids_for(self, dimension: Dimension) -> Set[str]:
        return self._ids[self._check(dimension)]
