"""
Tests for the vendor product draft.
"""

import pytest

from facets.catalog_factory import catalog_item_from_row
from facets.draft import DraftAttributes, DraftIncompleteError
from facets.models import Dimension, PriceMode


def _complete_draft() -> DraftAttributes:
    draft = DraftAttributes()
    draft.set_title("Lawn Kurta")
    draft.set_amount_total(5000)
    draft.set_ids(Dimension.DRESS_TYPE, [1])
    return draft


class TestPriceMode:
    """Mode switches clear the fields of the other mode."""

    def test_switch_to_per_unit_clears_total_and_sizes(self):
        draft = DraftAttributes()
        draft.set_amount_total(5000)
        draft.set_available_sizes(["S", "M"])

        draft.set_price_mode(PriceMode.PER_UNIT_AREA)

        assert draft.price.mode is PriceMode.PER_UNIT_AREA
        assert draft.price.amount_total is None
        assert draft.price.available_sizes == []

    def test_switch_to_total_clears_per_unit(self):
        draft = DraftAttributes()
        draft.set_price_mode(PriceMode.PER_UNIT_AREA)
        draft.set_amount_per_unit(1200)

        draft.set_price_mode(PriceMode.TOTAL)

        assert draft.price.mode is PriceMode.TOTAL
        assert draft.price.amount_per_unit is None

    def test_reselecting_current_mode_keeps_amounts(self):
        draft = DraftAttributes()
        draft.set_amount_total(5000)
        draft.set_available_sizes(["M"])

        draft.set_price_mode(PriceMode.TOTAL)

        assert draft.price.amount_total == 5000
        assert draft.price.available_sizes == ["M"]

    def test_amounts_are_clamped(self):
        draft = DraftAttributes()

        draft.set_amount_total(-50)
        assert draft.price.amount_total == 0

        draft.set_amount_total("1999.9")
        assert draft.price.amount_total == 1999

        draft.set_amount_total("abc")
        assert draft.price.amount_total == 0

    def test_price_property_is_a_copy(self):
        draft = DraftAttributes()
        draft.set_amount_total(100)

        price = draft.price
        price.available_sizes.append("XL")

        assert draft.price.available_sizes == []


class TestScalars:

    def test_inventory_qty_clamped(self):
        draft = DraftAttributes()

        draft.set_inventory_qty(-4)
        assert draft.inventory_qty == 0

        draft.set_inventory_qty(7.8)
        assert draft.inventory_qty == 7

        draft.set_inventory_qty(None)
        assert draft.inventory_qty == 0

    def test_title_trimmed(self):
        draft = DraftAttributes()

        draft.set_title("  Chiffon Saree ")

        assert draft.title == "Chiffon Saree"


class TestAttributes:

    def test_set_ids_normalizes_and_dedupes(self):
        draft = DraftAttributes()

        draft.set_ids(Dimension.FABRIC, ["silk", "silk", 4, ""])

        assert draft.selected(Dimension.FABRIC) == frozenset({"silk", "4"})

    def test_toggle(self):
        draft = DraftAttributes()

        draft.toggle(Dimension.COLOR, "red")
        draft.toggle(Dimension.COLOR, "blue")
        draft.toggle(Dimension.COLOR, "red")

        assert draft.selected(Dimension.COLOR) == frozenset({"blue"})

    def test_dress_type_may_hold_several_ids(self):
        draft = DraftAttributes()

        draft.set_ids(Dimension.DRESS_TYPE, [1, 2])

        assert draft.selected(Dimension.DRESS_TYPE) == frozenset({"1", "2"})

    def test_price_band_is_not_a_draft_attribute(self):
        draft = DraftAttributes()

        with pytest.raises(ValueError):
            draft.set_ids(Dimension.PRICE_BAND, ["b1"])


class TestValidation:

    def test_empty_draft_reports_all_missing(self):
        draft = DraftAttributes()

        assert draft.missing_fields() == ["title", "amount_total", "dress_type"]
        assert draft.can_save is False

    def test_per_unit_mode_requires_per_unit_amount(self):
        draft = _complete_draft()
        draft.set_price_mode(PriceMode.PER_UNIT_AREA)

        assert draft.missing_fields() == ["amount_per_unit"]

        draft.set_amount_per_unit(800)
        assert draft.can_save is True

    def test_zero_amount_is_missing(self):
        draft = _complete_draft()
        draft.set_amount_total(0)

        assert "amount_total" in draft.missing_fields()

    def test_complete_draft_can_save(self):
        assert _complete_draft().can_save is True


class TestPayload:

    def test_payload_shape(self):
        draft = _complete_draft()
        draft.set_ids(Dimension.FABRIC, ["silk", "cotton"])
        draft.set_inventory_qty(4)
        draft.set_available_sizes(["M", "L"])

        payload = draft.to_payload("vendor-1")

        assert payload["vendor_id"] == "vendor-1"
        assert payload["title"] == "Lawn Kurta"
        assert payload["inventory_qty"] == 4
        assert payload["spec"]["dressTypeIds"] == ["1"]
        assert payload["spec"]["fabricTypeIds"] == ["cotton", "silk"]
        assert payload["spec"]["colorShadeIds"] == []
        assert payload["spec"]["made_on_order"] is False
        assert payload["price"] == {
            "currency": "PKR",
            "mode": "stitched_total",
            "cost_pkr_total": 5000,
            "cost_pkr_per_meter": None,
            "available_sizes": ["M", "L"],
        }

    def test_made_on_order_zeroes_inventory(self):
        draft = _complete_draft()
        draft.set_inventory_qty(9)
        draft.set_made_on_order(True)

        payload = draft.to_payload("vendor-1")

        assert payload["inventory_qty"] == 0
        assert payload["spec"]["made_on_order"] is True

    def test_incomplete_draft_raises_with_missing_fields(self):
        draft = DraftAttributes()
        draft.set_title("Only a title")

        with pytest.raises(DraftIncompleteError) as exc_info:
            draft.to_payload("vendor-1")

        assert exc_info.value.missing == ["amount_total", "dress_type"]

    def test_blank_vendor_is_missing(self):
        with pytest.raises(DraftIncompleteError) as exc_info:
            _complete_draft().to_payload("  ")

        assert exc_info.value.missing == ["vendor_id"]

    def test_reset_after_save(self):
        draft = _complete_draft()
        draft.to_payload("vendor-1")

        draft.reset()

        assert draft.title == ""
        assert draft.selected(Dimension.DRESS_TYPE) == frozenset()
        assert draft.price.amount_total is None


class TestFromItem:

    def test_hydrates_from_saved_product(self, product_row_factory):
        row = product_row_factory("A", [1], per_meter=900, fabricTypeIds=["silk"])
        item = catalog_item_from_row(row)

        draft = DraftAttributes.from_item(item)

        assert draft.title == "Product A"
        assert draft.price.mode is PriceMode.PER_UNIT_AREA
        assert draft.price.amount_per_unit == 900
        assert draft.selected(Dimension.FABRIC) == frozenset({"silk"})
        assert draft.can_save is True
