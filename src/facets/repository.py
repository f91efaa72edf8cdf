"""
Catalog repository.

Reads products, lookup tables, price bands and vendors from Supabase and
writes new products. Rows pass through ``facets.catalog_factory`` before
leaving this module.

Read failures are logged and degrade to empty results; the browse flow keeps
working with reduced filtering fidelity. That includes a Supabase client
that could not be created at all. Writes raise.
"""

from typing import Any, Dict, List, Optional

from supabase import Client

from config.settings import Settings, get_settings
from core.logging import LoggerMixin
from facets.catalog_factory import (
    catalog_items_from_rows,
    name_entries_from_rows,
    price_bands_from_rows,
    vendor_from_row,
)
from facets.facet_catalog import color_entries, lookup_table_for
from facets.models import CatalogItem, Dimension, NameEntry, PriceBand, Vendor


PRODUCT_COLUMNS = "id, vendor_id, product_code, title, created_at, inventory_qty, spec, price"
PRICE_BAND_COLUMNS = "id, name, min_pkr, max_pkr, sort_order"
VENDOR_COLUMNS = "id, name, shop_name, location"


class CatalogWriteError(Exception):
    """Raised when a product row cannot be written."""
    pass


class CatalogRepository(LoggerMixin):
    """
    Supabase-backed source for the catalog snapshot and facet tables.

    Args:
        client: Supabase client (defaults to the shared singleton; if that
            cannot be created, reads return [] and writes raise)
        settings: Settings (defaults to get_settings())
    """

    def __init__(self, client: Optional[Client] = None, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        if client is None:
            from config.database import get_supabase_client_optional
            client = get_supabase_client_optional()
            if client is None:
                self.logger.warning("Supabase unavailable, catalog reads will be empty")
        self._client = client

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def _skip_offline(self, table: str) -> bool:
        if self._client is not None:
            return False
        self.logger.warning("Skipping fetch, no Supabase client", table=table)
        return True

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def fetch_products(self, limit: Optional[int] = None) -> List[CatalogItem]:
        """
        Newest products first, one bounded page.

        ``limit`` is capped at settings.catalog_row_limit.
        """
        cap = self._settings.catalog_row_limit
        row_limit = cap if limit is None else max(1, min(limit, cap))
        table = self._settings.products_table
        if self._skip_offline(table):
            return []

        try:
            result = (
                self._client.table(table)
                .select(PRODUCT_COLUMNS)
                .order("created_at", desc=True)
                .limit(row_limit)
                .execute()
            )
        except Exception as e:
            self.logger.warning("Product fetch failed", table=table, error=str(e))
            return []

        items = catalog_items_from_rows(result.data, self._settings.currency)
        self.logger.info("Products fetched", count=len(items), limit=row_limit)
        return items

    def fetch_names(self, dimension: Dimension) -> List[NameEntry]:
        """
        All {id, name} entries of a dimension.

        Colors come from the static palette; price bands and vendors are
        read from their own tables.
        """
        dimension = Dimension(dimension)
        if dimension is Dimension.COLOR:
            return color_entries()
        if dimension is Dimension.PRICE_BAND:
            return [NameEntry(id=band.id, name=band.name) for band in self.fetch_price_bands() if band.name]
        if dimension is Dimension.VENDOR:
            return [NameEntry(id=vendor.id, name=vendor.display_name) for vendor in self.fetch_vendors()]

        lookup = lookup_table_for(dimension)
        if lookup is None or self._skip_offline(lookup.table):
            return []
        try:
            result = (
                self._client.table(lookup.table)
                .select("id, name")
                .order(lookup.order_by)
                .execute()
            )
        except Exception as e:
            self.logger.warning("Lookup fetch failed", table=lookup.table, error=str(e))
            return []
        return name_entries_from_rows(result.data)

    def fetch_price_bands(self) -> List[PriceBand]:
        """Price bands ordered by sort_order. Inverted bands are kept but logged."""
        table = self._settings.price_bands_table
        if self._skip_offline(table):
            return []
        try:
            result = (
                self._client.table(table)
                .select(PRICE_BAND_COLUMNS)
                .order("sort_order")
                .execute()
            )
        except Exception as e:
            self.logger.warning("Price band fetch failed", table=table, error=str(e))
            return []

        bands = price_bands_from_rows(result.data)
        for band in bands:
            if not band.is_valid:
                self.logger.warning(
                    "Price band has min above max and will never match",
                    band_id=band.id,
                    min_amount=band.min_amount,
                    max_amount=band.max_amount,
                )
        return bands

    def fetch_vendors(self) -> List[Vendor]:
        table = self._settings.vendors_table
        if self._skip_offline(table):
            return []
        try:
            result = (
                self._client.table(table)
                .select(VENDOR_COLUMNS)
                .order("name")
                .execute()
            )
        except Exception as e:
            self.logger.warning("Vendor fetch failed", table=table, error=str(e))
            return []
        return [vendor for vendor in (vendor_from_row(row) for row in result.data or []) if vendor]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert_product(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a product row built by DraftAttributes.to_payload.

        Returns:
            {"id": ..., "product_code": ...} of the created row

        Raises:
            CatalogWriteError: If the insert fails or returns no row
        """
        table = self._settings.products_table
        if self._client is None:
            raise CatalogWriteError("Supabase client is not available")
        try:
            result = self._client.table(table).insert(payload).execute()
        except Exception as e:
            self.logger.error("Product insert failed", table=table, error=str(e))
            raise CatalogWriteError(f"Failed to insert product: {e}") from e

        rows = result.data or []
        if not rows or rows[0].get("id") is None:
            raise CatalogWriteError("Product insert returned no id")

        created = {"id": rows[0]["id"], "product_code": rows[0].get("product_code")}
        self.logger.info("Product created", product_id=created["id"], vendor_id=payload.get("vendor_id"))
        return created
