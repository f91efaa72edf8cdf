"""
Browse session.

Ties one buyer's filter state to a catalog snapshot:
- loads products, price bands, vendor names and every lookup table
  concurrently (the only suspension points in the flow)
- commits each response only while the session is alive, so responses that
  land after ``close()`` are discarded
- evaluates results against the filter state as it is when asked, never
  against a state captured when a fetch was issued
"""

import asyncio
import uuid
from typing import List, Optional

from core.logging import LoggerMixin
from facets.facet_catalog import LOOKUP_TABLES
from facets.filter_state import FilterState
from facets.matching import filter_catalog, index_bands, sort_items
from facets.models import CatalogItem, Dimension, NameEntry, PriceBand, SortMode, Vendor
from facets.names import NameResolver
from facets.repository import CatalogRepository


class BrowseSession(LoggerMixin):
    """
    Filter state plus the data it is matched against.

    Args:
        repository: Catalog source
        state: Filter state to drive (a fresh one if omitted)
        resolver: Name tables (a fresh one if omitted)
    """

    def __init__(
        self,
        repository: CatalogRepository,
        state: Optional[FilterState] = None,
        resolver: Optional[NameResolver] = None,
    ):
        self.session_id = uuid.uuid4().hex[:12]
        self.repository = repository
        self.state = state if state is not None else FilterState()
        self.resolver = resolver if resolver is not None else NameResolver()
        self._items: List[CatalogItem] = []
        self._bands: List[PriceBand] = []
        self._alive = True

    @property
    def is_alive(self) -> bool:
        return self._alive

    @property
    def items(self) -> List[CatalogItem]:
        return list(self._items)

    @property
    def bands(self) -> List[PriceBand]:
        return list(self._bands)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self, limit: Optional[int] = None) -> bool:
        """
        Fetch the catalog snapshot and all name tables concurrently.

        Returns:
            False if the session was closed before the responses arrived
        """
        lookup_dimensions = list(LOOKUP_TABLES)
        products, bands, vendors, *names = await asyncio.gather(
            asyncio.to_thread(self.repository.fetch_products, limit),
            asyncio.to_thread(self.repository.fetch_price_bands),
            asyncio.to_thread(self.repository.fetch_vendors),
            *(asyncio.to_thread(self.repository.fetch_names, d) for d in lookup_dimensions),
        )

        if not self.apply_catalog(products):
            return False
        self.apply_bands(bands)
        self.apply_vendors(vendors)
        for dimension, entries in zip(lookup_dimensions, names):
            self.apply_names(dimension, entries)

        self.logger.info(
            "Browse session loaded",
            session_id=self.session_id,
            products=len(self._items),
            bands=len(self._bands),
        )
        return True

    async def refresh_names(self, dimension: Dimension) -> bool:
        """Re-fetch one dimension's name table."""
        entries = await asyncio.to_thread(self.repository.fetch_names, dimension)
        return self.apply_names(dimension, entries)

    def close(self) -> None:
        """Tear the session down; later responses are dropped."""
        self._alive = False

    # -------------------------------------------------------------------------
    # Commit points (each checks liveness)
    # -------------------------------------------------------------------------

    def apply_catalog(self, items: List[CatalogItem]) -> bool:
        if not self._accepting("products"):
            return False
        self._items = list(items)
        return True

    def apply_bands(self, bands: List[PriceBand]) -> bool:
        if not self._accepting("price_bands"):
            return False
        self._bands = list(bands)
        self.resolver.load_price_bands(self._bands)
        return True

    def apply_vendors(self, vendors: List[Vendor]) -> bool:
        if not self._accepting("vendors"):
            return False
        self.resolver.load_vendors(vendors)
        return True

    def apply_names(self, dimension: Dimension, entries: List[NameEntry]) -> bool:
        if not self._accepting(Dimension(dimension).value):
            return False
        self.resolver.load(dimension, entries)
        return True

    def _accepting(self, resource: str) -> bool:
        if not self._alive:
            self.logger.debug("Discarding late response", session_id=self.session_id, resource=resource)
        return self._alive

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    def results(self, sort_mode: Optional[SortMode] = None) -> List[CatalogItem]:
        """Items matching the current filter state, optionally sorted."""
        matched = filter_catalog(self._items, self.state, index_bands(self._bands))
        if sort_mode is None:
            return matched
        return sort_items(matched, sort_mode)

    def summary(self) -> str:
        return self.resolver.filter_summary(self.state)
