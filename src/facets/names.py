"""
Name Resolution Layer.

Turns selected facet ids into human-readable summaries. Each dimension is in
one of three states for a given selection:

    ANY       nothing selected                       -> "Any"
    PENDING   ids selected, none of them named yet   -> "Loading…"
    RESOLVED  at least one id has a name             -> "Silk, Cotton"

PENDING must not collapse into ANY: an active filter shown as "Any" would
tell the buyer they are seeing everything when they are not. Ids that never
resolve are dropped from the text; matching is id-based and unaffected.
"""

from enum import Enum
from typing import AbstractSet, Dict, Iterable, List

from facets.facet_catalog import SUMMARY_LABELS, color_entries
from facets.filter_state import FilterState
from facets.models import ATTRIBUTE_DIMENSIONS, Dimension, NameEntry, PriceBand, Vendor


ANY_LABEL = "Any"
LOADING_LABEL = "Loading…"
SUMMARY_SEPARATOR = "  |  "

# Dimensions shown in the one-line filter summary, in display order
SUMMARY_DIMENSIONS = (Dimension.DRESS_TYPE,) + ATTRIBUTE_DIMENSIONS + (Dimension.PRICE_BAND,)


class ResolutionStatus(str, Enum):
    ANY = "any"
    PENDING = "pending"
    RESOLVED = "resolved"


class NameResolver:
    """
    Per-dimension id -> display name tables.

    Tables are replaced wholesale by ``load`` when a lookup fetch completes.
    Colors come from the static palette and are available immediately.
    """

    def __init__(self):
        self._names: Dict[Dimension, Dict[str, str]] = {}
        self._positions: Dict[Dimension, Dict[str, int]] = {}
        self.load(Dimension.COLOR, color_entries())

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, dimension: Dimension, entries: Iterable[NameEntry]) -> None:
        """Replace the name table for a dimension. Blank ids/names are skipped."""
        names: Dict[str, str] = {}
        positions: Dict[str, int] = {}
        for entry in entries:
            entry_id = entry.id.strip()
            name = entry.name.strip()
            if not entry_id or not name or entry_id in names:
                continue
            positions[entry_id] = len(positions)
            names[entry_id] = name
        self._names[Dimension(dimension)] = names
        self._positions[Dimension(dimension)] = positions

    def load_price_bands(self, bands: Iterable[PriceBand]) -> None:
        self.load(Dimension.PRICE_BAND, (NameEntry(id=b.id, name=b.name) for b in bands))

    def load_vendors(self, vendors: Iterable[Vendor]) -> None:
        self.load(Dimension.VENDOR, (NameEntry(id=v.id, name=v.display_name) for v in vendors))

    def is_loaded(self, dimension: Dimension) -> bool:
        return Dimension(dimension) in self._names

    # -------------------------------------------------------------------------
    # Resolution
    # -------------------------------------------------------------------------

    def names_for(self, dimension: Dimension, selected_ids: Iterable[str]) -> List[str]:
        """
        Resolved names for the selected ids, in name-table order.

        Unknown ids are dropped.
        """
        dimension = Dimension(dimension)
        names = self._names.get(dimension, {})
        positions = self._positions.get(dimension, {})
        known = [item_id for item_id in set(selected_ids) if item_id in names]
        known.sort(key=lambda item_id: positions[item_id])
        return [names[item_id] for item_id in known]

    def status(self, dimension: Dimension, selected_ids: AbstractSet[str]) -> ResolutionStatus:
        if not selected_ids:
            return ResolutionStatus.ANY
        if not self.names_for(dimension, selected_ids):
            return ResolutionStatus.PENDING
        return ResolutionStatus.RESOLVED

    def summary_for(self, dimension: Dimension, selected_ids: AbstractSet[str]) -> str:
        """
        "Any", "Loading…", or the comma-joined resolved names.

        Examples:
            >>> resolver = NameResolver()
            >>> resolver.summary_for(Dimension.COLOR, set())
            'Any'
            >>> resolver.summary_for(Dimension.COLOR, {"red"})
            'Red'
        """
        status = self.status(dimension, selected_ids)
        if status is ResolutionStatus.ANY:
            return ANY_LABEL
        if status is ResolutionStatus.PENDING:
            return LOADING_LABEL
        return ", ".join(self.names_for(dimension, selected_ids))

    def filter_summary(self, state: FilterState) -> str:
        """
        Labelled one-line summary of every displayed dimension.

        Example:
            "Dress: Kurta  |  Fabric: Silk  |  Color: Any  |  ...  |  Price: Loading…"
        """
        parts = [
            f"{SUMMARY_LABELS[dimension]}: {self.summary_for(dimension, state.selected(dimension))}"
            for dimension in SUMMARY_DIMENSIONS
        ]
        return SUMMARY_SEPARATOR.join(parts)
