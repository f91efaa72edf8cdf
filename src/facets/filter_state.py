"""
Buyer filter state.

Holds the current selection per dimension while a buyer narrows the catalog:
- dress type is single-valued and drives a cascading reset
- every other dimension is a set of ids where an empty set means ANY

The state is a plain object owned by whoever drives the browse flow (a
BrowseSession, an API request); there is no process-wide store.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Union

from core.utils import normalize_id, normalize_ids
from facets.models import CASCADE_DIMENSIONS, MULTI_VALUED_DIMENSIONS, Dimension


DimensionLike = Union[Dimension, str]


def _as_dimension(dimension: DimensionLike) -> Dimension:
    return dimension if isinstance(dimension, Dimension) else Dimension(dimension)


@dataclass
class FilterState:
    """
    Current filter selection.

    All mutations go through the methods below; they are synchronous and do
    no I/O.
    """
    dress_type_id: Optional[str] = None
    fabric: Set[str] = field(default_factory=set)
    color: Set[str] = field(default_factory=set)
    work: Set[str] = field(default_factory=set)
    work_density: Set[str] = field(default_factory=set)
    origin_city: Set[str] = field(default_factory=set)
    wear_state: Set[str] = field(default_factory=set)
    price_band: Set[str] = field(default_factory=set)
    vendor: Set[str] = field(default_factory=set)

    # -------------------------------------------------------------------------
    # Dress type (single-valued)
    # -------------------------------------------------------------------------

    @property
    def dress_type_ids(self) -> List[str]:
        """Zero-or-one element list view of dress_type_id."""
        return [] if self.dress_type_id is None else [self.dress_type_id]

    def set_dress_type(self, dress_type_id: Any) -> None:
        """
        Select a dress type (or None to unset).

        Clears every downstream dimension except vendor, even when the id is
        unchanged.
        """
        self.dress_type_id = normalize_id(dress_type_id)
        for dimension in CASCADE_DIMENSIONS:
            self._set_for(dimension).clear()

    def set_dress_type_ids(self, ids: Iterable[Any]) -> None:
        """List form used by the dress-type wizard; the first id wins."""
        normalized = normalize_ids(list(ids or []))
        self.set_dress_type(normalized[0] if normalized else None)

    # -------------------------------------------------------------------------
    # Multi-valued dimensions
    # -------------------------------------------------------------------------

    def toggle(self, dimension: DimensionLike, item_id: Any) -> None:
        """Add the id if absent, remove it if present."""
        selected = self._set_for(_as_dimension(dimension))
        key = normalize_id(item_id)
        if key is None:
            return
        if key in selected:
            selected.discard(key)
        else:
            selected.add(key)

    def clear(self, dimension: DimensionLike) -> None:
        """Empty one dimension (back to ANY)."""
        self._set_for(_as_dimension(dimension)).clear()

    def set_vendor_ids(self, ids: Iterable[Any]) -> None:
        """Replace the vendor selection wholesale (bulk apply from the vendor picker)."""
        self.vendor = set(normalize_ids(list(ids or [])))

    def reset(self) -> None:
        """Drop every selection, vendor included."""
        self.dress_type_id = None
        for dimension in MULTI_VALUED_DIMENSIONS:
            self._set_for(dimension).clear()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def selected(self, dimension: DimensionLike) -> FrozenSet[str]:
        """Snapshot of the selection on a dimension (dress type as a 0/1 set)."""
        dimension = _as_dimension(dimension)
        if dimension is Dimension.DRESS_TYPE:
            return frozenset(self.dress_type_ids)
        return frozenset(self._set_for(dimension))

    @property
    def is_empty(self) -> bool:
        """True when no dimension constrains the catalog."""
        return self.dress_type_id is None and not any(
            self._set_for(dimension) for dimension in MULTI_VALUED_DIMENSIONS
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with sorted id lists (stable for responses and logs)."""
        data: Dict[str, Any] = {
            "dress_type_id": self.dress_type_id,
            "dress_type_ids": self.dress_type_ids,
        }
        for dimension in MULTI_VALUED_DIMENSIONS:
            data[dimension.value] = sorted(self._set_for(dimension))
        return data

    @classmethod
    def from_selections(
        cls,
        dress_type_id: Any = None,
        selections: Optional[Mapping[DimensionLike, Iterable[Any]]] = None,
    ) -> "FilterState":
        """
        Build a state from already-chosen values (e.g. request query params).

        The dress type is applied first so the cascade cannot wipe the
        selections that follow.
        """
        state = cls()
        state.set_dress_type(dress_type_id)
        for dimension, ids in (selections or {}).items():
            target = state._set_for(_as_dimension(dimension))
            target.update(normalize_ids(list(ids or [])))
        return state

    def _set_for(self, dimension: Dimension) -> Set[str]:
        if not dimension.is_multi_valued:
            raise ValueError(f"{dimension.value} is single-valued; use set_dress_type")
        return getattr(self, dimension.value)
