"""
Faceted attribute selection and product matching.

- filter_state: buyer selections per dimension
- draft: vendor product draft
- guided_chain: ordered attribute-picker flow
- matching: predicates deciding which catalog items pass
- names: id -> display name resolution for summaries
- repository / browse_session: Supabase catalog access and fetch wiring
"""

from facets.draft import DraftAttributes, DraftIncompleteError
from facets.filter_state import FilterState
from facets.guided_chain import BUYER_STEPS, VENDOR_STEPS, ChainState, GuidedChain, OpenStep
from facets.matching import filter_catalog, matches_item
from facets.models import CatalogItem, Dimension, Price, PriceBand, PriceMode, SortMode
from facets.names import NameResolver, ResolutionStatus

__all__ = [
    "BUYER_STEPS",
    "VENDOR_STEPS",
    "CatalogItem",
    "ChainState",
    "Dimension",
    "DraftAttributes",
    "DraftIncompleteError",
    "FilterState",
    "GuidedChain",
    "NameResolver",
    "OpenStep",
    "Price",
    "PriceBand",
    "PriceMode",
    "ResolutionStatus",
    "SortMode",
    "filter_catalog",
    "matches_item",
]
