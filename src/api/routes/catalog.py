"""
Catalog API Routes.

Facet lookups, filtered product listing and product creation from a vendor
draft.

NOTE: Lookup and write routes use `def` because the Supabase client is
synchronous; FastAPI runs them in a thread pool. The listing route is
`async def` because BrowseSession already moves its fetches onto threads.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.logging import get_logger
from facets.browse_session import BrowseSession
from facets.draft import DraftAttributes, DraftIncompleteError
from facets.filter_state import FilterState
from facets.matching import comparable_price, format_price
from facets.models import (
    CatalogItem,
    CreateProductResponse,
    Dimension,
    NameEntry,
    PriceBand,
    PriceMode,
    ProductDraftRequest,
    ProductListResponse,
    ProductResult,
    SortMode,
)
from facets.repository import CatalogRepository, CatalogWriteError

logger = get_logger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["Catalog"])


def get_catalog_repository() -> CatalogRepository:
    """Dependency: repository over the shared Supabase client."""
    return CatalogRepository()


# =============================================================================
# Facets
# =============================================================================

@router.get(
    "/facets/{dimension}",
    response_model=List[NameEntry],
    summary="Legal values of one facet dimension",
)
def list_facet_values(
    dimension: str,
    repository: CatalogRepository = Depends(get_catalog_repository),
) -> List[NameEntry]:
    try:
        target = Dimension(dimension)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown dimension: {dimension}")
    return repository.fetch_names(target)


@router.get(
    "/price-bands",
    response_model=List[PriceBand],
    summary="Price bands ordered for display",
)
def list_price_bands(
    repository: CatalogRepository = Depends(get_catalog_repository),
) -> List[PriceBand]:
    return repository.fetch_price_bands()


# =============================================================================
# Products
# =============================================================================

@router.get(
    "/products",
    response_model=ProductListResponse,
    summary="Products matching the given facet selection",
)
async def list_products(
    dress_type: Optional[str] = Query(None, description="Single dress type id"),
    fabric: List[str] = Query([]),
    color: List[str] = Query([]),
    work: List[str] = Query([]),
    work_density: List[str] = Query([]),
    origin_city: List[str] = Query([]),
    wear_state: List[str] = Query([]),
    price_band: List[str] = Query([]),
    vendor: List[str] = Query([]),
    sort: Optional[SortMode] = Query(None, description="cost or date"),
    limit: Optional[int] = Query(None, ge=1),
    repository: CatalogRepository = Depends(get_catalog_repository),
) -> ProductListResponse:
    """
    Filter the newest catalog page by the selected facets.

    Within a dimension any selected id matches; across dimensions all must
    match. An empty dimension means "any".
    """
    state = FilterState.from_selections(
        dress_type_id=dress_type,
        selections={
            Dimension.FABRIC: fabric,
            Dimension.COLOR: color,
            Dimension.WORK: work,
            Dimension.WORK_DENSITY: work_density,
            Dimension.ORIGIN_CITY: origin_city,
            Dimension.WEAR_STATE: wear_state,
            Dimension.PRICE_BAND: price_band,
            Dimension.VENDOR: vendor,
        },
    )

    session = BrowseSession(repository, state=state)
    try:
        await session.load(limit)
        matched = session.results(sort)
        summary = session.summary()
    finally:
        session.close()

    logger.info(
        "Catalog filtered",
        session_id=session.session_id,
        matched=len(matched),
        total=len(session.items),
        sort=sort.value if sort else None,
    )

    return ProductListResponse(
        count=len(matched),
        summary=summary,
        filters=state.to_dict(),
        products=[_to_result(item) for item in matched],
    )


@router.post(
    "/products",
    response_model=CreateProductResponse,
    status_code=201,
    summary="Create a product from a vendor draft",
)
def create_product(
    request: ProductDraftRequest,
    repository: CatalogRepository = Depends(get_catalog_repository),
) -> CreateProductResponse:
    draft = _draft_from_request(request)
    try:
        payload = draft.to_payload(request.vendor_id)
    except DraftIncompleteError as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Draft is incomplete", "missing": e.missing},
        )

    try:
        created = repository.insert_product(payload)
    except CatalogWriteError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return CreateProductResponse(**created)


# =============================================================================
# Helpers
# =============================================================================

def _draft_from_request(request: ProductDraftRequest) -> DraftAttributes:
    draft = DraftAttributes()
    draft.set_title(request.title)
    draft.set_inventory_qty(request.inventory_qty)
    draft.set_made_on_order(request.made_on_order)
    draft.set_price_mode(request.price_mode)
    if request.price_mode is PriceMode.TOTAL:
        draft.set_amount_total(request.amount_total)
        draft.set_available_sizes(request.available_sizes)
    else:
        draft.set_amount_per_unit(request.amount_per_unit)

    ids_by_dimension: Dict[Dimension, List[Any]] = {
        Dimension.DRESS_TYPE: request.dress_type_ids,
        Dimension.FABRIC: request.fabric_ids,
        Dimension.COLOR: request.color_ids,
        Dimension.WORK: request.work_ids,
        Dimension.WORK_DENSITY: request.work_density_ids,
        Dimension.ORIGIN_CITY: request.origin_city_ids,
        Dimension.WEAR_STATE: request.wear_state_ids,
    }
    for dimension, ids in ids_by_dimension.items():
        draft.set_ids(dimension, ids)
    return draft


def _to_result(item: CatalogItem) -> ProductResult:
    return ProductResult(
        id=item.id,
        vendor_id=item.vendor_id,
        title=item.title,
        product_code=item.product_code,
        created_at=item.created_at,
        price_display=format_price(item.price),
        comparable_price=comparable_price(item.price),
        attributes=item.attributes,
    )
