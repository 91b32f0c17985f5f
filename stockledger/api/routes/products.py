"""
Product management endpoints.

Stock and average cost are read-only here; they change only through
/api/stock-movements.
"""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import get_mov_store, get_owner_id, get_prod_store
from stockledger.application.dto.requests import ProductRequest
from stockledger.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
    StockMovementListResponse,
    movement_to_response,
    product_to_response,
)
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import ProductNotFoundError
from stockledger.infrastructure.storage.sqlite import (
    SQLiteProductStore,
    SQLiteStockMovementStore,
)

router = APIRouter(prefix="/api/products", tags=["products"])


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_product(
    request: ProductRequest,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Create a product with zero stock."""
    product = Product(
        owner_id=owner_id,
        name=request.name,
        sku=request.sku,
        low_stock_at=request.low_stock_at,
        category_id=request.category_id,
        unit_id=request.unit_id,
    )
    created = await store.create(product)
    return product_to_response(created)


@router.get("", response_model=ProductListResponse)
async def list_products(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductListResponse:
    """List the owner's products, newest first."""
    products = await store.list_products(owner_id, limit=limit, offset=offset)
    return ProductListResponse(
        items=[product_to_response(p) for p in products],
        total=await store.count_products(owner_id),
    )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: int,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Get a product by ID."""
    product = await store.get(owner_id, product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return product_to_response(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: int,
    request: ProductRequest,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> ProductResponse:
    """Update a product's descriptive fields."""
    existing = await store.get(owner_id, product_id)
    if existing is None:
        raise ProductNotFoundError(product_id)

    existing.name = request.name
    existing.sku = request.sku
    existing.low_stock_at = request.low_stock_at
    existing.category_id = request.category_id
    existing.unit_id = request.unit_id

    updated = await store.update(existing)
    return product_to_response(updated)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: int,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteProductStore = Depends(get_prod_store),
) -> None:
    """Delete a product together with its movement history."""
    deleted = await store.delete(owner_id, product_id)
    if not deleted:
        raise ProductNotFoundError(product_id)


@router.get(
    "/{product_id}/movements",
    response_model=StockMovementListResponse,
    responses={404: {"model": ErrorResponse}},
)
async def list_product_movements(
    product_id: int,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    store: SQLiteProductStore = Depends(get_prod_store),
    movement_store: SQLiteStockMovementStore = Depends(get_mov_store),
) -> StockMovementListResponse:
    """Movement history of one product, newest first."""
    if await store.get(owner_id, product_id) is None:
        raise ProductNotFoundError(product_id)

    movements = await movement_store.list_movements(
        owner_id, product_id=product_id, limit=limit, offset=offset
    )
    return StockMovementListResponse(
        items=[movement_to_response(m) for m in movements],
        total=await movement_store.count_movements(owner_id, product_id=product_id),
        limit=limit,
        offset=offset,
    )
