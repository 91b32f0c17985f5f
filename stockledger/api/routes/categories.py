"""
Category management endpoints.
"""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import get_cat_store, get_owner_id
from stockledger.application.dto.requests import CategoryRequest
from stockledger.application.dto.responses import (
    CategoryResponse,
    ErrorResponse,
    category_to_response,
)
from stockledger.core.entities.catalog import Category
from stockledger.core.exceptions import CategoryNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLiteCategoryStore

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_category(
    request: CategoryRequest,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteCategoryStore = Depends(get_cat_store),
) -> CategoryResponse:
    """Create a category."""
    created = await store.create(Category(owner_id=owner_id, name=request.name))
    return category_to_response(created)


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    store: SQLiteCategoryStore = Depends(get_cat_store),
) -> list[CategoryResponse]:
    """List the owner's categories, newest first."""
    categories = await store.list_all(owner_id, limit=limit, offset=offset)
    return [category_to_response(c) for c in categories]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_category(
    category_id: int,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteCategoryStore = Depends(get_cat_store),
) -> CategoryResponse:
    """Get a category by ID."""
    category = await store.get(owner_id, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return category_to_response(category)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_category(
    category_id: int,
    request: CategoryRequest,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteCategoryStore = Depends(get_cat_store),
) -> CategoryResponse:
    """Rename a category."""
    existing = await store.get(owner_id, category_id)
    if existing is None:
        raise CategoryNotFoundError(category_id)

    existing.name = request.name
    updated = await store.update(existing)
    return category_to_response(updated)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_category(
    category_id: int,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteCategoryStore = Depends(get_cat_store),
) -> None:
    """Delete a category. Its products are kept, without a category."""
    deleted = await store.delete(owner_id, category_id)
    if not deleted:
        raise CategoryNotFoundError(category_id)
