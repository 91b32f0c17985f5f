"""
Unit of measure management endpoints.
"""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import get_owner_id, get_uom_store
from stockledger.application.dto.requests import UnitRequest
from stockledger.application.dto.responses import ErrorResponse, UnitResponse, unit_to_response
from stockledger.core.entities.catalog import Unit
from stockledger.core.exceptions import UnitNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLiteUnitStore

router = APIRouter(prefix="/api/units", tags=["units"])


@router.post(
    "",
    response_model=UnitResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_unit(
    request: UnitRequest,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteUnitStore = Depends(get_uom_store),
) -> UnitResponse:
    """Create a unit of measure."""
    created = await store.create(Unit(owner_id=owner_id, name=request.name))
    return unit_to_response(created)


@router.get("", response_model=list[UnitResponse])
async def list_units(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    store: SQLiteUnitStore = Depends(get_uom_store),
) -> list[UnitResponse]:
    """List the owner's units, newest first."""
    units = await store.list_all(owner_id, limit=limit, offset=offset)
    return [unit_to_response(u) for u in units]


@router.get(
    "/{unit_id}",
    response_model=UnitResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_unit(
    unit_id: int,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteUnitStore = Depends(get_uom_store),
) -> UnitResponse:
    """Get a unit by ID."""
    unit = await store.get(owner_id, unit_id)
    if unit is None:
        raise UnitNotFoundError(unit_id)
    return unit_to_response(unit)


@router.put(
    "/{unit_id}",
    response_model=UnitResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def update_unit(
    unit_id: int,
    request: UnitRequest,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteUnitStore = Depends(get_uom_store),
) -> UnitResponse:
    """Rename a unit."""
    existing = await store.get(owner_id, unit_id)
    if existing is None:
        raise UnitNotFoundError(unit_id)

    existing.name = request.name
    updated = await store.update(existing)
    return unit_to_response(updated)


@router.delete(
    "/{unit_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_unit(
    unit_id: int,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteUnitStore = Depends(get_uom_store),
) -> None:
    """Delete a unit. Fails while any product still uses it."""
    deleted = await store.delete(owner_id, unit_id)
    if not deleted:
        raise UnitNotFoundError(unit_id)
