"""Stock movement endpoints: the ledger's HTTP surface."""

from fastapi import APIRouter, Depends, Query, status

from stockledger.api.dependencies import (
    get_delete_movement_use_case,
    get_mov_store,
    get_owner_id,
    get_record_movement_use_case,
    get_update_movement_use_case,
)
from stockledger.application.dto.requests import StockMovementRequest
from stockledger.application.dto.responses import (
    DeleteStockMovementResponse,
    ErrorResponse,
    StockMovementListResponse,
    StockMovementResponse,
    StockMovementResultResponse,
    movement_to_response,
)
from stockledger.application.use_cases import (
    DeleteStockMovementUseCase,
    RecordStockMovementUseCase,
    UpdateStockMovementUseCase,
)
from stockledger.core.exceptions import StockMovementNotFoundError
from stockledger.infrastructure.storage.sqlite import SQLiteStockMovementStore

router = APIRouter(prefix="/api/stock-movements", tags=["stock-movements"])

_LEDGER_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


@router.post(
    "",
    response_model=StockMovementResultResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_LEDGER_ERRORS,
)
async def record_stock_movement(
    request: StockMovementRequest,
    owner_id: str = Depends(get_owner_id),
    use_case: RecordStockMovementUseCase = Depends(get_record_movement_use_case),
) -> StockMovementResultResponse:
    """Record a movement and update the product's stock and average cost."""
    result = await use_case.execute(owner_id, request)
    return use_case.to_response(result)


@router.get("", response_model=StockMovementListResponse)
async def list_stock_movements(
    product_id: int | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    owner_id: str = Depends(get_owner_id),
    store: SQLiteStockMovementStore = Depends(get_mov_store),
) -> StockMovementListResponse:
    """List the owner's movements, newest first."""
    movements = await store.list_movements(
        owner_id, product_id=product_id, limit=limit, offset=offset
    )
    return StockMovementListResponse(
        items=[movement_to_response(m) for m in movements],
        total=await store.count_movements(owner_id, product_id=product_id),
        limit=limit,
        offset=offset,
    )


@router.get(
    "/{movement_id}",
    response_model=StockMovementResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_stock_movement(
    movement_id: int,
    owner_id: str = Depends(get_owner_id),
    store: SQLiteStockMovementStore = Depends(get_mov_store),
) -> StockMovementResponse:
    """Get a movement by ID."""
    movement = await store.get_movement(owner_id, movement_id)
    if movement is None:
        raise StockMovementNotFoundError(movement_id)
    return movement_to_response(movement)


@router.put(
    "/{movement_id}",
    response_model=StockMovementResultResponse,
    responses=_LEDGER_ERRORS,
)
async def update_stock_movement(
    movement_id: int,
    request: StockMovementRequest,
    owner_id: str = Depends(get_owner_id),
    use_case: UpdateStockMovementUseCase = Depends(get_update_movement_use_case),
) -> StockMovementResultResponse:
    """Edit a movement: its old effect is reverted and the new one applied."""
    result = await use_case.execute(owner_id, movement_id, request)
    return use_case.to_response(result)


@router.delete(
    "/{movement_id}",
    response_model=DeleteStockMovementResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def delete_stock_movement(
    movement_id: int,
    owner_id: str = Depends(get_owner_id),
    use_case: DeleteStockMovementUseCase = Depends(get_delete_movement_use_case),
) -> DeleteStockMovementResponse:
    """Delete a movement and revert its effect on the product."""
    result = await use_case.execute(owner_id, movement_id)
    return use_case.to_response(result)
