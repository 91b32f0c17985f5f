"""Record Stock Movement Use Case: apply a movement and persist it atomically."""

from dataclasses import dataclass

from stockledger.application.dto.requests import StockMovementRequest
from stockledger.application.dto.responses import (
    StockMovementResultResponse,
    movement_to_response,
    product_to_response,
)
from stockledger.config import get_logger
from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import ProductNotFoundError
from stockledger.core.interfaces.ledger_store import IStockMovementStore
from stockledger.core.services.ledger import MovementInput, apply_movement

logger = get_logger(__name__)


@dataclass
class RecordStockMovementResult:
    """Result of recording a movement."""

    movement: StockMovement
    product: Product  # snapshot after the movement


class RecordStockMovementUseCase:
    """Record an IN / OUT / ADJUST movement and update the product snapshot."""

    def __init__(self, movement_store: IStockMovementStore | None = None):
        self._movement_store = movement_store

    async def _get_movement_store(self) -> IStockMovementStore:
        if self._movement_store is None:
            from stockledger.infrastructure.storage.sqlite import get_movement_store

            self._movement_store = await get_movement_store()
        return self._movement_store

    async def execute(
        self, owner_id: str, request: StockMovementRequest
    ) -> RecordStockMovementResult:
        """Execute record stock movement use case."""
        logger.info(
            "record_stock_movement_started",
            owner_id=owner_id,
            product_id=request.product_id,
            movement_type=request.movement_type.value,
            quantity=str(request.quantity),
        )

        store = await self._get_movement_store()

        async with store.unit_of_work() as uow:
            # 1. Load the product under the write lock
            product = await uow.get_product(owner_id, request.product_id)
            if product is None:
                raise ProductNotFoundError(request.product_id)

            # 2. Ledger arithmetic
            computation = apply_movement(
                product.snapshot,
                MovementInput(
                    movement_type=request.movement_type,
                    quantity=request.quantity,
                    unit_cost=request.unit_cost,
                ),
            )

            # 3. Persist movement and snapshot together
            movement = await uow.add_movement(
                StockMovement(
                    owner_id=owner_id,
                    product_id=product.id,  # type: ignore[arg-type]
                    movement_type=request.movement_type,
                    quantity=computation.quantity,
                    unit_cost=computation.unit_cost,
                    total_cost=computation.total_cost,
                    reference_type=request.reference_type,
                    reference_id=request.reference_id,
                    reason=request.reason,
                    product_name=product.name,
                    unit_name=product.unit_name,
                )
            )
            await uow.save_snapshot(product.id, computation.next_snapshot)  # type: ignore[arg-type]

        product = product.with_snapshot(computation.next_snapshot)

        logger.info(
            "stock_movement_recorded",
            movement_id=movement.id,
            product_id=product.id,
            movement_type=movement.movement_type.value,
            current_stock=str(product.current_stock),
            avg_cost=str(product.avg_cost),
        )

        return RecordStockMovementResult(movement=movement, product=product)

    def to_response(self, result: RecordStockMovementResult) -> StockMovementResultResponse:
        """Convert result to API response."""
        return StockMovementResultResponse(
            movement=movement_to_response(result.movement),
            product=product_to_response(result.product),
        )
