"""Delete Stock Movement Use Case: revert its effect and remove the record."""

from dataclasses import dataclass

from stockledger.application.dto.responses import (
    DeleteStockMovementResponse,
    product_to_response,
)
from stockledger.config import get_logger
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import ProductNotFoundError, StockMovementNotFoundError
from stockledger.core.interfaces.ledger_store import IStockMovementStore
from stockledger.core.services.ledger import revert_movement

logger = get_logger(__name__)


@dataclass
class DeleteStockMovementResult:
    """Result of deleting a movement."""

    movement_id: int
    product: Product  # snapshot after the revert


class DeleteStockMovementUseCase:
    """Delete a movement, reverting its effect on the product atomically."""

    def __init__(self, movement_store: IStockMovementStore | None = None):
        self._movement_store = movement_store

    async def _get_movement_store(self) -> IStockMovementStore:
        if self._movement_store is None:
            from stockledger.infrastructure.storage.sqlite import get_movement_store

            self._movement_store = await get_movement_store()
        return self._movement_store

    async def execute(self, owner_id: str, movement_id: int) -> DeleteStockMovementResult:
        """Execute delete stock movement use case."""
        logger.info(
            "delete_stock_movement_started",
            owner_id=owner_id,
            movement_id=movement_id,
        )

        store = await self._get_movement_store()

        async with store.unit_of_work() as uow:
            existing = await uow.get_movement(owner_id, movement_id)
            if existing is None:
                raise StockMovementNotFoundError(movement_id)

            product = await uow.get_product(owner_id, existing.product_id)
            if product is None:
                raise ProductNotFoundError(existing.product_id)

            reverted = revert_movement(product.snapshot, existing)

            await uow.delete_movement(movement_id)
            await uow.save_snapshot(product.id, reverted)  # type: ignore[arg-type]

        product = product.with_snapshot(reverted)

        logger.info(
            "stock_movement_deleted",
            movement_id=movement_id,
            product_id=product.id,
            current_stock=str(product.current_stock),
            avg_cost=str(product.avg_cost),
        )

        return DeleteStockMovementResult(movement_id=movement_id, product=product)

    def to_response(self, result: DeleteStockMovementResult) -> DeleteStockMovementResponse:
        """Convert result to API response."""
        return DeleteStockMovementResponse(
            movement_id=result.movement_id,
            product=product_to_response(result.product),
        )
