"""Update Stock Movement Use Case: revert the old effect, apply the new one."""

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
from stockledger.core.exceptions import ProductNotFoundError, StockMovementNotFoundError
from stockledger.core.interfaces.ledger_store import IStockMovementStore
from stockledger.core.services.ledger import MovementInput, apply_movement, revert_movement

logger = get_logger(__name__)


@dataclass
class UpdateStockMovementResult:
    """Result of editing a movement."""

    movement: StockMovement
    product: Product
    previous_product: Product | None = None  # set when the product changed


class UpdateStockMovementUseCase:
    """
    Edit a movement.

    The old effect is reverted and the new input applied inside a single
    unit of work, so a failure at any step (e.g. the revert would push
    stock negative) leaves both products and the movement untouched.
    """

    def __init__(self, movement_store: IStockMovementStore | None = None):
        self._movement_store = movement_store

    async def _get_movement_store(self) -> IStockMovementStore:
        if self._movement_store is None:
            from stockledger.infrastructure.storage.sqlite import get_movement_store

            self._movement_store = await get_movement_store()
        return self._movement_store

    async def execute(
        self,
        owner_id: str,
        movement_id: int,
        request: StockMovementRequest,
    ) -> UpdateStockMovementResult:
        """Execute update stock movement use case."""
        logger.info(
            "update_stock_movement_started",
            owner_id=owner_id,
            movement_id=movement_id,
            product_id=request.product_id,
            movement_type=request.movement_type.value,
        )

        store = await self._get_movement_store()
        previous_product: Product | None = None

        async with store.unit_of_work() as uow:
            existing = await uow.get_movement(owner_id, movement_id)
            if existing is None:
                raise StockMovementNotFoundError(movement_id)

            old_product = await uow.get_product(owner_id, existing.product_id)
            if old_product is None:
                raise ProductNotFoundError(existing.product_id)

            # 1. Undo the recorded effect
            reverted = revert_movement(old_product.snapshot, existing)

            # 2. Apply the new input on the right base snapshot
            if request.product_id == existing.product_id:
                target = old_product
                base = reverted
            else:
                target = await uow.get_product(owner_id, request.product_id)
                if target is None:
                    raise ProductNotFoundError(request.product_id)
                base = target.snapshot

            computation = apply_movement(
                base,
                MovementInput(
                    movement_type=request.movement_type,
                    quantity=request.quantity,
                    unit_cost=request.unit_cost,
                ),
            )

            # 3. Persist everything in the same transaction
            if target is not old_product:
                await uow.save_snapshot(old_product.id, reverted)  # type: ignore[arg-type]
                previous_product = old_product.with_snapshot(reverted)
            await uow.save_snapshot(target.id, computation.next_snapshot)  # type: ignore[arg-type]

            movement = await uow.update_movement(
                existing.model_copy(
                    update={
                        "product_id": target.id,
                        "movement_type": request.movement_type,
                        "quantity": computation.quantity,
                        "unit_cost": computation.unit_cost,
                        "total_cost": computation.total_cost,
                        "reference_type": request.reference_type,
                        "reference_id": request.reference_id,
                        "reason": request.reason,
                        "product_name": target.name,
                        "unit_name": target.unit_name,
                    }
                )
            )

        product = target.with_snapshot(computation.next_snapshot)

        logger.info(
            "stock_movement_updated",
            movement_id=movement.id,
            product_id=product.id,
            previous_product_id=previous_product.id if previous_product else None,
            current_stock=str(product.current_stock),
            avg_cost=str(product.avg_cost),
        )

        return UpdateStockMovementResult(
            movement=movement,
            product=product,
            previous_product=previous_product,
        )

    def to_response(self, result: UpdateStockMovementResult) -> StockMovementResultResponse:
        """Convert result to API response."""
        return StockMovementResultResponse(
            movement=movement_to_response(result.movement),
            product=product_to_response(result.product),
            previous_product=(
                product_to_response(result.previous_product)
                if result.previous_product is not None
                else None
            ),
        )
