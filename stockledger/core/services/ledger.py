"""
Stock ledger engine.

Moving-average-cost (MAC) arithmetic for applying a movement to a product
snapshot and for reverting a previously applied movement. Everything here
is pure: callers run these functions inside the storage transaction that
persists the movement record and the resulting snapshot.

Precision policy: stock is kept to 3 decimal places and costs to 2,
rounded half-up, using ``decimal.Decimal`` throughout.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from decimal import InvalidOperation as DecimalException

from stockledger.core.entities.movement import MovementType, StockMovement
from stockledger.core.entities.product import ProductSnapshot
from stockledger.core.exceptions import InvalidInputError, InvalidOperationError

STOCK_QUANTUM = Decimal("0.001")
COST_QUANTUM = Decimal("0.01")
ZERO = Decimal("0")

NumberLike = Decimal | int | float | str


@dataclass(frozen=True)
class MovementInput:
    """A validated movement request, reduced to what the ledger needs."""

    movement_type: MovementType | str
    quantity: NumberLike
    unit_cost: NumberLike | None = None


@dataclass(frozen=True)
class MovementComputation:
    """Result of applying a movement: next snapshot plus values to persist."""

    next_snapshot: ProductSnapshot
    quantity: Decimal
    unit_cost: Decimal | None
    total_cost: Decimal | None


def round_stock(value: Decimal) -> Decimal:
    return value.quantize(STOCK_QUANTUM, rounding=ROUND_HALF_UP)


def round_cost(value: Decimal) -> Decimal:
    return value.quantize(COST_QUANTUM, rounding=ROUND_HALF_UP)


def to_decimal(value: NumberLike, field: str) -> Decimal:
    """Convert user-supplied numbers to Decimal without float artefacts."""
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number.", field=field)
    try:
        if isinstance(value, Decimal):
            result = value
        elif isinstance(value, float):
            result = Decimal(repr(value))
        else:
            result = Decimal(value)
    except (DecimalException, TypeError, ValueError):
        raise InvalidInputError(f"{field} must be a number.", field=field) from None

    if not result.is_finite():
        raise InvalidInputError(f"{field} must be a finite number.", field=field)
    return result


def _movement_type(value: MovementType | str) -> MovementType:
    try:
        return MovementType(value)
    except ValueError:
        raise InvalidInputError("Unsupported movement type.", field="movement_type") from None


def apply_movement(
    snapshot: ProductSnapshot,
    movement: MovementInput,
) -> MovementComputation:
    """
    Compute the snapshot that results from applying a movement.

    IN blends the incoming cost into the running average. OUT leaves the
    average untouched and is valued at it. ADJUST is a signed stock delta
    with no cost impact.

    Raises:
        InvalidInputError: non-positive quantity, missing or negative unit
            cost on IN, zero ADJUST delta, unsupported movement type
        InvalidOperationError: stock would go negative
    """
    movement_type = _movement_type(movement.movement_type)
    quantity = round_stock(to_decimal(movement.quantity, "quantity"))

    if movement_type is MovementType.ADJUST:
        return _apply_adjustment(snapshot, quantity)

    if quantity <= ZERO:
        raise InvalidInputError("Quantity must be greater than 0.", field="quantity")

    current_stock = snapshot.current_stock
    current_avg = snapshot.avg_cost

    if movement_type is MovementType.IN:
        if movement.unit_cost is None:
            raise InvalidInputError(
                "Unit cost is required for stock in movements.", field="unit_cost"
            )
        # Unrounded until the result is built
        unit_cost = to_decimal(movement.unit_cost, "unit_cost")
        if unit_cost < ZERO:
            raise InvalidInputError("Unit cost cannot be negative.", field="unit_cost")

        next_stock = current_stock + quantity
        total_cost = unit_cost * quantity
        if next_stock > ZERO:
            next_avg = (current_stock * current_avg + total_cost) / next_stock
        else:
            next_avg = unit_cost
    else:
        next_stock = current_stock - quantity
        if next_stock < ZERO:
            raise InvalidOperationError(
                "Not enough stock to complete this action. "
                "Please review the available quantity.",
                details={"requested": str(quantity), "available": str(current_stock)},
            )
        # Outgoing stock is always valued at the current average
        unit_cost = current_avg
        total_cost = unit_cost * quantity
        next_avg = current_avg

    return MovementComputation(
        next_snapshot=ProductSnapshot(
            current_stock=round_stock(next_stock),
            avg_cost=round_cost(next_avg),
        ),
        quantity=quantity,
        unit_cost=round_cost(unit_cost),
        total_cost=round_cost(total_cost),
    )


def _apply_adjustment(snapshot: ProductSnapshot, delta: Decimal) -> MovementComputation:
    if delta == ZERO:
        raise InvalidInputError("Adjustment quantity must not be zero.", field="quantity")

    next_stock = snapshot.current_stock + delta
    if next_stock < ZERO:
        raise InvalidOperationError(
            "Not enough stock to complete this action. "
            "Please review the available quantity.",
            details={"requested": str(delta), "available": str(snapshot.current_stock)},
        )

    return MovementComputation(
        next_snapshot=ProductSnapshot(
            current_stock=round_stock(next_stock),
            avg_cost=snapshot.avg_cost,
        ),
        quantity=delta,
        unit_cost=None,
        total_cost=None,
    )


def revert_movement(
    snapshot: ProductSnapshot,
    movement: StockMovement,
) -> ProductSnapshot:
    """
    Undo a previously applied movement from the current snapshot.

    Used before editing or deleting a movement. Reverting an IN inverts
    the average-cost blend using the movement's recorded total cost
    (falling back to unit cost * quantity). Reverting an OUT restores
    the average to the cost basis recorded on the movement.

    Raises:
        InvalidInputError: unsupported movement type
        InvalidOperationError: stock would go negative
    """
    movement_type = _movement_type(movement.movement_type)
    quantity = to_decimal(movement.quantity, "quantity")
    current_stock = snapshot.current_stock
    current_avg = snapshot.avg_cost

    if movement_type is MovementType.IN:
        previous_stock = current_stock - quantity
        if previous_stock < ZERO:
            raise InvalidOperationError(
                "Cannot revert stock below zero.",
                details={"quantity": str(quantity), "available": str(current_stock)},
            )

        if movement.total_cost is not None:
            movement_value = movement.total_cost
        elif movement.unit_cost is not None:
            movement_value = movement.unit_cost * quantity
        else:
            movement_value = ZERO

        value_before = current_avg * current_stock - movement_value
        if previous_stock > ZERO and value_before > ZERO:
            previous_avg = round_cost(value_before / previous_stock)
        else:
            previous_avg = ZERO

        return ProductSnapshot(
            current_stock=round_stock(previous_stock),
            avg_cost=previous_avg,
        )

    if movement_type is MovementType.OUT:
        restored_stock = current_stock + quantity
        if restored_stock < ZERO:
            raise InvalidOperationError(
                "Cannot revert stock below zero.",
                details={"quantity": str(quantity), "available": str(current_stock)},
            )

        if restored_stock > ZERO:
            basis = movement.unit_cost if movement.unit_cost is not None else current_avg
            restored_avg = round_cost(basis)
        else:
            restored_avg = ZERO

        return ProductSnapshot(
            current_stock=round_stock(restored_stock),
            avg_cost=restored_avg,
        )

    # ADJUST: undo the signed delta, cost untouched
    previous_stock = current_stock - quantity
    if previous_stock < ZERO:
        raise InvalidOperationError(
            "Cannot revert stock below zero.",
            details={"quantity": str(quantity), "available": str(current_stock)},
        )
    return ProductSnapshot(
        current_stock=round_stock(previous_stock),
        avg_cost=current_avg,
    )
