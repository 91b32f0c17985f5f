"""Core domain services."""

from stockledger.core.services import dashboard
from stockledger.core.services.ledger import (
    MovementComputation,
    MovementInput,
    apply_movement,
    revert_movement,
    round_cost,
    round_stock,
)

__all__ = [
    "MovementInput",
    "MovementComputation",
    "apply_movement",
    "revert_movement",
    "round_cost",
    "round_stock",
    "dashboard",
]
