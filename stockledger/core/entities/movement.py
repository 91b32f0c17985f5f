"""Stock movement domain entities."""

from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class MovementType(str, Enum):
    """Types of stock movements."""

    IN = "IN"
    OUT = "OUT"
    ADJUST = "ADJUST"  # signed delta, no cost impact


class ReferenceType(str, Enum):
    """Where a movement came from."""

    PURCHASE = "PURCHASE"
    SALE = "SALE"
    RETURN = "RETURN"
    TRANSFER = "TRANSFER"
    ADJUSTMENT = "ADJUSTMENT"
    MANUAL = "MANUAL"


class StockMovement(BaseModel):
    """Audit record of a single change to a product's stock."""

    id: int | None = None
    owner_id: str
    product_id: int
    movement_type: MovementType
    quantity: Decimal  # positive for IN/OUT, signed delta for ADJUST
    unit_cost: Decimal | None = None
    total_cost: Decimal | None = None
    reference_type: ReferenceType = ReferenceType.MANUAL
    reference_id: str | None = None
    reason: str | None = None

    # Denormalized for listings
    product_name: str | None = None
    unit_name: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
