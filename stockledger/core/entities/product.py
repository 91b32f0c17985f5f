"""Product entity and its stock/cost snapshot."""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class ProductSnapshot:
    """Current stock quantity and weighted-average unit cost of a product."""

    current_stock: Decimal = Decimal("0")
    avg_cost: Decimal = Decimal("0")

    @property
    def total_value(self) -> Decimal:
        return self.current_stock * self.avg_cost


class Product(BaseModel):
    """A stocked item. Stock and cost only change through the ledger."""

    id: int | None = None
    owner_id: str
    name: str
    sku: str | None = None
    low_stock_at: int | None = None
    current_stock: Decimal = Decimal("0")  # 3 dp
    avg_cost: Decimal = Decimal("0")  # 2 dp, weighted average cost
    category_id: int | None = None
    unit_id: int

    # Denormalized for listings
    category_name: str | None = None
    unit_name: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def snapshot(self) -> ProductSnapshot:
        return ProductSnapshot(current_stock=self.current_stock, avg_cost=self.avg_cost)

    @property
    def inventory_value(self) -> Decimal:
        """Total inventory value = current_stock * avg_cost."""
        return self.current_stock * self.avg_cost

    def with_snapshot(self, snapshot: ProductSnapshot) -> "Product":
        """Return a copy carrying the given stock and cost."""
        return self.model_copy(
            update={
                "current_stock": snapshot.current_stock,
                "avg_cost": snapshot.avg_cost,
            }
        )
