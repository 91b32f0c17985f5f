"""In-memory ledger store for use case tests."""

import copy
import itertools
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from decimal import Decimal

import pytest

from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product, ProductSnapshot
from stockledger.core.interfaces.ledger_store import ILedgerUnitOfWork, IStockMovementStore


class InMemoryUnitOfWork(ILedgerUnitOfWork):
    def __init__(self, store: "InMemoryLedgerStore"):
        self._store = store

    async def get_product(self, owner_id, product_id):
        product = self._store.products.get(product_id)
        if product is None or product.owner_id != owner_id:
            return None
        return product

    async def get_movement(self, owner_id, movement_id):
        movement = self._store.movements.get(movement_id)
        if movement is None or movement.owner_id != owner_id:
            return None
        return movement

    async def save_snapshot(self, product_id, snapshot: ProductSnapshot):
        self._store.products[product_id] = self._store.products[product_id].with_snapshot(
            snapshot
        )

    async def add_movement(self, movement):
        movement = movement.model_copy(update={"id": next(self._store.ids)})
        self._store.movements[movement.id] = movement
        return movement

    async def update_movement(self, movement):
        movement = movement.model_copy(update={"updated_at": datetime.now(UTC)})
        self._store.movements[movement.id] = movement
        return movement

    async def delete_movement(self, movement_id):
        del self._store.movements[movement_id]


class InMemoryLedgerStore(IStockMovementStore):
    """Commits on clean exit and restores the previous state on error."""

    def __init__(self):
        self.products: dict[int, Product] = {}
        self.movements: dict[int, StockMovement] = {}
        self.ids = itertools.count(1)
        self.commits = 0

    @asynccontextmanager
    async def unit_of_work(self):
        saved = (copy.deepcopy(self.products), copy.deepcopy(self.movements))
        try:
            yield InMemoryUnitOfWork(self)
        except BaseException:
            self.products, self.movements = saved
            raise
        self.commits += 1

    async def get_movement(self, owner_id, movement_id):
        return self.movements.get(movement_id)

    async def list_movements(self, owner_id, product_id=None, limit=100, offset=0):
        return list(self.movements.values())

    async def count_movements(self, owner_id, product_id=None):
        return len(self.movements)

    async def list_recent(self, owner_id, limit=12, movement_types=()):
        return list(self.movements.values())[:limit]

    def add_product(
        self,
        product_id: int,
        stock: str = "0",
        avg: str = "0",
        owner_id: str = "user-1",
    ) -> Product:
        product = Product(
            id=product_id,
            owner_id=owner_id,
            name=f"Product {product_id}",
            unit_id=1,
            unit_name="pcs",
            current_stock=Decimal(stock),
            avg_cost=Decimal(avg),
        )
        self.products[product_id] = product
        return product


@pytest.fixture
def ledger_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()
