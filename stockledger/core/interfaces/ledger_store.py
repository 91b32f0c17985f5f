"""Abstract interface for stock movement storage and its unit of work."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager

from stockledger.core.entities.movement import MovementType, StockMovement
from stockledger.core.entities.product import Product, ProductSnapshot


class ILedgerUnitOfWork(ABC):
    """
    Transactional view used while applying or reverting movements.

    Everything done through one unit of work commits together or not at
    all. Implementations hold the write lock for the whole unit so the
    snapshot read here cannot go stale before it is written back.
    """

    @abstractmethod
    async def get_product(self, owner_id: str, product_id: int) -> Product | None:
        """Read the product (and its snapshot) for update."""
        pass

    @abstractmethod
    async def get_movement(self, owner_id: str, movement_id: int) -> StockMovement | None:
        """Read a movement for update."""
        pass

    @abstractmethod
    async def save_snapshot(self, product_id: int, snapshot: ProductSnapshot) -> None:
        """Write the product's new stock and average cost."""
        pass

    @abstractmethod
    async def add_movement(self, movement: StockMovement) -> StockMovement:
        """Insert a movement record."""
        pass

    @abstractmethod
    async def update_movement(self, movement: StockMovement) -> StockMovement:
        """Replace a movement record's contents."""
        pass

    @abstractmethod
    async def delete_movement(self, movement_id: int) -> None:
        """Remove a movement record."""
        pass


class IStockMovementStore(ABC):
    """Interface for stock movement queries and ledger transactions."""

    @abstractmethod
    def unit_of_work(self) -> AbstractAsyncContextManager[ILedgerUnitOfWork]:
        """Open a unit of work; commits on clean exit, rolls back on error."""
        pass

    @abstractmethod
    async def get_movement(self, owner_id: str, movement_id: int) -> StockMovement | None:
        """Get movement by ID."""
        pass

    @abstractmethod
    async def list_movements(
        self,
        owner_id: str,
        product_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        """List movements newest first, optionally for one product."""
        pass

    @abstractmethod
    async def count_movements(self, owner_id: str, product_id: int | None = None) -> int:
        """Number of movements matching the list_movements filter."""
        pass

    @abstractmethod
    async def list_recent(
        self,
        owner_id: str,
        limit: int = 12,
        movement_types: Sequence[MovementType] = (MovementType.IN, MovementType.OUT),
    ) -> list[StockMovement]:
        """Latest movements of the given types, for the activity feed."""
        pass
