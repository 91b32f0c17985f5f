"""Core interfaces (ports) for dependency injection."""

from stockledger.core.interfaces.ledger_store import ILedgerUnitOfWork, IStockMovementStore
from stockledger.core.interfaces.storage import ICategoryStore, IProductStore, IUnitStore

__all__ = [
    "ICategoryStore",
    "IUnitStore",
    "IProductStore",
    "IStockMovementStore",
    "ILedgerUnitOfWork",
]
