"""SQLite storage implementations."""

from stockledger.infrastructure.storage.sqlite.catalog_store import (
    SQLiteCategoryStore,
    SQLiteUnitStore,
)
from stockledger.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from stockledger.infrastructure.storage.sqlite.movement_store import (
    SQLiteLedgerUnitOfWork,
    SQLiteStockMovementStore,
)
from stockledger.infrastructure.storage.sqlite.product_store import SQLiteProductStore

# Singleton instances
_category_store: SQLiteCategoryStore | None = None
_unit_store: SQLiteUnitStore | None = None
_product_store: SQLiteProductStore | None = None
_movement_store: SQLiteStockMovementStore | None = None


async def get_category_store() -> SQLiteCategoryStore:
    """Get singleton category store instance."""
    global _category_store
    if _category_store is None:
        _category_store = SQLiteCategoryStore()
    return _category_store


async def get_unit_store() -> SQLiteUnitStore:
    """Get singleton unit store instance."""
    global _unit_store
    if _unit_store is None:
        _unit_store = SQLiteUnitStore()
    return _unit_store


async def get_product_store() -> SQLiteProductStore:
    """Get singleton product store instance."""
    global _product_store
    if _product_store is None:
        _product_store = SQLiteProductStore()
    return _product_store


async def get_movement_store() -> SQLiteStockMovementStore:
    """Get singleton stock movement store instance."""
    global _movement_store
    if _movement_store is None:
        _movement_store = SQLiteStockMovementStore()
    return _movement_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteCategoryStore",
    "SQLiteUnitStore",
    "SQLiteProductStore",
    "SQLiteStockMovementStore",
    "SQLiteLedgerUnitOfWork",
    # Factory functions
    "get_category_store",
    "get_unit_store",
    "get_product_store",
    "get_movement_store",
]
