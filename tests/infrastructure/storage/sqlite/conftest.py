"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from stockledger.core.entities.catalog import Category, Unit
from stockledger.core.entities.product import Product
from stockledger.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteProductStore,
    SQLiteStockMovementStore,
    SQLiteUnitStore,
)
from stockledger.infrastructure.storage.sqlite.migrations.migrator import run_migrations


@pytest.fixture
async def initialized_db(temp_db_path: Path) -> AsyncGenerator[Path, None]:
    """Create and initialize a temporary database with the full schema."""
    await run_migrations(temp_db_path)
    yield temp_db_path


@pytest.fixture
def category_store(ledger_db) -> SQLiteCategoryStore:
    return SQLiteCategoryStore()


@pytest.fixture
def unit_store(ledger_db) -> SQLiteUnitStore:
    return SQLiteUnitStore()


@pytest.fixture
def product_store(ledger_db) -> SQLiteProductStore:
    return SQLiteProductStore()


@pytest.fixture
def movement_store(ledger_db) -> SQLiteStockMovementStore:
    return SQLiteStockMovementStore()


@pytest.fixture
async def pcs(unit_store, owner_id) -> Unit:
    """A unit owned by the default owner."""
    return await unit_store.create(Unit(owner_id=owner_id, name="pcs"))


@pytest.fixture
async def hardware(category_store, owner_id) -> Category:
    """A category owned by the default owner."""
    return await category_store.create(Category(owner_id=owner_id, name="Hardware"))


@pytest.fixture
async def widget(product_store, owner_id, pcs, hardware) -> Product:
    """A product with zero stock."""
    return await product_store.create(
        Product(
            owner_id=owner_id,
            name="Widget",
            sku="W-1",
            low_stock_at=5,
            category_id=hardware.id,
            unit_id=pcs.id,
        )
    )
