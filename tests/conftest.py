"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from stockledger.core.entities.movement import MovementType, StockMovement
from stockledger.core.entities.product import Product

OWNER = "user-1"
OTHER_OWNER = "user-2"


@pytest.fixture
def owner_id() -> str:
    return OWNER


@pytest.fixture
def other_owner_id() -> str:
    return OTHER_OWNER


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
def mock_settings(temp_db_path: Path):
    """Mock settings with temp database path."""
    mock = MagicMock()
    mock.storage.db_path = temp_db_path
    mock.storage.pool_size = 2
    mock.storage.busy_timeout = 5000
    return mock


@pytest.fixture
async def ledger_db(temp_db_path: Path, mock_settings) -> AsyncGenerator[Path, None]:
    """Migrated temporary database served by the global connection pool."""
    import stockledger.infrastructure.storage.sqlite.connection as conn_module
    from stockledger.infrastructure.storage.sqlite.migrations.migrator import run_migrations

    results = await run_migrations(temp_db_path)
    assert all(r.success for r in results)

    conn_module._pool = None
    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield temp_db_path
        finally:
            await conn_module.close_pool()


def _make_product(
    product_id: int = 1,
    owner_id: str = OWNER,
    current_stock: str = "0",
    avg_cost: str = "0",
    low_stock_at: int | None = None,
    created_at: datetime | None = None,
    **kwargs,
) -> Product:
    """Build a Product entity with sensible defaults."""
    return Product(
        id=product_id,
        owner_id=owner_id,
        name=kwargs.pop("name", f"Product {product_id}"),
        unit_id=kwargs.pop("unit_id", 1),
        unit_name=kwargs.pop("unit_name", "pcs"),
        current_stock=Decimal(current_stock),
        avg_cost=Decimal(avg_cost),
        low_stock_at=low_stock_at,
        created_at=created_at or datetime.now(UTC),
        **kwargs,
    )


def _make_movement(
    movement_type: MovementType,
    quantity: str,
    unit_cost: str | None = None,
    total_cost: str | None = None,
    movement_id: int = 1,
    product_id: int = 1,
    owner_id: str = OWNER,
) -> StockMovement:
    """Build a recorded StockMovement entity."""
    return StockMovement(
        id=movement_id,
        owner_id=owner_id,
        product_id=product_id,
        movement_type=movement_type,
        quantity=Decimal(quantity),
        unit_cost=Decimal(unit_cost) if unit_cost is not None else None,
        total_cost=Decimal(total_cost) if total_cost is not None else None,
    )


@pytest.fixture
def make_product():
    """Factory for Product entities."""
    return _make_product


@pytest.fixture
def make_movement():
    """Factory for recorded StockMovement entities."""
    return _make_movement
