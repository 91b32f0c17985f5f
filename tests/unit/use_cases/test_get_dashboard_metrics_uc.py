"""Tests for GetDashboardMetricsUseCase."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from stockledger.application.use_cases import GetDashboardMetricsUseCase
from stockledger.config.settings import DashboardSettings
from stockledger.core.entities.movement import MovementType, StockMovement
from stockledger.core.entities.product import Product

NOW = datetime(2024, 6, 12, 15, 0, tzinfo=UTC)


@pytest.fixture
def mock_product_store():
    store = AsyncMock()
    store.list_products.return_value = [
        Product(
            id=1,
            owner_id="user-1",
            name="Bolts",
            unit_id=1,
            unit_name="pcs",
            current_stock=Decimal("3"),
            avg_cost=Decimal("4"),
            low_stock_at=5,
            created_at=datetime(2024, 6, 10, tzinfo=UTC),
        ),
        Product(
            id=2,
            owner_id="user-1",
            name="Nuts",
            unit_id=1,
            unit_name="pcs",
            current_stock=Decimal("10"),
            avg_cost=Decimal("2.50"),
            created_at=datetime(2024, 6, 4, tzinfo=UTC),
        ),
    ]
    return store


@pytest.fixture
def mock_movement_store():
    store = AsyncMock()
    store.list_recent.return_value = [
        StockMovement(
            id=5,
            owner_id="user-1",
            product_id=1,
            movement_type=MovementType.OUT,
            quantity=Decimal("2"),
            product_name="Bolts",
            unit_name="pcs",
        )
    ]
    return store


@pytest.fixture
def use_case(mock_product_store, mock_movement_store):
    return GetDashboardMetricsUseCase(
        product_store=mock_product_store,
        movement_store=mock_movement_store,
        settings=DashboardSettings(recent_activity_limit=3),
    )


class TestGetDashboardMetricsUseCase:
    async def test_metrics(self, use_case, mock_product_store, mock_movement_store):
        metrics = await use_case.execute("user-1", now=NOW)

        mock_product_store.list_products.assert_awaited_once_with("user-1")
        mock_movement_store.list_recent.assert_awaited_once_with("user-1", limit=3)

        assert metrics.key_metrics.total_products == 2
        assert metrics.key_metrics.low_stock == 1
        assert metrics.key_metrics.total_value == Decimal("37.00")
        assert len(metrics.weekly_products) == 12
        assert metrics.weekly_trends.product_trend == 0.0
        assert metrics.stock_levels[0].id == 1
        assert metrics.recent_activity[0].product_name == "Bolts"
        assert metrics.restock_suggestions[0].recommended_order == Decimal("7")

    async def test_empty_owner(self, use_case, mock_product_store, mock_movement_store):
        mock_product_store.list_products.return_value = []
        mock_movement_store.list_recent.return_value = []

        metrics = await use_case.execute("user-1", now=NOW)

        assert metrics.key_metrics.total_products == 0
        assert metrics.efficiency.efficiency_score is None
        assert metrics.restock_suggestions == []

    async def test_to_response(self, use_case):
        metrics = await use_case.execute("user-1", now=NOW)

        response = use_case.to_response(metrics, generated_at=NOW)

        assert response.generated_at == NOW
        assert response.key_metrics.total_value == 37.0
        assert response.stock_levels[0].stock_level == "LOW"
        assert response.recent_activity[0].movement_type == "OUT"
        assert response.restock_suggestions[0].recommended_order == 7.0
