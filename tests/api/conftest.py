"""Fixtures for API tests: mocked stores and use cases behind the real app."""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from stockledger.api.dependencies import (
    get_cat_store,
    get_dashboard_use_case,
    get_delete_movement_use_case,
    get_mov_store,
    get_prod_store,
    get_record_movement_use_case,
    get_uom_store,
    get_update_movement_use_case,
)
from stockledger.api.main import app
from stockledger.application.use_cases import (
    DeleteStockMovementUseCase,
    GetDashboardMetricsUseCase,
    RecordStockMovementUseCase,
    UpdateStockMovementUseCase,
)

OWNER_HEADERS = {"X-User-Id": "user-1"}


@pytest.fixture
def mock_category_store():
    return AsyncMock()


@pytest.fixture
def mock_unit_store():
    return AsyncMock()


@pytest.fixture
def mock_product_store():
    return AsyncMock()


@pytest.fixture
def mock_movement_store():
    return AsyncMock()


def _mock_use_case(cls):
    uc = AsyncMock(spec=cls)
    # Real response mapping over whatever execute() returns
    uc.to_response.side_effect = cls().to_response
    return uc


@pytest.fixture
def mock_record_use_case():
    return _mock_use_case(RecordStockMovementUseCase)


@pytest.fixture
def mock_update_use_case():
    return _mock_use_case(UpdateStockMovementUseCase)


@pytest.fixture
def mock_delete_use_case():
    return _mock_use_case(DeleteStockMovementUseCase)


@pytest.fixture
def mock_dashboard_use_case():
    return _mock_use_case(GetDashboardMetricsUseCase)


@pytest.fixture
async def client(
    mock_category_store,
    mock_unit_store,
    mock_product_store,
    mock_movement_store,
    mock_record_use_case,
    mock_update_use_case,
    mock_delete_use_case,
    mock_dashboard_use_case,
):
    overrides = {
        get_cat_store: lambda: mock_category_store,
        get_uom_store: lambda: mock_unit_store,
        get_prod_store: lambda: mock_product_store,
        get_mov_store: lambda: mock_movement_store,
        get_record_movement_use_case: lambda: mock_record_use_case,
        get_update_movement_use_case: lambda: mock_update_use_case,
        get_delete_movement_use_case: lambda: mock_delete_use_case,
        get_dashboard_use_case: lambda: mock_dashboard_use_case,
    }
    app.dependency_overrides.update(overrides)
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://test", headers=OWNER_HEADERS
    ) as ac:
        yield ac
    for dependency in overrides:
        app.dependency_overrides.pop(dependency, None)


@pytest.fixture
async def anonymous_client():
    """Client without the owner header."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
