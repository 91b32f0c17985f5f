"""
Dependency injection container for FastAPI.

Provides stores, use cases and the acting owner to route handlers.
"""

from functools import lru_cache

from fastapi import Request

from stockledger.application.use_cases import (
    DeleteStockMovementUseCase,
    GetDashboardMetricsUseCase,
    RecordStockMovementUseCase,
    UpdateStockMovementUseCase,
)
from stockledger.config import Settings, get_settings
from stockledger.core.exceptions import UnauthorizedError
from stockledger.infrastructure.storage.sqlite import (
    SQLiteCategoryStore,
    SQLiteProductStore,
    SQLiteStockMovementStore,
    SQLiteUnitStore,
    get_category_store,
    get_movement_store,
    get_product_store,
    get_unit_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Owner identity
def get_owner_id(request: Request) -> str:
    """
    Acting owner's id, set by the upstream auth layer.

    Raises:
        UnauthorizedError: header missing or blank
    """
    header = get_app_settings().api.owner_header
    owner_id = (request.headers.get(header) or "").strip()
    if not owner_id:
        raise UnauthorizedError()
    return owner_id


# Use case dependencies
def get_record_movement_use_case() -> RecordStockMovementUseCase:
    """Get record stock movement use case."""
    return RecordStockMovementUseCase()


def get_update_movement_use_case() -> UpdateStockMovementUseCase:
    """Get update stock movement use case."""
    return UpdateStockMovementUseCase()


def get_delete_movement_use_case() -> DeleteStockMovementUseCase:
    """Get delete stock movement use case."""
    return DeleteStockMovementUseCase()


def get_dashboard_use_case() -> GetDashboardMetricsUseCase:
    """Get dashboard metrics use case."""
    return GetDashboardMetricsUseCase(settings=get_app_settings().dashboard)


# Store dependencies
async def get_cat_store() -> SQLiteCategoryStore:
    """Get category store."""
    return await get_category_store()


async def get_uom_store() -> SQLiteUnitStore:
    """Get unit store."""
    return await get_unit_store()


async def get_prod_store() -> SQLiteProductStore:
    """Get product store."""
    return await get_product_store()


async def get_mov_store() -> SQLiteStockMovementStore:
    """Get stock movement store."""
    return await get_movement_store()
