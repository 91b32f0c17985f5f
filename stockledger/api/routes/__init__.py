"""API route modules."""

from stockledger.api.routes.categories import router as categories_router
from stockledger.api.routes.dashboard import router as dashboard_router
from stockledger.api.routes.health import router as health_router
from stockledger.api.routes.products import router as products_router
from stockledger.api.routes.stock_movements import router as stock_movements_router
from stockledger.api.routes.units import router as units_router

__all__ = [
    "health_router",
    "categories_router",
    "units_router",
    "products_router",
    "stock_movements_router",
    "dashboard_router",
]
