"""Core domain entities."""

from stockledger.core.entities.catalog import Category, Unit
from stockledger.core.entities.dashboard import (
    DashboardMetrics,
    EfficiencyMetrics,
    KeyMetrics,
    ProductOverview,
    RecentActivityItem,
    RestockSuggestion,
    StockBreakdown,
    StockLevel,
    StockLevelItem,
    WeeklyTrends,
    WeekProductCount,
)
from stockledger.core.entities.movement import MovementType, ReferenceType, StockMovement
from stockledger.core.entities.product import Product, ProductSnapshot

__all__ = [
    # Reference data
    "Category",
    "Unit",
    # Products
    "Product",
    "ProductSnapshot",
    # Movements
    "StockMovement",
    "MovementType",
    "ReferenceType",
    # Dashboard
    "DashboardMetrics",
    "EfficiencyMetrics",
    "KeyMetrics",
    "ProductOverview",
    "RecentActivityItem",
    "RestockSuggestion",
    "StockBreakdown",
    "StockLevel",
    "StockLevelItem",
    "WeeklyTrends",
    "WeekProductCount",
]
