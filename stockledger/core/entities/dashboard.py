"""Dashboard read models."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel

from stockledger.core.entities.movement import MovementType


class StockLevel(str, Enum):
    """Health of a product's stock relative to its threshold."""

    OUT_OF_STOCK = "OUT_OF_STOCK"
    LOW = "LOW"
    HEALTHY = "HEALTHY"


class ProductOverview(BaseModel):
    """Product enriched with valuation and stock-level flags."""

    id: int
    name: str
    sku: str | None = None
    low_stock_at: int | None = None
    current_stock: Decimal
    avg_cost: Decimal
    category_name: str | None = None
    unit_name: str | None = None
    created_at: datetime
    inventory_value: Decimal
    is_low_stock: bool
    is_out_of_stock: bool
    stock_level: StockLevel


class StockBreakdown(BaseModel):
    healthy: int = 0
    low: int = 0
    out_of_stock: int = 0


class KeyMetrics(BaseModel):
    total_products: int
    low_stock: int  # LOW + OUT_OF_STOCK
    total_value: Decimal
    stock_breakdown: StockBreakdown


class WeekProductCount(BaseModel):
    week: str
    products: int


class WeeklyTrends(BaseModel):
    """Percent change of this week against last week."""

    product_trend: float
    total_value_trend: float
    low_stock_trend: float


class EfficiencyMetrics(BaseModel):
    efficiency_score: int | None
    in_stock_percentage: int
    low_stock_percentage: int
    out_of_stock_percentage: int


class StockLevelItem(BaseModel):
    id: int
    name: str
    current_stock: Decimal
    low_stock_at: int | None = None
    unit_name: str | None = None
    stock_level: StockLevel


class RecentActivityItem(BaseModel):
    id: int
    product_name: str | None = None
    movement_type: MovementType
    quantity: Decimal
    unit_name: str | None = None
    reason: str | None = None
    created_at: datetime


class RestockSuggestion(BaseModel):
    id: int
    name: str
    current_stock: Decimal
    low_stock_at: int | None = None
    unit_name: str | None = None
    category_name: str | None = None
    stock_level: StockLevel
    recommended_order: Decimal | None = None


class DashboardMetrics(BaseModel):
    """Everything the dashboard page renders."""

    key_metrics: KeyMetrics
    weekly_products: list[WeekProductCount]
    weekly_trends: WeeklyTrends
    efficiency: EfficiencyMetrics
    stock_levels: list[StockLevelItem]
    recent_activity: list[RecentActivityItem]
    restock_suggestions: list[RestockSuggestion]
