"""Response DTOs for API endpoints.

Pydantic v2 models for API responses. Quantities and costs are kept as
Decimal inside the ledger and exposed here as JSON numbers.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from stockledger.core.entities.catalog import Category, Unit
from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product
from stockledger.core.services.ledger import round_cost

# --- Health ---


class ProviderHealthResponse(BaseModel):
    """Health of a single backing component."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. PRODUCT_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)


# --- Reference data ---


class CategoryResponse(BaseModel):
    """Category response DTO."""

    id: int
    name: str
    created_at: datetime
    updated_at: datetime


class UnitResponse(BaseModel):
    """Unit of measure response DTO."""

    id: int
    name: str
    created_at: datetime
    updated_at: datetime


# --- Products ---


class ProductResponse(BaseModel):
    """Product response DTO."""

    id: int
    name: str
    sku: str | None = None
    low_stock_at: int | None = None
    current_stock: float
    avg_cost: float
    inventory_value: float
    category_id: int | None = None
    category_name: str | None = None
    unit_id: int
    unit_name: str | None = None
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    """Product listing response."""

    items: list[ProductResponse]
    total: int  # all matching rows, not just this page


# --- Stock movements ---


class StockMovementResponse(BaseModel):
    """Stock movement response DTO."""

    id: int
    product_id: int
    product_name: str | None = None
    unit_name: str | None = None
    movement_type: str
    quantity: float
    unit_cost: float | None = None
    total_cost: float | None = None
    reference_type: str
    reference_id: str | None = None
    reason: str | None = None
    created_at: datetime
    updated_at: datetime


class StockMovementListResponse(BaseModel):
    """Paginated stock movement listing."""

    items: list[StockMovementResponse]
    total: int  # all matching rows, not just this page
    limit: int
    offset: int


class StockMovementResultResponse(BaseModel):
    """Response for create / update of a movement.

    ``product`` is the snapshot after the movement was applied. When an
    edit moved the movement to another product, ``previous_product``
    carries the reverted snapshot of the old one.
    """

    movement: StockMovementResponse
    product: ProductResponse
    previous_product: ProductResponse | None = None


class DeleteStockMovementResponse(BaseModel):
    """Response for movement deletion."""

    deleted: bool = True
    movement_id: int
    product: ProductResponse


# --- Dashboard ---


class StockBreakdownResponse(BaseModel):
    healthy: int
    low: int
    out_of_stock: int


class KeyMetricsResponse(BaseModel):
    total_products: int
    low_stock: int
    total_value: float
    stock_breakdown: StockBreakdownResponse


class WeekProductCountResponse(BaseModel):
    week: str
    products: int


class WeeklyTrendsResponse(BaseModel):
    product_trend: float
    total_value_trend: float
    low_stock_trend: float


class EfficiencyResponse(BaseModel):
    efficiency_score: int | None = None
    in_stock_percentage: int
    low_stock_percentage: int
    out_of_stock_percentage: int


class StockLevelResponse(BaseModel):
    id: int
    name: str
    current_stock: float
    low_stock_at: int | None = None
    unit_name: str | None = None
    stock_level: str


class RecentActivityResponse(BaseModel):
    id: int
    product_name: str | None = None
    movement_type: str
    quantity: float
    unit_name: str | None = None
    reason: str | None = None
    created_at: datetime


class RestockSuggestionResponse(BaseModel):
    id: int
    name: str
    current_stock: float
    low_stock_at: int | None = None
    unit_name: str | None = None
    category_name: str | None = None
    stock_level: str
    recommended_order: float | None = None


class DashboardResponse(BaseModel):
    """Dashboard metrics for the acting owner."""

    key_metrics: KeyMetricsResponse
    weekly_products: list[WeekProductCountResponse]
    weekly_trends: WeeklyTrendsResponse
    efficiency: EfficiencyResponse
    stock_levels: list[StockLevelResponse]
    recent_activity: list[RecentActivityResponse]
    restock_suggestions: list[RestockSuggestionResponse]
    generated_at: datetime


# --- Entity conversion ---


def category_to_response(category: Category) -> CategoryResponse:
    return CategoryResponse(
        id=category.id,  # type: ignore[arg-type]
        name=category.name,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def unit_to_response(unit: Unit) -> UnitResponse:
    return UnitResponse(
        id=unit.id,  # type: ignore[arg-type]
        name=unit.name,
        created_at=unit.created_at,
        updated_at=unit.updated_at,
    )


def product_to_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=product.id,  # type: ignore[arg-type]
        name=product.name,
        sku=product.sku,
        low_stock_at=product.low_stock_at,
        current_stock=float(product.current_stock),
        avg_cost=float(product.avg_cost),
        inventory_value=float(round_cost(product.inventory_value)),
        category_id=product.category_id,
        category_name=product.category_name,
        unit_id=product.unit_id,
        unit_name=product.unit_name,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def movement_to_response(movement: StockMovement) -> StockMovementResponse:
    return StockMovementResponse(
        id=movement.id,  # type: ignore[arg-type]
        product_id=movement.product_id,
        product_name=movement.product_name,
        unit_name=movement.unit_name,
        movement_type=movement.movement_type.value,
        quantity=float(movement.quantity),
        unit_cost=float(movement.unit_cost) if movement.unit_cost is not None else None,
        total_cost=float(movement.total_cost) if movement.total_cost is not None else None,
        reference_type=movement.reference_type.value,
        reference_id=movement.reference_id,
        reason=movement.reason,
        created_at=movement.created_at,
        updated_at=movement.updated_at,
    )
