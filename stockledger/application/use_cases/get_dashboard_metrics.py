"""Get Dashboard Metrics Use Case."""

from datetime import UTC, datetime

from stockledger.application.dto.responses import (
    DashboardResponse,
    EfficiencyResponse,
    KeyMetricsResponse,
    RecentActivityResponse,
    RestockSuggestionResponse,
    StockBreakdownResponse,
    StockLevelResponse,
    WeeklyTrendsResponse,
    WeekProductCountResponse,
)
from stockledger.config import get_logger, get_settings
from stockledger.config.settings import DashboardSettings
from stockledger.core.entities.dashboard import DashboardMetrics
from stockledger.core.interfaces.ledger_store import IStockMovementStore
from stockledger.core.interfaces.storage import IProductStore
from stockledger.core.services.dashboard import (
    build_key_metrics,
    build_recent_activity,
    build_restock_suggestions,
    build_stock_levels,
    calculate_efficiency_metrics,
    calculate_weekly_products,
    calculate_weekly_trends,
    classify_product,
)

logger = get_logger(__name__)


class GetDashboardMetricsUseCase:
    """Build the dashboard for one owner from products and recent movements."""

    def __init__(
        self,
        product_store: IProductStore | None = None,
        movement_store: IStockMovementStore | None = None,
        settings: DashboardSettings | None = None,
    ):
        self._product_store = product_store
        self._movement_store = movement_store
        self._settings = settings

    async def _get_product_store(self) -> IProductStore:
        if self._product_store is None:
            from stockledger.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_movement_store(self) -> IStockMovementStore:
        if self._movement_store is None:
            from stockledger.infrastructure.storage.sqlite import get_movement_store

            self._movement_store = await get_movement_store()
        return self._movement_store

    def _get_settings(self) -> DashboardSettings:
        if self._settings is None:
            self._settings = get_settings().dashboard
        return self._settings

    async def execute(self, owner_id: str, now: datetime | None = None) -> DashboardMetrics:
        """Execute get dashboard metrics use case."""
        now = now or datetime.now(UTC)
        settings = self._get_settings()

        product_store = await self._get_product_store()
        movement_store = await self._get_movement_store()

        products = [classify_product(p) for p in await product_store.list_products(owner_id)]
        recent = await movement_store.list_recent(
            owner_id, limit=settings.recent_activity_limit
        )

        metrics = DashboardMetrics(
            key_metrics=build_key_metrics(products),
            weekly_products=calculate_weekly_products(products, now, weeks=settings.weeks),
            weekly_trends=calculate_weekly_trends(products, now),
            efficiency=calculate_efficiency_metrics(products),
            stock_levels=build_stock_levels(products, limit=settings.stock_levels_limit),
            recent_activity=build_recent_activity(recent),
            restock_suggestions=build_restock_suggestions(
                products, limit=settings.restock_limit
            ),
        )

        logger.info(
            "dashboard_metrics_built",
            owner_id=owner_id,
            total_products=metrics.key_metrics.total_products,
            low_stock=metrics.key_metrics.low_stock,
        )

        return metrics

    def to_response(
        self, metrics: DashboardMetrics, generated_at: datetime | None = None
    ) -> DashboardResponse:
        """Convert metrics to API response."""
        key = metrics.key_metrics
        return DashboardResponse(
            key_metrics=KeyMetricsResponse(
                total_products=key.total_products,
                low_stock=key.low_stock,
                total_value=float(key.total_value),
                stock_breakdown=StockBreakdownResponse(**key.stock_breakdown.model_dump()),
            ),
            weekly_products=[
                WeekProductCountResponse(week=w.week, products=w.products)
                for w in metrics.weekly_products
            ],
            weekly_trends=WeeklyTrendsResponse(**metrics.weekly_trends.model_dump()),
            efficiency=EfficiencyResponse(**metrics.efficiency.model_dump()),
            stock_levels=[
                StockLevelResponse(
                    id=s.id,
                    name=s.name,
                    current_stock=float(s.current_stock),
                    low_stock_at=s.low_stock_at,
                    unit_name=s.unit_name,
                    stock_level=s.stock_level.value,
                )
                for s in metrics.stock_levels
            ],
            recent_activity=[
                RecentActivityResponse(
                    id=a.id,
                    product_name=a.product_name,
                    movement_type=a.movement_type.value,
                    quantity=float(a.quantity),
                    unit_name=a.unit_name,
                    reason=a.reason,
                    created_at=a.created_at,
                )
                for a in metrics.recent_activity
            ],
            restock_suggestions=[
                RestockSuggestionResponse(
                    id=r.id,
                    name=r.name,
                    current_stock=float(r.current_stock),
                    low_stock_at=r.low_stock_at,
                    unit_name=r.unit_name,
                    category_name=r.category_name,
                    stock_level=r.stock_level.value,
                    recommended_order=(
                        float(r.recommended_order) if r.recommended_order is not None else None
                    ),
                )
                for r in metrics.restock_suggestions
            ],
            generated_at=generated_at or datetime.now(UTC),
        )
