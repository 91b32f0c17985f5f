"""
Dashboard analytics.

Pure functions turning an owner's products and recent movements into the
metrics shown on the dashboard: valuation, stock-level breakdown, weekly
trends and an efficiency score. No I/O; the use case feeds them.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import UTC, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from stockledger.core.entities.dashboard import (
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
from stockledger.core.entities.movement import StockMovement
from stockledger.core.entities.product import Product
from stockledger.core.services.ledger import round_cost, round_stock

STOCK_LEVEL_PRIORITY: dict[StockLevel, int] = {
    StockLevel.OUT_OF_STOCK: 0,
    StockLevel.LOW: 1,
    StockLevel.HEALTHY: 2,
}


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _start_of_week(now: datetime) -> datetime:
    """Midnight of the Sunday starting the week containing ``now``."""
    days_since_sunday = (now.weekday() + 1) % 7
    start = now - timedelta(days=days_since_sunday)
    return start.replace(hour=0, minute=0, second=0, microsecond=0)


def classify_product(product: Product) -> ProductOverview:
    """Attach inventory value and stock-level flags to a product."""
    current_stock = product.current_stock
    low_stock_at = product.low_stock_at
    is_out_of_stock = current_stock <= 0
    is_low_stock = (
        not is_out_of_stock
        and low_stock_at is not None
        and low_stock_at > 0
        and current_stock <= low_stock_at
    )

    if is_out_of_stock:
        stock_level = StockLevel.OUT_OF_STOCK
    elif is_low_stock:
        stock_level = StockLevel.LOW
    else:
        stock_level = StockLevel.HEALTHY

    return ProductOverview(
        id=product.id or 0,
        name=product.name,
        sku=product.sku,
        low_stock_at=low_stock_at,
        current_stock=current_stock,
        avg_cost=product.avg_cost,
        category_name=product.category_name,
        unit_name=product.unit_name,
        created_at=_as_utc(product.created_at),
        inventory_value=round_cost(product.inventory_value),
        is_low_stock=is_low_stock,
        is_out_of_stock=is_out_of_stock,
        stock_level=stock_level,
    )


def build_key_metrics(products: Sequence[ProductOverview]) -> KeyMetrics:
    breakdown = StockBreakdown()
    for product in products:
        if product.stock_level is StockLevel.OUT_OF_STOCK:
            breakdown.out_of_stock += 1
        elif product.stock_level is StockLevel.LOW:
            breakdown.low += 1
        else:
            breakdown.healthy += 1

    total_value = sum((p.inventory_value for p in products), Decimal("0"))

    return KeyMetrics(
        total_products=len(products),
        low_stock=breakdown.low + breakdown.out_of_stock,
        total_value=round_cost(total_value),
        stock_breakdown=breakdown,
    )


def calculate_weekly_products(
    products: Sequence[ProductOverview],
    now: datetime,
    weeks: int = 12,
) -> list[WeekProductCount]:
    """Count products created per week, oldest week first."""
    this_week = _start_of_week(_as_utc(now))
    data: list[WeekProductCount] = []

    for i in range(weeks - 1, -1, -1):
        week_start = this_week - timedelta(weeks=i)
        week_end = week_start + timedelta(days=7)
        count = sum(1 for p in products if week_start <= p.created_at < week_end)
        label = f"{week_start:%b %d} - {week_end - timedelta(days=1):%b %d}"
        data.append(WeekProductCount(week=label, products=count))

    return data


def _percent_change(current: float, previous: float) -> float:
    return ((current - previous) / previous) * 100 if previous > 0 else 0.0


def calculate_weekly_trends(
    products: Sequence[ProductOverview],
    now: datetime,
) -> WeeklyTrends:
    """Compare products created this week with those created last week."""
    start_this_week = _start_of_week(_as_utc(now))
    start_last_week = start_this_week - timedelta(weeks=1)

    this_week = [p for p in products if p.created_at >= start_this_week]
    last_week = [p for p in products if start_last_week <= p.created_at < start_this_week]

    def total_value(items: Iterable[ProductOverview]) -> float:
        return float(sum((p.inventory_value for p in items), Decimal("0")))

    def low_count(items: Iterable[ProductOverview]) -> int:
        return sum(1 for p in items if p.is_low_stock or p.is_out_of_stock)

    return WeeklyTrends(
        product_trend=_percent_change(len(this_week), len(last_week)),
        total_value_trend=_percent_change(total_value(this_week), total_value(last_week)),
        low_stock_trend=_percent_change(low_count(this_week), low_count(last_week)),
    )


def calculate_efficiency_metrics(products: Sequence[ProductOverview]) -> EfficiencyMetrics:
    total = len(products)
    in_stock = low = out = 0

    for product in products:
        if product.is_out_of_stock:
            out += 1
        elif product.is_low_stock:
            low += 1
        elif product.current_stock > 0:
            in_stock += 1

    def pct(count: int) -> int:
        return _round_half_up(count / total * 100) if total > 0 else 0

    in_pct, low_pct, out_pct = pct(in_stock), pct(low), pct(out)

    score: int | None = None
    if total > 0:
        raw = in_pct * 0.7 + (100 - low_pct) * 0.2 + (100 - out_pct) * 0.1
        score = max(0, min(100, _round_half_up(raw)))

    return EfficiencyMetrics(
        efficiency_score=score,
        in_stock_percentage=in_pct,
        low_stock_percentage=low_pct,
        out_of_stock_percentage=out_pct,
    )


def _criticality_key(product: ProductOverview) -> tuple:
    # Most severe first, then lowest stock, then newest
    return (
        STOCK_LEVEL_PRIORITY[product.stock_level],
        product.current_stock,
        -product.created_at.timestamp(),
    )


def build_stock_levels(
    products: Sequence[ProductOverview],
    limit: int = 5,
) -> list[StockLevelItem]:
    ranked = sorted(products, key=_criticality_key)[:limit]
    return [
        StockLevelItem(
            id=p.id,
            name=p.name,
            current_stock=p.current_stock,
            low_stock_at=p.low_stock_at,
            unit_name=p.unit_name,
            stock_level=p.stock_level,
        )
        for p in ranked
    ]


def build_restock_suggestions(
    products: Sequence[ProductOverview],
    limit: int = 5,
) -> list[RestockSuggestion]:
    """Suggest refilling LOW / OUT_OF_STOCK products up to twice their threshold."""
    candidates = [p for p in products if p.stock_level is not StockLevel.HEALTHY]
    suggestions = []

    for p in sorted(candidates, key=_criticality_key)[:limit]:
        recommended: Decimal | None = None
        if p.low_stock_at is not None and p.low_stock_at > 0:
            recommended = round_stock(max(Decimal(2 * p.low_stock_at) - p.current_stock, Decimal("0")))
        suggestions.append(
            RestockSuggestion(
                id=p.id,
                name=p.name,
                current_stock=p.current_stock,
                low_stock_at=p.low_stock_at,
                unit_name=p.unit_name,
                category_name=p.category_name,
                stock_level=p.stock_level,
                recommended_order=recommended,
            )
        )

    return suggestions


def build_recent_activity(movements: Iterable[StockMovement]) -> list[RecentActivityItem]:
    return [
        RecentActivityItem(
            id=m.id or 0,
            product_name=m.product_name,
            movement_type=m.movement_type,
            quantity=m.quantity,
            unit_name=m.unit_name,
            reason=m.reason,
            created_at=m.created_at,
        )
        for m in movements
    ]
