"""Application use cases."""

from stockledger.application.use_cases.delete_stock_movement import (
    DeleteStockMovementResult,
    DeleteStockMovementUseCase,
)
from stockledger.application.use_cases.get_dashboard_metrics import GetDashboardMetricsUseCase
from stockledger.application.use_cases.record_stock_movement import (
    RecordStockMovementResult,
    RecordStockMovementUseCase,
)
from stockledger.application.use_cases.update_stock_movement import (
    UpdateStockMovementResult,
    UpdateStockMovementUseCase,
)

__all__ = [
    "RecordStockMovementUseCase",
    "RecordStockMovementResult",
    "UpdateStockMovementUseCase",
    "UpdateStockMovementResult",
    "DeleteStockMovementUseCase",
    "DeleteStockMovementResult",
    "GetDashboardMetricsUseCase",
]
