"""
Application layer - Use cases and DTOs.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that run the ledger engine inside a storage
   unit of work

Use cases are the entry point for API handlers that touch stock.
"""

from stockledger.application.dto.requests import (
    CategoryRequest,
    ProductRequest,
    StockMovementRequest,
    UnitRequest,
)
from stockledger.application.dto.responses import (
    DashboardResponse,
    ErrorResponse,
    HealthResponse,
    ProductResponse,
    StockMovementResponse,
)
from stockledger.application.use_cases import (
    DeleteStockMovementUseCase,
    GetDashboardMetricsUseCase,
    RecordStockMovementUseCase,
    UpdateStockMovementUseCase,
)

__all__ = [
    # Requests
    "CategoryRequest",
    "UnitRequest",
    "ProductRequest",
    "StockMovementRequest",
    # Responses
    "DashboardResponse",
    "ErrorResponse",
    "HealthResponse",
    "ProductResponse",
    "StockMovementResponse",
    # Use cases
    "RecordStockMovementUseCase",
    "UpdateStockMovementUseCase",
    "DeleteStockMovementUseCase",
    "GetDashboardMetricsUseCase",
]
