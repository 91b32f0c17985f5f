"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from stockledger.application.dto.requests import (
    CategoryRequest,
    ProductRequest,
    StockMovementRequest,
    UnitRequest,
)
from stockledger.application.dto.responses import (
    CategoryResponse,
    DashboardResponse,
    DeleteStockMovementResponse,
    ErrorResponse,
    HealthResponse,
    ProductListResponse,
    ProductResponse,
    StockMovementListResponse,
    StockMovementResponse,
    StockMovementResultResponse,
    UnitResponse,
)

__all__ = [
    # Requests
    "CategoryRequest",
    "UnitRequest",
    "ProductRequest",
    "StockMovementRequest",
    # Responses
    "CategoryResponse",
    "UnitResponse",
    "ProductResponse",
    "ProductListResponse",
    "StockMovementResponse",
    "StockMovementListResponse",
    "StockMovementResultResponse",
    "DeleteStockMovementResponse",
    "DashboardResponse",
    "ErrorResponse",
    "HealthResponse",
]
