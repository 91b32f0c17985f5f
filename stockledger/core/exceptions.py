"""
Domain exceptions for the stock ledger.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class StockLedgerError(Exception):
    """Base exception for all stock ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Ledger Exceptions
class InvalidInputError(StockLedgerError):
    """Malformed or missing field for the given movement type."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message,
            code="INVALID_INPUT",
            details={"field": field} if field else {},
        )


class InvalidOperationError(StockLedgerError):
    """Operation is impossible under the current stock state."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="INVALID_OPERATION", details=details)


# Lookup Exceptions
class NotFoundError(StockLedgerError):
    """Entity does not exist for the acting owner."""

    def __init__(self, entity: str, entity_id: int | str, code: str = "NOT_FOUND"):
        super().__init__(
            f"{entity} not found: {entity_id}",
            code=code,
            details={"entity": entity, "id": entity_id},
        )


class ProductNotFoundError(NotFoundError):
    """Product not found for the acting owner."""

    def __init__(self, product_id: int):
        super().__init__("Product", product_id, code="PRODUCT_NOT_FOUND")


class StockMovementNotFoundError(NotFoundError):
    """Stock movement not found for the acting owner."""

    def __init__(self, movement_id: int):
        super().__init__("Stock movement", movement_id, code="STOCK_MOVEMENT_NOT_FOUND")


class CategoryNotFoundError(NotFoundError):
    """Category not found for the acting owner."""

    def __init__(self, category_id: int):
        super().__init__("Category", category_id, code="CATEGORY_NOT_FOUND")


class UnitNotFoundError(NotFoundError):
    """Unit of measure not found for the acting owner."""

    def __init__(self, unit_id: int):
        super().__init__("Unit", unit_id, code="UNIT_NOT_FOUND")


class UnauthorizedError(StockLedgerError):
    """Request carries no owner identity."""

    def __init__(self, message: str = "Please log in first."):
        super().__init__(message, code="UNAUTHORIZED")


# Storage Exceptions
class StorageError(StockLedgerError):
    """Base exception for storage operations."""

    pass


class DuplicateEntityError(StorageError):
    """A row with the same unique value already exists for the owner."""

    def __init__(self, entity: str, name: str):
        super().__init__(
            f"{entity} '{name}' already exists. Please choose another one.",
            code="DUPLICATE_ENTITY",
            details={"entity": entity, "name": name},
        )


class ReferencedEntityError(StorageError):
    """Row cannot be deleted because other rows still reference it."""

    def __init__(self, entity: str, entity_id: int):
        super().__init__(
            f"Cannot delete this {entity.lower()} because it's linked to other data.",
            code="REFERENCED_ENTITY",
            details={"entity": entity, "id": entity_id},
        )


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )
