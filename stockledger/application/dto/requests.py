"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.

Free-text fields are sanitised before validation: HTML tags are
stripped and surrounding whitespace trimmed. Sign rules for quantity
and unit cost are left to the ledger engine, which knows the movement
type.
"""

import re
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from stockledger.core.entities.movement import MovementType, ReferenceType

MAX_QUANTITY = Decimal("999999999999")
MAX_UNIT_COST = Decimal("999999999999")
MAX_LOW_STOCK_AT = 9_999_999_999
MAX_NAME_LENGTH = 191
MAX_REFERENCE_ID_LENGTH = 191
MAX_REASON_LENGTH = 255

_TAG_RE = re.compile(r"<[^>]*>")


def sanitize_text(value):
    """Strip HTML tags and trim. Non-strings pass through untouched."""
    if isinstance(value, str):
        return _TAG_RE.sub("", value).strip()
    return value


def sanitize_optional_text(value):
    """Like sanitize_text, but blank input becomes None."""
    value = sanitize_text(value)
    if value == "":
        return None
    return value


# --- Reference data ---


class CategoryRequest(BaseModel):
    """Request to create or rename a category."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description="Category name, unique per owner",
        examples=["Beverages"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, value):
        return sanitize_text(value)


class UnitRequest(BaseModel):
    """Request to create or rename a unit of measure."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_NAME_LENGTH,
        description="Unit name, unique per owner",
        examples=["pcs", "kg"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, value):
        return sanitize_text(value)


# --- Products ---


class ProductRequest(BaseModel):
    """Request to create a product or replace its descriptive fields.

    Stock and average cost are not accepted here; they only change
    through stock movements.
    """

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH, description="Product name")
    sku: str | None = Field(default=None, max_length=MAX_NAME_LENGTH, description="Stock keeping unit")
    low_stock_at: int | None = Field(
        default=None,
        ge=0,
        le=MAX_LOW_STOCK_AT,
        description="Stock level at or below which the product counts as low",
    )
    category_id: int | None = Field(default=None, description="Owner's category ID")
    unit_id: int = Field(..., description="Owner's unit of measure ID")

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, value):
        return sanitize_text(value)

    @field_validator("sku", mode="before")
    @classmethod
    def clean_sku(cls, value):
        return sanitize_optional_text(value)


# --- Stock movements ---


class StockMovementRequest(BaseModel):
    """Request to record or edit a stock movement.

    quantity is positive for IN/OUT and a signed, non-zero delta for
    ADJUST. unit_cost is required for IN and ignored for OUT/ADJUST.
    """

    product_id: int = Field(..., description="Owner's product ID")
    movement_type: MovementType = Field(..., description="IN, OUT or ADJUST")
    quantity: Decimal = Field(
        ...,
        ge=-MAX_QUANTITY,
        le=MAX_QUANTITY,
        decimal_places=3,
        description="Quantity moved (up to 3 decimal places)",
        examples=[10, 2.5],
    )
    unit_cost: Decimal | None = Field(
        default=None,
        le=MAX_UNIT_COST,
        decimal_places=2,
        description="Cost per unit, required for IN",
        examples=[5.25],
    )
    reference_type: ReferenceType = Field(
        default=ReferenceType.MANUAL,
        description="Provenance of the movement",
    )
    reference_id: str | None = Field(
        default=None,
        max_length=MAX_REFERENCE_ID_LENGTH,
        description="External reference (PO number, sale ID, ...)",
    )
    reason: str | None = Field(
        default=None,
        max_length=MAX_REASON_LENGTH,
        description="Free-text reason",
    )

    @field_validator("reference_id", "reason", mode="before")
    @classmethod
    def clean_text(cls, value):
        return sanitize_optional_text(value)
