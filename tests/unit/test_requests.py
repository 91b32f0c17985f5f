"""Tests for request DTO validation and sanitisation."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from stockledger.application.dto.requests import (
    CategoryRequest,
    ProductRequest,
    StockMovementRequest,
    UnitRequest,
    sanitize_optional_text,
    sanitize_text,
)
from stockledger.core.entities.movement import MovementType, ReferenceType


class TestSanitize:
    def test_strips_tags_and_whitespace(self):
        assert sanitize_text("  <b>Bolts</b> ") == "Bolts"

    def test_non_string_passthrough(self):
        assert sanitize_text(None) is None
        assert sanitize_text(5) == 5

    def test_blank_optional_becomes_none(self):
        assert sanitize_optional_text("  <br>  ") is None
        assert sanitize_optional_text("PO-1") == "PO-1"


class TestReferenceRequests:
    @pytest.mark.parametrize("model", [CategoryRequest, UnitRequest])
    def test_name_cleaned(self, model):
        assert model(name=" <i>kg</i> ").name == "kg"

    @pytest.mark.parametrize("model", [CategoryRequest, UnitRequest])
    def test_blank_name_rejected(self, model):
        with pytest.raises(ValidationError):
            model(name="<p></p>  ")

    def test_name_too_long(self):
        with pytest.raises(ValidationError):
            CategoryRequest(name="x" * 192)


class TestProductRequest:
    def test_minimal(self):
        request = ProductRequest(name="Widget", unit_id=1)
        assert request.sku is None
        assert request.low_stock_at is None
        assert request.category_id is None

    def test_blank_sku_becomes_none(self):
        assert ProductRequest(name="Widget", unit_id=1, sku="   ").sku is None

    def test_negative_threshold_rejected(self):
        with pytest.raises(ValidationError):
            ProductRequest(name="Widget", unit_id=1, low_stock_at=-1)

    def test_unit_required(self):
        with pytest.raises(ValidationError):
            ProductRequest(name="Widget")

    def test_stock_fields_ignored(self):
        request = ProductRequest.model_validate(
            {"name": "Widget", "unit_id": 1, "current_stock": 50, "avg_cost": 3}
        )
        assert not hasattr(request, "current_stock")


class TestStockMovementRequest:
    def test_in_movement(self):
        request = StockMovementRequest(
            product_id=1, movement_type="IN", quantity="2.5", unit_cost="4.10"
        )
        assert request.movement_type is MovementType.IN
        assert request.quantity == Decimal("2.5")
        assert request.unit_cost == Decimal("4.10")
        assert request.reference_type is ReferenceType.MANUAL

    def test_negative_adjust_quantity_allowed(self):
        request = StockMovementRequest(product_id=1, movement_type="ADJUST", quantity="-3")
        assert request.quantity == Decimal("-3")

    def test_too_many_quantity_decimals(self):
        with pytest.raises(ValidationError):
            StockMovementRequest(product_id=1, movement_type="OUT", quantity="1.2345")

    def test_too_many_cost_decimals(self):
        with pytest.raises(ValidationError):
            StockMovementRequest(
                product_id=1, movement_type="IN", quantity="1", unit_cost="1.234"
            )

    def test_quantity_over_limit(self):
        with pytest.raises(ValidationError):
            StockMovementRequest(product_id=1, movement_type="IN", quantity="1000000000000")

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            StockMovementRequest(product_id=1, movement_type="MOVE", quantity="1")

    def test_text_fields_cleaned(self):
        request = StockMovementRequest(
            product_id=1,
            movement_type="OUT",
            quantity="1",
            reference_type="SALE",
            reference_id=" <a>INV-9</a> ",
            reason="   ",
        )
        assert request.reference_type is ReferenceType.SALE
        assert request.reference_id == "INV-9"
        assert request.reason is None

    def test_reason_too_long(self):
        with pytest.raises(ValidationError):
            StockMovementRequest(
                product_id=1, movement_type="OUT", quantity="1", reason="r" * 256
            )
