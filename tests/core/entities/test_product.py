"""Tests for product entities."""

from decimal import Decimal

from stockledger.core.entities.product import Product, ProductSnapshot


class TestProductSnapshot:
    def test_defaults(self):
        snapshot = ProductSnapshot()
        assert snapshot.current_stock == Decimal("0")
        assert snapshot.avg_cost == Decimal("0")
        assert snapshot.total_value == Decimal("0")

    def test_total_value(self):
        snapshot = ProductSnapshot(current_stock=Decimal("2.5"), avg_cost=Decimal("4"))
        assert snapshot.total_value == Decimal("10")


class TestProduct:
    """Tests for Product entity."""

    def test_defaults(self):
        product = Product(owner_id="user-1", name="Widget", unit_id=1)
        assert product.id is None
        assert product.sku is None
        assert product.low_stock_at is None
        assert product.current_stock == Decimal("0")
        assert product.avg_cost == Decimal("0")
        assert product.category_id is None

    def test_inventory_value(self):
        product = Product(
            owner_id="user-1",
            name="Widget",
            unit_id=1,
            current_stock=Decimal("12"),
            avg_cost=Decimal("3.25"),
        )
        assert product.inventory_value == Decimal("39")

    def test_snapshot_round_trip(self):
        product = Product(id=1, owner_id="user-1", name="Widget", unit_id=1)
        updated = product.with_snapshot(
            ProductSnapshot(current_stock=Decimal("5"), avg_cost=Decimal("2"))
        )

        assert updated.snapshot == ProductSnapshot(Decimal("5"), Decimal("2"))
        assert updated.name == "Widget"
        # original untouched
        assert product.current_stock == Decimal("0")
