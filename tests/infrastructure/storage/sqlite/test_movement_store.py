"""Tests for SQLite stock movement store and ledger unit of work."""

from decimal import Decimal

import pytest

from stockledger.core.entities.movement import MovementType, ReferenceType, StockMovement
from stockledger.core.entities.product import Product, ProductSnapshot
from stockledger.core.exceptions import DatabaseError


def movement(owner_id, product_id, movement_type=MovementType.IN, quantity="1", **kwargs):
    return StockMovement(
        owner_id=owner_id,
        product_id=product_id,
        movement_type=movement_type,
        quantity=Decimal(quantity),
        **kwargs,
    )


class TestLedgerUnitOfWork:
    async def test_commit_persists_movement_and_snapshot(
        self, movement_store, product_store, owner_id, widget
    ):
        async with movement_store.unit_of_work() as uow:
            product = await uow.get_product(owner_id, widget.id)
            assert product.current_stock == Decimal("0")

            added = await uow.add_movement(
                movement(
                    owner_id,
                    widget.id,
                    quantity="2.500",
                    unit_cost=Decimal("4.10"),
                    total_cost=Decimal("10.25"),
                    reference_type=ReferenceType.PURCHASE,
                    reference_id="PO-7",
                )
            )
            await uow.save_snapshot(widget.id, ProductSnapshot(Decimal("2.500"), Decimal("4.10")))

        stored = await movement_store.get_movement(owner_id, added.id)
        assert stored.quantity == Decimal("2.500")
        assert stored.unit_cost == Decimal("4.10")
        assert stored.total_cost == Decimal("10.25")
        assert stored.reference_type is ReferenceType.PURCHASE
        assert stored.reference_id == "PO-7"
        assert stored.product_name == "Widget"
        assert stored.unit_name == "pcs"

        product = await product_store.get(owner_id, widget.id)
        assert product.current_stock == Decimal("2.5")
        assert product.avg_cost == Decimal("4.1")

    async def test_error_rolls_back_everything(
        self, movement_store, product_store, owner_id, widget
    ):
        with pytest.raises(RuntimeError):
            async with movement_store.unit_of_work() as uow:
                await uow.add_movement(movement(owner_id, widget.id))
                await uow.save_snapshot(widget.id, ProductSnapshot(Decimal("1"), Decimal("1")))
                raise RuntimeError("ledger step failed")

        assert await movement_store.list_movements(owner_id) == []
        assert (await product_store.get(owner_id, widget.id)).current_stock == Decimal("0")

    async def test_save_snapshot_for_missing_product(self, movement_store, ledger_db):
        with pytest.raises(DatabaseError):
            async with movement_store.unit_of_work() as uow:
                await uow.save_snapshot(999, ProductSnapshot())

    async def test_update_and_delete_movement(self, movement_store, owner_id, widget):
        async with movement_store.unit_of_work() as uow:
            added = await uow.add_movement(movement(owner_id, widget.id, reason="first"))

        async with movement_store.unit_of_work() as uow:
            existing = await uow.get_movement(owner_id, added.id)
            await uow.update_movement(
                existing.model_copy(
                    update={
                        "movement_type": MovementType.ADJUST,
                        "quantity": Decimal("-1"),
                        "unit_cost": None,
                        "total_cost": None,
                        "reason": "recount",
                    }
                )
            )

        updated = await movement_store.get_movement(owner_id, added.id)
        assert updated.movement_type is MovementType.ADJUST
        assert updated.quantity == Decimal("-1")
        assert updated.unit_cost is None
        assert updated.reason == "recount"

        async with movement_store.unit_of_work() as uow:
            await uow.delete_movement(added.id)

        assert await movement_store.get_movement(owner_id, added.id) is None

    async def test_reads_are_owner_scoped(self, movement_store, owner_id, other_owner_id, widget):
        async with movement_store.unit_of_work() as uow:
            added = await uow.add_movement(movement(owner_id, widget.id))

            assert await uow.get_product(other_owner_id, widget.id) is None
            assert await uow.get_movement(other_owner_id, added.id) is None

        assert await movement_store.get_movement(other_owner_id, added.id) is None
        assert await movement_store.list_movements(other_owner_id) == []


class TestSQLiteStockMovementStore:
    @pytest.fixture
    async def history(self, movement_store, product_store, owner_id, widget, pcs):
        """IN, OUT, ADJUST on the widget, then an IN on a second product."""
        gadget = await product_store.create(
            Product(owner_id=owner_id, name="Gadget", unit_id=pcs.id)
        )
        ids = []
        async with movement_store.unit_of_work() as uow:
            for m in (
                movement(owner_id, widget.id, MovementType.IN, "5"),
                movement(owner_id, widget.id, MovementType.OUT, "2"),
                movement(owner_id, widget.id, MovementType.ADJUST, "-1"),
                movement(owner_id, gadget.id, MovementType.IN, "3"),
            ):
                ids.append((await uow.add_movement(m)).id)
        return ids

    async def test_list_newest_first(self, movement_store, owner_id, history):
        listed = await movement_store.list_movements(owner_id)
        assert [m.id for m in listed] == list(reversed(history))

    async def test_filter_by_product(self, movement_store, owner_id, widget, history):
        listed = await movement_store.list_movements(owner_id, product_id=widget.id)
        assert [m.id for m in listed] == list(reversed(history[:3]))

    async def test_paging(self, movement_store, owner_id, history):
        listed = await movement_store.list_movements(owner_id, limit=2, offset=1)
        assert [m.id for m in listed] == [history[2], history[1]]

    async def test_count_ignores_paging(
        self, movement_store, owner_id, other_owner_id, widget, history
    ):
        assert await movement_store.count_movements(owner_id) == 4
        assert await movement_store.count_movements(owner_id, product_id=widget.id) == 3
        assert await movement_store.count_movements(other_owner_id) == 0

    async def test_list_recent_skips_adjustments(self, movement_store, owner_id, history):
        recent = await movement_store.list_recent(owner_id)

        assert [m.movement_type for m in recent] == [
            MovementType.IN,
            MovementType.OUT,
            MovementType.IN,
        ]
        assert recent[0].product_name == "Gadget"

    async def test_list_recent_limit(self, movement_store, owner_id, history):
        assert len(await movement_store.list_recent(owner_id, limit=1)) == 1

    async def test_list_recent_custom_types(self, movement_store, owner_id, history):
        recent = await movement_store.list_recent(
            owner_id, movement_types=[MovementType.ADJUST]
        )
        assert [m.id for m in recent] == [history[2]]
        assert await movement_store.list_recent(owner_id, movement_types=[]) == []
