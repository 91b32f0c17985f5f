"""SQLite implementation of stock movement storage and the ledger unit of work."""

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from decimal import Decimal

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.movement import MovementType, ReferenceType, StockMovement
from stockledger.core.entities.product import Product, ProductSnapshot
from stockledger.core.exceptions import DatabaseError
from stockledger.core.interfaces.ledger_store import ILedgerUnitOfWork, IStockMovementStore
from stockledger.infrastructure.storage.sqlite.catalog_store import parse_datetime
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction
from stockledger.infrastructure.storage.sqlite.product_store import (
    PRODUCT_SELECT,
    SQLiteProductStore,
)

logger = get_logger(__name__)

MOVEMENT_SELECT = """
    SELECT m.*, p.name AS product_name, u.name AS unit_name
    FROM stock_movements m
    JOIN products p ON p.id = m.product_id
    LEFT JOIN units u ON u.id = p.unit_id
"""


def _decimal_or_none(value: str | None) -> Decimal | None:
    return Decimal(value) if value is not None else None


def _text_or_none(value: Decimal | None) -> str | None:
    return str(value) if value is not None else None


class SQLiteLedgerUnitOfWork(ILedgerUnitOfWork):
    """
    Ledger operations bound to one open write transaction.

    Created by ``SQLiteStockMovementStore.unit_of_work()``; the
    connection already holds the write lock, so every read here sees
    the latest committed snapshot and no other writer can interleave.
    """

    def __init__(self, conn: aiosqlite.Connection):
        self._conn = conn

    async def get_product(self, owner_id: str, product_id: int) -> Product | None:
        cursor = await self._conn.execute(
            PRODUCT_SELECT + " WHERE p.id = ? AND p.owner_id = ?",
            (product_id, owner_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return SQLiteProductStore._row_to_product(row)

    async def get_movement(self, owner_id: str, movement_id: int) -> StockMovement | None:
        cursor = await self._conn.execute(
            MOVEMENT_SELECT + " WHERE m.id = ? AND m.owner_id = ?",
            (movement_id, owner_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return SQLiteStockMovementStore._row_to_movement(row)

    async def save_snapshot(self, product_id: int, snapshot: ProductSnapshot) -> None:
        cursor = await self._conn.execute(
            """
            UPDATE products SET current_stock = ?, avg_cost = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                str(snapshot.current_stock),
                str(snapshot.avg_cost),
                datetime.now(UTC).isoformat(),
                product_id,
            ),
        )
        if cursor.rowcount == 0:
            raise DatabaseError("save_snapshot", f"product {product_id} vanished")

        logger.debug(
            "product_snapshot_saved",
            product_id=product_id,
            current_stock=str(snapshot.current_stock),
            avg_cost=str(snapshot.avg_cost),
        )

    async def add_movement(self, movement: StockMovement) -> StockMovement:
        now = datetime.now(UTC)
        movement.created_at = now
        movement.updated_at = now
        cursor = await self._conn.execute(
            """
            INSERT INTO stock_movements (
                owner_id, product_id, movement_type, quantity, unit_cost,
                total_cost, reference_type, reference_id, reason,
                created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                movement.owner_id,
                movement.product_id,
                movement.movement_type.value,
                str(movement.quantity),
                _text_or_none(movement.unit_cost),
                _text_or_none(movement.total_cost),
                movement.reference_type.value,
                movement.reference_id,
                movement.reason,
                movement.created_at.isoformat(),
                movement.updated_at.isoformat(),
            ),
        )
        movement.id = cursor.lastrowid
        return movement

    async def update_movement(self, movement: StockMovement) -> StockMovement:
        movement.updated_at = datetime.now(UTC)
        await self._conn.execute(
            """
            UPDATE stock_movements SET
                product_id = ?,
                movement_type = ?,
                quantity = ?,
                unit_cost = ?,
                total_cost = ?,
                reference_type = ?,
                reference_id = ?,
                reason = ?,
                updated_at = ?
            WHERE id = ?
            """,
            (
                movement.product_id,
                movement.movement_type.value,
                str(movement.quantity),
                _text_or_none(movement.unit_cost),
                _text_or_none(movement.total_cost),
                movement.reference_type.value,
                movement.reference_id,
                movement.reason,
                movement.updated_at.isoformat(),
                movement.id,
            ),
        )
        return movement

    async def delete_movement(self, movement_id: int) -> None:
        await self._conn.execute(
            "DELETE FROM stock_movements WHERE id = ?", (movement_id,)
        )


class SQLiteStockMovementStore(IStockMovementStore):
    """SQLite implementation of stock movement storage."""

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[SQLiteLedgerUnitOfWork]:
        """Open a BEGIN IMMEDIATE transaction wrapped as a ledger unit of work."""
        async with get_transaction(immediate=True) as conn:
            yield SQLiteLedgerUnitOfWork(conn)

    async def get_movement(self, owner_id: str, movement_id: int) -> StockMovement | None:
        """Get movement by ID, with product and unit names."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                MOVEMENT_SELECT + " WHERE m.id = ? AND m.owner_id = ?",
                (movement_id, owner_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_movement(row)

    async def list_movements(
        self,
        owner_id: str,
        product_id: int | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[StockMovement]:
        """List movements newest first, optionally for one product."""
        query = MOVEMENT_SELECT + " WHERE m.owner_id = ?"
        params: list = [owner_id]
        if product_id is not None:
            query += " AND m.product_id = ?"
            params.append(product_id)
        query += " ORDER BY m.created_at DESC, m.id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    async def count_movements(self, owner_id: str, product_id: int | None = None) -> int:
        """Number of movements matching the list_movements filter."""
        query = "SELECT COUNT(*) FROM stock_movements WHERE owner_id = ?"
        params: list = [owner_id]
        if product_id is not None:
            query += " AND product_id = ?"
            params.append(product_id)

        async with get_connection() as conn:
            cursor = await conn.execute(query, params)
            row = await cursor.fetchone()
            return row[0]

    async def list_recent(
        self,
        owner_id: str,
        limit: int = 12,
        movement_types: Sequence[MovementType] = (MovementType.IN, MovementType.OUT),
    ) -> list[StockMovement]:
        """Latest movements of the given types, for the activity feed."""
        if not movement_types:
            return []
        placeholders = ", ".join("?" for _ in movement_types)
        async with get_connection() as conn:
            cursor = await conn.execute(
                MOVEMENT_SELECT
                + f"""
                WHERE m.owner_id = ? AND m.movement_type IN ({placeholders})
                ORDER BY m.created_at DESC, m.id DESC
                LIMIT ?
                """,
                (owner_id, *(MovementType(t).value for t in movement_types), limit),
            )
            rows = await cursor.fetchall()
            return [self._row_to_movement(row) for row in rows]

    @staticmethod
    def _row_to_movement(row: aiosqlite.Row) -> StockMovement:
        """Convert a database row to a StockMovement entity."""
        return StockMovement(
            id=row["id"],
            owner_id=row["owner_id"],
            product_id=row["product_id"],
            movement_type=MovementType(row["movement_type"]),
            quantity=Decimal(row["quantity"]),
            unit_cost=_decimal_or_none(row["unit_cost"]),
            total_cost=_decimal_or_none(row["total_cost"]),
            reference_type=ReferenceType(row["reference_type"]),
            reference_id=row["reference_id"],
            reason=row["reason"],
            product_name=row["product_name"],
            unit_name=row["unit_name"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
