"""SQLite implementation of product storage."""

from datetime import UTC, datetime
from decimal import Decimal

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.product import Product
from stockledger.core.exceptions import CategoryNotFoundError, UnitNotFoundError
from stockledger.core.interfaces.storage import IProductStore
from stockledger.infrastructure.storage.sqlite.catalog_store import parse_datetime
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)

PRODUCT_SELECT = """
    SELECT p.*, c.name AS category_name, u.name AS unit_name
    FROM products p
    LEFT JOIN categories c ON c.id = p.category_id
    LEFT JOIN units u ON u.id = p.unit_id
"""


async def _ensure_references(
    conn: aiosqlite.Connection,
    owner_id: str,
    category_id: int | None,
    unit_id: int,
) -> None:
    """Category and unit must exist and belong to the product's owner."""
    cursor = await conn.execute(
        "SELECT 1 FROM units WHERE id = ? AND owner_id = ?",
        (unit_id, owner_id),
    )
    if await cursor.fetchone() is None:
        raise UnitNotFoundError(unit_id)

    if category_id is not None:
        cursor = await conn.execute(
            "SELECT 1 FROM categories WHERE id = ? AND owner_id = ?",
            (category_id, owner_id),
        )
        if await cursor.fetchone() is None:
            raise CategoryNotFoundError(category_id)


class SQLiteProductStore(IProductStore):
    """SQLite implementation of product storage.

    Stock and average cost are written only by the ledger unit of work;
    this store creates products at zero and edits descriptive fields.
    """

    async def create(self, product: Product) -> Product:
        """Create a product with zero stock and zero cost."""
        now = datetime.now(UTC)
        product.created_at = now
        product.updated_at = now
        product.current_stock = Decimal("0.000")
        product.avg_cost = Decimal("0.00")

        async with get_transaction() as conn:
            await _ensure_references(conn, product.owner_id, product.category_id, product.unit_id)
            cursor = await conn.execute(
                """
                INSERT INTO products (
                    owner_id, name, sku, low_stock_at, current_stock, avg_cost,
                    category_id, unit_id, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    product.owner_id,
                    product.name,
                    product.sku,
                    product.low_stock_at,
                    str(product.current_stock),
                    str(product.avg_cost),
                    product.category_id,
                    product.unit_id,
                    product.created_at.isoformat(),
                    product.updated_at.isoformat(),
                ),
            )
            product.id = cursor.lastrowid

        logger.info("product_created", product_id=product.id, owner_id=product.owner_id)
        return await self.get(product.owner_id, product.id) or product

    async def get(self, owner_id: str, product_id: int) -> Product | None:
        """Get product by ID, with category and unit names."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                PRODUCT_SELECT + " WHERE p.id = ? AND p.owner_id = ?",
                (product_id, owner_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_product(row)

    async def list_products(
        self, owner_id: str, limit: int | None = None, offset: int = 0
    ) -> list[Product]:
        """List the owner's products, newest first. ``limit=None`` returns all."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                PRODUCT_SELECT
                + """
                WHERE p.owner_id = ?
                ORDER BY p.created_at DESC, p.id DESC
                LIMIT ? OFFSET ?
                """,
                (owner_id, -1 if limit is None else limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_product(row) for row in rows]

    async def count_products(self, owner_id: str) -> int:
        """Number of products the owner has."""
        async with get_connection() as conn:
            cursor = await conn.execute(
                "SELECT COUNT(*) FROM products WHERE owner_id = ?", (owner_id,)
            )
            row = await cursor.fetchone()
            return row[0]

    async def update(self, product: Product) -> Product:
        """Update descriptive fields. Stock and cost columns are left alone."""
        product.updated_at = datetime.now(UTC)
        async with get_transaction() as conn:
            await _ensure_references(conn, product.owner_id, product.category_id, product.unit_id)
            await conn.execute(
                """
                UPDATE products SET
                    name = ?,
                    sku = ?,
                    low_stock_at = ?,
                    category_id = ?,
                    unit_id = ?,
                    updated_at = ?
                WHERE id = ? AND owner_id = ?
                """,
                (
                    product.name,
                    product.sku,
                    product.low_stock_at,
                    product.category_id,
                    product.unit_id,
                    product.updated_at.isoformat(),
                    product.id,
                    product.owner_id,
                ),
            )

        logger.info("product_updated", product_id=product.id)
        return await self.get(product.owner_id, product.id) or product

    async def delete(self, owner_id: str, product_id: int) -> bool:
        """Delete a product; its movements go with it (ON DELETE CASCADE)."""
        async with get_transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM products WHERE id = ? AND owner_id = ?",
                (product_id, owner_id),
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("product_deleted", product_id=product_id)
        return deleted

    @staticmethod
    def _row_to_product(row: aiosqlite.Row) -> Product:
        """Convert a database row to a Product entity."""
        return Product(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            sku=row["sku"],
            low_stock_at=row["low_stock_at"],
            current_stock=Decimal(row["current_stock"]),
            avg_cost=Decimal(row["avg_cost"]),
            category_id=row["category_id"],
            unit_id=row["unit_id"],
            category_name=row["category_name"],
            unit_name=row["unit_name"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )
