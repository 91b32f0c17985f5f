"""SQLite implementation of category and unit storage."""

from datetime import UTC, datetime
from typing import ClassVar

import aiosqlite

from stockledger.config import get_logger
from stockledger.core.entities.catalog import Category, Unit
from stockledger.core.exceptions import DuplicateEntityError, ReferencedEntityError
from stockledger.core.interfaces.storage import ICategoryStore, IUnitStore
from stockledger.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


def parse_datetime(value: str | None) -> datetime:
    if value:
        try:
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            pass
    return datetime.now(UTC)


class _NamedEntityStore:
    """Shared SQL for owner-scoped name tables (categories, units)."""

    table: ClassVar[str]
    entity_name: ClassVar[str]
    entity_cls: ClassVar[type[Category] | type[Unit]]

    async def _create(self, entity):
        now = datetime.now(UTC)
        entity.created_at = now
        entity.updated_at = now
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"""
                    INSERT INTO {self.table} (owner_id, name, created_at, updated_at)
                    VALUES (?, ?, ?, ?)
                    """,
                    (
                        entity.owner_id,
                        entity.name,
                        entity.created_at.isoformat(),
                        entity.updated_at.isoformat(),
                    ),
                )
                entity.id = cursor.lastrowid
        except aiosqlite.IntegrityError:
            raise DuplicateEntityError(self.entity_name, entity.name) from None

        logger.info(
            f"{self.entity_name.lower()}_created",
            id=entity.id,
            owner_id=entity.owner_id,
        )
        return entity

    async def _get(self, owner_id: str, entity_id: int):
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"SELECT * FROM {self.table} WHERE id = ? AND owner_id = ?",
                (entity_id, owner_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entity(row)

    async def _list_all(self, owner_id: str, limit: int, offset: int):
        async with get_connection() as conn:
            cursor = await conn.execute(
                f"""
                SELECT * FROM {self.table}
                WHERE owner_id = ?
                ORDER BY created_at DESC, id DESC
                LIMIT ? OFFSET ?
                """,
                (owner_id, limit, offset),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entity(row) for row in rows]

    async def _update(self, entity):
        entity.updated_at = datetime.now(UTC)
        try:
            async with get_transaction() as conn:
                await conn.execute(
                    f"""
                    UPDATE {self.table} SET name = ?, updated_at = ?
                    WHERE id = ? AND owner_id = ?
                    """,
                    (entity.name, entity.updated_at.isoformat(), entity.id, entity.owner_id),
                )
        except aiosqlite.IntegrityError:
            raise DuplicateEntityError(self.entity_name, entity.name) from None

        logger.info(f"{self.entity_name.lower()}_updated", id=entity.id)
        return entity

    async def _delete(self, owner_id: str, entity_id: int) -> bool:
        try:
            async with get_transaction() as conn:
                cursor = await conn.execute(
                    f"DELETE FROM {self.table} WHERE id = ? AND owner_id = ?",
                    (entity_id, owner_id),
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.IntegrityError:
            raise ReferencedEntityError(self.entity_name, entity_id) from None

        if deleted:
            logger.info(f"{self.entity_name.lower()}_deleted", id=entity_id)
        return deleted

    @classmethod
    def _row_to_entity(cls, row: aiosqlite.Row):
        return cls.entity_cls(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            created_at=parse_datetime(row["created_at"]),
            updated_at=parse_datetime(row["updated_at"]),
        )


class SQLiteCategoryStore(_NamedEntityStore, ICategoryStore):
    """SQLite implementation of category storage."""

    table = "categories"
    entity_name = "Category"
    entity_cls = Category

    async def create(self, category: Category) -> Category:
        return await self._create(category)

    async def get(self, owner_id: str, category_id: int) -> Category | None:
        return await self._get(owner_id, category_id)

    async def list_all(
        self, owner_id: str, limit: int = 100, offset: int = 0
    ) -> list[Category]:
        return await self._list_all(owner_id, limit, offset)

    async def update(self, category: Category) -> Category:
        return await self._update(category)

    async def delete(self, owner_id: str, category_id: int) -> bool:
        # products.category_id is ON DELETE SET NULL
        return await self._delete(owner_id, category_id)


class SQLiteUnitStore(_NamedEntityStore, IUnitStore):
    """SQLite implementation of unit-of-measure storage."""

    table = "units"
    entity_name = "Unit"
    entity_cls = Unit

    async def create(self, unit: Unit) -> Unit:
        return await self._create(unit)

    async def get(self, owner_id: str, unit_id: int) -> Unit | None:
        return await self._get(owner_id, unit_id)

    async def list_all(
        self, owner_id: str, limit: int = 100, offset: int = 0
    ) -> list[Unit]:
        return await self._list_all(owner_id, limit, offset)

    async def update(self, unit: Unit) -> Unit:
        return await self._update(unit)

    async def delete(self, owner_id: str, unit_id: int) -> bool:
        # Raises ReferencedEntityError while products still use it (RESTRICT)
        return await self._delete(owner_id, unit_id)
