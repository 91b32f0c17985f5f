"""
Versioned schema migrations for the ledger database.

Each ``vNNN_<name>.sql`` file beside this module is one schema version.
Pending versions run in order. A version's statements, its
``schema_migrations`` row and a foreign-key check share one transaction,
and the first failing version is rolled back and stops the run.

Migration files must not open or commit transactions themselves.
"""

import argparse
import asyncio
import hashlib
import re
import time
from dataclasses import dataclass, field
from pathlib import Path

import aiosqlite

from stockledger.config import get_logger, get_settings
from stockledger.core.exceptions import DatabaseError
from stockledger.infrastructure.storage.sqlite.connection import open_connection

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
MIGRATION_FILE = re.compile(r"^v(\d+)_(\w+)\.sql$")

LEDGER_TABLES = ("categories", "units", "products", "stock_movements", "schema_migrations")

TRACKING_DDL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    checksum TEXT NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (datetime('now'))
)
"""


@dataclass(frozen=True)
class Migration:
    """One schema version read from a ``vNNN_<name>.sql`` file."""

    version: int
    name: str
    sql: str

    @property
    def checksum(self) -> str:
        return hashlib.sha256(self.sql.encode()).hexdigest()[:16]

    @property
    def label(self) -> str:
        return f"v{self.version:03d}_{self.name}"


@dataclass
class MigrationResult:
    version: int
    name: str
    success: bool
    execution_time_ms: int = 0
    error: str | None = None


@dataclass
class MigrationStatus:
    db_path: Path
    exists: bool
    current_version: int = 0
    applied: list[int] = field(default_factory=list)
    pending: list[int] = field(default_factory=list)
    # Applied versions whose file no longer matches the recorded checksum
    changed: list[int] = field(default_factory=list)


@dataclass
class SchemaCheck:
    name: str
    passed: bool
    detail: str = ""


def load_migrations(directory: Path = MIGRATIONS_DIR) -> list[Migration]:
    """Migration files in version order. Other ``.sql`` files are skipped."""
    found: dict[int, Migration] = {}
    for path in directory.glob("*.sql"):
        match = MIGRATION_FILE.match(path.name)
        if match is None:
            logger.warning("migration_file_skipped", file=path.name)
            continue
        version = int(match.group(1))
        if version in found:
            raise ValueError(f"Duplicate migration version {version}: {path.name}")
        found[version] = Migration(version, match.group(2), path.read_text(encoding="utf-8"))
    return [found[version] for version in sorted(found)]


async def _applied_checksums(conn: aiosqlite.Connection) -> dict[int, str]:
    cursor = await conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_migrations'"
    )
    if await cursor.fetchone() is None:
        return {}
    cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    return {row[0]: row[1] for row in await cursor.fetchall()}


class SchemaMigrator:
    """Applies and inspects schema versions for one database file."""

    def __init__(self, db_path: Path | None = None, migrations_dir: Path = MIGRATIONS_DIR):
        self.db_path = db_path or get_settings().storage.db_path
        self.migrations_dir = migrations_dir

    async def migrate(self) -> list[MigrationResult]:
        """Apply pending versions. Returns one result per version attempted."""
        migrations = load_migrations(self.migrations_dir)
        results: list[MigrationResult] = []

        conn = await open_connection(self.db_path)
        try:
            # Table rebuilds must not cascade; each version is checked instead
            await conn.execute("PRAGMA foreign_keys=OFF")
            await conn.execute(TRACKING_DDL)
            await conn.commit()
            applied = await _applied_checksums(conn)

            for migration in migrations:
                if migration.version in applied:
                    if applied[migration.version] != migration.checksum:
                        logger.warning("migration_changed_since_applied", migration=migration.label)
                    continue
                result = await self._apply(conn, migration)
                results.append(result)
                if not result.success:
                    break
        finally:
            await conn.close()

        logger.info(
            "migrations_finished",
            db_path=str(self.db_path),
            applied=sum(r.success for r in results),
            failed=sum(not r.success for r in results),
        )
        return results

    async def _apply(self, conn: aiosqlite.Connection, migration: Migration) -> MigrationResult:
        logger.info("migration_applying", migration=migration.label)
        start = time.perf_counter()
        try:
            # executescript leaves the BEGIN open so the check and the record join it
            await conn.executescript(f"BEGIN;\n{migration.sql}\n")
            cursor = await conn.execute("PRAGMA foreign_key_check")
            violations = await cursor.fetchall()
            if violations:
                tables = ", ".join(sorted({row[0] for row in violations}))
                raise DatabaseError("migrate", f"foreign key violations in {tables}")
            await conn.execute(
                "INSERT INTO schema_migrations (version, name, checksum) VALUES (?, ?, ?)",
                (migration.version, migration.name, migration.checksum),
            )
            await conn.commit()
        except (aiosqlite.Error, DatabaseError) as e:
            await conn.rollback()
            logger.error("migration_failed", migration=migration.label, error=str(e))
            return MigrationResult(migration.version, migration.name, False, error=str(e))

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.info("migration_applied", migration=migration.label, execution_time_ms=elapsed_ms)
        return MigrationResult(migration.version, migration.name, True, elapsed_ms)

    async def status(self) -> MigrationStatus:
        """Applied, pending and changed versions. Never writes."""
        migrations = load_migrations(self.migrations_dir)
        status = MigrationStatus(db_path=self.db_path, exists=self.db_path.exists())

        applied: dict[int, str] = {}
        if status.exists:
            conn = await open_connection(self.db_path)
            try:
                applied = await _applied_checksums(conn)
            finally:
                await conn.close()

        status.applied = sorted(applied)
        status.current_version = max(applied, default=0)
        status.pending = [m.version for m in migrations if m.version not in applied]
        status.changed = [
            m.version
            for m in migrations
            if m.version in applied and applied[m.version] != m.checksum
        ]
        return status

    async def verify(self) -> list[SchemaCheck]:
        """Integrity, foreign-key and table checks against the current file."""
        if not self.db_path.exists():
            return [SchemaCheck("database", False, f"{self.db_path} does not exist")]

        conn = await open_connection(self.db_path)
        try:
            cursor = await conn.execute("PRAGMA integrity_check")
            integrity = (await cursor.fetchone())[0]
            cursor = await conn.execute("PRAGMA foreign_key_check")
            violations = await cursor.fetchall()
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {row[0] for row in await cursor.fetchall()}
        finally:
            await conn.close()

        missing = [table for table in LEDGER_TABLES if table not in tables]
        return [
            SchemaCheck("integrity", integrity == "ok", "" if integrity == "ok" else integrity),
            SchemaCheck(
                "foreign_keys",
                not violations,
                ", ".join(sorted({row[0] for row in violations})),
            ),
            SchemaCheck("tables", not missing, ", ".join(missing)),
        ]


async def run_migrations(
    db_path: Path | None = None, migrations_dir: Path = MIGRATIONS_DIR
) -> list[MigrationResult]:
    """Bring the database (default: from settings) up to the latest version."""
    return await SchemaMigrator(db_path, migrations_dir).migrate()


def _print_status(status: MigrationStatus) -> None:
    print(f"database: {status.db_path}" + ("" if status.exists else " (not created)"))
    print(f"current version: {status.current_version}")
    print(f"pending: {', '.join(map(str, status.pending)) or 'none'}")
    if status.changed:
        print(f"changed since applied: {', '.join(map(str, status.changed))}")


def main() -> int:
    """``stockledger-migrate``: apply pending versions, or inspect with --status/--verify."""
    parser = argparse.ArgumentParser(
        prog="stockledger-migrate", description="Ledger database schema migrations"
    )
    parser.add_argument("--db-path", type=Path, help="database file (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="show applied and pending versions")
    mode.add_argument("--verify", action="store_true", help="check integrity and foreign keys")
    args = parser.parse_args()

    migrator = SchemaMigrator(args.db_path)

    if args.status:
        _print_status(asyncio.run(migrator.status()))
        return 0

    if args.verify:
        checks = asyncio.run(migrator.verify())
        for check in checks:
            print(f"[{'ok' if check.passed else 'FAIL'}] {check.name} {check.detail}".rstrip())
        return 0 if all(check.passed for check in checks) else 1

    results = asyncio.run(migrator.migrate())
    if not results:
        print("schema is up to date")
    for result in results:
        line = f"[{'ok' if result.success else 'FAIL'}] v{result.version:03d}_{result.name}"
        print(f"{line}: {result.error}" if result.error else f"{line} ({result.execution_time_ms}ms)")
    return 0 if all(result.success for result in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
