"""Tests for the schema migrator."""

import sys
from pathlib import Path

import aiosqlite
import pytest

from stockledger.infrastructure.storage.sqlite.migrations.migrator import (
    LEDGER_TABLES,
    Migration,
    SchemaMigrator,
    load_migrations,
    main,
    run_migrations,
)


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    """Directory with a single parent-table migration."""
    path = tmp_path / "migrations"
    path.mkdir()
    (path / "v001_parent.sql").write_text("CREATE TABLE parent (id INTEGER PRIMARY KEY);")
    return path


async def table_names(db_path: Path) -> set[str]:
    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        return {row[0] for row in await cursor.fetchall()}


class TestLoadMigrations:
    def test_orders_by_numeric_version(self, migrations_dir: Path):
        (migrations_dir / "v010_late.sql").write_text("SELECT 10;")
        (migrations_dir / "v002_early.sql").write_text("SELECT 2;")

        migrations = load_migrations(migrations_dir)

        assert [m.label for m in migrations] == ["v001_parent", "v002_early", "v010_late"]

    def test_skips_unversioned_files(self, migrations_dir: Path):
        (migrations_dir / "notes.sql").write_text("SELECT 1;")

        assert [m.version for m in load_migrations(migrations_dir)] == [1]

    def test_duplicate_version(self, migrations_dir: Path):
        (migrations_dir / "v1_again.sql").write_text("SELECT 1;")

        with pytest.raises(ValueError, match="Duplicate migration version 1"):
            load_migrations(migrations_dir)

    def test_checksum_follows_content(self):
        first = Migration(1, "a", "SELECT 1;")

        assert len(first.checksum) == 16
        assert first.checksum == Migration(7, "b", "SELECT 1;").checksum
        assert first.checksum != Migration(1, "a", "SELECT 2;").checksum


class TestMigrate:
    async def test_bundled_schema(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "ledger.db"

        results = await run_migrations(db_path)

        assert [(r.version, r.success) for r in results] == [(1, True)]
        assert set(LEDGER_TABLES) <= await table_names(db_path)
        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT version, name FROM schema_migrations")
            assert await cursor.fetchall() == [(1, "initial_schema")]

    async def test_second_run_is_a_no_op(self, temp_db_path: Path, migrations_dir: Path):
        first = await run_migrations(temp_db_path, migrations_dir)
        second = await run_migrations(temp_db_path, migrations_dir)

        assert [r.success for r in first] == [True]
        assert second == []

    async def test_failed_version_rolls_back_and_stops(
        self, temp_db_path: Path, migrations_dir: Path
    ):
        (migrations_dir / "v002_broken.sql").write_text(
            "CREATE TABLE half_done (id INTEGER);\nCREATE TABLE (;"
        )
        (migrations_dir / "v003_never.sql").write_text("CREATE TABLE never (id INTEGER);")

        results = await run_migrations(temp_db_path, migrations_dir)

        assert [(r.version, r.success) for r in results] == [(1, True), (2, False)]
        assert results[1].error
        tables = await table_names(temp_db_path)
        assert "half_done" not in tables
        assert "never" not in tables
        status = await SchemaMigrator(temp_db_path, migrations_dir).status()
        assert status.applied == [1]
        assert status.pending == [2, 3]

    async def test_foreign_key_violation_rolls_back(
        self, temp_db_path: Path, migrations_dir: Path
    ):
        (migrations_dir / "v002_orphans.sql").write_text(
            "CREATE TABLE child (id INTEGER PRIMARY KEY, parent_id INTEGER "
            "REFERENCES parent(id));\n"
            "INSERT INTO child (id, parent_id) VALUES (1, 99);"
        )

        results = await run_migrations(temp_db_path, migrations_dir)

        assert results[-1].success is False
        assert "child" in results[-1].error
        assert "child" not in await table_names(temp_db_path)


class TestStatus:
    async def test_missing_database(self, tmp_path: Path, migrations_dir: Path):
        db_path = tmp_path / "missing.db"

        status = await SchemaMigrator(db_path, migrations_dir).status()

        assert status.exists is False
        assert status.current_version == 0
        assert status.pending == [1]
        assert not db_path.exists()

    async def test_reports_changed_files(self, temp_db_path: Path, migrations_dir: Path):
        await run_migrations(temp_db_path, migrations_dir)
        (migrations_dir / "v001_parent.sql").write_text(
            "CREATE TABLE parent (id INTEGER PRIMARY KEY, name TEXT);"
        )
        (migrations_dir / "v002_next.sql").write_text("SELECT 2;")

        status = await SchemaMigrator(temp_db_path, migrations_dir).status()

        assert status.current_version == 1
        assert status.pending == [2]
        assert status.changed == [1]


class TestVerify:
    async def test_migrated_database_passes(self, initialized_db: Path):
        checks = await SchemaMigrator(initialized_db).verify()

        assert {c.name: c.passed for c in checks} == {
            "integrity": True,
            "foreign_keys": True,
            "tables": True,
        }

    async def test_missing_tables(self, temp_db_path: Path, migrations_dir: Path):
        await run_migrations(temp_db_path, migrations_dir)

        checks = {c.name: c for c in await SchemaMigrator(temp_db_path).verify()}

        assert checks["tables"].passed is False
        assert "products" in checks["tables"].detail

    async def test_missing_database(self, tmp_path: Path):
        checks = await SchemaMigrator(tmp_path / "missing.db").verify()

        assert [(c.name, c.passed) for c in checks] == [("database", False)]


class TestCommandLine:
    def run(self, monkeypatch, *args: str) -> int:
        monkeypatch.setattr(sys, "argv", ["stockledger-migrate", *args])
        return main()

    def test_migrate_then_status(self, monkeypatch, capsys, temp_db_path: Path):
        assert self.run(monkeypatch, "--db-path", str(temp_db_path)) == 0
        assert "[ok] v001_initial_schema" in capsys.readouterr().out

        assert self.run(monkeypatch, "--db-path", str(temp_db_path), "--status") == 0
        out = capsys.readouterr().out
        assert "current version: 1" in out
        assert "pending: none" in out

    def test_up_to_date(self, monkeypatch, capsys, temp_db_path: Path):
        self.run(monkeypatch, "--db-path", str(temp_db_path))
        capsys.readouterr()

        assert self.run(monkeypatch, "--db-path", str(temp_db_path)) == 0
        assert "schema is up to date" in capsys.readouterr().out

    def test_verify_exit_code(self, monkeypatch, capsys, tmp_path: Path):
        assert self.run(monkeypatch, "--db-path", str(tmp_path / "missing.db"), "--verify") == 1
        assert "[FAIL] database" in capsys.readouterr().out

    def test_status_and_verify_are_exclusive(self, monkeypatch, temp_db_path: Path):
        with pytest.raises(SystemExit):
            self.run(monkeypatch, "--db-path", str(temp_db_path), "--status", "--verify")
