"""Ledger schema migrations."""

from stockledger.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationResult,
    SchemaMigrator,
    run_migrations,
)

__all__ = [
    "MigrationResult",
    "SchemaMigrator",
    "run_migrations",
]
