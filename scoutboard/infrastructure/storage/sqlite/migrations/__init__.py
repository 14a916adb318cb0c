"""Versioned SQL schema migrations."""

from scoutboard.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    discover_migrations,
    get_applied_migrations,
    get_migration_status,
    initialize_database,
)

__all__ = [
    "MigrationInfo",
    "MigrationResult",
    "discover_migrations",
    "get_applied_migrations",
    "get_migration_status",
    "initialize_database",
]
