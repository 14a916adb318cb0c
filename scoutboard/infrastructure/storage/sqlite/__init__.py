"""SQLite storage implementations."""

from scoutboard.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from scoutboard.infrastructure.storage.sqlite.record_store import SQLiteRecordStore

# Singleton instance
_record_store: SQLiteRecordStore | None = None


def get_record_store() -> SQLiteRecordStore:
    """Get singleton record store backed by the global pool."""
    global _record_store
    if _record_store is None:
        _record_store = SQLiteRecordStore()
    return _record_store


def reset_record_store() -> None:
    """Drop the singleton (for testing)."""
    global _record_store
    _record_store = None


__all__ = [
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    "SQLiteRecordStore",
    "get_record_store",
    "reset_record_store",
]
