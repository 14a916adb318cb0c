"""
SQLite implementation of the generic record store.

Records are JSON documents in the ``records`` table, keyed by collection and
id. Equality filters run against ``json_extract`` of the document.
"""

import json
import re
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import aiosqlite

from scoutboard.config import get_logger
from scoutboard.core.exceptions import (
    DatabaseError,
    PersistenceFailedError,
    RecordNotFoundError,
    ValidationError,
)
from scoutboard.core.interfaces.storage import IRecordStore
from scoutboard.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    get_connection,
    get_transaction,
)

logger = get_logger(__name__)

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _check_name(kind: str, name: str) -> str:
    if not _FIELD_RE.match(name or ""):
        raise ValidationError(kind, "must be a plain identifier", name)
    return name


def _where(filters: dict[str, Any] | None) -> tuple[str, list[Any]]:
    """Build the filter clause; list values mean IN."""
    clauses: list[str] = []
    params: list[Any] = []
    for name, value in (filters or {}).items():
        path = f"json_extract(data, '$.{_check_name('filter', name)}')"
        if isinstance(value, (list, tuple, set)):
            values = list(value)
            if not values:
                clauses.append("0")
                continue
            clauses.append(f"{path} IN ({', '.join('?' for _ in values)})")
            params.extend(values)
        elif value is None:
            clauses.append(f"{path} IS NULL")
        else:
            clauses.append(f"{path} = ?")
            params.append(value)
    return (" AND " + " AND ".join(clauses) if clauses else ""), params


def _decode(row: aiosqlite.Row) -> dict[str, Any]:
    record = json.loads(row["data"])
    record["id"] = row["id"]
    return record


class SQLiteRecordStore(IRecordStore):
    """
    JSON-document record store.

    Uses the injected pool, or the global pool from settings when none is
    given.
    """

    def __init__(self, pool: ConnectionPool | None = None):
        self._pool = pool

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._pool is not None:
            async with self._pool.acquire() as conn:
                yield conn
        else:
            async with get_connection() as conn:
                yield conn

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        if self._pool is not None:
            async with self._pool.transaction() as conn:
                yield conn
        else:
            async with get_transaction() as conn:
                yield conn

    async def fetch_all(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch matching records, newest first."""
        _check_name("collection", collection)
        where, params = _where(filters)
        try:
            async with self._connection() as conn:
                cursor = await conn.execute(
                    f"""
                    SELECT id, data FROM records
                    WHERE collection = ?{where}
                    ORDER BY created_at DESC, rowid DESC
                    """,
                    (collection, *params),
                )
                rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise DatabaseError("fetch_all", str(e)) from e
        return [_decode(row) for row in rows]

    async def get(self, collection: str, record_id: str) -> dict[str, Any] | None:
        """Get record by id."""
        try:
            async with self._connection() as conn:
                cursor = await conn.execute(
                    "SELECT id, data FROM records WHERE collection = ? AND id = ?",
                    (collection, str(record_id)),
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise DatabaseError("get", str(e)) from e
        return _decode(row) if row is not None else None

    async def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        """Insert a record; ``id`` and ``created_at`` are filled in when absent."""
        _check_name("collection", collection)
        data = dict(record)
        record_id = str(data.pop("id", None) or uuid.uuid4().hex)
        now = _now()
        data.setdefault("created_at", now)

        try:
            async with self._transaction() as conn:
                await conn.execute(
                    """
                    INSERT INTO records (collection, id, data, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        collection,
                        record_id,
                        json.dumps(data, default=str),
                        str(data["created_at"]),
                        now,
                    ),
                )
        except aiosqlite.IntegrityError as e:
            raise PersistenceFailedError("insert", collection, record_id, cause=str(e)) from e
        except aiosqlite.Error as e:
            raise DatabaseError("insert", str(e)) from e

        logger.debug("record_inserted", collection=collection, record_id=record_id)
        return {**data, "id": record_id}

    async def update(
        self,
        collection: str,
        record_id: str,
        patch: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge a patch into a record; the id itself cannot be changed."""
        record_id = str(record_id)
        changes = {k: v for k, v in patch.items() if k != "id"}

        try:
            async with self._transaction() as conn:
                cursor = await conn.execute(
                    "SELECT data, created_at FROM records WHERE collection = ? AND id = ?",
                    (collection, record_id),
                )
                row = await cursor.fetchone()
                if row is None:
                    raise RecordNotFoundError(collection, record_id)

                data = json.loads(row["data"])
                data.update(changes)
                await conn.execute(
                    """
                    UPDATE records SET data = ?, created_at = ?, updated_at = ?
                    WHERE collection = ? AND id = ?
                    """,
                    (
                        json.dumps(data, default=str),
                        str(data.get("created_at") or row["created_at"]),
                        _now(),
                        collection,
                        record_id,
                    ),
                )
        except aiosqlite.Error as e:
            raise DatabaseError("update", str(e)) from e

        logger.debug(
            "record_updated",
            collection=collection,
            record_id=record_id,
            fields=sorted(changes),
        )
        return {**data, "id": record_id}

    async def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record by id."""
        try:
            async with self._transaction() as conn:
                cursor = await conn.execute(
                    "DELETE FROM records WHERE collection = ? AND id = ?",
                    (collection, str(record_id)),
                )
                deleted = cursor.rowcount > 0
        except aiosqlite.Error as e:
            raise DatabaseError("delete", str(e)) from e

        if deleted:
            logger.info("record_deleted", collection=collection, record_id=record_id)
        return deleted
