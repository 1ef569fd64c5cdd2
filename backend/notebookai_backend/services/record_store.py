from __future__ import annotations

import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

from ..errors import NotFoundError, StoreError

Record = dict[str, Any]

TABLES: dict[str, tuple[str, ...]] = {
    "notebooks": ("id", "title", "created_at"),
    "sources": ("id", "notebook_id", "file_name", "file_type", "summary", "created_at"),
    "conversations": ("id", "notebook_id", "created_at"),
    "messages": ("id", "conversation_id", "role", "content", "created_at"),
    "syllabi": ("id", "notebook_id", "content", "created_at", "updated_at"),
    "activities": ("id", "syllabus_id", "name", "description", "created_at"),
    "pedagogical_approaches": ("id", "syllabus_id", "name", "description", "created_at"),
    "generated_features": ("id", "notebook_id", "name", "description", "type", "reference_id", "created_at"),
}

SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS notebooks (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sources (
        id TEXT PRIMARY KEY,
        notebook_id TEXT NOT NULL REFERENCES notebooks (id) ON DELETE CASCADE,
        file_name TEXT NOT NULL,
        file_type TEXT NOT NULL,
        summary TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS conversations (
        id TEXT PRIMARY KEY,
        notebook_id TEXT NOT NULL UNIQUE REFERENCES notebooks (id) ON DELETE CASCADE,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS messages (
        id TEXT PRIMARY KEY,
        conversation_id TEXT NOT NULL REFERENCES conversations (id) ON DELETE CASCADE,
        role TEXT NOT NULL CHECK (role IN ('user', 'assistant')),
        content TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS syllabi (
        id TEXT PRIMARY KEY,
        notebook_id TEXT NOT NULL REFERENCES notebooks (id) ON DELETE CASCADE,
        content TEXT NOT NULL,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS activities (
        id TEXT PRIMARY KEY,
        syllabus_id TEXT NOT NULL REFERENCES syllabi (id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        description TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS pedagogical_approaches (
        id TEXT PRIMARY KEY,
        syllabus_id TEXT NOT NULL REFERENCES syllabi (id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        description TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS generated_features (
        id TEXT PRIMARY KEY,
        notebook_id TEXT NOT NULL REFERENCES notebooks (id) ON DELETE CASCADE,
        name TEXT NOT NULL,
        description TEXT NOT NULL,
        type TEXT NOT NULL,
        reference_id TEXT,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_sources_notebook ON sources (notebook_id)",
    "CREATE INDEX IF NOT EXISTS idx_messages_conversation ON messages (conversation_id)",
    "CREATE INDEX IF NOT EXISTS idx_syllabi_notebook ON syllabi (notebook_id)",
)


def utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


class RecordStore:
    """
    SQLite-backed record store with a small table-generic API.

    Records are plain dicts keyed by column name. Ids and timestamps are filled
    in on insert when absent.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            conn.execute("PRAGMA foreign_keys = ON")
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(f"Database error: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._connect() as conn:
            for statement in SCHEMA:
                conn.execute(statement)

    def insert(self, table: str, record: Mapping[str, Any], *, ignore_conflicts: bool = False) -> Record:
        return self.insert_many(table, [record], ignore_conflicts=ignore_conflicts)[0]

    def insert_many(
        self,
        table: str,
        records: Iterable[Mapping[str, Any]],
        *,
        ignore_conflicts: bool = False,
    ) -> list[Record]:
        columns = _columns(table)
        prepared = [self._prepare(table, record) for record in records]
        if not prepared:
            return []

        verb = "INSERT OR IGNORE" if ignore_conflicts else "INSERT"
        placeholders = ", ".join("?" for _ in columns)
        sql = f"{verb} INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
        with self._connect() as conn:
            conn.executemany(sql, [tuple(row.get(column) for column in columns) for row in prepared])
        return prepared

    def select_one(self, table: str, filters: Mapping[str, Any]) -> Record:
        rows, _ = self.select_many(table, filters, limit=1)
        if not rows:
            raise NotFoundError(f"No {table} record matching {dict(filters)}")
        return rows[0]

    def select_many(
        self,
        table: str,
        filters: Mapping[str, Any] | None = None,
        *,
        order_by: str = "created_at",
        descending: bool = False,
        offset: int = 0,
        limit: int | None = None,
    ) -> tuple[list[Record], int]:
        """Return the matching page of rows and the total number of matches."""
        where, params = _where(table, filters or {})
        _check_column(table, order_by)
        direction = "DESC" if descending else "ASC"

        sql = f"SELECT * FROM {table}{where} ORDER BY {order_by} {direction}, rowid {direction}"
        page_params = list(params)
        if limit is not None or offset:
            sql += " LIMIT ? OFFSET ?"
            page_params.extend([-1 if limit is None else limit, offset])

        with self._connect() as conn:
            rows = conn.execute(sql, page_params).fetchall()
            total = conn.execute(f"SELECT COUNT(*) AS cnt FROM {table}{where}", params).fetchone()["cnt"]
        return [dict(row) for row in rows], total

    def count(self, table: str, filters: Mapping[str, Any] | None = None) -> int:
        where, params = _where(table, filters or {})
        with self._connect() as conn:
            return conn.execute(f"SELECT COUNT(*) AS cnt FROM {table}{where}", params).fetchone()["cnt"]

    def update(self, table: str, filters: Mapping[str, Any], patch: Mapping[str, Any]) -> Record:
        if not patch:
            return self.select_one(table, filters)
        for column in patch:
            _check_column(table, column)
        where, params = _where(table, filters)
        assignments = ", ".join(f"{column} = ?" for column in patch)
        with self._connect() as conn:
            cursor = conn.execute(f"UPDATE {table} SET {assignments}{where}", [*patch.values(), *params])
            if cursor.rowcount == 0:
                raise NotFoundError(f"No {table} record matching {dict(filters)}")
        return self.select_one(table, filters)

    def delete(self, table: str, filters: Mapping[str, Any]) -> int:
        where, params = _where(table, filters)
        with self._connect() as conn:
            return conn.execute(f"DELETE FROM {table}{where}", params).rowcount

    @staticmethod
    def _prepare(table: str, record: Mapping[str, Any]) -> Record:
        for column in record:
            _check_column(table, column)
        row = dict(record)
        now = utcnow()
        row.setdefault("id", uuid.uuid4().hex)
        row.setdefault("created_at", now)
        if "updated_at" in TABLES[table]:
            row.setdefault("updated_at", row["created_at"])
        return row


def _columns(table: str) -> tuple[str, ...]:
    try:
        return TABLES[table]
    except KeyError:
        raise StoreError(f"Unknown table: {table}") from None


def _check_column(table: str, column: str) -> None:
    if column not in _columns(table):
        raise StoreError(f"Unknown column {column!r} for table {table}")


def _where(table: str, filters: Mapping[str, Any]) -> tuple[str, list[Any]]:
    if not filters:
        return "", []
    for column in filters:
        _check_column(table, column)
    clause = " AND ".join(f"{column} = ?" for column in filters)
    return f" WHERE {clause}", list(filters.values())
