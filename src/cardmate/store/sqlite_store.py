"""Local SQLite implementation of the relational store."""

import json
import os
import sqlite3
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from cardmate.exceptions import StoreConstraintError
from cardmate.exceptions import StoreError
from cardmate.store.base import Filters
from cardmate.store.base import RemoteStore
from cardmate.store.base import Row


SCHEMA: dict[str, list[str]] = {
    'profiles': [
        "id TEXT PRIMARY KEY",
        "email TEXT",
        "created_at TEXT DEFAULT CURRENT_TIMESTAMP",
    ],
    'courses': [
        "id TEXT PRIMARY KEY",
        "user_id TEXT NOT NULL",
        "name TEXT NOT NULL",
        "layout TEXT NOT NULL CHECK (layout IN ('9', '18'))",
        "holes TEXT NOT NULL DEFAULT '[]'",
        "created_at TEXT DEFAULT CURRENT_TIMESTAMP",
    ],
    'players': [
        "id TEXT PRIMARY KEY",
        "user_id TEXT NOT NULL",
        "name TEXT NOT NULL",
        "created_at TEXT DEFAULT CURRENT_TIMESTAMP",
    ],
    'scorecards': [
        "id TEXT PRIMARY KEY",
        "user_id TEXT NOT NULL",
        "course_id TEXT REFERENCES courses(id) ON DELETE SET NULL",
        "date TEXT NOT NULL",
        "completed INTEGER NOT NULL DEFAULT 1",
        "total_score INTEGER NOT NULL DEFAULT 0",
        "relative_to_par INTEGER NOT NULL DEFAULT 0",
        "created_at TEXT DEFAULT CURRENT_TIMESTAMP",
    ],
    'scorecard_players': [
        "id TEXT PRIMARY KEY",
        # No cascade: child rows must be removed before their scorecard
        "scorecard_id TEXT NOT NULL REFERENCES scorecards(id)",
        "player_id TEXT NOT NULL REFERENCES players(id) ON DELETE CASCADE",
        "scores TEXT NOT NULL DEFAULT '[]'",
        "total_score INTEGER NOT NULL DEFAULT 0",
        "relative_to_par INTEGER NOT NULL DEFAULT 0",
        "created_at TEXT DEFAULT CURRENT_TIMESTAMP",
    ],
}

JSON_COLUMNS = {
    'courses': {'holes'},
    'scorecard_players': {'scores'},
}

BOOL_COLUMNS = {
    'scorecards': {'completed'},
}

def _column_names(table: str) -> set[str]:
    return {definition.split()[0] for definition in SCHEMA[table]}

class SqliteStore(RemoteStore):
    """Relational store backed by a SQLite file with foreign keys enforced."""

    def __init__(self, db_file: str):
        """Initialize store and create tables if needed.

        Args:
            db_file: Path to the database file, or ``:memory:``
        """
        super().__init__()
        self.db_file = db_file
        self._memory_conn: sqlite3.Connection | None = None
        if db_file == ':memory:':
            self._memory_conn = sqlite3.connect(':memory:')
        self.set_log_context(store='sqlite')
        self._init_db()

    def _init_db(self) -> None:
        """Create tables that do not exist yet."""
        if self._memory_conn is None:
            db_dir = os.path.dirname(os.path.abspath(self.db_file))
            os.makedirs(db_dir, exist_ok=True)
        with self._connect() as conn:
            for table_name, columns in SCHEMA.items():
                conn.execute(f'''
                    CREATE TABLE IF NOT EXISTS {table_name} (
                        {", ".join(columns)}
                    )
                ''')
        self.debug("Database initialization complete", db_file=self.db_file)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = self._memory_conn or sqlite3.connect(self.db_file)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            if conn is not self._memory_conn:
                conn.close()

    @contextmanager
    def _errors(self, table: str, operation: str) -> Iterator[None]:
        """Translate sqlite3 errors into store errors."""
        try:
            yield
        except sqlite3.IntegrityError as e:
            self.warning("Constraint violation", table=table, operation=operation, error=str(e))
            raise StoreConstraintError(f"Failed to {operation} {table}: {e}", table) from e
        except sqlite3.Error as e:
            self.error(f"Failed to {operation} {table}", exc_info=e)
            raise StoreError(f"Failed to {operation} {table}: {e}", details={"table": table}) from e

    def _check_columns(self, table: str, columns: list[str] | set[str]) -> None:
        if table not in SCHEMA:
            raise StoreError(f"Unknown table: {table}")
        unknown = set(columns) - _column_names(table)
        if unknown:
            raise StoreError(f"Unknown columns for {table}: {sorted(unknown)}", details={"table": table})

    def _encode(self, table: str, row: Row) -> Row:
        encoded = dict(row)
        for column in JSON_COLUMNS.get(table, set()):
            if column in encoded:
                encoded[column] = json.dumps(encoded[column])
        for column in BOOL_COLUMNS.get(table, set()):
            if column in encoded:
                encoded[column] = 1 if encoded[column] else 0
        return encoded

    def _decode(self, table: str, row: sqlite3.Row) -> Row:
        decoded = dict(row)
        for column in JSON_COLUMNS.get(table, set()):
            if decoded.get(column) is not None:
                decoded[column] = json.loads(decoded[column])
        for column in BOOL_COLUMNS.get(table, set()):
            if column in decoded:
                decoded[column] = bool(decoded[column])
        return decoded

    def _where(self, table: str, filters: Filters | None) -> tuple[str, list[Any]]:
        if not filters:
            return "", []
        self._check_columns(table, list(filters))
        clause = " AND ".join(f"{column} = ?" for column in filters)
        return f" WHERE {clause}", list(self._encode(table, filters).values())

    def _fetch(self, conn: sqlite3.Connection, table: str, filters: Filters | None,
               order_by: str | None = None, descending: bool = False) -> list[Row]:
        where, params = self._where(table, filters)
        query = f"SELECT * FROM {table}{where}"
        if order_by:
            self._check_columns(table, [order_by])
            query += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"
        return [self._decode(table, row) for row in conn.execute(query, params).fetchall()]

    def _prepare(self, table: str, row: Row) -> Row:
        """Fill server-side defaults the hosted backend would generate."""
        prepared = dict(row)
        prepared.setdefault('id', str(uuid.uuid4()))
        if table == 'scorecards':
            prepared.setdefault('date', datetime.now(UTC).isoformat())
        return prepared

    def select(
        self,
        table: str,
        filters: Filters | None = None,
        order_by: str | None = None,
        descending: bool = False
    ) -> list[Row]:
        self._check_columns(table, [])
        with self._errors(table, 'select'), self._connect() as conn:
            return self._fetch(conn, table, filters, order_by, descending)

    def insert(self, table: str, rows: Row | list[Row]) -> list[Row]:
        prepared = [self._prepare(table, row) for row in self._as_rows(rows)]
        inserted: list[Row] = []
        with self._errors(table, 'insert'), self._connect() as conn:
            for row in prepared:
                self._check_columns(table, list(row))
                encoded = self._encode(table, row)
                columns = ", ".join(encoded)
                placeholders = ", ".join("?" for _ in encoded)
                conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(encoded.values()))
                inserted.extend(self._fetch(conn, table, {'id': row['id']}))
        self.debug("Inserted rows", table=table, count=len(inserted))
        for row in inserted:
            self._publish(table, 'INSERT', new=row)
        return inserted

    def upsert(self, table: str, rows: Row | list[Row], on_conflict: str = 'id') -> list[Row]:
        events: list[tuple[str, Row, Row | None]] = []
        with self._errors(table, 'upsert'), self._connect() as conn:
            for row in self._as_rows(rows):
                self._check_columns(table, list(row) + [on_conflict])
                if on_conflict not in row:
                    raise StoreError(f"Upsert into {table} requires {on_conflict}", details={"table": table})
                existing = self._fetch(conn, table, {on_conflict: row[on_conflict]})
                if existing:
                    values = {k: v for k, v in row.items() if k != on_conflict}
                    if values:
                        encoded = self._encode(table, values)
                        assignments = ", ".join(f"{column} = ?" for column in encoded)
                        conn.execute(
                            f"UPDATE {table} SET {assignments} WHERE {on_conflict} = ?",
                            list(encoded.values()) + [row[on_conflict]]
                        )
                    current = self._fetch(conn, table, {on_conflict: row[on_conflict]})[0]
                    events.append(('UPDATE', current, existing[0]))
                else:
                    encoded = self._encode(table, self._prepare(table, row))
                    columns = ", ".join(encoded)
                    placeholders = ", ".join("?" for _ in encoded)
                    conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(encoded.values()))
                    current = self._fetch(conn, table, {on_conflict: row[on_conflict]})[0]
                    events.append(('INSERT', current, None))
        self.debug("Upserted rows", table=table, count=len(events))
        for event_type, new, old in events:
            self._publish(table, event_type, new=new, old=old)
        return [new for _, new, _ in events]

    def update(self, table: str, values: Row, filters: Filters) -> list[Row]:
        self._check_columns(table, list(values))
        with self._errors(table, 'update'), self._connect() as conn:
            before = self._fetch(conn, table, filters)
            if before and values:
                where, params = self._where(table, filters)
                encoded = self._encode(table, values)
                assignments = ", ".join(f"{column} = ?" for column in encoded)
                conn.execute(f"UPDATE {table} SET {assignments}{where}", list(encoded.values()) + params)
            after = [self._fetch(conn, table, {'id': row['id']})[0] for row in before]
        self.debug("Updated rows", table=table, count=len(after))
        for old, new in zip(before, after, strict=True):
            self._publish(table, 'UPDATE', new=new, old=old)
        return after

    def delete(self, table: str, filters: Filters) -> list[Row]:
        with self._errors(table, 'delete'), self._connect() as conn:
            before = self._fetch(conn, table, filters)
            if before:
                where, params = self._where(table, filters)
                conn.execute(f"DELETE FROM {table}{where}", params)
        self.debug("Deleted rows", table=table, count=len(before))
        for old in before:
            self._publish(table, 'DELETE', old=old)
        return before

    def close(self) -> None:
        super().close()
        if self._memory_conn is not None:
            self._memory_conn.close()
            self._memory_conn = None
