"""PostgreSQL-backed key-value store."""

import logging

import psycopg
from psycopg import sql

from installment_plan.exceptions import StorageError
from installment_plan.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class PostgresKeyValueStore(KeyValueStore):
    """Key-value pairs in a single ``(key, value)`` table.

    The table is created on first connection. Writes are upserts, so the
    last write for a key wins.

    Parameters
    ----------
    conninfo : str
        libpq connection string, e.g. ``PostgresConfig.connection_string``.
    table : str
        Table name (default ``plan_store``).
    """

    def __init__(self, conninfo: str, table: str = "plan_store") -> None:
        self.conninfo = conninfo
        self.table = table
        self._conn: psycopg.Connection | None = None

    def _connection(self) -> psycopg.Connection:
        if self._conn is None or self._conn.closed:
            try:
                self._conn = psycopg.connect(self.conninfo, autocommit=True)
            except psycopg.Error as e:
                raise StorageError(f"Cannot connect to PostgreSQL: {e}") from e
            self._ensure_table()
            logger.info("Connected key-value store to table %s", self.table)
        return self._conn

    def _ensure_table(self) -> None:
        query = sql.SQL(
            "CREATE TABLE IF NOT EXISTS {} ("
            " key TEXT PRIMARY KEY,"
            " value BYTEA NOT NULL,"
            " updated_at TIMESTAMPTZ NOT NULL DEFAULT now())"
        ).format(sql.Identifier(self.table))
        self._execute(query)

    def _execute(self, query: sql.Composable, params: tuple = ()) -> psycopg.Cursor:
        try:
            return self._connection().execute(query, params)
        except psycopg.Error as e:
            raise StorageError(f"Query on {self.table} failed: {e}") from e

    def get(self, key: str) -> bytes | None:
        query = sql.SQL("SELECT value FROM {} WHERE key = %s").format(sql.Identifier(self.table))
        row = self._execute(query, (key,)).fetchone()
        return bytes(row[0]) if row else None

    def set(self, key: str, value: bytes) -> None:
        query = sql.SQL(
            "INSERT INTO {} (key, value) VALUES (%s, %s) "
            "ON CONFLICT (key) DO UPDATE SET value = EXCLUDED.value, updated_at = now()"
        ).format(sql.Identifier(self.table))
        self._execute(query, (key, value))

    def remove(self, key: str) -> bool:
        query = sql.SQL("DELETE FROM {} WHERE key = %s").format(sql.Identifier(self.table))
        return self._execute(query, (key,)).rowcount > 0

    def close(self) -> None:
        if self._conn is not None and not self._conn.closed:
            self._conn.close()
        self._conn = None
