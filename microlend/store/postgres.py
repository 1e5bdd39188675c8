"""Networked backend: documents in a PostgreSQL JSONB table."""

import logging
from typing import Any

import psycopg
from psycopg import sql
from psycopg.types.json import Jsonb

from microlend.exceptions import PersistenceError
from microlend.store.base import Documents, Store

logger = logging.getLogger(__name__)


class PostgresStore(Store):
    """Store each record as one row of ``(collection, id, data)``.

    ``seq`` keeps first-write order so the ledger reloads chronologically;
    an upsert keeps the original ``seq`` of the row it replaces.
    """

    CREATE_TABLE = """
        CREATE TABLE IF NOT EXISTS {table} (
            seq BIGSERIAL,
            collection TEXT NOT NULL,
            id TEXT NOT NULL,
            data JSONB NOT NULL,
            PRIMARY KEY (collection, id)
        )
    """
    UPSERT = """
        INSERT INTO {table} (collection, id, data) VALUES (%s, %s, %s)
        ON CONFLICT (collection, id) DO UPDATE SET data = EXCLUDED.data
    """
    SELECT_ALL = "SELECT collection, id, data FROM {table} ORDER BY seq"
    DELETE_ONE = "DELETE FROM {table} WHERE collection = %s AND id = %s"
    TRUNCATE = "TRUNCATE {table}"

    def __init__(self, connection_string: str, table: str = "documents") -> None:
        """Initialize PostgreSQL store.

        Parameters
        ----------
        connection_string : str
            libpq connection URL.
        table : str
            Table holding the documents; created when missing.
        """
        self.table = table
        try:
            self.conn = psycopg.connect(connection_string)
        except psycopg.Error as e:
            raise PersistenceError(f"Cannot connect to PostgreSQL: {e}") from e

        self._execute(self.CREATE_TABLE)
        logger.info("PostgreSQL store ready (table=%s)", table)

    def load(self) -> Documents:
        documents: Documents = {}
        try:
            with self.conn.cursor() as cur:
                cur.execute(self._sql(self.SELECT_ALL))
                for collection, record_id, data in cur.fetchall():
                    documents.setdefault(collection, {})[record_id] = data
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise PersistenceError(f"Cannot load documents: {e}") from e
        return documents

    def put(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        self._execute(self.UPSERT, (collection, record_id, Jsonb(data)))

    def delete(self, collection: str, record_id: str) -> None:
        self._execute(self.DELETE_ONE, (collection, record_id))

    def replace_all(self, documents: Documents) -> None:
        rows = [
            (collection, record_id, Jsonb(data))
            for collection, docs in documents.items()
            for record_id, data in docs.items()
        ]
        try:
            with self.conn.cursor() as cur:
                cur.execute(self._sql(self.TRUNCATE))
                if rows:
                    cur.executemany(self._sql(self.UPSERT), rows)
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise PersistenceError(f"Cannot replace documents: {e}") from e
        logger.info("Replaced PostgreSQL documents: %d rows", len(rows))

    def close(self) -> None:
        self.conn.close()
        logger.info("PostgreSQL store closed")

    def _sql(self, template: str) -> sql.Composed:
        return sql.SQL(template).format(table=sql.Identifier(self.table))

    def _execute(self, template: str, params: tuple | None = None) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute(self._sql(template), params)
            self.conn.commit()
        except psycopg.Error as e:
            self.conn.rollback()
            raise PersistenceError(f"PostgreSQL write failed: {e}") from e
