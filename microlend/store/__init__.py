"""Persistence: repositories, the book aggregate and storage backends."""

from microlend.config import MicrolendConfig
from microlend.store.base import Documents, MemoryStore, Store
from microlend.store.book import ADMIN_ID, COLLECTIONS, Book, Snapshot
from microlend.store.json_file import JsonFileStore
from microlend.store.repository import AppendOnlyRepository, Repository


def open_store(config: MicrolendConfig) -> Store:
    """Build the backend selected by ``config.store.backend``."""
    backend = config.store.backend
    if backend == "json":
        return JsonFileStore(config.store.json_path, pretty=config.store.pretty_json)
    if backend == "postgres":
        # psycopg is only imported when this backend is selected
        from microlend.store.postgres import PostgresStore

        return PostgresStore(config.postgres.connection_string, table=config.postgres.table)
    return MemoryStore()


__all__ = [
    "ADMIN_ID",
    "AppendOnlyRepository",
    "Book",
    "COLLECTIONS",
    "Documents",
    "JsonFileStore",
    "MemoryStore",
    "Repository",
    "Snapshot",
    "Store",
    "open_store",
]
