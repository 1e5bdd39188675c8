"""Persistence backend interface and the in-memory backend."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

# collection name -> record id -> JSON-safe document, in write order
Documents = dict[str, dict[str, dict[str, Any]]]


class Store(ABC):
    """Uniform write interface the book persists through.

    Backends hold plain JSON-safe documents grouped by collection and
    keyed by id. They raise :class:`~microlend.exceptions.PersistenceError`
    on failure and never retry.
    """

    @abstractmethod
    def load(self) -> Documents:
        """Return every stored collection."""

    @abstractmethod
    def put(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        """Insert or replace one document."""

    @abstractmethod
    def delete(self, collection: str, record_id: str) -> None:
        """Remove one document (missing ids are ignored)."""

    @abstractmethod
    def replace_all(self, documents: Documents) -> None:
        """Drop everything and write ``documents`` in its place."""

    def close(self) -> None:
        """Release backend resources."""

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class MemoryStore(Store):
    """Keeps documents in process memory only."""

    def __init__(self, documents: Documents | None = None) -> None:
        self._collections: Documents = {}
        if documents:
            self.replace_all(documents)

    def load(self) -> Documents:
        return copy.deepcopy(self._collections)

    def put(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[record_id] = copy.deepcopy(data)

    def delete(self, collection: str, record_id: str) -> None:
        self._collections.get(collection, {}).pop(record_id, None)

    def replace_all(self, documents: Documents) -> None:
        self._collections = copy.deepcopy(documents)
