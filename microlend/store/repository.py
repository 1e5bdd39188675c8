"""Per-collection repositories with write-through persistence."""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, Iterator, TypeVar

from microlend.exceptions import EntityNotFoundError, InvalidEntityStateError
from microlend.store.base import Store
from microlend.store.serialization import from_dict, to_dict

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Repository(Generic[T]):
    """In-memory index of one collection, written through to a store.

    Memory is updated before the store is written. If the store raises,
    the error propagates and the in-memory change is kept, so the caller
    sees the failure and must reconcile.

    Parameters
    ----------
    collection : str
        Collection name in the store.
    model : type
        Dataclass held by this repository.
    key : str
        Name of the id attribute on ``model``.
    store : Store
        Persistence backend.
    not_found : type[EntityNotFoundError]
        Error raised by :meth:`get` and :meth:`remove` for unknown ids.
    """

    def __init__(
        self,
        collection: str,
        model: type[T],
        key: str,
        store: Store,
        not_found: type[EntityNotFoundError] = EntityNotFoundError,
    ) -> None:
        self.collection = collection
        self.model = model
        self.key = key
        self.store = store
        self.not_found = not_found
        self._items: dict[str, T] = {}

    def key_of(self, item: T) -> str:
        return str(getattr(item, self.key))

    def decode(self, documents: dict[str, dict[str, Any]]) -> dict[str, T]:
        """Build records from stored documents without touching memory."""
        return {str(record_id): from_dict(self.model, data) for record_id, data in documents.items()}

    def replace(self, items: dict[str, T]) -> None:
        """Swap memory contents for already decoded records (no write)."""
        self._items = dict(items)

    def load(self, documents: dict[str, dict[str, Any]]) -> None:
        """Replace memory contents from stored documents (no write)."""
        self.replace(self.decode(documents))

    def dump(self) -> dict[str, dict[str, Any]]:
        return {record_id: to_dict(item) for record_id, item in self._items.items()}

    def add(self, item: T) -> T:
        """Insert a new record; its id must not exist yet."""
        record_id = self.key_of(item)
        if record_id in self._items:
            raise InvalidEntityStateError(f"{self.collection} {record_id} already exists")
        return self._write(record_id, item)

    def save(self, item: T) -> T:
        """Insert or replace a record."""
        return self._write(self.key_of(item), item)

    def get(self, record_id: str) -> T:
        try:
            return self._items[str(record_id)]
        except KeyError:
            raise self.not_found(f"{self.collection} {record_id} not found") from None

    def find(self, record_id: str) -> T | None:
        return self._items.get(str(record_id))

    def remove(self, record_id: str) -> T:
        item = self.get(record_id)
        del self._items[str(record_id)]
        self.store.delete(self.collection, str(record_id))
        logger.debug("Removed %s %s", self.collection, record_id)
        return item

    def all(self) -> list[T]:
        return list(self._items.values())

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        return [item for item in self._items.values() if predicate(item)]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items.values()))

    def __contains__(self, record_id: object) -> bool:
        return str(record_id) in self._items

    def _write(self, record_id: str, item: T) -> T:
        self._items[record_id] = item
        self.store.put(self.collection, record_id, to_dict(item))
        return item


class AppendOnlyRepository(Repository[T]):
    """Repository whose records can be added but never changed or removed."""

    def save(self, item: T) -> T:
        if self.key_of(item) in self._items:
            raise InvalidEntityStateError(f"{self.collection} entries are append-only")
        return self._write(self.key_of(item), item)

    def remove(self, record_id: str) -> T:
        raise InvalidEntityStateError(f"{self.collection} entries are append-only")
