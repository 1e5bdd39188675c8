"""Local JSON file backend: the whole book in one document."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from microlend.exceptions import PersistenceError
from microlend.store.base import Documents, Store

logger = logging.getLogger(__name__)


class JsonFileStore(Store):
    """Persist every collection to a single JSON file.

    The file is rewritten after each change, replacing the previous
    version atomically.
    """

    def __init__(self, path: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        path : str | Path
            File to read from and write to; parent directories are created.
        pretty : bool
            Pretty-print JSON output.
        """
        self.path = Path(path)
        self.pretty = pretty
        self._collections: Documents = {}
        self._writes = 0

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create directory for {self.path}: {e}") from e

        if self.path.exists():
            self._collections = self._read()

    def load(self) -> Documents:
        return json.loads(json.dumps(self._collections))

    def put(self, collection: str, record_id: str, data: dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[record_id] = data
        self._flush()

    def delete(self, collection: str, record_id: str) -> None:
        if self._collections.get(collection, {}).pop(record_id, None) is not None:
            self._flush()

    def replace_all(self, documents: Documents) -> None:
        self._collections = {name: dict(docs) for name, docs in documents.items()}
        self._flush()

    def close(self) -> None:
        logger.info("JSON store %s closed after %d writes", self.path, self._writes)

    def _read(self) -> Documents:
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise PersistenceError(f"{self.path} does not contain a JSON object")
        return raw

    def _flush(self) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(self._collections, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(self._collections, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise PersistenceError(f"Cannot write {self.path}: {e}") from e
        self._writes += 1
