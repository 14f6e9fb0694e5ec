#!/usr/bin/env python3
"""
JSON File Document Store

Persists the versioned document state of MemoryDocumentStore to a single
JSON file. The file is reloaded whenever it changes on disk, before reads
and under the commit lock, so a commit validates against the latest
persisted versions. Writes go through an atomic rename.

Commits are serialized within one process only; the file is meant to be
owned by one CLI process at a time.
"""

import logging
from pathlib import Path
from typing import Any

from ..core.errors import StoreError
from ..core.json_utils import read_json, write_json
from .memory import MemoryDocumentStore

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def _key(path: tuple[str, ...]) -> str:
    return "/".join(path)


def _path(key: str) -> tuple[str, ...]:
    return tuple(key.split("/"))


class JsonDocumentStore(MemoryDocumentStore):
    """DocumentStore persisted as one JSON file."""

    def __init__(self, filepath: Path):
        super().__init__()
        self.filepath = Path(filepath)
        self._loaded_stamp: tuple[int, int] | None = None

    def _file_stamp(self) -> tuple[int, int] | None:
        if not self.filepath.exists():
            return None
        stat = self.filepath.stat()
        return (stat.st_mtime_ns, stat.st_size)

    def _refresh(self) -> None:
        stamp = self._file_stamp()
        if stamp is None or stamp == self._loaded_stamp:
            return

        try:
            data = read_json(self.filepath)
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read ledger store {self.filepath}: {e}") from e

        if not isinstance(data, dict) or data.get("format") != FORMAT_VERSION:
            raise StoreError(f"Unsupported ledger store format in {self.filepath}")

        self._docs = {_path(key): doc for key, doc in data.get("documents", {}).items()}
        self._versions = {_path(key): int(v) for key, v in data.get("versions", {}).items()}
        self._collection_versions = {_path(key): int(v) for key, v in data.get("collections", {}).items()}
        self._counter = int(data.get("counter", 0))
        self._loaded_stamp = stamp
        logger.debug("Loaded %d documents from %s", len(self._docs), self.filepath)

    def _persist(self) -> None:
        payload: dict[str, Any] = {
            "format": FORMAT_VERSION,
            "counter": self._counter,
            "documents": {_key(path): doc for path, doc in self._docs.items()},
            "versions": {_key(path): v for path, v in self._versions.items()},
            "collections": {_key(path): v for path, v in self._collection_versions.items()},
        }
        try:
            write_json(self.filepath, payload)
        except OSError as e:
            raise StoreError(f"Cannot write ledger store {self.filepath}: {e}") from e
        self._loaded_stamp = self._file_stamp()

    def exists(self) -> bool:
        """Check if the store file exists."""
        return self.filepath.exists()

    def summary_text(self) -> str:
        """Get human-readable summary."""
        if not self.exists():
            return f"No ledger store at {self.filepath}"
        return f"Ledger store: {len(self.export_documents())} documents in {self.filepath}"
