#!/usr/bin/env python3
"""
In-Memory Document Store

Thread-safe document store with per-document versions, used directly in
tests and as the base of the JSON file store. Every committed write stamps
the document and its collection with a new monotonically increasing
version; transactions compare the versions they read against the current
ones under the commit lock.
"""

import copy
import threading
import uuid
from typing import Any

from ..core.errors import ConflictError, NotFoundError
from .base import Document, DocumentPath, collection_of, validate_path
from .transaction import PendingWrite, Transaction, WriteBatch


class MemoryDocumentStore:
    """DocumentStore kept in process memory."""

    def __init__(self):
        self._lock = threading.RLock()
        self._docs: dict[DocumentPath, Document] = {}
        self._versions: dict[DocumentPath, int] = {}
        self._collection_versions: dict[DocumentPath, int] = {}
        self._counter = 0

    # Hooks for persistent subclasses

    def _refresh(self) -> None:
        """Bring in-memory state up to date with the backing medium."""
        pass

    def _persist(self) -> None:
        """Write in-memory state to the backing medium."""
        pass

    # Internal primitives used by Transaction and WriteBatch

    def _read(self, path: DocumentPath) -> tuple[int, Document | None]:
        with self._lock:
            self._refresh()
            data = self._docs.get(path)
            return self._versions.get(path, 0), copy.deepcopy(data)

    def _read_collection(self, collection: DocumentPath) -> tuple[int, list[tuple[str, Document]]]:
        with self._lock:
            self._refresh()
            docs = [
                (path[-1], copy.deepcopy(data))
                for path, data in self._docs.items()
                if collection_of(path) == collection
            ]
            return self._collection_versions.get(collection, 0), docs

    def _bump(self, path: DocumentPath) -> None:
        self._counter += 1
        self._versions[path] = self._counter
        self._collection_versions[collection_of(path)] = self._counter

    def _apply_write(self, path: DocumentPath, data: Document | None, merge: bool) -> None:
        if data is None:
            if path in self._docs:
                del self._docs[path]
                self._bump(path)
            return

        existing = self._docs.get(path)
        if merge and existing is not None:
            merged = dict(existing)
            merged.update(copy.deepcopy(data))
            self._docs[path] = merged
        else:
            self._docs[path] = copy.deepcopy(data)
        self._bump(path)

    def _state(self) -> tuple[Any, ...]:
        return (dict(self._docs), dict(self._versions), dict(self._collection_versions), self._counter)

    def _restore(self, state: tuple[Any, ...]) -> None:
        self._docs, self._versions, self._collection_versions, self._counter = state

    def _commit(
        self,
        read_versions: dict[DocumentPath, int],
        read_collections: dict[DocumentPath, int],
        writes: dict[DocumentPath, PendingWrite],
    ) -> None:
        with self._lock:
            self._refresh()

            for path, version in read_versions.items():
                if self._versions.get(path, 0) != version:
                    raise ConflictError(f"Document changed during transaction: {'/'.join(path)}")
            for collection, version in read_collections.items():
                if self._collection_versions.get(collection, 0) != version:
                    raise ConflictError(f"Collection changed during transaction: {'/'.join(collection)}")

            if not writes:
                return

            state = self._state()
            try:
                for path, (data, merge) in writes.items():
                    self._apply_write(path, data, merge)
                self._persist()
            except BaseException:
                self._restore(state)
                raise

    def _commit_batch(self, writes: list[tuple[str, DocumentPath, Document | None, bool]]) -> None:
        with self._lock:
            self._refresh()
            state = self._state()
            try:
                for op, path, data, merge in writes:
                    if op == "update" and path not in self._docs:
                        raise NotFoundError(f"Document not found: {'/'.join(path)}", path=path)
                    self._apply_write(path, data, merge)
                if writes:
                    self._persist()
            except BaseException:
                self._restore(state)
                raise

    # DocumentStore API

    def get(self, path: DocumentPath) -> Document | None:
        return self._read(validate_path(path))[1]

    def set(self, path: DocumentPath, data: Document, merge: bool = False) -> None:
        self.batch().set(path, data, merge=merge).commit()

    def update(self, path: DocumentPath, fields: Document) -> None:
        self.batch().update(path, fields).commit()

    def delete(self, path: DocumentPath) -> None:
        self.batch().delete(path).commit()

    def list(self, collection: DocumentPath) -> list[tuple[str, Document]]:
        return self._read_collection(validate_path(collection, collection=True))[1]

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def transaction(self) -> Transaction:
        return Transaction(self)

    def batch(self) -> WriteBatch:
        return WriteBatch(self)

    def export_documents(self) -> dict[str, Document]:
        """All documents keyed by slash-joined path (for inspection and tests)."""
        with self._lock:
            self._refresh()
            return {"/".join(path): copy.deepcopy(data) for path, data in self._docs.items()}
