#!/usr/bin/env python3
"""
Atomic Units of Work

``Transaction`` gives optimistic read-then-write semantics: reads record the
version of every document (and collection) they observe, writes are buffered,
and ``commit`` applies all writes only if nothing that was read has changed
since. ``WriteBatch`` applies blind writes all-or-nothing.

Neither class retries. ``retry_on_conflict`` is provided for callers that
want to re-run a whole operation with fresh reads.
"""

import copy
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from ..core.errors import ConflictError, NotFoundError, StoreError
from .base import Document, DocumentPath, collection_of, validate_path

if TYPE_CHECKING:
    from .memory import MemoryDocumentStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Buffered write: (data, merge). data=None means delete.
PendingWrite = tuple[Document | None, bool]


class Transaction:
    """Optimistic transaction against a MemoryDocumentStore (or subclass)."""

    def __init__(self, store: "MemoryDocumentStore"):
        self._store = store
        self._read_versions: dict[DocumentPath, int] = {}
        self._read_collections: dict[DocumentPath, int] = {}
        self._writes: dict[DocumentPath, PendingWrite] = {}
        self._finished = False

    def _check_open(self) -> None:
        if self._finished:
            raise StoreError("Transaction already committed or discarded")

    def _resolve(self, path: DocumentPath, base: Document | None) -> Document | None:
        """Apply any buffered write for ``path`` on top of ``base``."""
        if path not in self._writes:
            return base
        data, merge = self._writes[path]
        if data is None:
            return None
        if merge and base is not None:
            merged = copy.deepcopy(base)
            merged.update(copy.deepcopy(data))
            return merged
        return copy.deepcopy(data)

    def get(self, path: DocumentPath) -> Document | None:
        """Read a document, seeing this transaction's own pending writes."""
        self._check_open()
        path = validate_path(path)
        version, data = self._store._read(path)
        self._read_versions.setdefault(path, version)
        return self._resolve(path, data)

    def list(self, collection: DocumentPath) -> list[tuple[str, Document]]:
        """List a collection, seeing this transaction's own pending writes."""
        self._check_open()
        collection = validate_path(collection, collection=True)
        version, docs = self._store._read_collection(collection)
        self._read_collections.setdefault(collection, version)

        results: dict[str, Document | None] = {}
        for doc_id, data in docs:
            results[doc_id] = self._resolve(collection + (doc_id,), data)
        for path in self._writes:
            if collection_of(path) == collection and path[-1] not in results:
                results[path[-1]] = self._resolve(path, None)
        return [(doc_id, data) for doc_id, data in results.items() if data is not None]

    def set(self, path: DocumentPath, data: Document, merge: bool = False) -> None:
        self._check_open()
        path = validate_path(path)
        if merge and path in self._writes:
            previous, previous_merge = self._writes[path]
            if previous is None:
                # merge onto a pending delete starts from an empty document
                self._writes[path] = (copy.deepcopy(data), False)
                return
            combined = copy.deepcopy(previous)
            combined.update(copy.deepcopy(data))
            self._writes[path] = (combined, previous_merge)
            return
        self._writes[path] = (copy.deepcopy(data), merge)

    def update(self, path: DocumentPath, fields: Document) -> None:
        """
        Update fields of an existing document.

        Raises:
            NotFoundError: If the document does not exist at this point of the transaction
        """
        current = self.get(path)
        if current is None:
            raise NotFoundError(f"Document not found: {'/'.join(path)}", path=tuple(path))
        current.update(copy.deepcopy(fields))
        self._writes[tuple(path)] = (current, False)

    def delete(self, path: DocumentPath) -> None:
        self._check_open()
        path = validate_path(path)
        self._writes[path] = (None, False)

    def commit(self) -> None:
        """
        Apply all buffered writes atomically.

        Raises:
            ConflictError: If any document or collection read by this
                transaction changed before commit; nothing is applied
        """
        self._check_open()
        self._finished = True
        self._store._commit(self._read_versions, self._read_collections, self._writes)

    def discard(self) -> None:
        """Drop all buffered writes."""
        self._finished = True
        self._writes.clear()


class WriteBatch:
    """All-or-nothing blind writes; no reads, no version checks."""

    def __init__(self, store: "MemoryDocumentStore"):
        self._store = store
        self._writes: list[tuple[str, DocumentPath, Document | None, bool]] = []
        self._committed = False

    def set(self, path: DocumentPath, data: Document, merge: bool = False) -> "WriteBatch":
        self._writes.append(("set", validate_path(path), copy.deepcopy(data), merge))
        return self

    def update(self, path: DocumentPath, fields: Document) -> "WriteBatch":
        self._writes.append(("update", validate_path(path), copy.deepcopy(fields), True))
        return self

    def delete(self, path: DocumentPath) -> "WriteBatch":
        self._writes.append(("delete", validate_path(path), None, False))
        return self

    def __len__(self) -> int:
        return len(self._writes)

    def commit(self) -> None:
        """
        Apply every write, or none.

        Raises:
            NotFoundError: If an ``update`` targets a missing document
        """
        if self._committed:
            raise StoreError("Batch already committed")
        self._committed = True
        self._store._commit_batch(self._writes)


def retry_on_conflict(operation: Callable[[], T], attempts: int = 3) -> T:
    """
    Run ``operation``, re-running it from scratch on ConflictError.

    Only conflicts are retried; every other error propagates immediately.
    The operation must perform its own fresh reads on every attempt.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except ConflictError:
            if attempt == attempts:
                raise
            logger.debug("Conflict on attempt %d/%d, retrying", attempt, attempts)
    raise AssertionError("unreachable")
