#!/usr/bin/env python3
"""
DocumentStore Protocol - Standard interface for the ledger's backing store.

Models a hierarchical document database: documents live at paths of
alternating collection / document segments, e.g.
``("users", "u1", "expenses", "e42")``. The ledger requires single-document
get/set/update/delete, collection listing, write batches and a
read-then-write transaction spanning several documents and collections.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .transaction import Transaction, WriteBatch

DocumentPath = tuple[str, ...]
Document = dict[str, Any]


def validate_path(path: DocumentPath, *, collection: bool = False) -> DocumentPath:
    """
    Check a document (even length) or collection (odd length) path.

    Raises:
        ValueError: If the path is malformed
    """
    path = tuple(path)
    if not path:
        raise ValueError("Empty store path")
    for segment in path:
        if not isinstance(segment, str) or not segment or "/" in segment:
            raise ValueError(f"Invalid path segment {segment!r} in {path!r}")
    expected_odd = collection
    if (len(path) % 2 == 1) != expected_odd:
        kind = "collection" if collection else "document"
        raise ValueError(f"Not a {kind} path: {'/'.join(path)}")
    return path


def collection_of(path: DocumentPath) -> DocumentPath:
    """Collection path a document path belongs to."""
    return path[:-1]


class DocumentStore(Protocol):
    """
    Protocol for the per-user document store.

    All returned documents are copies; mutating them never changes stored
    state.
    """

    def get(self, path: DocumentPath) -> Document | None:
        """
        Read one document.

        Returns:
            The document data, or None if it does not exist
        """
        ...

    def set(self, path: DocumentPath, data: Document, merge: bool = False) -> None:
        """Create or overwrite a document (merge=True updates only the given fields)."""
        ...

    def update(self, path: DocumentPath, fields: Document) -> None:
        """
        Update fields of an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """
        ...

    def delete(self, path: DocumentPath) -> None:
        """Delete a document (missing documents are ignored)."""
        ...

    def list(self, collection: DocumentPath) -> list[tuple[str, Document]]:
        """List ``(doc_id, data)`` pairs of a collection in insertion order."""
        ...

    def new_id(self) -> str:
        """Generate a fresh document id."""
        ...

    def transaction(self) -> "Transaction":
        """Open an optimistic read-then-write transaction."""
        ...

    def batch(self) -> "WriteBatch":
        """Open an all-or-nothing write batch."""
        ...
