"""
Ledger Store Package

Document store abstraction, optimistic transactions, the in-memory and
JSON file backends, and the per-user LedgerSession adapter.
"""

from .base import Document, DocumentPath, DocumentStore
from .json_store import JsonDocumentStore
from .memory import MemoryDocumentStore
from .session import LedgerSession, TransactionView
from .transaction import Transaction, WriteBatch, retry_on_conflict

__all__ = [
    "Document",
    "DocumentPath",
    "DocumentStore",
    "JsonDocumentStore",
    "LedgerSession",
    "MemoryDocumentStore",
    "Transaction",
    "TransactionView",
    "WriteBatch",
    "retry_on_conflict",
]
