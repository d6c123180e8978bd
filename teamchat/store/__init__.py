"""
Team Chat API - Document Store
Transactional document storage behind every service
"""

from teamchat.core.config import settings
from teamchat.store.base import Document, DocumentStore, Transaction
from teamchat.store.exceptions import (
    DocumentStoreError,
    DocumentNotFoundError,
    DuplicateKeyError,
    TransactionAbortedError,
    UnknownIndexError,
    UnknownTableError,
)
from teamchat.store.registry import StoreRegistry
from teamchat.store.schema import TABLES, WORKSPACE_DEPENDENT_TABLES

# Import backends to trigger registration
from teamchat.store.memory import MemoryDocumentStore
from teamchat.store.postgres import PostgresDocumentStore


def get_store() -> DocumentStore:
    """FastAPI dependency returning the configured store backend."""
    return StoreRegistry.get_store(settings.STORE_BACKEND)


__all__ = [
    "Document",
    "DocumentStore",
    "Transaction",
    "DocumentStoreError",
    "DocumentNotFoundError",
    "DuplicateKeyError",
    "TransactionAbortedError",
    "UnknownIndexError",
    "UnknownTableError",
    "StoreRegistry",
    "TABLES",
    "WORKSPACE_DEPENDENT_TABLES",
    "MemoryDocumentStore",
    "PostgresDocumentStore",
    "get_store",
]
