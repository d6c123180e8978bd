"""
Base interface for document store backends.
All backends must inherit from these classes.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncContextManager, Dict, List, Optional

from teamchat.store.exceptions import DocumentStoreError, UnknownTableError
from teamchat.store.schema import TABLES, Index, Table

Document = Dict[str, Any]


class Transaction(ABC):
    """
    Unit of work against the store.

    Every read and write of one API operation goes through a single
    transaction; nothing it wrote is visible to others until it commits, and
    an exception raised inside it discards all of its writes.
    """

    def __init__(self, tables: Dict[str, Table] = TABLES):
        self.tables = tables

    def table(self, name: str) -> Table:
        try:
            return self.tables[name]
        except KeyError:
            raise UnknownTableError(name)

    def resolve_index(self, table: str, index: str, values: Dict[str, Any]) -> Index:
        """Check that ``values`` covers exactly the fields of ``index``."""
        idx = self.table(table).index(index)
        if set(values) != set(idx.fields):
            raise DocumentStoreError(
                f"Index '{index}' on '{table}' expects fields {idx.fields}, got {tuple(values)}"
            )
        return idx

    @abstractmethod
    async def get(self, table: str, doc_id: str) -> Optional[Document]:
        """Fetch a document by id, or None."""

    @abstractmethod
    async def insert(self, table: str, fields: Document) -> str:
        """
        Insert a document and return its generated id.

        Raises:
            DuplicateKeyError: If a unique index already holds the key
        """

    @abstractmethod
    async def patch(self, table: str, doc_id: str, fields: Document) -> None:
        """
        Update some fields of an existing document.

        Raises:
            DocumentNotFoundError: If the document does not exist
        """

    @abstractmethod
    async def delete(self, table: str, doc_id: str) -> bool:
        """Delete a document. Deleting a missing document is a no-op returning False."""

    @abstractmethod
    async def query(self, table: str, index: str, **values: Any) -> List[Document]:
        """Return every document whose index fields equal ``values``."""

    async def unique(self, table: str, index: str, **values: Any) -> Optional[Document]:
        """Return the single document matching ``values``, or None."""
        docs = await self.query(table, index, **values)
        if len(docs) > 1:
            raise DocumentStoreError(
                f"Expected at most one '{table}' document for index '{index}', found {len(docs)}"
            )
        return docs[0] if docs else None

    async def delete_many(self, table: str, index: str, **values: Any) -> int:
        """Delete every document matching ``values``; returns how many were removed."""
        removed = 0
        for doc in await self.query(table, index, **values):
            if await self.delete(table, doc["id"]):
                removed += 1
        return removed


class DocumentStore(ABC):
    """
    Abstract base class for document stores.

    Usage:
        async with store.transaction() as tx:
            workspace = await tx.get("workspaces", workspace_id)
            await tx.patch("workspaces", workspace_id, {"name": "Design"})
    """

    backend_name: str = "unknown"

    async def connect(self) -> None:
        """Acquire backend resources (pools, files)."""

    async def disconnect(self) -> None:
        """Release backend resources."""

    @abstractmethod
    def transaction(self) -> AsyncContextManager[Transaction]:
        """Open a unit of work; commit on normal exit, roll back on exception."""
