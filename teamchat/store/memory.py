"""
In-process document store.

Used for local development (``STORE_BACKEND=memory``) and by the test suite.
Transactions are serialized with a lock and rolled back from an undo journal,
so a failed operation never leaves partial writes behind.
"""

import copy
import itertools
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List, Optional, Set, Tuple
from uuid import uuid4

import anyio

from teamchat.store.base import Document, DocumentStore, Transaction
from teamchat.store.exceptions import (
    DocumentNotFoundError,
    DocumentStoreError,
    DuplicateKeyError,
)
from teamchat.store.registry import StoreRegistry
from teamchat.store.schema import TABLES, Index, Table

logger = logging.getLogger(__name__)


def _index_key(index: Index, doc: Document) -> Tuple[Any, ...]:
    return tuple(doc.get(f) for f in index.fields)


class MemoryTransaction(Transaction):

    def __init__(self, store: "MemoryDocumentStore"):
        super().__init__(store.tables)
        self._store = store
        # (table, doc_id, document before the write or None if it did not exist,
        #  insertion sequence of a deleted document)
        self._undo: List[Tuple[str, str, Optional[Document], Optional[int]]] = []

    def _check_columns(self, table: Table, fields: Document) -> None:
        unknown = set(fields) - set(table.columns)
        if unknown:
            raise DocumentStoreError(f"Unknown columns for '{table.name}': {sorted(unknown)}")

    async def get(self, table: str, doc_id: str) -> Optional[Document]:
        self.table(table)
        doc = self._store._docs[table].get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def insert(self, table: str, fields: Document) -> str:
        tbl = self.table(table)
        self._check_columns(tbl, fields)

        doc_id = str(uuid4())
        doc = {column: None for column in tbl.columns}
        doc.update(copy.deepcopy(fields))
        doc["id"] = doc_id
        doc["created_at"] = datetime.now(timezone.utc)

        self._store._write(table, doc_id, doc)
        self._store._order[doc_id] = next(self._store._sequence)
        self._undo.append((table, doc_id, None, None))
        return doc_id

    async def patch(self, table: str, doc_id: str, fields: Document) -> None:
        tbl = self.table(table)
        self._check_columns(tbl, fields)

        old = self._store._docs[table].get(doc_id)
        if old is None:
            raise DocumentNotFoundError(table, doc_id)

        new = dict(old)
        new.update(copy.deepcopy(fields))
        self._store._write(table, doc_id, new)
        self._undo.append((table, doc_id, old, None))

    async def delete(self, table: str, doc_id: str) -> bool:
        self.table(table)
        old = self._store._docs[table].get(doc_id)
        if old is None:
            return False

        sequence = self._store._order[doc_id]
        self._store._write(table, doc_id, None)
        self._undo.append((table, doc_id, old, sequence))
        return True

    async def query(self, table: str, index: str, **values: Any) -> List[Document]:
        idx = self.resolve_index(table, index, values)
        ids = self._store._indexes[table][idx.name].get(_index_key(idx, values), ())
        order = self._store._order
        docs = [self._store._docs[table][doc_id] for doc_id in sorted(ids, key=order.__getitem__)]
        return copy.deepcopy(docs)

    def rollback(self) -> None:
        for table, doc_id, previous, sequence in reversed(self._undo):
            self._store._write(table, doc_id, previous)
            if sequence is not None:
                self._store._order[doc_id] = sequence
        if self._undo:
            logger.debug(f"Rolled back {len(self._undo)} writes")
        self._undo.clear()


@StoreRegistry.register("memory")
class MemoryDocumentStore(DocumentStore):
    """Dictionary-backed store with hash indexes over every declared index."""

    backend_name = "memory"

    def __init__(self, tables: Dict[str, Table] = TABLES):
        self.tables = tables
        self._docs: Dict[str, Dict[str, Document]] = {name: {} for name in tables}
        self._indexes: Dict[str, Dict[str, Dict[Tuple[Any, ...], Set[str]]]] = {
            name: {idx: defaultdict(set) for idx in table.indexes}
            for name, table in tables.items()
        }
        # Insertion sequence, used to return query results in creation order
        self._order: Dict[str, int] = {}
        self._sequence = itertools.count()
        self._lock = anyio.Lock()

    def _write(self, table: str, doc_id: str, doc: Optional[Document]) -> None:
        """Replace (or remove, when ``doc`` is None) a document and keep indexes in sync."""
        tbl = self.tables[table]
        indexes = self._indexes[table]

        if doc is not None:
            for idx in tbl.indexes.values():
                if not idx.unique:
                    continue
                key = _index_key(idx, doc)
                # NULLs never collide, matching PostgreSQL unique indexes
                if None in key:
                    continue
                if indexes[idx.name].get(key, set()) - {doc_id}:
                    raise DuplicateKeyError(table, idx.name)

        old = self._docs[table].pop(doc_id, None)
        if doc is None:
            self._order.pop(doc_id, None)
        if old is not None:
            for idx in tbl.indexes.values():
                key = _index_key(idx, old)
                bucket = indexes[idx.name][key]
                bucket.discard(doc_id)
                if not bucket:
                    del indexes[idx.name][key]

        if doc is not None:
            self._docs[table][doc_id] = doc
            for idx in tbl.indexes.values():
                indexes[idx.name][_index_key(idx, doc)].add(doc_id)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[MemoryTransaction]:
        async with self._lock:
            tx = MemoryTransaction(self)
            try:
                yield tx
            except BaseException:
                tx.rollback()
                raise
