"""
Document store exceptions, independent of the HTTP layer.
"""


class DocumentStoreError(Exception):
    """Base class for store failures."""


class UnknownTableError(DocumentStoreError):
    def __init__(self, table: str):
        super().__init__(f"Unknown table '{table}'")
        self.table = table


class UnknownIndexError(DocumentStoreError):
    def __init__(self, table: str, index: str):
        super().__init__(f"Unknown index '{index}' on table '{table}'")
        self.table = table
        self.index = index


class DocumentNotFoundError(DocumentStoreError):
    def __init__(self, table: str, doc_id: str):
        super().__init__(f"Document '{doc_id}' not found in '{table}'")
        self.table = table
        self.doc_id = doc_id


class DuplicateKeyError(DocumentStoreError):
    """A write would break a unique index."""

    def __init__(self, table: str, index: str):
        super().__init__(f"Duplicate key for unique index '{index}' on '{table}'")
        self.table = table
        self.index = index


class TransactionAbortedError(DocumentStoreError):
    """
    The database aborted the transaction.

    ``retryable`` is set for serialization failures and deadlocks, where the
    same operation may succeed when run again.
    """

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable
