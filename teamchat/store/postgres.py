"""
PostgreSQL document store using asyncpg.

Each transaction holds one pooled connection for its whole duration and runs
at REPEATABLE READ, so the reads an operation bases its writes on come from a
single snapshot. A snapshot alone does not stop a record being written into a
workspace that a concurrent transaction is deleting, so every dependent
``workspace_id`` is a foreign key to ``workspaces``; together with the unique
index on members by workspace and user, the database rejects the losing side
of such races.
"""
import asyncpg
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional
from uuid import uuid4

from teamchat.core.config import settings
from teamchat.store.base import Document, DocumentStore, Transaction
from teamchat.store.exceptions import (
    DocumentNotFoundError,
    DocumentStoreError,
    DuplicateKeyError,
    TransactionAbortedError,
)
from teamchat.store.registry import StoreRegistry
from teamchat.store.schema import TABLES, WORKSPACE_DEPENDENT_TABLES, Table

logger = logging.getLogger(__name__)


def _constraint_name(table: str, index: str) -> str:
    return f"{table}_{index}"


def _column_definition(table: Table, column: str) -> str:
    if column == "workspace_id" and table.name in WORKSPACE_DEPENDENT_TABLES:
        return f'"{column}" text REFERENCES "workspaces" ("id")'
    return f'"{column}" text'


def schema_statements(tables: Dict[str, Table] = TABLES) -> List[str]:
    """
    DDL creating every table and index; safe to run repeatedly.

    ``workspaces`` must come before the tables referencing it.
    """
    statements = []
    for table in tables.values():
        columns = ",\n    ".join(_column_definition(table, c) for c in table.columns)
        statements.append(
            f'CREATE TABLE IF NOT EXISTS "{table.name}" (\n'
            f'    "id" text PRIMARY KEY,\n'
            f'    {columns},\n'
            f'    "created_at" timestamptz NOT NULL DEFAULT now()\n'
            f')'
        )
        for index in table.indexes.values():
            unique = "UNIQUE " if index.unique else ""
            fields = ", ".join(f'"{f}"' for f in index.fields)
            statements.append(
                f'CREATE {unique}INDEX IF NOT EXISTS "{_constraint_name(table.name, index.name)}" '
                f'ON "{table.name}" ({fields})'
            )
    return statements


class PostgresTransaction(Transaction):

    def __init__(self, conn: asyncpg.Connection, tables: Dict[str, Table] = TABLES):
        super().__init__(tables)
        self.conn = conn

    def _check_columns(self, table: Table, fields: Document) -> None:
        unknown = set(fields) - set(table.columns)
        if unknown:
            raise DocumentStoreError(f"Unknown columns for '{table.name}': {sorted(unknown)}")

    async def get(self, table: str, doc_id: str) -> Optional[Document]:
        self.table(table)
        row = await self.conn.fetchrow(f'SELECT * FROM "{table}" WHERE "id" = $1', doc_id)
        return dict(row) if row else None

    async def insert(self, table: str, fields: Document) -> str:
        tbl = self.table(table)
        self._check_columns(tbl, fields)

        doc_id = str(uuid4())
        names = ["id", *fields.keys()]
        columns = ", ".join(f'"{n}"' for n in names)
        placeholders = ", ".join(f"${i + 1}" for i in range(len(names)))

        try:
            await self.conn.execute(
                f'INSERT INTO "{table}" ({columns}) VALUES ({placeholders})',
                doc_id, *fields.values()
            )
        except asyncpg.UniqueViolationError as e:
            index = (e.constraint_name or "").replace(f"{table}_", "", 1)
            raise DuplicateKeyError(table, index) from e
        return doc_id

    async def patch(self, table: str, doc_id: str, fields: Document) -> None:
        tbl = self.table(table)
        self._check_columns(tbl, fields)
        if not fields:
            return

        assignments = ", ".join(f'"{name}" = ${i + 2}' for i, name in enumerate(fields))
        try:
            status = await self.conn.execute(
                f'UPDATE "{table}" SET {assignments} WHERE "id" = $1',
                doc_id, *fields.values()
            )
        except asyncpg.UniqueViolationError as e:
            index = (e.constraint_name or "").replace(f"{table}_", "", 1)
            raise DuplicateKeyError(table, index) from e

        if status == "UPDATE 0":
            raise DocumentNotFoundError(table, doc_id)

    async def delete(self, table: str, doc_id: str) -> bool:
        self.table(table)
        status = await self.conn.execute(f'DELETE FROM "{table}" WHERE "id" = $1', doc_id)
        return status != "DELETE 0"

    async def query(self, table: str, index: str, **values: Any) -> List[Document]:
        idx = self.resolve_index(table, index, values)

        clauses = []
        params = []
        for name in idx.fields:
            value = values[name]
            if value is None:
                clauses.append(f'"{name}" IS NULL')
            else:
                params.append(value)
                clauses.append(f'"{name}" = ${len(params)}')

        rows = await self.conn.fetch(
            f'SELECT * FROM "{table}" WHERE {" AND ".join(clauses)} ORDER BY "created_at", "id"',
            *params
        )
        return [dict(row) for row in rows]


@StoreRegistry.register("postgres")
class PostgresDocumentStore(DocumentStore):
    """Direct PostgreSQL store using an asyncpg pool."""

    backend_name = "postgres"

    def __init__(self, connection_string: Optional[str] = None, tables: Dict[str, Table] = TABLES):
        self.pool: Optional[asyncpg.Pool] = None
        self._connection_string = connection_string
        self.tables = tables

    def _get_connection_string(self) -> str:
        """
        Build the connection string from the individual DB_* settings.
        """
        if not settings.DB_PASSWORD:
            raise ValueError(
                "Database password not found. "
                "Please add 'DB_PASSWORD' to your .env file"
            )

        if not settings.DB_HOST:
            raise ValueError(
                "Database host not found. "
                "Please add 'DB_HOST' to your .env file"
            )

        logger.info(f"PostgreSQL connection string configured for host: {settings.DB_HOST}")
        return settings.DATABASE_URL

    async def connect(self) -> None:
        """Create the connection pool."""
        if self.pool is None:
            if not self._connection_string:
                self._connection_string = self._get_connection_string()

            try:
                self.pool = await asyncpg.create_pool(
                    self._connection_string,
                    ssl="require" if settings.DB_SSL else None,
                    min_size=settings.DB_POOL_MIN_SIZE,
                    max_size=settings.DB_POOL_MAX_SIZE,
                    command_timeout=settings.DB_COMMAND_TIMEOUT,
                    timeout=30,  # seconds to acquire a connection
                )
                logger.info("PostgreSQL connection pool created successfully")
            except Exception as e:
                logger.error(f"Failed to create PostgreSQL connection pool: {e}")
                raise

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            logger.info("PostgreSQL connection pool closed")

    async def create_schema(self) -> None:
        """Create all tables and indexes."""
        if not self.pool:
            await self.connect()

        async with self.pool.acquire() as conn:
            async with conn.transaction():
                for statement in schema_statements(self.tables):
                    logger.debug(f"Executing: {statement}")
                    await conn.execute(statement)
        logger.info(f"Schema ready ({len(self.tables)} tables)")

    async def sweep_orphans(self) -> Dict[str, int]:
        """
        Delete dependent records whose workspace no longer exists.

        Only needed for databases created before the workspace foreign keys,
        or after manual deletes; returns rows removed per table.
        """
        if not self.pool:
            await self.connect()

        removed = {}
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                for table in WORKSPACE_DEPENDENT_TABLES:
                    status = await conn.execute(
                        f'DELETE FROM "{table}" WHERE "workspace_id" IS NOT NULL '
                        f'AND "workspace_id" NOT IN (SELECT "id" FROM "workspaces")'
                    )
                    removed[table] = int(status.split()[-1])
        logger.info(f"Orphan sweep removed: {removed}")
        return removed

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[PostgresTransaction]:
        """
        Run a REPEATABLE READ transaction on a pooled connection.

        Database errors not already translated by ``PostgresTransaction`` are
        raised as ``TransactionAbortedError`` once the transaction has rolled
        back.
        """
        if not self.pool:
            await self.connect()

        try:
            async with self.pool.acquire() as conn:
                async with conn.transaction(isolation="repeatable_read"):
                    yield PostgresTransaction(conn, self.tables)
        except (asyncpg.SerializationError, asyncpg.DeadlockDetectedError) as e:
            logger.warning(f"Transaction aborted by a concurrent update: {e}")
            raise TransactionAbortedError(str(e), retryable=True) from e
        except asyncpg.PostgresError as e:
            logger.error(f"Transaction failed: {e}")
            raise TransactionAbortedError(str(e)) from e
