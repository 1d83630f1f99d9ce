"""JSON document store on top of a single aiosqlite connection.

Every collection is a table of ``(_id, body)`` rows where ``body`` holds the
document as JSON. The store offers the small set of document operations the
API needs: point and filtered lookups, inserts, field updates, array push and
pull, deletes and counts. Every operation, read or write, is serialised by a
lock; a ``transaction()`` holds that lock for a whole unit of work, so other
tasks never observe its uncommitted writes.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import uuid
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import aiosqlite

from bookstore.common import InternalFailure

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Iterable

    from aiosqlite import Connection, Cursor

LOGGER = logging.getLogger(__name__)

Document = dict[str, Any]

_FIELD_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_IN_TRANSACTION: ContextVar[bool] = ContextVar("in_transaction", default=False)


class StoreError(InternalFailure):
    """Raised when the underlying database rejects an operation."""


@dataclass(frozen=True)
class UpdateResult:
    """Outcome of an update, in matched/modified document counts."""

    matched_count: int
    modified_count: int


def new_id() -> str:
    """Return a fresh opaque document identifier."""
    return uuid.uuid4().hex


def utc_now() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


class DocumentStore:
    """Repository for raw documents grouped in named collections."""

    COLLECTIONS = frozenset({"users", "books", "orders"})

    CREATE_COLLECTION = """
        CREATE TABLE IF NOT EXISTS {collection} (
            _id TEXT PRIMARY KEY,
            body TEXT NOT NULL
        );
        """

    def __init__(self, connection: Connection) -> None:
        """Create a DocumentStore on an open connection.

        The connection should be opened with ``isolation_level=None`` so that
        single operations autocommit and transactions are explicit.

        :param connection: Database connection
        """
        self.connection = connection
        self._lock = asyncio.Lock()

    @classmethod
    @asynccontextmanager
    async def open(cls, db_path: str) -> AsyncGenerator[DocumentStore]:
        """Open a connection to ``db_path`` and yield an initialized store.

        :param db_path: Path to the SQLite database file
        """
        async with aiosqlite.connect(db_path, isolation_level=None) as connection:
            store = cls(connection)
            await store.initialize_collections()
            yield store

    async def initialize_collections(self) -> None:
        """Create the collection tables if they do not exist."""
        for collection in sorted(self.COLLECTIONS):
            await self._execute(
                DocumentStore.CREATE_COLLECTION.format(collection=collection),
            )
        LOGGER.debug("Collections initialized: %s", ", ".join(sorted(self.COLLECTIONS)))

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[DocumentStore]:
        """Run the enclosed operations as one unit of work.

        Commits when the block exits normally and rolls back every write made
        inside it when the block raises. Nested calls join the outer
        transaction.
        """
        if _IN_TRANSACTION.get():
            yield self
            return

        async with self._lock:
            token = _IN_TRANSACTION.set(True)
            try:
                await self._execute("BEGIN IMMEDIATE")
                try:
                    yield self
                except BaseException:
                    await self._execute("ROLLBACK")
                    LOGGER.debug("Transaction rolled back")
                    raise
                await self._execute("COMMIT")
            finally:
                _IN_TRANSACTION.reset(token)

    async def find_one(
        self,
        collection: str,
        doc_id: str,
        exclude: Iterable[str] = (),
    ) -> Document | None:
        """Look up a single document by its identifier.

        :param collection: Collection name
        :param doc_id: Document identifier
        :param exclude: Fields to leave out of the returned document
        :return: The document, or None if it does not exist
        """
        async with self._guarded():
            document = await self._fetch(collection, doc_id)
        if document is None:
            return None
        for field in exclude:
            document.pop(field, None)
        return document

    async def find(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        *,
        sort: str | None = None,
        descending: bool = False,
        limit: int | None = None,
    ) -> list[Document]:
        """Return the documents whose fields equal every value in ``filters``.

        Without ``sort`` documents come back in insertion order.

        :param collection: Collection name
        :param filters: Mapping of field name to required value
        :param sort: Field to order by
        :param descending: Whether to order in descending order
        :param limit: Maximum number of documents to return
        :return: Matching documents
        """
        self._check_collection(collection)
        where_clause, params = _build_filters(filters)

        direction = "DESC" if descending else "ASC"
        if sort is None:
            order_clause = f" ORDER BY rowid {direction}"
        else:
            _check_field(sort)
            order_clause = (
                f" ORDER BY json_extract(body, '$.{sort}') {direction},"
                f" rowid {direction}"
            )

        limit_clause = ""
        if limit is not None:
            limit_clause = " LIMIT ?"
            params.append(limit)

        # collection, fields and direction are validated, values are bound
        async with self._guarded():
            cursor = await self._execute(
                f"SELECT _id, body FROM {collection}"  # noqa: S608
                f"{where_clause}{order_clause}{limit_clause}",
                params,
            )
            rows = await cursor.fetchall()
        return [_load(row) for row in rows]

    async def find_many(
        self,
        collection: str,
        ids: Iterable[str],
    ) -> dict[str, Document]:
        """Resolve a set of identifiers in one query.

        :param collection: Collection name
        :param ids: Identifiers to look up
        :return: Mapping of identifier to document for those that exist
        """
        self._check_collection(collection)
        wanted = list(dict.fromkeys(ids))
        if not wanted:
            return {}

        placeholders = ", ".join("?" for _ in wanted)
        async with self._guarded():
            cursor = await self._execute(
                f"SELECT _id, body FROM {collection} WHERE _id IN ({placeholders})",  # noqa: S608
                wanted,
            )
            rows = await cursor.fetchall()
        return {row[0]: _load(row) for row in rows}

    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        """Count the documents matching ``filters``."""
        self._check_collection(collection)
        where_clause, params = _build_filters(filters)
        async with self._guarded():
            cursor = await self._execute(
                f"SELECT COUNT(*) FROM {collection}{where_clause}",  # noqa: S608
                params,
            )
            row = await cursor.fetchone()
        return row[0] if row else 0

    async def insert_one(self, collection: str, document: Document) -> str:
        """Insert a document under a fresh identifier.

        :param collection: Collection name
        :param document: Document body, without ``_id``
        :return: The new document identifier
        """
        self._check_collection(collection)
        doc_id = new_id()
        body = {key: value for key, value in document.items() if key != "_id"}
        async with self._guarded():
            await self._execute(
                f"INSERT INTO {collection} (_id, body) VALUES (?, ?)",  # noqa: S608
                (doc_id, json.dumps(body)),
            )
        return doc_id

    async def set_fields(
        self,
        collection: str,
        doc_id: str,
        fields: dict[str, Any],
    ) -> UpdateResult:
        """Overwrite the given fields of one document."""
        for field in fields:
            _check_field(field)

        async with self._guarded():
            document = await self._fetch(collection, doc_id)
            if document is None:
                return UpdateResult(matched_count=0, modified_count=0)

            changed = any(document.get(key) != value for key, value in fields.items())
            if not changed:
                return UpdateResult(matched_count=1, modified_count=0)

            document.update(fields)
            await self._replace(collection, document)
        return UpdateResult(matched_count=1, modified_count=1)

    async def push(
        self,
        collection: str,
        doc_id: str,
        field: str,
        value: Any,  # noqa: ANN401
        *,
        unique: bool = False,
    ) -> UpdateResult:
        """Append ``value`` to the array stored in ``field``.

        With ``unique`` set, a value already in the array is left alone and
        the result reports no modification.
        """
        _check_field(field)

        async with self._guarded():
            document = await self._fetch(collection, doc_id)
            if document is None:
                return UpdateResult(matched_count=0, modified_count=0)

            current = document.get(field, [])
            if unique and value in current:
                return UpdateResult(matched_count=1, modified_count=0)

            document[field] = [*current, value]
            await self._replace(collection, document)
        return UpdateResult(matched_count=1, modified_count=1)

    async def pull(
        self,
        collection: str,
        doc_id: str,
        field: str,
        value: Any,  # noqa: ANN401
    ) -> UpdateResult:
        """Remove every element equal to ``value`` from the array in ``field``."""
        _check_field(field)

        async with self._guarded():
            document = await self._fetch(collection, doc_id)
            if document is None:
                return UpdateResult(matched_count=0, modified_count=0)

            current = document.get(field, [])
            remaining = [item for item in current if item != value]
            if len(remaining) == len(current):
                return UpdateResult(matched_count=1, modified_count=0)

            document[field] = remaining
            await self._replace(collection, document)
        return UpdateResult(matched_count=1, modified_count=1)

    async def delete_one(self, collection: str, doc_id: str) -> int:
        """Delete one document.

        :return: Number of documents deleted
        """
        self._check_collection(collection)
        async with self._guarded():
            cursor = await self._execute(
                f"DELETE FROM {collection} WHERE _id = ?",  # noqa: S608
                (doc_id,),
            )
        return cursor.rowcount

    async def _replace(self, collection: str, document: Document) -> None:
        body = {key: value for key, value in document.items() if key != "_id"}
        await self._execute(
            f"UPDATE {collection} SET body = ? WHERE _id = ?",  # noqa: S608
            (json.dumps(body), document["_id"]),
        )

    async def _fetch(self, collection: str, doc_id: str) -> Document | None:
        self._check_collection(collection)
        cursor = await self._execute(
            f"SELECT _id, body FROM {collection} WHERE _id = ?",  # noqa: S608
            (doc_id,),
        )
        row = await cursor.fetchone()
        return None if row is None else _load(row)

    @asynccontextmanager
    async def _guarded(self) -> AsyncGenerator[None]:
        """Serialise an operation unless the caller already owns the transaction."""
        if _IN_TRANSACTION.get():
            yield
            return
        async with self._lock:
            yield

    async def _execute(self, query: str, params: Iterable[Any] = ()) -> Cursor:
        try:
            return await self.connection.execute(query, tuple(params))
        except aiosqlite.Error as e:
            msg = f"Database operation failed: {e}"
            raise StoreError(msg) from e

    def _check_collection(self, collection: str) -> None:
        if collection not in self.COLLECTIONS:
            msg = f"Unknown collection: {collection}"
            raise StoreError(msg)


def _check_field(field: str) -> None:
    if not _FIELD_PATTERN.match(field):
        msg = f"Invalid field name: {field}"
        raise StoreError(msg)


def _build_filters(filters: dict[str, Any] | None) -> tuple[str, list[Any]]:
    where = []
    params: list[Any] = []

    for field, value in (filters or {}).items():
        if field == "_id":
            where.append("_id = ?")
        else:
            _check_field(field)
            where.append(f"json_extract(body, '$.{field}') = ?")
        params.append(value)

    clause = f" WHERE {' AND '.join(where)}" if where else ""
    return clause, params


def _load(row: tuple[str, str]) -> Document:
    document = json.loads(row[1])
    document["_id"] = row[0]
    return document
