"""
SQL Document Store

Document-store contract on top of the async SQLAlchemy ``documents`` table.
Only the collection is pushed down to SQL; field filters, ordering and limits
run in Python so the same code serves PostgreSQL (asyncpg) and SQLite
(aiosqlite) without dialect-specific JSON operators.
"""

import json
from datetime import date, datetime
from typing import Any, AsyncContextManager, Callable, List, Optional, Sequence

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ticket_analytics.database.connection import get_db
from ticket_analytics.database.models import Document as DocumentRow
from ticket_analytics.exceptions import StoreAccessError

from .base import Document, DocumentStore, Filter, apply_query

logger = structlog.get_logger(__name__)

SessionFactory = Callable[[], AsyncContextManager[AsyncSession]]


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json_payload(data: Document) -> Document:
    """Round-trip through JSON so the payload only holds JSON-native values"""
    payload = {k: v for k, v in data.items() if k != "id"}
    return json.loads(json.dumps(payload, default=_json_default))


class SQLDocumentStore(DocumentStore):
    """
    Document store backed by the ``documents`` table.

    Args:
        session_factory: Async context manager yielding a session that
            commits on exit (defaults to ``get_db``)
    """

    def __init__(self, session_factory: Optional[SessionFactory] = None):
        self._session_factory = session_factory or get_db

    async def query_documents(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        try:
            async with self._session_factory() as db:
                result = await db.execute(
                    select(DocumentRow.key, DocumentRow.data)
                    .where(DocumentRow.collection == collection)
                    .order_by(DocumentRow.key)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            logger.error("Document query failed", collection=collection, error=str(e))
            raise StoreAccessError("query", collection, str(e)) from e

        documents = ({**row.data, "id": row.key} for row in rows)
        return apply_query(documents, filters, order_by, limit)

    async def get_document(self, collection: str, key: str) -> Optional[Document]:
        try:
            async with self._session_factory() as db:
                row = await db.get(DocumentRow, (collection, key))
                data = dict(row.data) if row is not None else None
        except SQLAlchemyError as e:
            logger.error("Document fetch failed", collection=collection, key=key, error=str(e))
            raise StoreAccessError("get", collection, str(e)) from e

        if data is None:
            return None
        data["id"] = key
        return data

    async def update_document(self, collection: str, key: str, data: Document) -> None:
        payload = to_json_payload(data)
        try:
            async with self._session_factory() as db:
                await db.merge(DocumentRow(collection=collection, key=key, data=payload))
        except SQLAlchemyError as e:
            logger.error("Document upsert failed", collection=collection, key=key, error=str(e))
            raise StoreAccessError("update", collection, str(e)) from e

    async def delete_document(self, collection: str, key: str) -> None:
        try:
            async with self._session_factory() as db:
                await db.execute(
                    delete(DocumentRow).where(
                        DocumentRow.collection == collection,
                        DocumentRow.key == key,
                    )
                )
        except SQLAlchemyError as e:
            logger.error("Document delete failed", collection=collection, key=key, error=str(e))
            raise StoreAccessError("delete", collection, str(e)) from e
