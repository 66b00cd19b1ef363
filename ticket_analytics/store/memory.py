"""
In-Memory Document Store

Dictionary-backed implementation of the document-store contract. Used by the
test suite, demos and the ``memory`` backend setting.
"""

import copy
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from .base import Document, DocumentStore, Filter, apply_query


class InMemoryDocumentStore(DocumentStore):
    """
    Document store held in process memory.

    Documents are deep-copied on the way in and out so callers can never
    mutate stored state by accident.

    Example:
        store = InMemoryDocumentStore()
        await store.update_document("tickets", "t1", {"eventName": "Gala"})
        docs = await store.query_documents("tickets")
    """

    def __init__(self, initial: Optional[Dict[str, Dict[str, Document]]] = None):
        self._collections: Dict[str, Dict[str, Document]] = defaultdict(dict)
        for collection, documents in (initial or {}).items():
            for key, data in documents.items():
                self._collections[collection][key] = copy.deepcopy(data)

    @staticmethod
    def _with_id(key: str, data: Document) -> Document:
        document = copy.deepcopy(data)
        document["id"] = key
        return document

    async def query_documents(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        documents = (
            self._with_id(key, data)
            for key, data in self._collections.get(collection, {}).items()
        )
        return apply_query(documents, filters, order_by, limit)

    async def get_document(self, collection: str, key: str) -> Optional[Document]:
        data = self._collections.get(collection, {}).get(key)
        if data is None:
            return None
        return self._with_id(key, data)

    async def update_document(self, collection: str, key: str, data: Document) -> None:
        stored = copy.deepcopy(data)
        stored.pop("id", None)
        self._collections[collection][key] = stored

    async def delete_document(self, collection: str, key: str) -> None:
        self._collections.get(collection, {}).pop(key, None)

    def count(self, collection: str) -> int:
        """Number of documents in ``collection``"""
        return len(self._collections.get(collection, {}))

    def keys(self, collection: str) -> List[str]:
        """Keys stored in ``collection`` in insertion order"""
        return list(self._collections.get(collection, {}))
