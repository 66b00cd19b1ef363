"""
Document Store Contract

Narrow interface the analytics engine uses to reach raw records and persist
rollups. Collections hold documents addressed by a string key; query results
carry that key under ``id``.
"""

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

Document = Dict[str, Any]

OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


@dataclass(frozen=True)
class Filter:
    """Single ``field op value`` predicate"""
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in OPERATORS:
            raise ValueError(f"Unsupported operator '{self.op}', expected one of {sorted(OPERATORS)}")

    def matches(self, document: Document) -> bool:
        # Documents without the field never match, whatever the operator
        if self.field not in document or document[self.field] is None:
            return False
        try:
            left = as_local_naive(coerce_for_comparison(document[self.field], self.value))
            return OPERATORS[self.op](left, as_local_naive(self.value))
        except (TypeError, ValueError):
            # Values of incomparable types never match
            return False


def as_local_naive(value: Any) -> Any:
    """Convert an aware ``datetime`` to naive server-local time; pass anything else through"""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def coerce_for_comparison(stored: Any, probe: Any) -> Any:
    """
    Bring a stored value to the probe's type.

    JSON-backed stores keep datetimes as ISO strings; comparing them against a
    ``datetime`` filter value needs them parsed back first.
    """
    if isinstance(stored, str):
        if isinstance(probe, datetime):
            if stored.endswith("Z"):
                stored = stored[:-1] + "+00:00"
            return datetime.fromisoformat(stored)
        if isinstance(probe, date):
            return date.fromisoformat(stored[:10])
    return stored


def apply_query(
    documents: Iterable[Document],
    filters: Sequence[Filter] = (),
    order_by: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[Document]:
    """
    Filter, order and limit documents in memory.

    ``order_by`` names a field; a leading ``-`` sorts descending. Documents
    lacking the ordering field are dropped, as in Firestore.
    """
    results = [doc for doc in documents if all(f.matches(doc) for f in filters)]

    if order_by:
        descending = order_by.startswith("-")
        field = order_by.lstrip("-")
        results = [doc for doc in results if doc.get(field) is not None]
        results.sort(key=lambda doc: as_local_naive(doc[field]), reverse=descending)

    if limit is not None:
        results = results[:limit]

    return results


class DocumentStore(ABC):
    """Generic document-store contract consumed by the analytics engine"""

    @abstractmethod
    async def query_documents(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Document]:
        """Return documents of ``collection`` matching every filter."""

    @abstractmethod
    async def get_document(self, collection: str, key: str) -> Optional[Document]:
        """Return one document or ``None`` when the key is absent."""

    @abstractmethod
    async def update_document(self, collection: str, key: str, data: Document) -> None:
        """Create or fully replace the document stored under ``key``."""

    @abstractmethod
    async def delete_document(self, collection: str, key: str) -> None:
        """Delete the document stored under ``key``."""
