"""
Document Store Module
"""
from .base import Document, DocumentStore, Filter, apply_query, as_local_naive
from .memory import InMemoryDocumentStore
from .sql import SQLDocumentStore

__all__ = [
    "Document",
    "DocumentStore",
    "Filter",
    "apply_query",
    "as_local_naive",
    "InMemoryDocumentStore",
    "SQLDocumentStore",
]
