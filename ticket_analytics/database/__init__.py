"""
Database Module
"""
from .connection import check_database_health, close_database, get_db, init_database
from .models import Base, Document

__all__ = [
    "init_database",
    "close_database",
    "get_db",
    "check_database_health",
    "Base",
    "Document",
]
