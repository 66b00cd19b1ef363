"""
Test Suite Configuration
"""
import os

# Settings are cached on first access; pin the test environment before any
# ticket_analytics import
os.environ["APP_ENV"] = "testing"
os.environ["ANALYTICS_STORE_BACKEND"] = "memory"
os.environ["REDIS_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

import uuid
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, Optional

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from ticket_analytics.analytics.models import DailyAnalyticsRecord, RevenueMetrics, TicketMetrics
from ticket_analytics.config import AnalyticsSettings
from ticket_analytics.database import close_database, init_database
from ticket_analytics.exceptions import StoreAccessError
from ticket_analytics.store import InMemoryDocumentStore, SQLDocumentStore

FIXED_NOW = datetime(2025, 3, 15, 12, 0, 0)


class FlakyDocumentStore(InMemoryDocumentStore):
    """In-memory store that fails on demand"""

    def __init__(self):
        super().__init__()
        self.fail_get_keys = set()
        self.fail_delete_keys = set()
        self.fail_queries = False

    async def query_documents(self, collection, filters=(), order_by=None, limit=None):
        if self.fail_queries:
            raise StoreAccessError("query", collection, "connection reset")
        return await super().query_documents(collection, filters, order_by, limit)

    async def get_document(self, collection, key):
        if key in self.fail_get_keys:
            raise StoreAccessError("get", collection, f"timeout reading {key}")
        return await super().get_document(collection, key)

    async def delete_document(self, collection, key):
        if key in self.fail_delete_keys:
            raise StoreAccessError("delete", collection, f"permission denied on {key}")
        await super().delete_document(collection, key)


class UnreachableRedis:
    """Redis client whose every command fails with a connection error"""

    async def get(self, key):
        raise RedisConnectionError("Connection refused")

    async def setex(self, key, ttl, value):
        raise RedisConnectionError("Connection refused")

    async def scan_iter(self, match=None):
        raise RedisConnectionError("Connection refused")
        yield

    async def delete(self, *keys):
        raise RedisConnectionError("Connection refused")

    async def ping(self):
        raise RedisConnectionError("Connection refused")

    async def aclose(self):
        pass


@pytest.fixture
def unreachable_redis(monkeypatch):
    """Install a failing Redis client as the active cache connection"""
    client = UnreachableRedis()
    monkeypatch.setattr("ticket_analytics.serving.cache._redis_client", client)
    return client

@pytest.fixture
def config() -> AnalyticsSettings:
    """Engine settings with the default price table and collections"""
    return AnalyticsSettings()


@pytest.fixture
def clock():
    """Deterministic clock pinned to FIXED_NOW"""
    return lambda: FIXED_NOW


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def flaky_store() -> FlakyDocumentStore:
    return FlakyDocumentStore()


@pytest.fixture
async def sql_store(tmp_path):
    """SQL-backed store on a throwaway SQLite file"""
    await init_database(f"sqlite+aiosqlite:///{tmp_path / 'documents.db'}")
    yield SQLDocumentStore()
    await close_database()


@pytest.fixture
def make_ticket():
    """Factory for raw ticket documents"""

    def _make(
        created_at: datetime,
        category: str = "Standard",
        event_name: Optional[str] = "Spring Gala",
        user_id: Optional[str] = None,
        checked_in: bool = False,
        status: str = "active",
        ticket_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        return {
            "id": ticket_id or str(uuid.uuid4()),
            "createdAt": created_at,
            "ticketType": category,
            "eventName": event_name,
            "userId": user_id,
            "checkedIn": checked_in,
            "status": status,
        }

    return _make


@pytest.fixture
def make_user():
    """Factory for raw user documents"""

    def _make(created_at: datetime, deleted: bool = False, user_id: Optional[str] = None) -> Dict[str, Any]:
        return {
            "id": user_id or str(uuid.uuid4()),
            "createdAt": created_at,
            "deleted": deleted,
        }

    return _make


@pytest.fixture
def seed():
    """Write documents into a collection, keyed by their ``id``"""

    async def _seed(target_store, collection: str, documents: Iterable[Dict[str, Any]]) -> None:
        for document in documents:
            await target_store.update_document(collection, document["id"], document)

    return _seed


@pytest.fixture
def make_record():
    """Factory for daily rollups with the fields the reducers read"""

    def _make(
        day: date,
        created: int = 0,
        revenue: float = 0.0,
        checked_in: int = 0,
        registered: int = 0,
        processed_at: Optional[datetime] = None,
    ) -> DailyAnalyticsRecord:
        return DailyAnalyticsRecord(
            date=day.isoformat(),
            ticket_metrics=TicketMetrics(created=created, checked_in=checked_in),
            revenue_metrics=RevenueMetrics(daily_total=revenue),
            user_metrics={"registered": registered, "active": registered},
            processed_at=processed_at or FIXED_NOW,
        )

    return _make


@pytest.fixture
def make_series(make_record):
    """Consecutive daily rollups from per-day ticket counts"""

    def _make(counts, start: date = date(2025, 1, 1), revenue_per_ticket: float = 10.0):
        return [
            make_record(start + timedelta(days=i), created=count, revenue=count * revenue_per_ticket)
            for i, count in enumerate(counts)
        ]

    return _make
