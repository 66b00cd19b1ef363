"""
Unit Tests - Real-Time Snapshot
"""
from datetime import datetime

import pytest

from ticket_analytics.analytics import RealtimeMonitor
from ticket_analytics.config import AnalyticsSettings
from ticket_analytics.exceptions import RealtimeSnapshotError, StoreAccessError


@pytest.fixture
async def live_store(store, seed, make_ticket):
    # clock is pinned to 2025-03-15 12:00
    just_sold = make_ticket(datetime(2025, 3, 15, 11, 55), "VIP", event_name="Tech Summit", ticket_id="t1")
    just_sold["userName"] = "Ada"
    early_entry = make_ticket(datetime(2025, 3, 15, 2, 0), "Premium", checked_in=True, ticket_id="t2")
    early_entry["checkedInAt"] = datetime(2025, 3, 15, 11, 30)
    yesterday = make_ticket(datetime(2025, 3, 14, 10, 0), "Standard", checked_in=True, ticket_id="t3")
    yesterday["checkedInAt"] = datetime(2025, 3, 15, 11, 50)
    await seed(store, "tickets", [just_sold, early_entry, yesterday])
    return store


class TestRealtimeMonitor:
    """Tests for RealtimeMonitor"""

    async def test_metrics(self, live_store, config, clock):
        snapshot = await RealtimeMonitor(live_store, config, clock).snapshot()

        assert snapshot.metrics.tickets_last_24h == 2
        assert snapshot.metrics.check_ins_last_hour == 2
        assert snapshot.metrics.active_sessions == 1
        assert snapshot.metrics.total_tickets == 3
        assert snapshot.metrics.total_checked_in == 2
        assert snapshot.generated_at == clock()

    async def test_activity_feed_newest_first(self, live_store, config, clock):
        snapshot = await RealtimeMonitor(live_store, config, clock).snapshot()

        feed = [(item.type, item.timestamp) for item in snapshot.recent_activity]
        assert feed == [
            ("ticket_created", datetime(2025, 3, 15, 11, 55)),
            ("checkin", datetime(2025, 3, 15, 11, 50)),
            ("checkin", datetime(2025, 3, 15, 11, 30)),
            ("ticket_created", datetime(2025, 3, 15, 2, 0)),
        ]
        assert snapshot.recent_activity[0].user_name == "Ada"
        assert snapshot.recent_activity[0].ticket_type == "VIP"

    async def test_limits(self, live_store, clock):
        config = AnalyticsSettings(realtime_activity_limit=2, realtime_sample_size=2)

        snapshot = await RealtimeMonitor(live_store, config, clock).snapshot()

        assert len(snapshot.recent_activity) == 2
        # the two latest sales: t1 and t2
        assert snapshot.metrics.total_tickets == 2
        assert snapshot.metrics.total_checked_in == 1

    async def test_camel_case_payload(self, live_store, config, clock):
        snapshot = await RealtimeMonitor(live_store, config, clock).snapshot()

        metrics = snapshot.model_dump(by_alias=True)["metrics"]
        assert metrics["ticketsLast24h"] == 2
        assert metrics["checkInsLastHour"] == 2

    async def test_empty_store(self, store, config, clock):
        snapshot = await RealtimeMonitor(store, config, clock).snapshot()

        assert snapshot.metrics.total_tickets == 0
        assert snapshot.recent_activity == []

    async def test_store_failure_propagates(self, flaky_store, config, clock):
        flaky_store.fail_queries = True

        with pytest.raises(StoreAccessError):
            await RealtimeMonitor(flaky_store, config, clock).snapshot()

    async def test_unparseable_ticket(self, store, seed, make_ticket, config, clock):
        bad = make_ticket(datetime(2025, 3, 15, 9, 0))
        bad["checkedIn"] = "maybe"
        await seed(store, "tickets", [bad])

        with pytest.raises(RealtimeSnapshotError):
            await RealtimeMonitor(store, config, clock).snapshot()
