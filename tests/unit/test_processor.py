"""
Unit Tests - Daily Rollup Processor
"""
from datetime import date, datetime, timezone

import pytest

from ticket_analytics.analytics import DailyAnalyticsRecord, DailyRollupProcessor
from ticket_analytics.exceptions import RollupComputationError, StoreAccessError

DAY = date(2025, 3, 14)


@pytest.fixture
async def seeded_store(store, seed, make_ticket, make_user):
    await seed(store, "tickets", [
        make_ticket(datetime(2025, 3, 14, 0, 0, 0), "Premium", event_name="Tech Summit", user_id="u1"),
        make_ticket(datetime(2025, 3, 14, 9, 30), "VIP", event_name="Tech Summit", user_id="u1", checked_in=True),
        make_ticket(datetime(2025, 3, 14, 23, 59, 59, 999000), "Standard", event_name="Jazz Night"),
        # outside the day window, counted only in the cumulative total
        make_ticket(datetime(2025, 3, 13, 23, 59, 59), "VIP"),
        make_ticket(datetime(2025, 3, 15, 0, 0, 0), "Premium"),
    ])
    await seed(store, "users", [
        make_user(datetime(2025, 3, 14, 8, 0), user_id="u1"),
        make_user(datetime(2025, 3, 14, 18, 0), deleted=True),
        make_user(datetime(2025, 3, 12, 8, 0)),
    ])
    return store


class TestDailyRollupProcessor:
    """Tests for DailyRollupProcessor"""

    async def test_process_computes_day(self, seeded_store, config, clock):
        processor = DailyRollupProcessor(seeded_store, config, clock)

        record = await processor.process(DAY)

        assert record.date == "2025-03-14"
        assert record.ticket_metrics.created == 3
        assert record.ticket_metrics.checked_in == 1
        assert record.user_metrics.registered == 2
        assert record.user_metrics.active == 1
        assert record.revenue_metrics.daily_total == 148
        assert record.revenue_metrics.cumulative_total_to_date == 148 + 99 + 49
        assert record.event_metrics.top_event.name == "Tech Summit"
        assert record.engagement_metrics.active_user_count == 1
        assert record.processed_at == clock()
        assert record.processing_duration_ms >= 0

    async def test_process_persists_under_daily_key(self, seeded_store, config, clock):
        processor = DailyRollupProcessor(seeded_store, config, clock)

        await processor.process(DAY)

        document = await seeded_store.get_document("analytics", "daily_2025-03-14")
        assert document is not None
        assert document["ticketMetrics"]["created"] == 3
        stored = DailyAnalyticsRecord.model_validate(document)
        assert stored.key == "daily_2025-03-14"

    async def test_process_is_idempotent(self, seeded_store, config, clock):
        processor = DailyRollupProcessor(seeded_store, config, clock)

        first = await processor.process(DAY)
        second = await processor.process(DAY)

        assert first.ticket_metrics == second.ticket_metrics
        assert first.revenue_metrics == second.revenue_metrics
        assert first.event_metrics == second.event_metrics
        assert first.engagement_metrics == second.engagement_metrics
        assert seeded_store.keys("analytics") == ["daily_2025-03-14"]

    async def test_process_accepts_iso_string(self, seeded_store, config, clock):
        processor = DailyRollupProcessor(seeded_store, config, clock)

        record = await processor.process("2025-03-14")

        assert record.date == "2025-03-14"
        assert record.ticket_metrics.created == 3

    async def test_empty_day(self, store, config, clock):
        processor = DailyRollupProcessor(store, config, clock)

        record = await processor.process(DAY)

        assert record.ticket_metrics.created == 0
        assert record.revenue_metrics.average_per_ticket == 0
        assert record.event_metrics.top_event is None
        assert store.count("analytics") == 1

    async def test_store_failure_propagates_and_writes_nothing(self, flaky_store, config, clock):
        flaky_store.fail_queries = True
        processor = DailyRollupProcessor(flaky_store, config, clock)

        with pytest.raises(StoreAccessError):
            await processor.process(DAY)

        assert flaky_store.count("analytics") == 0

    async def test_unparseable_record_raises_computation_error(self, store, seed, make_ticket, config, clock):
        bad = make_ticket(datetime(2025, 3, 14, 10, 0))
        bad["checkedIn"] = "maybe"
        await seed(store, "tickets", [bad])
        processor = DailyRollupProcessor(store, config, clock)

        with pytest.raises(RollupComputationError) as exc_info:
            await processor.process(DAY)

        assert exc_info.value.day == "2025-03-14"
        assert store.count("analytics") == 0

    async def test_timezone_aware_timestamps(self, store, seed, make_ticket, make_user, config, clock):
        utc_string = make_ticket(datetime(2025, 3, 14, 12, 0), "VIP")
        utc_string["createdAt"] = "2025-03-14T12:00:00Z"
        await seed(store, "tickets", [
            utc_string,
            make_ticket(datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc), "Premium"),
            make_ticket(datetime(2025, 3, 14, 13, 0), "Standard"),
        ])
        await seed(store, "users", [make_user(datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc))])
        processor = DailyRollupProcessor(store, config, clock)

        record = await processor.process(DAY)

        assert record.ticket_metrics.created == 3
        assert record.user_metrics.registered == 1
        assert record.revenue_metrics.daily_total == 148

    async def test_last_microsecond_of_day_counted_once(self, store, seed, make_ticket, config, clock):
        await seed(store, "tickets", [make_ticket(datetime(2025, 3, 14, 23, 59, 59, 999500), "VIP")])
        processor = DailyRollupProcessor(store, config, clock)

        this_day = await processor.process(DAY)
        next_day = await processor.process(date(2025, 3, 15))

        assert this_day.ticket_metrics.created == 1
        assert next_day.ticket_metrics.created == 0

    async def test_null_flags_read_as_false(self, store, seed, make_ticket, make_user, config, clock):
        ticket = make_ticket(datetime(2025, 3, 14, 10, 0), "Premium")
        ticket["checkedIn"] = None
        user = make_user(datetime(2025, 3, 14, 11, 0))
        user["deleted"] = None
        await seed(store, "tickets", [ticket])
        await seed(store, "users", [user])
        processor = DailyRollupProcessor(store, config, clock)

        record = await processor.process(DAY)

        assert record.ticket_metrics.created == 1
        assert record.ticket_metrics.checked_in == 0
        assert record.user_metrics.active == 1

    async def test_sql_store_round_trip(self, sql_store, seed, make_ticket, config, clock):
        await seed(sql_store, "tickets", [
            make_ticket(datetime(2025, 3, 14, 11, 0), "VIP"),
            make_ticket(datetime(2025, 3, 13, 11, 0), "Premium"),
        ])
        processor = DailyRollupProcessor(sql_store, config, clock)

        record = await processor.process(DAY)

        assert record.ticket_metrics.created == 1
        assert record.revenue_metrics.cumulative_total_to_date == 148
        document = await sql_store.get_document("analytics", "daily_2025-03-14")
        assert DailyAnalyticsRecord.model_validate(document).processed_at == clock()
