"""
Unit Tests - Range Assembler
"""
from datetime import date, datetime, timezone

from ticket_analytics.analytics import AnalyticsService, DailyRollupProcessor, RangeAssembler


def assembler_for(store, config, clock) -> RangeAssembler:
    return RangeAssembler(store, DailyRollupProcessor(store, config, clock), config)


class TestRangeAssembler:
    """Tests for RangeAssembler"""

    async def test_backfills_every_day_in_order(self, store, config, clock):
        assembler = assembler_for(store, config, clock)

        records = await assembler.assemble(date(2025, 3, 1), date(2025, 3, 5))

        assert [r.date for r in records] == [
            "2025-03-01", "2025-03-02", "2025-03-03", "2025-03-04", "2025-03-05",
        ]
        assert store.count("analytics") == 5

    async def test_existing_rollup_is_not_recomputed(self, store, config, clock, make_record):
        stored = make_record(date(2025, 3, 2), created=42)
        await store.update_document("analytics", stored.key, stored.to_document())
        assembler = assembler_for(store, config, clock)

        records = await assembler.assemble(date(2025, 3, 1), date(2025, 3, 3))

        assert len(records) == 3
        assert records[1].ticket_metrics.created == 42
        assert records[0].ticket_metrics.created == 0

    async def test_backfilled_days_use_raw_records(self, store, config, clock, seed, make_ticket):
        await seed(store, "tickets", [
            make_ticket(datetime(2025, 3, 2, 14, 0), "Premium"),
            make_ticket(datetime(2025, 3, 2, 15, 0), "Premium"),
        ])
        assembler = assembler_for(store, config, clock)

        records = await assembler.assemble("2025-03-01", "2025-03-02")

        assert [r.ticket_metrics.created for r in records] == [0, 2]
        assert records[1].revenue_metrics.daily_total == 98

    async def test_aware_timestamps_keep_every_day(self, store, config, clock, seed, make_ticket):
        await seed(store, "tickets", [make_ticket(datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc), "VIP")])
        assembler = assembler_for(store, config, clock)

        records = await assembler.assemble(date(2025, 3, 13), date(2025, 3, 15))

        assert [r.date for r in records] == ["2025-03-13", "2025-03-14", "2025-03-15"]
        assert [r.ticket_metrics.created for r in records] == [0, 1, 0]

    async def test_failed_day_is_skipped(self, flaky_store, config, clock):
        flaky_store.fail_get_keys = {"daily_2025-03-03"}
        assembler = assembler_for(flaky_store, config, clock)

        records = await assembler.assemble(date(2025, 3, 1), date(2025, 3, 5))

        assert [r.date for r in records] == ["2025-03-01", "2025-03-02", "2025-03-04", "2025-03-05"]

    async def test_inverted_range_is_empty(self, store, config, clock):
        assembler = assembler_for(store, config, clock)

        records = await assembler.assemble(date(2025, 3, 5), date(2025, 3, 1))

        assert records == []
        assert store.count("analytics") == 0

    async def test_single_day_range(self, store, config, clock):
        service = AnalyticsService(store, config, clock)

        records = await service.get_analytics_range("2025-03-01", "2025-03-01")

        assert len(records) == 1
