"""
Analytics Service

Facade over the rollup engine exposing the operations the reporting layer
consumes: daily processing, range reads, growth, summary, forecast, period
trends, revenue breakdowns, the real-time snapshot, retention and a health
probe.
"""

import time
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

import structlog

from ticket_analytics.config import AnalyticsSettings, get_settings
from ticket_analytics.store import DocumentStore

from .dates import DateLike
from .forecast import predict_trends
from .growth import MetricPath, calculate_growth_rates
from .models import (
    CleanupResult,
    DailyAnalyticsRecord,
    Forecast,
    GrowthRates,
    HealthStatus,
    RealtimeSnapshot,
    RevenueReport,
    Summary,
    TicketTrends,
)
from .processor import DailyRollupProcessor
from .ranges import RangeAssembler
from .realtime import RealtimeMonitor
from .retention import RetentionCleaner
from .summary import generate_summary_stats
from .trends import Breakdown, Granularity, build_revenue_report, build_ticket_trends

logger = structlog.get_logger(__name__)


class AnalyticsService:
    """
    Entry point to the rollup & forecasting engine.

    Holds no state beyond its collaborators; every call is a function of its
    arguments and the document store.

    Example:
        service = AnalyticsService(store)
        records = await service.get_analytics_range("2025-03-01", "2025-03-31")
        growth = service.calculate_growth_rates(records, MetricPath.REVENUE_DAILY)
    """

    def __init__(
        self,
        store: DocumentStore,
        config: Optional[AnalyticsSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.config = config or get_settings().analytics
        self.clock = clock
        self.processor = DailyRollupProcessor(store, self.config, clock)
        self.assembler = RangeAssembler(store, self.processor, self.config)
        self.cleaner = RetentionCleaner(store, self.config, clock)
        self.monitor = RealtimeMonitor(store, self.config, clock)

    async def process_daily_analytics(self, day: Optional[DateLike] = None) -> DailyAnalyticsRecord:
        """Compute and store the rollup for ``day`` (today by default)."""
        return await self.processor.process(day if day is not None else self.clock())

    async def get_analytics_range(self, start_date: DateLike, end_date: DateLike) -> List[DailyAnalyticsRecord]:
        return await self.assembler.assemble(start_date, end_date)

    def calculate_growth_rates(
        self,
        records: Sequence[DailyAnalyticsRecord],
        metric: MetricPath = MetricPath.TICKETS_CREATED,
    ) -> GrowthRates:
        return calculate_growth_rates(records, metric)

    def generate_summary_stats(self, records: Sequence[DailyAnalyticsRecord]) -> Optional[Summary]:
        return generate_summary_stats(records)

    def predict_trends(
        self,
        records: Sequence[DailyAnalyticsRecord],
        horizon_days: Optional[int] = None,
    ) -> Optional[Forecast]:
        if horizon_days is None:
            horizon_days = self.config.forecast_horizon_days
        return predict_trends(records, horizon_days, self.config.min_forecast_days)

    def ticket_trends(
        self,
        records: Sequence[DailyAnalyticsRecord],
        granularity: Granularity = Granularity.DAY,
    ) -> TicketTrends:
        return build_ticket_trends(records, granularity)

    def revenue_report(
        self,
        records: Sequence[DailyAnalyticsRecord],
        breakdown: Breakdown = Breakdown.DAILY,
    ) -> RevenueReport:
        return build_revenue_report(records, breakdown)

    async def realtime_snapshot(self) -> RealtimeSnapshot:
        return await self.monitor.snapshot()

    async def cleanup_old_analytics(self, older_than_days: Optional[int] = None) -> CleanupResult:
        return await self.cleaner.cleanup(older_than_days)

    async def health_check(self) -> HealthStatus:
        """
        Run a full rollup for yesterday and report its latency.

        Never raises: a failure is reported as ``unhealthy`` with its message.
        """
        yesterday = (self.clock() - timedelta(days=1)).date()
        try:
            start = time.perf_counter()
            await self.processor.process(yesterday)
            response_time_ms = (time.perf_counter() - start) * 1000
        except Exception as e:
            logger.error("Analytics service health check failed", error=str(e))
            return HealthStatus(status="unhealthy", error=str(e))

        return HealthStatus(
            status="healthy",
            response_time_ms=round(response_time_ms, 2),
            last_processed=yesterday.isoformat(),
        )
