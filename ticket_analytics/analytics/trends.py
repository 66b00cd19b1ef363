"""
Period Trends

Folds an assembled range of daily rollups into day, week or month buckets
for the trend and revenue reports. Buckets are built from stored rollups
only; no raw record is re-read.

Weeks start on Sunday and are labelled by that Sunday's date; months are
labelled ``YYYY-MM``. Buckets at the edges of a range may cover fewer days
than a full period, which ``days`` records.
"""

from datetime import date, timedelta
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .calculators import round_half_away
from .growth import percent_change
from .models import (
    CategoryRevenue,
    DailyAnalyticsRecord,
    RevenueReport,
    RevenueSummary,
    TicketTrends,
    TrendBucket,
    TrendGrowth,
)


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class Breakdown(str, Enum):
    """Revenue time-series resolution"""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def granularity(self) -> Granularity:
        return _BREAKDOWN_GRANULARITY[self]


class TimeRange(str, Enum):
    """Dashboard presets, each a number of calendar days ending today"""
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_YEAR = "1y"

    @property
    def days(self) -> int:
        return _TIME_RANGE_DAYS[self]

    def window(self, end: date) -> Tuple[date, date]:
        return end - timedelta(days=self.days - 1), end


_BREAKDOWN_GRANULARITY = {
    Breakdown.DAILY: Granularity.DAY,
    Breakdown.WEEKLY: Granularity.WEEK,
    Breakdown.MONTHLY: Granularity.MONTH,
}

_TIME_RANGE_DAYS = {
    TimeRange.LAST_7_DAYS: 7,
    TimeRange.LAST_30_DAYS: 30,
    TimeRange.LAST_90_DAYS: 90,
    TimeRange.LAST_YEAR: 365,
}

_PRESET_GRANULARITY = {
    TimeRange.LAST_7_DAYS: Granularity.DAY,
    TimeRange.LAST_90_DAYS: Granularity.WEEK,
    TimeRange.LAST_YEAR: Granularity.MONTH,
}


def resolve_granularity(time_range: Optional[TimeRange], requested: Optional[Granularity]) -> Granularity:
    """
    Bucket size for a trend report.

    Presets fix the resolution, except that a 30-day range may ask for weeks.
    Without a preset the requested granularity applies (daily by default).
    """
    if time_range is None:
        return requested or Granularity.DAY
    if time_range is TimeRange.LAST_30_DAYS:
        return Granularity.WEEK if requested is Granularity.WEEK else Granularity.DAY
    return _PRESET_GRANULARITY[time_range]


def period_start(day: date, granularity: Granularity) -> date:
    if granularity is Granularity.WEEK:
        return day - timedelta(days=(day.weekday() + 1) % 7)
    if granularity is Granularity.MONTH:
        return day.replace(day=1)
    return day


def period_label(start: date, granularity: Granularity) -> str:
    if granularity is Granularity.MONTH:
        return start.strftime("%Y-%m")
    return start.isoformat()


def bucket_records(
    records: Sequence[DailyAnalyticsRecord],
    granularity: Granularity = Granularity.DAY,
) -> List[TrendBucket]:
    """
    Sum daily rollups per period, ascending by period.

    Args:
        records: Daily rollups in any order; gaps are allowed
        granularity: Bucket size

    Returns:
        One bucket per period holding at least one record
    """
    granularity = Granularity(granularity)
    buckets: Dict[date, TrendBucket] = {}

    for record in sorted(records, key=lambda r: r.date):
        day = date.fromisoformat(record.date)
        start = period_start(day, granularity)
        bucket = buckets.get(start)
        if bucket is None:
            bucket = TrendBucket(
                period=period_label(start, granularity),
                start_date=record.date,
                end_date=record.date,
            )
            buckets[start] = bucket

        bucket.end_date = record.date
        bucket.days += 1
        bucket.tickets += record.ticket_metrics.created
        bucket.check_ins += record.ticket_metrics.checked_in
        bucket.cancelled += record.ticket_metrics.cancelled
        bucket.users += record.user_metrics.registered
        bucket.revenue += record.revenue_metrics.daily_total
        for category, count in record.ticket_metrics.by_category.items():
            bucket.by_category[category] = bucket.by_category.get(category, 0) + count
        for category, amount in record.revenue_metrics.by_category.items():
            bucket.revenue_by_category[category] = bucket.revenue_by_category.get(category, 0.0) + amount

    return list(buckets.values())


def bucket_growth(buckets: Sequence[TrendBucket]) -> TrendGrowth:
    """Last bucket against the previous one; zeros with fewer than two buckets"""
    if len(buckets) < 2:
        return TrendGrowth()
    latest, previous = buckets[-1], buckets[-2]
    return TrendGrowth(
        tickets=percent_change(latest.tickets, previous.tickets),
        check_ins=percent_change(latest.check_ins, previous.check_ins),
        users=percent_change(latest.users, previous.users),
        revenue=percent_change(latest.revenue, previous.revenue),
    )


def build_ticket_trends(
    records: Sequence[DailyAnalyticsRecord],
    granularity: Granularity = Granularity.DAY,
) -> TicketTrends:
    granularity = Granularity(granularity)
    buckets = bucket_records(records, granularity)
    return TicketTrends(
        granularity=granularity.value,
        trends=buckets,
        growth_rates=bucket_growth(buckets),
    )


def build_revenue_report(
    records: Sequence[DailyAnalyticsRecord],
    breakdown: Breakdown = Breakdown.DAILY,
) -> RevenueReport:
    """
    Revenue per category over the whole range plus a bucketed time series.

    ``topPerformingType`` is the highest-earning category, the first one in
    price-table order on ties, and ``None`` when no category was recorded.
    """
    breakdown = Breakdown(breakdown)
    time_series = bucket_records(records, breakdown.granularity)

    by_type: Dict[str, CategoryRevenue] = {}
    for bucket in time_series:
        for category, count in bucket.by_category.items():
            by_type.setdefault(category, CategoryRevenue()).count += count
        for category, amount in bucket.revenue_by_category.items():
            by_type.setdefault(category, CategoryRevenue()).revenue += amount

    total_revenue = sum(bucket.revenue for bucket in time_series)
    total_tickets = sum(bucket.tickets for bucket in time_series)
    growth_rate = 0.0
    if len(time_series) >= 2:
        growth_rate = percent_change(time_series[-1].revenue, time_series[-2].revenue)

    top_type = max(by_type, key=lambda category: by_type[category].revenue) if by_type else None

    return RevenueReport(
        breakdown=breakdown.value,
        summary=RevenueSummary(
            total_revenue=total_revenue,
            total_tickets=total_tickets,
            average_revenue_per_ticket=round_half_away(total_revenue / total_tickets, 2) if total_tickets else 0.0,
            growth_rate=growth_rate,
            top_performing_type=top_type,
        ),
        revenue_by_type=by_type,
        time_series=time_series,
    )
