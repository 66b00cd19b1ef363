"""
Growth Rate Calculator

Period-over-period percentage change of one metric across an ordered range,
using fixed lookback positions: the previous entry (daily), ``len-7``
(weekly) and ``len-30`` (monthly).
"""

from enum import Enum
from typing import Callable, Dict, Optional, Sequence

from .calculators import round_half_away
from .models import DailyAnalyticsRecord, GrowthRates

WEEKLY_LOOKBACK = 7
MONTHLY_LOOKBACK = 30


class MetricPath(str, Enum):
    """Metrics a growth rate can be computed for, named by their dashboard path"""
    TICKETS_CREATED = "tickets.created"
    TICKETS_CHECKED_IN = "tickets.checkedIn"
    TICKETS_CANCELLED = "tickets.cancelled"
    USERS_REGISTERED = "users.registered"
    USERS_ACTIVE = "users.active"
    REVENUE_DAILY = "revenue.daily.total"
    REVENUE_CUMULATIVE = "revenue.total.total"
    REVENUE_AVERAGE = "revenue.daily.averagePerTicket"
    EVENTS_TOTAL = "events.totalEvents"
    TOP_EVENT_TICKETS = "events.topEvent.tickets"
    ENGAGEMENT_ACTIVE_USERS = "engagement.activeUsers"
    ENGAGEMENT_RATE = "engagement.engagementRate"


def _top_event_tickets(record: DailyAnalyticsRecord) -> Optional[float]:
    top = record.event_metrics.top_event
    return top.ticket_count if top is not None else None


_EXTRACTORS: Dict[MetricPath, Callable[[DailyAnalyticsRecord], Optional[float]]] = {
    MetricPath.TICKETS_CREATED: lambda r: r.ticket_metrics.created,
    MetricPath.TICKETS_CHECKED_IN: lambda r: r.ticket_metrics.checked_in,
    MetricPath.TICKETS_CANCELLED: lambda r: r.ticket_metrics.cancelled,
    MetricPath.USERS_REGISTERED: lambda r: r.user_metrics.registered,
    MetricPath.USERS_ACTIVE: lambda r: r.user_metrics.active,
    MetricPath.REVENUE_DAILY: lambda r: r.revenue_metrics.daily_total,
    MetricPath.REVENUE_CUMULATIVE: lambda r: r.revenue_metrics.cumulative_total_to_date,
    MetricPath.REVENUE_AVERAGE: lambda r: r.revenue_metrics.average_per_ticket,
    MetricPath.EVENTS_TOTAL: lambda r: r.event_metrics.total_distinct_events,
    MetricPath.TOP_EVENT_TICKETS: _top_event_tickets,
    MetricPath.ENGAGEMENT_ACTIVE_USERS: lambda r: r.engagement_metrics.active_user_count,
    MetricPath.ENGAGEMENT_RATE: lambda r: r.engagement_metrics.engagement_rate,
}


def metric_value(record: DailyAnalyticsRecord, metric: MetricPath) -> float:
    """Value of ``metric`` in ``record``; an absent value reads as 0."""
    value = _EXTRACTORS[MetricPath(metric)](record)
    return float(value or 0)


def percent_change(latest: float, baseline: float) -> float:
    if baseline <= 0:
        return 0.0
    return round_half_away((latest - baseline) / baseline * 100, 1)


def calculate_growth_rates(
    records: Sequence[DailyAnalyticsRecord],
    metric: MetricPath = MetricPath.TICKETS_CREATED,
) -> GrowthRates:
    """
    Daily, weekly and monthly growth of ``metric``.

    Args:
        records: Range ordered by date, ascending
        metric: Metric to compare (enum member or its dotted path)

    Returns:
        GrowthRates, all zero for fewer than two records
    """
    metric = MetricPath(metric)
    if len(records) < 2:
        return GrowthRates()

    latest = metric_value(records[-1], metric)
    growth = GrowthRates(daily=percent_change(latest, metric_value(records[-2], metric)))

    if len(records) >= WEEKLY_LOOKBACK:
        growth.weekly = percent_change(latest, metric_value(records[-WEEKLY_LOOKBACK], metric))

    if len(records) >= MONTHLY_LOOKBACK:
        growth.monthly = percent_change(latest, metric_value(records[-MONTHLY_LOOKBACK], metric))

    return growth
