"""
Analytics Rollup & Forecasting Engine
"""
from .calculators import (
    calculate_engagement_metrics,
    calculate_event_metrics,
    calculate_revenue_metrics,
    calculate_ticket_metrics,
    calculate_user_metrics,
    round_half_away,
)
from .forecast import linear_regression, predict_trends
from .growth import MetricPath, calculate_growth_rates
from .models import (
    CleanupResult,
    DailyAnalyticsRecord,
    Forecast,
    GrowthRates,
    HealthStatus,
    RawTicketRecord,
    RawUserRecord,
    RealtimeSnapshot,
    RevenueReport,
    Summary,
    TicketTrends,
)
from .processor import DailyRollupProcessor
from .ranges import RangeAssembler
from .realtime import RealtimeMonitor
from .retention import RetentionCleaner
from .service import AnalyticsService
from .summary import generate_summary_stats
from .trends import (
    Breakdown,
    Granularity,
    TimeRange,
    bucket_records,
    build_revenue_report,
    build_ticket_trends,
    resolve_granularity,
)

__all__ = [
    "AnalyticsService",
    "DailyRollupProcessor",
    "RangeAssembler",
    "RetentionCleaner",
    "RealtimeMonitor",
    "MetricPath",
    "Granularity",
    "Breakdown",
    "TimeRange",
    "resolve_granularity",
    "bucket_records",
    "build_ticket_trends",
    "build_revenue_report",
    "calculate_growth_rates",
    "generate_summary_stats",
    "predict_trends",
    "linear_regression",
    "calculate_ticket_metrics",
    "calculate_user_metrics",
    "calculate_revenue_metrics",
    "calculate_event_metrics",
    "calculate_engagement_metrics",
    "round_half_away",
    "DailyAnalyticsRecord",
    "RawTicketRecord",
    "RawUserRecord",
    "GrowthRates",
    "Summary",
    "Forecast",
    "CleanupResult",
    "HealthStatus",
    "TicketTrends",
    "RevenueReport",
    "RealtimeSnapshot",
]
