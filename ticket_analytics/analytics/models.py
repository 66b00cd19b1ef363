"""
Analytics Data Models

Pydantic models for the raw records read from the document store, the
persisted ``DailyAnalyticsRecord`` and the derived reports (growth, summary,
forecast, retention, health). Every model serialises with camelCase keys,
which is also the document layout in the store.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ROLLUP_KEY_PREFIX = "daily_"


def rollup_key(day: str) -> str:
    """Store key for the rollup of ``day`` (``YYYY-MM-DD``)"""
    return f"{ROLLUP_KEY_PREFIX}{day}"


class CamelModel(BaseModel):
    """Base model: camelCase aliases, construction by either name"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> Dict:
        return self.model_dump(by_alias=True)


# =============================================================================
# RAW RECORDS (read-only, owned by the ticketing system)
# =============================================================================

class RawTicketRecord(CamelModel):
    """Ticket document as stored in the ``tickets`` collection"""
    id: str
    created_at: Optional[datetime] = None
    category: Optional[str] = Field(default=None, alias="ticketType")
    checked_in: bool = False
    status: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    event_name: Optional[str] = None
    checked_in_at: Optional[datetime] = None

    @field_validator("checked_in", mode="before")
    @classmethod
    def null_as_false(cls, v):
        return False if v is None else v

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"


class RawUserRecord(CamelModel):
    """User document as stored in the ``users`` collection"""
    id: str
    created_at: Optional[datetime] = None
    deleted: bool = False

    @field_validator("deleted", mode="before")
    @classmethod
    def null_as_false(cls, v):
        return False if v is None else v


# =============================================================================
# DAILY ROLLUP
# =============================================================================

class TicketMetrics(CamelModel):
    created: int = 0
    checked_in: int = 0
    cancelled: int = 0
    by_category: Dict[str, int] = Field(default_factory=dict)


class UserMetrics(CamelModel):
    registered: int = 0
    active: int = 0


class RevenueMetrics(CamelModel):
    daily_total: float = 0.0
    cumulative_total_to_date: float = 0.0
    by_category: Dict[str, float] = Field(default_factory=dict)
    average_per_ticket: float = 0.0


class EventStats(CamelModel):
    """Per-event breakdown for one day"""
    name: Optional[str] = None
    ticket_count: int = 0
    checked_in_count: int = 0
    check_in_rate: float = 0.0
    revenue: float = 0.0
    by_category: Dict[str, int] = Field(default_factory=dict)


class EventMetrics(CamelModel):
    total_distinct_events: int = 0
    per_event: List[EventStats] = Field(default_factory=list)
    top_event: Optional[EventStats] = None


class UserActivity(CamelModel):
    """Ticket activity of one owner on one day"""
    user_id: str
    ticket_count: int = 0
    checked_in_count: int = 0
    revenue: float = 0.0


class EngagementMetrics(CamelModel):
    active_user_count: int = 0
    total_user_count: int = 0
    engagement_rate: float = 0.0
    average_tickets_per_active_user: float = 0.0
    top_users: List[UserActivity] = Field(default_factory=list)


class DailyAnalyticsRecord(CamelModel):
    """
    Precomputed summary of one calendar day.

    Exactly one record exists per ``date``; recomputation replaces it whole.
    """
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    ticket_metrics: TicketMetrics = Field(default_factory=TicketMetrics)
    user_metrics: UserMetrics = Field(default_factory=UserMetrics)
    revenue_metrics: RevenueMetrics = Field(default_factory=RevenueMetrics)
    event_metrics: EventMetrics = Field(default_factory=EventMetrics)
    engagement_metrics: EngagementMetrics = Field(default_factory=EngagementMetrics)
    processed_at: datetime
    processing_duration_ms: float = 0.0

    @property
    def key(self) -> str:
        return rollup_key(self.date)


# =============================================================================
# DERIVED REPORTS
# =============================================================================

class GrowthRates(CamelModel):
    """Period-over-period percentage changes"""
    daily: float = 0.0
    weekly: float = 0.0
    monthly: float = 0.0


class SummaryTotals(CamelModel):
    tickets: int = 0
    checked_in: int = 0
    users: int = 0
    revenue: float = 0.0


class SummaryAverages(CamelModel):
    tickets_per_day: float = 0.0
    users_per_day: float = 0.0
    revenue_per_day: float = 0.0
    check_in_rate: float = 0.0


class DayHighlight(CamelModel):
    date: str
    tickets: int


class Summary(CamelModel):
    totals: SummaryTotals
    averages: SummaryAverages
    best_day: DayHighlight
    worst_day: DayHighlight
    total_days: int


class Prediction(CamelModel):
    day: int
    predicted_tickets: int
    predicted_revenue: int


class TrendDirections(CamelModel):
    tickets: str
    revenue: str


class Forecast(CamelModel):
    predictions: List[Prediction] = Field(default_factory=list)
    confidence: float
    trends: TrendDirections


class CleanupResult(CamelModel):
    deleted_count: int
    older_than_days: int


class HealthStatus(CamelModel):
    status: str
    response_time_ms: Optional[float] = None
    last_processed: Optional[str] = None
    error: Optional[str] = None


# =============================================================================
# PERIOD REPORTS
# =============================================================================

class TrendBucket(CamelModel):
    """Daily rollups of one day, week or month folded together"""
    period: str
    start_date: str
    end_date: str
    days: int = 0
    tickets: int = 0
    check_ins: int = 0
    cancelled: int = 0
    users: int = 0
    revenue: float = 0.0
    by_category: Dict[str, int] = Field(default_factory=dict)
    revenue_by_category: Dict[str, float] = Field(default_factory=dict)


class TrendGrowth(CamelModel):
    """Change of the last bucket against the one before it, in percent"""
    tickets: float = 0.0
    check_ins: float = 0.0
    users: float = 0.0
    revenue: float = 0.0


class TicketTrends(CamelModel):
    granularity: str
    trends: List[TrendBucket] = Field(default_factory=list)
    growth_rates: TrendGrowth = Field(default_factory=TrendGrowth)


class CategoryRevenue(CamelModel):
    count: int = 0
    revenue: float = 0.0


class RevenueSummary(CamelModel):
    total_revenue: float = 0.0
    total_tickets: int = 0
    average_revenue_per_ticket: float = 0.0
    growth_rate: float = 0.0
    top_performing_type: Optional[str] = None


class RevenueReport(CamelModel):
    breakdown: str
    summary: RevenueSummary
    revenue_by_type: Dict[str, CategoryRevenue] = Field(default_factory=dict)
    time_series: List[TrendBucket] = Field(default_factory=list)


# =============================================================================
# REAL-TIME SNAPSHOT (read straight from raw tickets, never persisted)
# =============================================================================

class RealtimeMetrics(CamelModel):
    tickets_last_24h: int = Field(default=0, alias="ticketsLast24h")
    check_ins_last_hour: int = 0
    active_sessions: int = 0
    total_tickets: int = 0
    total_checked_in: int = 0


class ActivityItem(CamelModel):
    type: str
    timestamp: datetime
    user_name: Optional[str] = None
    event_name: Optional[str] = None
    ticket_type: Optional[str] = None


class RealtimeSnapshot(CamelModel):
    metrics: RealtimeMetrics
    recent_activity: List[ActivityItem] = Field(default_factory=list)
    generated_at: datetime
