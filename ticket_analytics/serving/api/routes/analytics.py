"""
Analytics API Endpoints

REST surface over the rollup engine for the operations dashboard.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from ticket_analytics.analytics import (
    AnalyticsService,
    Breakdown,
    CleanupResult,
    DailyAnalyticsRecord,
    Forecast,
    Granularity,
    GrowthRates,
    MetricPath,
    RealtimeSnapshot,
    RevenueReport,
    Summary,
    TicketTrends,
    TimeRange,
    resolve_granularity,
)
from ticket_analytics.config import get_settings
from ticket_analytics.serving.api.dependencies import get_analytics_service
from ticket_analytics.serving.cache import dashboard_cache

router = APIRouter()
logger = structlog.get_logger(__name__)


class RangeResponse(BaseModel):
    """Assembled range with the requested bounds"""
    start_date: date
    end_date: date
    days: int
    data: List[DailyAnalyticsRecord]


def resolve_range(
    start_date: Optional[date],
    end_date: Optional[date],
    time_range: Optional[TimeRange] = None,
) -> Tuple[date, date]:
    """
    Apply defaults and bounds checks.

    A missing ``end_date`` is today. A missing ``start_date`` spans the
    ``time_range`` preset, or ``default_range_days`` without one.

    Raises:
        HTTPException: 400 when the range is inverted or too long
    """
    config = get_settings().analytics
    end_date = end_date or date.today()
    if start_date is None:
        if time_range is not None:
            start_date, _ = time_range.window(end_date)
        else:
            start_date = end_date - timedelta(days=config.default_range_days - 1)

    if start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date must not be after end_date")
    if (end_date - start_date).days + 1 > config.max_range_days:
        raise HTTPException(
            status_code=400,
            detail=f"Range exceeds {config.max_range_days} days",
        )
    return start_date, end_date


async def invalidate_dashboard() -> None:
    """Drop cached dashboards after the rollup collection changed"""
    await dashboard_cache.invalidate_all()


@router.post("/daily/{day}", response_model=DailyAnalyticsRecord)
async def process_daily(
    day: date,
    service: AnalyticsService = Depends(get_analytics_service),
) -> DailyAnalyticsRecord:
    """Recompute and store the rollup for one day."""
    logger.info("process_daily called", date=day.isoformat())
    record = await service.process_daily_analytics(day)
    await invalidate_dashboard()
    return record


@router.get("/range", response_model=RangeResponse)
async def get_range(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_range: Optional[TimeRange] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> RangeResponse:
    """Daily rollups for a date range, backfilling missing days."""
    start_date, end_date = resolve_range(start_date, end_date, time_range)
    records = await service.get_analytics_range(start_date, end_date)
    return RangeResponse(start_date=start_date, end_date=end_date, days=len(records), data=records)


@router.get("/growth", response_model=GrowthRates)
async def get_growth(
    metric: MetricPath = Query(MetricPath.TICKETS_CREATED),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_range: Optional[TimeRange] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> GrowthRates:
    """Daily, weekly and monthly growth of one metric."""
    start_date, end_date = resolve_range(start_date, end_date, time_range)
    records = await service.get_analytics_range(start_date, end_date)
    return service.calculate_growth_rates(records, metric)


@router.get("/summary", response_model=Optional[Summary])
async def get_summary(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_range: Optional[TimeRange] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> Optional[Summary]:
    """Totals, averages and best/worst days; null when no day could be loaded."""
    start_date, end_date = resolve_range(start_date, end_date, time_range)
    records = await service.get_analytics_range(start_date, end_date)
    return service.generate_summary_stats(records)


@router.get("/forecast", response_model=Optional[Forecast])
async def get_forecast(
    horizon_days: int = Query(7, ge=1, le=90),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_range: Optional[TimeRange] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> Optional[Forecast]:
    """Linear ticket and revenue forecast; null with less than a week of history."""
    start_date, end_date = resolve_range(start_date, end_date, time_range)
    records = await service.get_analytics_range(start_date, end_date)
    return service.predict_trends(records, horizon_days)


@router.get("/dashboard")
async def get_dashboard(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_range: Optional[TimeRange] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> Dict[str, Any]:
    """
    Summary, ticket/revenue growth and forecast in one payload.

    Cached per range when Redis is available.
    """
    start_date, end_date = resolve_range(start_date, end_date, time_range)

    async def build() -> Dict[str, Any]:
        records = await service.get_analytics_range(start_date, end_date)
        summary = service.generate_summary_stats(records)
        forecast = service.predict_trends(records)
        return {
            "startDate": start_date.isoformat(),
            "endDate": end_date.isoformat(),
            "days": len(records),
            "summary": summary.model_dump(mode="json", by_alias=True) if summary else None,
            "growth": {
                "tickets": service.calculate_growth_rates(records, MetricPath.TICKETS_CREATED).model_dump(by_alias=True),
                "revenue": service.calculate_growth_rates(records, MetricPath.REVENUE_DAILY).model_dump(by_alias=True),
            },
            "forecast": forecast.model_dump(mode="json", by_alias=True) if forecast else None,
        }

    return await dashboard_cache.get_or_set(f"{start_date}:{end_date}", build)


@router.get("/trends", response_model=TicketTrends)
async def get_trends(
    granularity: Optional[Granularity] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_range: Optional[TimeRange] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> TicketTrends:
    """
    Tickets, check-ins, sign-ups and revenue per day, week or month.

    Presets pick the bucket size: 7d by day, 30d by day (or week on
    request), 90d by week, 1y by month.
    """
    start_date, end_date = resolve_range(start_date, end_date, time_range)
    records = await service.get_analytics_range(start_date, end_date)
    return service.ticket_trends(records, resolve_granularity(time_range, granularity))


@router.get("/revenue", response_model=RevenueReport)
async def get_revenue(
    breakdown: Breakdown = Query(Breakdown.DAILY),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    time_range: Optional[TimeRange] = None,
    service: AnalyticsService = Depends(get_analytics_service),
) -> RevenueReport:
    """Revenue by category and as a daily, weekly or monthly series."""
    start_date, end_date = resolve_range(start_date, end_date, time_range)
    records = await service.get_analytics_range(start_date, end_date)
    return service.revenue_report(records, breakdown)


@router.get("/realtime", response_model=RealtimeSnapshot)
async def get_realtime(
    service: AnalyticsService = Depends(get_analytics_service),
) -> RealtimeSnapshot:
    """Sales in the last 24 hours, check-ins in the last hour and recent activity."""
    return await service.realtime_snapshot()


@router.delete("/retention", response_model=CleanupResult)
async def cleanup(
    older_than_days: Optional[int] = Query(None, ge=0),
    service: AnalyticsService = Depends(get_analytics_service),
) -> CleanupResult:
    """Delete rollups processed longer ago than ``older_than_days``."""
    result = await service.cleanup_old_analytics(older_than_days)
    await invalidate_dashboard()
    logger.info("Retention cleanup requested", deleted_count=result.deleted_count)
    return result
