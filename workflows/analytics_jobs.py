"""
Prefect Workflow Orchestration - Analytics Jobs

Scheduled jobs around the rollup engine:
- Nightly rollup of the previous day
- Backfill of an arbitrary date range
- Retention cleanup of stale rollups
"""

from datetime import date, datetime, timedelta
from typing import Optional

from prefect import flow, get_run_logger, task

from ticket_analytics.analytics import AnalyticsService
from ticket_analytics.config import get_settings
from ticket_analytics.database import close_database, init_database
from ticket_analytics.store import SQLDocumentStore

settings = get_settings()


# =============================================================================
# TASKS
# =============================================================================

@task(
    name="process_day",
    description="Compute and store the rollup for one day",
    retries=3,
    retry_delay_seconds=60,
)
async def process_day(service: AnalyticsService, day: date) -> dict:
    """Recompute one day's rollup"""
    logger = get_run_logger()

    record = await service.process_daily_analytics(day)
    logger.info(
        f"Processed {record.date}: {record.ticket_metrics.created} tickets, "
        f"{record.user_metrics.registered} users in {record.processing_duration_ms:.0f}ms"
    )
    return {"date": record.date, "tickets": record.ticket_metrics.created}


@task(
    name="assemble_range",
    description="Read a range of rollups, backfilling missing days",
    retries=1,
    retry_delay_seconds=120,
)
async def assemble_range(service: AnalyticsService, start: date, end: date) -> dict:
    """Backfill every missing day in the range"""
    logger = get_run_logger()

    records = await service.get_analytics_range(start, end)
    expected = (end - start).days + 1
    if len(records) < expected:
        logger.warning(f"Backfill incomplete: {len(records)}/{expected} days available")

    return {"expected": expected, "available": len(records)}


@task(
    name="cleanup_rollups",
    description="Delete rollups older than the retention horizon",
    retries=2,
    retry_delay_seconds=30,
)
async def cleanup_rollups(service: AnalyticsService, older_than_days: int) -> dict:
    """Apply the retention policy"""
    logger = get_run_logger()

    result = await service.cleanup_old_analytics(older_than_days)
    logger.info(f"Deleted {result.deleted_count} rollups older than {older_than_days} days")
    return result.model_dump(by_alias=True)


# =============================================================================
# FLOWS
# =============================================================================

@flow(
    name="nightly_rollup",
    description="Roll up yesterday's tickets and users",
)
async def nightly_rollup(process_date: Optional[date] = None) -> dict:
    process_date = process_date or (datetime.now() - timedelta(days=1)).date()

    await init_database()
    try:
        service = AnalyticsService(SQLDocumentStore())
        return await process_day(service, process_date)
    finally:
        await close_database()


@flow(
    name="backfill_range",
    description="Compute rollups for every missing day in a range",
)
async def backfill_range(start: date, end: date) -> dict:
    await init_database()
    try:
        service = AnalyticsService(SQLDocumentStore())
        return await assemble_range(service, start, end)
    finally:
        await close_database()


@flow(
    name="retention_cleanup",
    description="Scheduled retention pass over the rollup collection",
)
async def retention_cleanup(older_than_days: Optional[int] = None) -> dict:
    if older_than_days is None:
        older_than_days = settings.analytics.retention_days

    await init_database()
    try:
        service = AnalyticsService(SQLDocumentStore())
        return await cleanup_rollups(service, older_than_days)
    finally:
        await close_database()


if __name__ == "__main__":
    import asyncio

    asyncio.run(nightly_rollup())
