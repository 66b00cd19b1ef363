"""
Daily Rollup Processor

Computes the ``DailyAnalyticsRecord`` for one calendar day from the raw
ticket and user collections and upserts it under ``daily_<YYYY-MM-DD>``.
Recomputing a day fully replaces the stored record.
"""

import asyncio
import time
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

import structlog

from ticket_analytics.config import AnalyticsSettings, get_settings
from ticket_analytics.exceptions import AnalyticsError, RollupComputationError
from ticket_analytics.store import DocumentStore, Filter

from .calculators import (
    calculate_engagement_metrics,
    calculate_event_metrics,
    calculate_revenue_metrics,
    calculate_ticket_metrics,
    calculate_user_metrics,
)
from .dates import DateLike, as_date, day_window
from .models import DailyAnalyticsRecord, RawTicketRecord, RawUserRecord

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class DailyRollupProcessor:
    """
    Builds and persists one day's rollup.

    The day's tickets, the day's users and the all-time ticket set are read
    concurrently. Any store failure propagates; nothing is written unless
    every read succeeded.

    Example:
        processor = DailyRollupProcessor(store)
        record = await processor.process(date(2025, 3, 14))
    """

    def __init__(
        self,
        store: DocumentStore,
        config: Optional[AnalyticsSettings] = None,
        clock: Clock = datetime.now,
    ):
        self.store = store
        self.config = config or get_settings().analytics
        self.clock = clock

    async def fetch_day(self, day: date) -> Tuple[List[RawTicketRecord], List[RawUserRecord], List[RawTicketRecord]]:
        """Return (day tickets, day users, all tickets) for ``day``"""
        start, end = day_window(day)
        window = [
            Filter("createdAt", ">=", start),
            Filter("createdAt", "<", end),
        ]

        day_ticket_docs, day_user_docs, all_ticket_docs = await asyncio.gather(
            self.store.query_documents(self.config.tickets_collection, window),
            self.store.query_documents(self.config.users_collection, window),
            self.store.query_documents(self.config.tickets_collection),
        )

        return (
            [RawTicketRecord.model_validate(doc) for doc in day_ticket_docs],
            [RawUserRecord.model_validate(doc) for doc in day_user_docs],
            [RawTicketRecord.model_validate(doc) for doc in all_ticket_docs],
        )

    def build_record(
        self,
        day: date,
        day_tickets: List[RawTicketRecord],
        day_users: List[RawUserRecord],
        all_tickets: List[RawTicketRecord],
    ) -> DailyAnalyticsRecord:
        """Assemble the rollup from already-fetched records (no I/O)."""
        prices = self.config.ticket_prices
        return DailyAnalyticsRecord(
            date=day.isoformat(),
            ticket_metrics=calculate_ticket_metrics(day_tickets, prices),
            user_metrics=calculate_user_metrics(day_users),
            revenue_metrics=calculate_revenue_metrics(day_tickets, all_tickets, prices),
            event_metrics=calculate_event_metrics(day_tickets, prices),
            engagement_metrics=calculate_engagement_metrics(
                day_tickets, day_users, prices, self.config.top_users_limit
            ),
            processed_at=self.clock(),
        )

    async def process(self, day: DateLike) -> DailyAnalyticsRecord:
        """
        Compute and upsert the rollup for ``day``.

        Args:
            day: Calendar day (``date``, ``datetime`` or ``YYYY-MM-DD``)

        Returns:
            The record as written to the store

        Raises:
            StoreAccessError: If any read or the upsert fails
            RollupComputationError: If a raw record cannot be parsed or reduced
        """
        day = as_date(day)
        started = time.perf_counter()

        try:
            day_tickets, day_users, all_tickets = await self.fetch_day(day)

            record = self.build_record(day, day_tickets, day_users, all_tickets)
            record.processing_duration_ms = round((time.perf_counter() - started) * 1000, 3)

            await self.store.update_document(self.config.collection, record.key, record.to_document())
        except AnalyticsError as e:
            logger.error("Error processing daily analytics", date=day.isoformat(), error=str(e))
            raise
        except Exception as e:
            logger.error("Error processing daily analytics", date=day.isoformat(), error=str(e))
            raise RollupComputationError(day.isoformat(), str(e)) from e

        logger.info(
            "Daily analytics processed",
            date=record.date,
            tickets_processed=len(day_tickets),
            users_processed=len(day_users),
            duration_ms=record.processing_duration_ms,
        )
        return record
