"""
Real-Time Snapshot

Live counters read straight from the raw ticket collection: the last 24
hours of sales, the last hour of check-ins and an activity feed. Nothing is
persisted.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Callable, List, Optional

import structlog

from ticket_analytics.config import AnalyticsSettings, get_settings
from ticket_analytics.exceptions import AnalyticsError, RealtimeSnapshotError
from ticket_analytics.store import DocumentStore, Filter, as_local_naive

from .models import ActivityItem, RawTicketRecord, RealtimeMetrics, RealtimeSnapshot

logger = structlog.get_logger(__name__)

SALES_WINDOW = timedelta(hours=24)
CHECK_IN_WINDOW = timedelta(hours=1)
SESSION_WINDOW = timedelta(minutes=15)


def activity_feed(
    created: List[RawTicketRecord],
    checked_in: List[RawTicketRecord],
    limit: int,
) -> List[ActivityItem]:
    """Newest-first merge of ticket sales and check-ins"""
    items = [
        ActivityItem(
            type="ticket_created",
            timestamp=as_local_naive(t.created_at),
            user_name=t.user_name,
            event_name=t.event_name,
            ticket_type=t.category,
        )
        for t in created if t.created_at is not None
    ]
    items += [
        ActivityItem(
            type="checkin",
            timestamp=as_local_naive(t.checked_in_at),
            user_name=t.user_name,
            event_name=t.event_name,
            ticket_type=t.category,
        )
        for t in checked_in if t.checked_in_at is not None
    ]
    items.sort(key=lambda item: item.timestamp, reverse=True)
    return items[:limit]


class RealtimeMonitor:
    """
    Summarises recent ticket activity.

    Example:
        monitor = RealtimeMonitor(store)
        snapshot = await monitor.snapshot()
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

    async def snapshot(self) -> RealtimeSnapshot:
        """
        Raises:
            StoreAccessError: If a ticket query fails
            RealtimeSnapshotError: If a ticket document cannot be parsed
        """
        now = self.clock()
        tickets = self.config.tickets_collection

        try:
            recent_docs, check_in_docs, sample_docs = await asyncio.gather(
                self.store.query_documents(tickets, [Filter("createdAt", ">=", now - SALES_WINDOW)]),
                self.store.query_documents(tickets, [Filter("checkedInAt", ">=", now - CHECK_IN_WINDOW)]),
                self.store.query_documents(
                    tickets, order_by="-createdAt", limit=self.config.realtime_sample_size
                ),
            )
            recent = [RawTicketRecord.model_validate(doc) for doc in recent_docs]
            check_ins = [RawTicketRecord.model_validate(doc) for doc in check_in_docs]
            sample = [RawTicketRecord.model_validate(doc) for doc in sample_docs]
        except AnalyticsError as e:
            logger.error("Error fetching real-time analytics", error=str(e))
            raise
        except Exception as e:
            logger.error("Error fetching real-time analytics", error=str(e))
            raise RealtimeSnapshotError(f"Real-time snapshot failed: {e}") from e

        session_start = now - SESSION_WINDOW
        metrics = RealtimeMetrics(
            tickets_last_24h=len(recent),
            check_ins_last_hour=len(check_ins),
            active_sessions=sum(
                1 for t in recent
                if t.created_at is not None and as_local_naive(t.created_at) > session_start
            ),
            total_tickets=len(sample),
            total_checked_in=sum(1 for t in sample if t.checked_in),
        )

        logger.debug("Real-time snapshot built", tickets_last_24h=metrics.tickets_last_24h)
        return RealtimeSnapshot(
            metrics=metrics,
            recent_activity=activity_feed(recent, check_ins, self.config.realtime_activity_limit),
            generated_at=now,
        )
