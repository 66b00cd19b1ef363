"""
Retention Cleaner

Deletes rollups whose ``processedAt`` is strictly older than the retention
horizon. Deletion is best-effort per record.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional

import structlog

from ticket_analytics.config import AnalyticsSettings, get_settings
from ticket_analytics.store import DocumentStore, Filter

from .models import CleanupResult

logger = structlog.get_logger(__name__)


class RetentionCleaner:
    """
    Retires stale rollups.

    It does not coordinate with in-flight rollups: a day deleted here may be
    recomputed immediately by a concurrent range read.
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

    async def cleanup(self, older_than_days: Optional[int] = None) -> CleanupResult:
        """
        Delete rollups processed before ``now - older_than_days``.

        Args:
            older_than_days: Age threshold, defaults to the configured retention

        Returns:
            CleanupResult with the number of deleted records

        Raises:
            StoreAccessError: If the stale-record query fails
        """
        if older_than_days is None:
            older_than_days = self.config.retention_days
        cutoff = self.clock() - timedelta(days=older_than_days)

        try:
            stale = await self.store.query_documents(
                self.config.collection,
                [Filter("processedAt", "<", cutoff)],
            )
        except Exception as e:
            logger.error("Error cleaning up old analytics", error=str(e))
            raise

        deleted_count = 0
        for document in stale:
            try:
                await self.store.delete_document(self.config.collection, document["id"])
                deleted_count += 1
            except Exception as e:
                logger.warning("Failed to delete analytics", key=document.get("id"), error=str(e))

        logger.info(
            "Analytics cleanup completed",
            deleted_count=deleted_count,
            older_than_days=older_than_days,
            cutoff=cutoff.isoformat(),
        )
        return CleanupResult(deleted_count=deleted_count, older_than_days=older_than_days)
