"""
Range Assembler

Reads stored rollups for a date interval and lazily backfills the days that
have none. The read is best-effort: a day that cannot be fetched or computed
is logged and left out, so the result may be shorter than the interval.
"""

from typing import List, Optional

import structlog

from ticket_analytics.config import AnalyticsSettings, get_settings
from ticket_analytics.store import DocumentStore

from .dates import DateLike, as_date, iter_days
from .models import DailyAnalyticsRecord, rollup_key
from .processor import DailyRollupProcessor

logger = structlog.get_logger(__name__)


class RangeAssembler:
    """
    Ordered, gap-filling reader over the rollup collection.

    Backfilled days are persisted by the processor, so repeating the same
    range read does not recompute them. Two concurrent readers may both
    backfill the same day; the upsert is a full replacement, so the race only
    costs duplicate work.
    """

    def __init__(
        self,
        store: DocumentStore,
        processor: DailyRollupProcessor,
        config: Optional[AnalyticsSettings] = None,
    ):
        self.store = store
        self.processor = processor
        self.config = config or get_settings().analytics

    async def load_day(self, day) -> DailyAnalyticsRecord:
        """Stored rollup for ``day``, computing it first when absent."""
        document = await self.store.get_document(self.config.collection, rollup_key(day.isoformat()))
        if document is not None:
            return DailyAnalyticsRecord.model_validate(document)

        logger.debug("Backfilling missing rollup", date=day.isoformat())
        return await self.processor.process(day)

    async def assemble(self, start_date: DateLike, end_date: DateLike) -> List[DailyAnalyticsRecord]:
        """
        Rollups for every day in ``[start_date, end_date]``, ascending.

        Args:
            start_date: First day (inclusive)
            end_date: Last day (inclusive)

        Returns:
            Records sorted by date; days whose load failed are omitted
        """
        start, end = as_date(start_date), as_date(end_date)
        records: List[DailyAnalyticsRecord] = []
        failed = 0

        for day in iter_days(start, end):
            try:
                records.append(await self.load_day(day))
            except Exception as e:
                failed += 1
                logger.warning("Failed to get analytics for date", date=day.isoformat(), error=str(e))

        records.sort(key=lambda record: record.date)

        logger.debug(
            "Analytics range assembled",
            start_date=start.isoformat(),
            end_date=end.isoformat(),
            days=len(records),
            failed=failed,
        )
        return records
