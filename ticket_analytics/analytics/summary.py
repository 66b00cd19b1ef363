"""
Summary Reducer

Totals, per-day averages and best/worst days over an assembled range.
"""

from typing import Optional, Sequence

from .calculators import percentage, round_half_away
from .models import (
    DailyAnalyticsRecord,
    DayHighlight,
    Summary,
    SummaryAverages,
    SummaryTotals,
)


def generate_summary_stats(records: Sequence[DailyAnalyticsRecord]) -> Optional[Summary]:
    """
    Reduce a range to headline figures.

    Best and worst days compare tickets created; on ties the earliest day in
    range order wins.

    Returns:
        Summary, or None for an empty range
    """
    if not records:
        return None

    totals = SummaryTotals()
    for record in records:
        totals.tickets += record.ticket_metrics.created
        totals.checked_in += record.ticket_metrics.checked_in
        totals.users += record.user_metrics.registered
        totals.revenue += record.revenue_metrics.daily_total

    days = len(records)
    averages = SummaryAverages(
        tickets_per_day=round_half_away(totals.tickets / days, 1),
        users_per_day=round_half_away(totals.users / days, 1),
        revenue_per_day=round_half_away(totals.revenue / days, 2),
        check_in_rate=percentage(totals.checked_in, totals.tickets),
    )

    best = worst = records[0]
    for record in records[1:]:
        if record.ticket_metrics.created > best.ticket_metrics.created:
            best = record
        if record.ticket_metrics.created < worst.ticket_metrics.created:
            worst = record

    return Summary(
        totals=totals,
        averages=averages,
        best_day=DayHighlight(date=best.date, tickets=best.ticket_metrics.created),
        worst_day=DayHighlight(date=worst.date, tickets=worst.ticket_metrics.created),
        total_days=days,
    )
