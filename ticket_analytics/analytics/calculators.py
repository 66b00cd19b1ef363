"""
Metric Calculators

Pure reductions of one day's raw records into the metric blocks of a
``DailyAnalyticsRecord``. No I/O; every function depends only on its
arguments, which keeps recomputation of a day deterministic.

Revenue counts every fetched ticket, cancelled ones included.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping, Optional, Sequence

from ticket_analytics.config.settings import DEFAULT_TICKET_PRICES, DEFAULT_TOP_USERS_LIMIT

from .models import (
    EngagementMetrics,
    EventMetrics,
    EventStats,
    RawTicketRecord,
    RawUserRecord,
    RevenueMetrics,
    TicketMetrics,
    UserActivity,
    UserMetrics,
)


def round_half_away(value: float, places: int = 1) -> float:
    """Round to ``places`` decimals, halves away from zero (2.25 -> 2.3, -2.25 -> -2.3)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def percentage(part: float, whole: float, places: int = 1) -> float:
    """``part / whole * 100`` rounded, 0 when ``whole`` is 0."""
    if not whole:
        return 0.0
    return round_half_away(part / whole * 100, places)


def ticket_price(ticket: RawTicketRecord, prices: Mapping[str, float]) -> float:
    # Unknown or missing categories are free
    return float(prices.get(ticket.category or "", 0))


def _empty_breakdown(prices: Mapping[str, float]) -> Dict[str, int]:
    return {category: 0 for category in prices}


def count_by_category(tickets: Sequence[RawTicketRecord], prices: Mapping[str, float]) -> Dict[str, int]:
    """Ticket count per configured category; every category is present"""
    counts = _empty_breakdown(prices)
    for ticket in tickets:
        if ticket.category in counts:
            counts[ticket.category] += 1
    return counts


def calculate_ticket_metrics(
    tickets: Sequence[RawTicketRecord],
    prices: Mapping[str, float] = DEFAULT_TICKET_PRICES,
) -> TicketMetrics:
    return TicketMetrics(
        created=len(tickets),
        checked_in=sum(1 for t in tickets if t.checked_in),
        cancelled=sum(1 for t in tickets if t.is_cancelled),
        by_category=count_by_category(tickets, prices),
    )


def calculate_user_metrics(users: Sequence[RawUserRecord]) -> UserMetrics:
    return UserMetrics(
        registered=len(users),
        active=sum(1 for u in users if not u.deleted),
    )


def total_revenue(tickets: Sequence[RawTicketRecord], prices: Mapping[str, float] = DEFAULT_TICKET_PRICES) -> float:
    return sum(ticket_price(t, prices) for t in tickets)


def calculate_revenue_metrics(
    day_tickets: Sequence[RawTicketRecord],
    all_tickets: Sequence[RawTicketRecord],
    prices: Mapping[str, float] = DEFAULT_TICKET_PRICES,
) -> RevenueMetrics:
    """
    Revenue for the day plus the all-time cumulative total.

    Args:
        day_tickets: Tickets created within the day window
        all_tickets: Every ticket in the store
        prices: Category -> unit price table

    Returns:
        RevenueMetrics with ``averagePerTicket`` 0 for an empty day
    """
    daily_total = total_revenue(day_tickets, prices)
    counts = count_by_category(day_tickets, prices)

    return RevenueMetrics(
        daily_total=daily_total,
        cumulative_total_to_date=total_revenue(all_tickets, prices),
        by_category={category: counts[category] * float(price) for category, price in prices.items()},
        average_per_ticket=daily_total / len(day_tickets) if day_tickets else 0.0,
    )


def calculate_event_metrics(
    tickets: Sequence[RawTicketRecord],
    prices: Mapping[str, float] = DEFAULT_TICKET_PRICES,
) -> EventMetrics:
    """
    Group the day's tickets by event name.

    ``perEvent`` is ordered by ticket count, descending; the sort is stable so
    events with equal counts keep the order they were first seen in, and the
    first of them becomes ``topEvent``.
    """
    groups: Dict[Optional[str], List[RawTicketRecord]] = {}
    for ticket in tickets:
        groups.setdefault(ticket.event_name, []).append(ticket)

    per_event = []
    for name, event_tickets in groups.items():
        checked_in = sum(1 for t in event_tickets if t.checked_in)
        per_event.append(EventStats(
            name=name,
            ticket_count=len(event_tickets),
            checked_in_count=checked_in,
            check_in_rate=percentage(checked_in, len(event_tickets)),
            revenue=total_revenue(event_tickets, prices),
            by_category=count_by_category(event_tickets, prices),
        ))

    per_event.sort(key=lambda event: event.ticket_count, reverse=True)

    return EventMetrics(
        total_distinct_events=len(per_event),
        per_event=per_event,
        top_event=per_event[0] if per_event else None,
    )


def calculate_engagement_metrics(
    tickets: Sequence[RawTicketRecord],
    users: Sequence[RawUserRecord],
    prices: Mapping[str, float] = DEFAULT_TICKET_PRICES,
    top_users_limit: int = DEFAULT_TOP_USERS_LIMIT,
) -> EngagementMetrics:
    """
    Per-owner ticket activity for the day.

    Tickets without an owner are ignored. ``totalUserCount`` is the number of
    users registered that day, so the engagement rate can exceed 100 when
    older accounts are the active ones.
    """
    activity: Dict[str, UserActivity] = {}
    for ticket in tickets:
        if not ticket.user_id:
            continue
        entry = activity.get(ticket.user_id)
        if entry is None:
            entry = activity[ticket.user_id] = UserActivity(user_id=ticket.user_id)
        entry.ticket_count += 1
        if ticket.checked_in:
            entry.checked_in_count += 1
        entry.revenue += ticket_price(ticket, prices)

    active_users = len(activity)
    owned_tickets = sum(entry.ticket_count for entry in activity.values())
    ranked = sorted(activity.values(), key=lambda entry: entry.ticket_count, reverse=True)

    return EngagementMetrics(
        active_user_count=active_users,
        total_user_count=len(users),
        engagement_rate=percentage(active_users, len(users)),
        average_tickets_per_active_user=owned_tickets / active_users if active_users else 0.0,
        top_users=ranked[:top_users_limit],
    )
