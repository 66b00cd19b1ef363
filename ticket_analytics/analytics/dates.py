"""
Calendar helpers shared by the rollup processor and range assembler.

Day windows are naive datetimes in server-local time.
"""

from datetime import date, datetime, time, timedelta
from typing import Iterator, Tuple, Union

DateLike = Union[date, datetime, str]


def as_date(value: DateLike) -> date:
    """Accept a ``date``, ``datetime`` or ``YYYY-MM-DD`` string"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value[:10])


def day_window(day: date) -> Tuple[datetime, datetime]:
    """
    Half-open ``[day 00:00, next day 00:00)`` window.

    Callers filter with ``>=`` on the start and ``<`` on the end so every
    instant of the day falls in exactly one window.
    """
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every date from ``start`` to ``end`` inclusive, ascending; empty when start > end"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
