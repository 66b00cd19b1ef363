"""
Trend Forecaster

Single-variable ordinary least squares over the position of each day in the
range. Deliberately simple: the confidence value is a sample-size heuristic,
not a statistical interval.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from .calculators import round_half_away
from .models import DailyAnalyticsRecord, Forecast, Prediction, TrendDirections

MIN_HISTORY_DAYS = 7
FULL_CONFIDENCE_DAYS = 30


def linear_regression(values: Sequence[float]) -> Tuple[float, float]:
    """
    Fit ``y = slope * x + intercept`` with ``x = 0..n-1``.

    Returns:
        (slope, intercept)
    """
    y = np.asarray(values, dtype=float)
    n = len(y)
    x = np.arange(n, dtype=float)

    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_xx = (x * x).sum()

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return float(slope), float(intercept)


def project(slope: float, intercept: float, index: int) -> int:
    """Fitted value at ``index``, rounded and floored at zero"""
    return max(0, int(round_half_away(slope * index + intercept, 0)))


def trend_label(slope: float) -> str:
    # A flat series reports "decreasing"
    return "increasing" if slope > 0 else "decreasing"


def predict_trends(
    records: Sequence[DailyAnalyticsRecord],
    horizon_days: int = 7,
    min_history_days: int = MIN_HISTORY_DAYS,
) -> Optional[Forecast]:
    """
    Project tickets created and daily revenue ``horizon_days`` ahead.

    Args:
        records: Range ordered by date, ascending
        horizon_days: Number of future days to predict
        min_history_days: Shortest range worth fitting

    Returns:
        Forecast, or None when the range is shorter than ``min_history_days``
    """
    n = len(records)
    if n < max(min_history_days, 2):
        return None

    ticket_slope, ticket_intercept = linear_regression([r.ticket_metrics.created for r in records])
    revenue_slope, revenue_intercept = linear_regression([r.revenue_metrics.daily_total for r in records])

    predictions = [
        Prediction(
            day=offset + 1,
            predicted_tickets=project(ticket_slope, ticket_intercept, n + offset),
            predicted_revenue=project(revenue_slope, revenue_intercept, n + offset),
        )
        for offset in range(max(horizon_days, 0))
    ]

    return Forecast(
        predictions=predictions,
        confidence=min(n / FULL_CONFIDENCE_DAYS, 1.0),
        trends=TrendDirections(
            tickets=trend_label(ticket_slope),
            revenue=trend_label(revenue_slope),
        ),
    )
