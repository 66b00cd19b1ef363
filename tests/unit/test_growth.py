"""
Unit Tests - Growth Rates
"""
from datetime import date

import pytest

from ticket_analytics.analytics import GrowthRates, MetricPath, calculate_growth_rates
from ticket_analytics.analytics.growth import metric_value, percent_change


class TestGrowthRates:
    """Tests for calculate_growth_rates"""

    def test_empty_range_is_zero(self):
        assert calculate_growth_rates([]) == GrowthRates(daily=0, weekly=0, monthly=0)

    def test_single_record_is_zero(self, make_series):
        assert calculate_growth_rates(make_series([25])) == GrowthRates()

    def test_daily_growth(self, make_series):
        growth = calculate_growth_rates(make_series([10, 15]))

        assert growth.daily == 50.0
        assert growth.weekly == 0.0
        assert growth.monthly == 0.0

    def test_decline_is_negative(self, make_series):
        assert calculate_growth_rates(make_series([20, 15])).daily == -25.0

    def test_zero_baseline_is_zero(self, make_series):
        assert calculate_growth_rates(make_series([0, 15])).daily == 0.0

    def test_rounds_to_one_decimal(self, make_series):
        assert calculate_growth_rates(make_series([3, 4])).daily == 33.3

    def test_weekly_compares_against_seventh_from_last(self, make_series):
        growth = calculate_growth_rates(make_series([10, 1, 1, 1, 1, 1, 20]))

        assert growth.weekly == 100.0
        assert growth.daily == 1900.0

    def test_weekly_needs_seven_records(self, make_series):
        growth = calculate_growth_rates(make_series([10, 1, 1, 1, 1, 20]))

        assert growth.weekly == 0.0

    def test_monthly_compares_against_thirtieth_from_last(self, make_series):
        counts = [10] + [12] * 28 + [15]

        growth = calculate_growth_rates(make_series(counts))

        assert growth.monthly == 50.0
        assert growth.weekly == 25.0

    def test_other_metric_by_path(self, make_series):
        records = make_series([10, 20], revenue_per_ticket=49)

        growth = calculate_growth_rates(records, "revenue.daily.total")

        assert growth.daily == 100.0

    def test_missing_top_event_reads_as_zero(self, make_series):
        records = make_series([10, 20])

        assert metric_value(records[-1], MetricPath.TOP_EVENT_TICKETS) == 0
        assert calculate_growth_rates(records, MetricPath.TOP_EVENT_TICKETS) == GrowthRates()

    def test_unknown_metric_rejected(self, make_series):
        with pytest.raises(ValueError):
            calculate_growth_rates(make_series([1, 2]), "tickets.refunded")


class TestPercentChange:
    """Tests for percent_change"""

    @pytest.mark.parametrize(
        "latest,baseline,expected",
        [
            (150, 100, 50.0),
            (50, 100, -50.0),
            (10, 0, 0.0),
            (10, -5, 0.0),
            (1, 8, -87.5),
        ],
    )
    def test_percent_change(self, latest, baseline, expected):
        assert percent_change(latest, baseline) == expected


def test_metric_paths_cover_nested_blocks(make_record):
    record = make_record(date(2025, 3, 1), created=7, revenue=343.0, checked_in=3, registered=4)

    assert metric_value(record, MetricPath.TICKETS_CREATED) == 7
    assert metric_value(record, MetricPath.TICKETS_CHECKED_IN) == 3
    assert metric_value(record, MetricPath.USERS_REGISTERED) == 4
    assert metric_value(record, MetricPath.REVENUE_DAILY) == 343.0
    assert metric_value(record, MetricPath.ENGAGEMENT_RATE) == 0
