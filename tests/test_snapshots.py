from datetime import date

import pytest

from core.models import NetWorthSnapshot
from networth.snapshots import (
    AVG_DAYS_PER_MONTH,
    avg_monthly_growth,
    find_snapshot_near_date,
    monthly_change,
    weighted_deltas,
)


def snap(y, m, d, value):
    return NetWorthSnapshot(snapshot_date=date(y, m, d), net_worth=value)


class TestFindSnapshotNearDate:

    def test_within_tolerance(self):
        snaps = [snap(2024, 5, 20, 100)]
        assert find_snapshot_near_date(snaps, date(2024, 5, 15)) is snaps[0]

    def test_outside_tolerance(self):
        snaps = [snap(2024, 5, 21, 100)]
        assert find_snapshot_near_date(snaps, date(2024, 5, 15)) is None

    def test_closest_wins(self):
        snaps = [snap(2024, 5, 12, 1), snap(2024, 5, 16, 2), snap(2024, 5, 19, 3)]
        assert find_snapshot_near_date(snaps, date(2024, 5, 15)).net_worth == 2

    def test_tie_keeps_first_listed(self):
        snaps = [snap(2024, 5, 17, 1), snap(2024, 5, 13, 2)]
        assert find_snapshot_near_date(snaps, date(2024, 5, 15)).net_worth == 1

    def test_custom_tolerance(self):
        snaps = [snap(2024, 5, 25, 1)]
        assert find_snapshot_near_date(snaps, date(2024, 5, 15), tolerance_days=10) is snaps[0]
        assert find_snapshot_near_date([], date(2024, 5, 15)) is None


class TestGrowth:

    def test_steady_history(self, steady_history, as_of):
        assert avg_monthly_growth(steady_history, 10000, as_of=as_of) == pytest.approx(1000.0)

    def test_weighted_average(self, as_of):
        snaps = [snap(2024, 5, 15, 9500), snap(2024, 4, 15, 8500), snap(2024, 3, 15, 8000)]
        deltas = weighted_deltas(snaps, 10000, as_of=as_of)
        assert deltas == [(500.0, 3), (1000.0, 2), (500.0, 1)]
        growth = avg_monthly_growth(snaps, 10000, as_of=as_of)
        assert round(growth, 2) == pytest.approx(666.67)

    def test_two_deltas_use_remaining_weights(self, as_of):
        # No snapshot three months back: weights 3 and 2 only.
        snaps = [snap(2024, 5, 15, 9500), snap(2024, 4, 15, 8500)]
        growth = avg_monthly_growth(snaps, 10000, as_of=as_of)
        assert growth == pytest.approx((500 * 3 + 1000 * 2) / 5)

    def test_missing_middle_falls_back_to_slope(self, as_of):
        snaps = [snap(2024, 5, 15, 9000), snap(2024, 3, 15, 7000)]
        assert len(weighted_deltas(snaps, 10000, as_of=as_of)) == 1
        months = (as_of - date(2024, 3, 15)).days / AVG_DAYS_PER_MONTH
        assert avg_monthly_growth(snaps, 10000, as_of=as_of) == pytest.approx(3000 / months)

    def test_recent_single_snapshot_counts_as_one_month(self, as_of):
        snaps = [snap(2024, 6, 10, 9800)]
        assert avg_monthly_growth(snaps, 10000, as_of=as_of) == pytest.approx(200.0)

    def test_no_history(self, as_of):
        assert avg_monthly_growth([], 10000, as_of=as_of) == 0.0

    def test_future_snapshots_are_not_history(self, as_of):
        snaps = [snap(2024, 7, 1, 5000)]
        assert avg_monthly_growth(snaps, 10000, as_of=as_of) == 0.0

    def test_order_does_not_matter(self, steady_history, as_of):
        reversed_history = list(reversed(steady_history))
        assert avg_monthly_growth(reversed_history, 10000, as_of=as_of) == pytest.approx(
            avg_monthly_growth(steady_history, 10000, as_of=as_of)
        )


class TestMonthlyChange:

    def test_with_history(self, steady_history, as_of):
        change = monthly_change(steady_history, 10000, as_of=as_of)
        assert change.monthly_change == pytest.approx(1000.0)
        assert change.last_month_change == pytest.approx(1000.0)

    def test_only_last_month(self, as_of):
        change = monthly_change([snap(2024, 5, 15, 9400)], 10000, as_of=as_of)
        assert change.monthly_change == pytest.approx(600.0)
        assert change.last_month_change is None

    def test_no_history(self, as_of):
        change = monthly_change([], 10000, as_of=as_of)
        assert change.monthly_change == 0.0
        assert change.last_month_change is None
