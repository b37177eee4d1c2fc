from datetime import date

import pytest

from core.config import ForecastConfig
from core.models import Goal
from core.schema import GoalType, Likelihood
from networth.milestones import (
    chance_dates,
    milestone_info,
    next_milestone,
    progress_percentage,
    project_milestone,
    projection_series,
    required_monthly_savings,
)


class TestNoDeadline:

    def test_on_track(self, as_of):
        info = milestone_info(10000, 20000, 1000, as_of=as_of)
        assert info.estimated_arrival_date == date(2025, 4, 15)
        assert info.suggested_date == date(2025, 6, 15)
        assert info.likelihood is Likelihood.ON_TRACK
        assert info.percentage_chance is None
        assert info.required_monthly_growth is None

    def test_beyond_arrival_horizon(self, as_of):
        info = milestone_info(10000, 100000, 1000, as_of=as_of)
        assert info.estimated_arrival_date is None
        assert info.suggested_date == date(2033, 6, 15)
        assert info.likelihood is Likelihood.AT_RISK

    def test_beyond_suggestion_horizon(self, as_of):
        info = milestone_info(0, 1_000_000, 1000, as_of=as_of)
        assert info.estimated_arrival_date is None
        assert info.suggested_date is None

    def test_flat_growth_is_behind(self, as_of):
        info = milestone_info(10000, 20000, 0, as_of=as_of)
        assert info.likelihood is Likelihood.BEHIND
        assert info.estimated_arrival_date is None
        assert info.suggested_date is None

    def test_already_reached(self, as_of):
        info = milestone_info(25000, 20000, -300, as_of=as_of)
        assert info.likelihood is Likelihood.ON_TRACK
        assert info.percentage_chance == 99
        assert info.required_monthly_growth is None


class TestDeadline:

    def test_exactly_on_pace(self, as_of):
        info = milestone_info(10000, 16000, 1000, date(2024, 12, 15), as_of=as_of)
        assert info.percentage_chance == 85
        assert info.likelihood is Likelihood.ON_TRACK
        assert info.required_monthly_growth == pytest.approx(1000.0)

    def test_half_pace_is_behind(self, as_of):
        info = milestone_info(10000, 16000, 1000, date(2024, 9, 15), as_of=as_of)
        assert info.percentage_chance == 43
        assert info.likelihood is Likelihood.BEHIND
        assert info.required_monthly_growth == pytest.approx(2000.0)

    def test_at_risk_band(self, as_of):
        info = milestone_info(10000, 14000, 1000, date(2024, 9, 15), as_of=as_of)
        assert info.percentage_chance == 64
        assert info.likelihood is Likelihood.AT_RISK
        assert info.required_monthly_growth == pytest.approx(1333.33)

    def test_chance_is_capped(self, as_of):
        info = milestone_info(10000, 11500, 1000, date(2024, 9, 15), as_of=as_of)
        assert info.percentage_chance == 99
        assert info.likelihood is Likelihood.ON_TRACK

    def test_negative_growth_floors_at_zero(self, as_of):
        info = milestone_info(10000, 16000, -500, date(2024, 12, 15), as_of=as_of)
        assert info.percentage_chance == 0
        assert info.likelihood is Likelihood.BEHIND

    def test_no_whole_month_left(self, as_of):
        info = milestone_info(10000, 16000, 1000, date(2024, 7, 1), as_of=as_of)
        assert info.likelihood is Likelihood.BEHIND
        assert info.percentage_chance == 0
        assert info.required_monthly_growth == pytest.approx(6000.0)

    def test_reached_with_deadline(self, as_of):
        info = milestone_info(20000, 16000, 0, date(2024, 12, 15), as_of=as_of)
        assert info.percentage_chance == 99
        assert info.required_monthly_growth == 0.0

    def test_custom_thresholds(self, as_of):
        strict = ForecastConfig(on_track_ratio=1.5, at_risk_ratio=1.2)
        info = milestone_info(10000, 16000, 1000, date(2024, 12, 15), as_of=as_of, config=strict)
        assert info.likelihood is Likelihood.BEHIND
        assert info.percentage_chance == 85


def test_project_milestone_from_history(steady_history, as_of):
    info = project_milestone(10000, 20000, steady_history, as_of=as_of)
    assert info.avg_monthly_growth == pytest.approx(1000.0)
    assert info.estimated_arrival_date == date(2025, 4, 15)
    assert info.likelihood is Likelihood.ON_TRACK


def test_project_milestone_without_history(as_of):
    info = project_milestone(10000, 20000, [], as_of=as_of)
    assert info.avg_monthly_growth == 0.0
    assert info.likelihood is Likelihood.BEHIND


class TestNextMilestone:

    def test_negative_net_worth(self):
        m = next_milestone(-500)
        assert m.name == "Debt-free"
        assert m.amount == 0.0

    def test_round_numbers(self):
        assert next_milestone(3000).name == "$5k"
        assert next_milestone(3000).amount == 5000.0
        assert next_milestone(999_999).name == "$1M"
        assert next_milestone(1_500_000).name == "$2M"
        assert next_milestone(0).name == "$1k"

    def test_savings_goal_can_come_first(self):
        goals = [Goal(id="g1", name="Holiday", target_amount=4000)]
        m = next_milestone(3000, goals)
        assert m.name == "Holiday"
        assert m.is_goal

    def test_other_goal_types_are_ignored(self):
        goals = [Goal(id="g1", name="Clear card", target_amount=4000, goal_type=GoalType.DEBT_PAYOFF)]
        assert next_milestone(3000, goals).name == "$5k"

    def test_past_the_last_milestone(self):
        assert next_milestone(6_000_000) is None


def test_projection_series(as_of):
    points = projection_series(1000, 500, 2000, start_date=as_of)
    assert [p.date for p in points] == [date(2024, 7, 1), date(2024, 8, 1)]
    assert [p.projected_net_worth for p in points] == [1500.0, 2000.0]
    assert projection_series(1000, 0, 2000, start_date=as_of) == []
    assert len(projection_series(0, 1, 1_000_000, start_date=as_of)) == 60


def test_chance_dates(as_of):
    dates = chance_dates(10000, 20000, 1000, as_of=as_of)
    assert [(c.percentage, c.date) for c in dates] == [
        (25, date(2024, 9, 30)),
        (50, date(2024, 12, 31)),
        (75, date(2025, 3, 31)),
        (99, date(2025, 6, 30)),
    ]
    assert chance_dates(20000, 20000, 1000, as_of=as_of) == []
    assert chance_dates(10000, 20000, 0, as_of=as_of) == []


def test_required_monthly_savings(as_of):
    assert required_monthly_savings(12000, 6000, date(2024, 12, 15), as_of=as_of) == pytest.approx(1000.0)
    assert required_monthly_savings(12000, 6000, None, as_of=as_of) is None
    assert required_monthly_savings(5000, 6000, date(2024, 12, 15), as_of=as_of) == 0.0
    assert required_monthly_savings(12000, 6000, date(2024, 6, 1), as_of=as_of) == 6000


def test_progress_percentage():
    assert progress_percentage(250, 1000) == pytest.approx(25.0)
    assert progress_percentage(1500, 1000) == 100.0
    assert progress_percentage(10, 0) == 0.0


def test_project_milestone_repeatable(steady_history, as_of):
    args = (10000, 16000, steady_history, date(2024, 12, 15))
    assert project_milestone(*args, as_of=as_of) == project_milestone(*args, as_of=as_of)
