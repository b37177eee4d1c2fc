"""
Milestone projection: when will net worth reach a target, and how likely is
that by a deadline?

Arrival is a straight-line extrapolation of the smoothed monthly growth. It is
only reported up to arrival_horizon_months out (60); anything further is
treated as indefinite. The suggested date pads the required months by 20% and
is offered up to suggestion_horizon_months (120).

Likelihood without a deadline:
    growth <= 0          -> behind
    arrival within range -> on_track
    otherwise            -> at_risk
With a deadline, ratio = growth / (remaining / whole months left):
    chance = clamp(round(ratio * 85), 0, 99)
    ratio >= 0.9 on_track, >= 0.6 at_risk, else behind
A deadline with no whole month left is behind at 0%. A target already reached
is on_track at 99% whatever the trend.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from core.config import DEFAULT_CONFIG, ForecastConfig
from core.log import get_logger
from core.models import Goal, NetWorthSnapshot
from core.schema import GoalType, Likelihood
from core.utils import add_months, datedif_months, first_of_month, round_half_up

from .snapshots import avg_monthly_growth

log = get_logger(__name__)

AUTO_MILESTONES: Tuple[int, ...] = (
    0, 1_000, 5_000, 10_000, 25_000, 50_000, 100_000,
    250_000, 500_000, 1_000_000, 2_000_000, 5_000_000,
)

CHANCE_LEVELS: Tuple[int, ...] = (25, 50, 75, 99)


@dataclass(frozen=True)
class MilestoneInfo:
    avg_monthly_growth: float
    estimated_arrival_date: Optional[date]
    suggested_date: Optional[date]
    likelihood: Likelihood
    percentage_chance: Optional[int]
    required_monthly_growth: Optional[float]


@dataclass(frozen=True)
class Milestone:
    amount: float
    name: str
    is_goal: bool


@dataclass(frozen=True)
class ProjectionPoint:
    date: date
    projected_net_worth: float


@dataclass(frozen=True)
class ChanceDate:
    percentage: int
    date: date


def months_needed(current: float, target: float, growth: float) -> Optional[float]:
    """Months of growth to close the gap; None when growth is flat or negative."""
    if growth <= 0:
        return None
    return (float(target) - float(current)) / growth


def project_arrival_date(
    current: float,
    target: float,
    growth: float,
    *,
    as_of: date,
    horizon_months: int = DEFAULT_CONFIG.arrival_horizon_months,
) -> Optional[date]:
    months = months_needed(current, target, growth)
    if months is None or months <= 0 or months > horizon_months:
        return None
    return add_months(as_of, math.ceil(months))


def suggest_date(
    current: float,
    target: float,
    growth: float,
    *,
    as_of: date,
    config: ForecastConfig = DEFAULT_CONFIG,
) -> Optional[date]:
    """A realistic deadline: required months plus a buffer, if still within range."""
    months = months_needed(current, target, growth)
    if months is None or months <= 0:
        return None
    buffered = math.ceil(months * config.suggestion_buffer)
    if buffered > config.suggestion_horizon_months:
        return None
    return add_months(as_of, buffered)


def milestone_info(
    current_net_worth: float,
    target_amount: float,
    growth: float,
    deadline: Optional[date] = None,
    *,
    as_of: date,
    config: ForecastConfig = DEFAULT_CONFIG,
) -> MilestoneInfo:
    """Score a target given an already-estimated monthly growth rate."""
    current = float(current_net_worth)
    target = float(target_amount)
    remaining = target - current

    if remaining <= 0:
        return MilestoneInfo(
            avg_monthly_growth=round(growth, 2),
            estimated_arrival_date=None,
            suggested_date=None,
            likelihood=Likelihood.ON_TRACK,
            percentage_chance=config.chance_cap,
            required_monthly_growth=0.0 if deadline is not None else None,
        )

    arrival = project_arrival_date(
        current, target, growth, as_of=as_of, horizon_months=config.arrival_horizon_months
    )
    suggested = suggest_date(current, target, growth, as_of=as_of, config=config)

    if deadline is None:
        if growth <= 0:
            likelihood = Likelihood.BEHIND
        elif arrival is not None:
            likelihood = Likelihood.ON_TRACK
        else:
            likelihood = Likelihood.AT_RISK
        return MilestoneInfo(
            avg_monthly_growth=round(growth, 2),
            estimated_arrival_date=arrival,
            suggested_date=suggested,
            likelihood=likelihood,
            percentage_chance=None,
            required_monthly_growth=None,
        )

    months_remaining = datedif_months(as_of, deadline)
    if months_remaining <= 0:
        return MilestoneInfo(
            avg_monthly_growth=round(growth, 2),
            estimated_arrival_date=arrival,
            suggested_date=suggested,
            likelihood=Likelihood.BEHIND,
            percentage_chance=0,
            required_monthly_growth=round(remaining, 2),
        )

    required = remaining / months_remaining
    ratio = growth / required
    chance = min(max(round_half_up(ratio * config.chance_scale), 0), config.chance_cap)

    if ratio >= config.on_track_ratio:
        likelihood = Likelihood.ON_TRACK
    elif ratio >= config.at_risk_ratio:
        likelihood = Likelihood.AT_RISK
    else:
        likelihood = Likelihood.BEHIND

    return MilestoneInfo(
        avg_monthly_growth=round(growth, 2),
        estimated_arrival_date=arrival,
        suggested_date=suggested,
        likelihood=likelihood,
        percentage_chance=chance,
        required_monthly_growth=round(required, 2),
    )


def project_milestone(
    current_net_worth: float,
    target_amount: float,
    snapshots: Sequence[NetWorthSnapshot],
    deadline: Optional[date] = None,
    *,
    as_of: date,
    config: ForecastConfig = DEFAULT_CONFIG,
) -> MilestoneInfo:
    """
    Estimate growth from snapshot history and score the target.

    Parameters
    ----------
    current_net_worth : float
        Net worth today.
    target_amount : float
        Milestone to reach.
    snapshots : sequence of NetWorthSnapshot
        History; may be empty (growth is then 0).
    deadline : date, optional
        Target date; enables percentage_chance and required_monthly_growth.
    as_of : date
        "Today".
    config : ForecastConfig
        Thresholds and horizons.
    """
    growth = avg_monthly_growth(
        snapshots,
        current_net_worth,
        as_of=as_of,
        tolerance_days=config.snapshot_tolerance_days,
    )
    info = milestone_info(
        current_net_worth, target_amount, growth, deadline, as_of=as_of, config=config
    )
    log.debug(
        "milestone_projected",
        target=float(target_amount),
        growth=info.avg_monthly_growth,
        likelihood=info.likelihood.value,
        chance=info.percentage_chance,
    )
    return info


def _milestone_label(amount: int) -> str:
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:g}M"
    return f"${amount / 1_000:,.0f}k"


def next_milestone(
    current_net_worth: float,
    goals: Sequence[Goal] = (),
) -> Optional[Milestone]:
    """
    Nearest checkpoint above current net worth.

    Candidates are the fixed round-number milestones and the targets of savings
    goals. Below zero the next milestone is always "Debt-free" at 0.
    """
    current = float(current_net_worth)
    if current < 0:
        return Milestone(amount=0.0, name="Debt-free", is_goal=False)

    candidates: List[Milestone] = []
    auto = next((m for m in AUTO_MILESTONES if m > current), None)
    if auto is not None:
        candidates.append(Milestone(amount=float(auto), name=_milestone_label(auto), is_goal=False))

    savings = sorted(
        (g for g in goals if g.goal_type is GoalType.SAVINGS and g.target_amount > current),
        key=lambda g: g.target_amount,
    )
    if savings:
        candidates.append(Milestone(amount=savings[0].target_amount, name=savings[0].name, is_goal=True))

    if not candidates:
        return None
    return min(candidates, key=lambda m: m.amount)


def projection_series(
    current_net_worth: float,
    growth: float,
    target_amount: float,
    *,
    start_date: date,
    max_points: int = DEFAULT_CONFIG.arrival_horizon_months,
) -> List[ProjectionPoint]:
    """Monthly projected values (dated the 1st) until the target is passed or max_points."""
    if growth <= 0:
        return []
    points: List[ProjectionPoint] = []
    value = float(current_net_worth)
    for i in range(1, max_points + 1):
        value += growth
        points.append(ProjectionPoint(date=first_of_month(start_date, i), projected_net_worth=round(value, 2)))
        if value >= target_amount:
            break
    return points


def chance_dates(
    current_net_worth: float,
    target_amount: float,
    growth: float,
    *,
    as_of: date,
    levels: Sequence[int] = CHANCE_LEVELS,
    config: ForecastConfig = DEFAULT_CONFIG,
    max_months: int = 600,
) -> List[ChanceDate]:
    """
    Deadlines that would score each requested percentage chance.

    Inverts chance = ratio * chance_scale for the deadline month, then uses the
    last day of that month so the whole month counts.
    """
    remaining = float(target_amount) - float(current_net_worth)
    if remaining <= 0 or growth <= 0:
        return []
    out: List[ChanceDate] = []
    for pct in levels:
        months = math.ceil((pct / config.chance_scale) * remaining / growth)
        if 0 < months <= max_months:
            month_end = first_of_month(as_of, months + 1) - timedelta(days=1)
            out.append(ChanceDate(percentage=pct, date=month_end))
    return out


def required_monthly_savings(
    target_amount: float,
    current_amount: float,
    deadline: Optional[date],
    *,
    as_of: date,
) -> Optional[float]:
    """Even monthly amount needed to hit a target by its deadline."""
    if deadline is None:
        return None
    remaining = float(target_amount) - float(current_amount)
    if remaining <= 0:
        return 0.0
    months = datedif_months(as_of, deadline)
    if months <= 0:
        return remaining
    return remaining / months


def progress_percentage(current: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(float(current) / float(target) * 100.0, 100.0)
