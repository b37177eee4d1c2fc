"""
Net-worth history lookups and trend estimation.

Snapshots are taken irregularly, so every lookback ("one month ago") picks the
snapshot closest to that date within a tolerance window, or nothing.

The growth estimate is a 3:2:1 weighted average of up to three trailing monthly
deltas, most recent first:
    now        - 1 month ago   (weight 3)
    1 month ago - 2 months ago (weight 2)
    2 months ago - 3 months ago (weight 1)
A delta needs both of its endpoints. Missing lookbacks drop their delta and the
average is taken over the weights that remain (3:2 when the oldest point is
missing). With fewer than two deltas the estimate falls back to
a straight slope from the oldest snapshot to now.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

import numpy as np

from core.config import DEFAULT_CONFIG
from core.models import NetWorthSnapshot
from core.utils import add_months

AVG_DAYS_PER_MONTH = 365.25 / 12


@dataclass(frozen=True)
class MonthlyChange:
    monthly_change: float
    last_month_change: Optional[float]


def find_snapshot_near_date(
    snapshots: Sequence[NetWorthSnapshot],
    target: date,
    tolerance_days: int = DEFAULT_CONFIG.snapshot_tolerance_days,
) -> Optional[NetWorthSnapshot]:
    """Snapshot closest to `target` within +/- tolerance_days (earliest listed wins ties)."""
    best: Optional[NetWorthSnapshot] = None
    best_diff: Optional[int] = None
    for snap in snapshots:
        diff = abs((snap.snapshot_date - target).days)
        if diff <= tolerance_days and (best_diff is None or diff < best_diff):
            best = snap
            best_diff = diff
    return best


def _lookbacks(
    snapshots: Sequence[NetWorthSnapshot],
    as_of: date,
    n: int,
    tolerance_days: int,
) -> List[Optional[NetWorthSnapshot]]:
    return [
        find_snapshot_near_date(snapshots, add_months(as_of, -k), tolerance_days)
        for k in range(1, n + 1)
    ]


def monthly_change(
    snapshots: Sequence[NetWorthSnapshot],
    current_net_worth: float,
    *,
    as_of: date,
    tolerance_days: int = DEFAULT_CONFIG.snapshot_tolerance_days,
) -> MonthlyChange:
    """Change over the last month, and the month before that when known."""
    snap1, snap2 = _lookbacks(snapshots, as_of, 2, tolerance_days)
    if snap1 is None:
        return MonthlyChange(monthly_change=0.0, last_month_change=None)
    last = snap1.net_worth - snap2.net_worth if snap2 is not None else None
    return MonthlyChange(
        monthly_change=float(current_net_worth) - snap1.net_worth,
        last_month_change=last,
    )


def weighted_deltas(
    snapshots: Sequence[NetWorthSnapshot],
    current_net_worth: float,
    *,
    as_of: date,
    tolerance_days: int = DEFAULT_CONFIG.snapshot_tolerance_days,
) -> List[Tuple[float, int]]:
    """(delta, weight) pairs for the trailing months that have both endpoints."""
    snap1, snap2, snap3 = _lookbacks(snapshots, as_of, 3, tolerance_days)
    changes: List[Tuple[float, int]] = []
    if snap1 is not None:
        changes.append((float(current_net_worth) - snap1.net_worth, 3))
    if snap1 is not None and snap2 is not None:
        changes.append((snap1.net_worth - snap2.net_worth, 2))
    if snap2 is not None and snap3 is not None:
        changes.append((snap2.net_worth - snap3.net_worth, 1))
    return changes


def _slope_from_oldest(
    snapshots: Sequence[NetWorthSnapshot],
    current_net_worth: float,
    as_of: date,
) -> float:
    history = [s for s in snapshots if s.snapshot_date < as_of]
    if not history:
        return 0.0
    oldest = min(history, key=lambda s: s.snapshot_date)
    months = (as_of - oldest.snapshot_date).days / AVG_DAYS_PER_MONTH
    # A snapshot from a few days ago is treated as a full month of change.
    return (float(current_net_worth) - oldest.net_worth) / max(months, 1.0)


def avg_monthly_growth(
    snapshots: Sequence[NetWorthSnapshot],
    current_net_worth: float,
    *,
    as_of: date,
    tolerance_days: int = DEFAULT_CONFIG.snapshot_tolerance_days,
) -> float:
    """
    Smoothed monthly net-worth growth.

    Parameters
    ----------
    snapshots : sequence of NetWorthSnapshot
        History in any order.
    current_net_worth : float
        Today's value (not necessarily snapshotted).
    as_of : date
        "Now" for the lookbacks.
    tolerance_days : int
        How far a snapshot may sit from each lookback date.

    Returns
    -------
    Growth per month; 0.0 when there is no usable history.
    """
    changes = weighted_deltas(
        snapshots, current_net_worth, as_of=as_of, tolerance_days=tolerance_days
    )
    if len(changes) >= 2:
        values = np.array([c[0] for c in changes], dtype=float)
        weights = np.array([c[1] for c in changes], dtype=float)
        return float(np.average(values, weights=weights))
    return _slope_from_oldest(snapshots, current_net_worth, as_of)
