"""
Forecast configuration.
Thresholds and horizons shared by the projection components.
Per-call knobs (timeline days, max months) are plain keyword parameters; these
defaults exist so callers can override a whole policy in one object.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ForecastConfig:
    timeline_days: int = 30
    max_months: int = 360

    # snapshot lookback
    snapshot_tolerance_days: int = 5

    # milestone arrival / suggestion horizons (months)
    arrival_horizon_months: int = 60
    suggestion_buffer: float = 1.2
    suggestion_horizon_months: int = 120

    # likelihood scoring
    chance_scale: float = 85.0
    chance_cap: int = 99
    on_track_ratio: float = 0.9
    at_risk_ratio: float = 0.6


DEFAULT_CONFIG = ForecastConfig()
