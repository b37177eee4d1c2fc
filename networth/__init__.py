"""
Net-worth trend estimation and milestone projection.
"""

from .milestones import MilestoneInfo, next_milestone, project_milestone
from .snapshots import avg_monthly_growth, find_snapshot_near_date, monthly_change

__all__ = [
    "MilestoneInfo",
    "next_milestone",
    "project_milestone",
    "avg_monthly_growth",
    "find_snapshot_near_date",
    "monthly_change",
]
