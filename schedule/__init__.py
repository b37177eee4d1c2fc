"""
Recurring schedules: expansion of income/bill rules into occurrence dates.
"""

from .recurrence import expand, next_occurrence, validate_rule

__all__ = ["expand", "next_occurrence", "validate_rule"]
