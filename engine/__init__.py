"""
Projection engine: interest accrual, cash-flow timeline and debt payoff simulation.
"""

from .debt import compare_strategies, simulate
from .interest import accrue, calculate_interest_due
from .timeline import (
    build_timeline,
    find_lowest_balance,
    get_first_negative_date,
    has_negative_balance,
)

__all__ = [
    "accrue",
    "calculate_interest_due",
    "build_timeline",
    "find_lowest_balance",
    "get_first_negative_date",
    "has_negative_balance",
    "simulate",
    "compare_strategies",
]
