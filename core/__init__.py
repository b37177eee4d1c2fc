"""
Core package: records, vocabularies, configuration, errors and shared helpers.
No forecasting logic lives here.
"""

from .config import DEFAULT_CONFIG, ForecastConfig
from .errors import ForecastError, InvalidRuleError
from .models import (
    Account,
    Bill,
    Debt,
    Goal,
    IncomeEntry,
    NetWorthSnapshot,
    RecurringRule,
)
from .schema import (
    AccountType,
    EventType,
    Frequency,
    GoalType,
    Likelihood,
    PayoffStrategy,
)
from .utils import round_money

__all__ = [
    "DEFAULT_CONFIG",
    "ForecastConfig",
    "ForecastError",
    "InvalidRuleError",
    "Account",
    "Bill",
    "Debt",
    "Goal",
    "IncomeEntry",
    "NetWorthSnapshot",
    "RecurringRule",
    "AccountType",
    "EventType",
    "Frequency",
    "GoalType",
    "Likelihood",
    "PayoffStrategy",
    "round_money",
]
