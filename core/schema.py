"""
Closed vocabularies and tabular output layouts.

Enums are str-valued so records round-trip through JSON/storage as plain strings.
The column tuples define the frames handed to the output consumer.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class Frequency(str, Enum):
    WEEKLY = "weekly"
    FORTNIGHTLY = "fortnightly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    ONCE = "once"


# Day-based steps
DAY_STEPS: Dict[Frequency, int] = {
    Frequency.WEEKLY: 7,
    Frequency.FORTNIGHTLY: 14,
}

# Calendar-month steps
MONTH_STEPS: Dict[Frequency, int] = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.YEARLY: 12,
}

# Compounding periods per year (interest accrual only supports these)
PERIODS_PER_YEAR: Dict[Frequency, int] = {
    Frequency.WEEKLY: 52,
    Frequency.FORTNIGHTLY: 26,
    Frequency.MONTHLY: 12,
}


class PayoffStrategy(str, Enum):
    AVALANCHE = "avalanche"  # highest rate first
    SNOWBALL = "snowball"    # lowest balance first


class AccountType(str, Enum):
    BANK = "bank"
    CASH = "cash"
    CREDIT = "credit"
    CREDIT_CARD = "credit_card"
    INVESTMENT = "investment"
    LOAN = "loan"
    DEBT = "debt"


SPENDABLE_TYPES = (AccountType.BANK, AccountType.CASH)
OWED_CREDIT_TYPES = (AccountType.CREDIT, AccountType.CREDIT_CARD)
INTEREST_BEARING_TYPES = (AccountType.LOAN, AccountType.DEBT)


class EventType(str, Enum):
    INCOME = "income"
    BILL = "bill"


class Likelihood(str, Enum):
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    BEHIND = "behind"


class GoalType(str, Enum):
    SAVINGS = "savings"
    DEBT_PAYOFF = "debt_payoff"
    NET_WORTH_MILESTONE = "net_worth_milestone"


TIMELINE_COLUMNS: Tuple[str, ...] = (
    "date",
    "projected_balance",
    "income",
    "bills",
    "n_events",
    "is_negative",
)

SCHEDULE_COLUMNS: Tuple[str, ...] = (
    "month",
    "date",
    "debt_id",
    "debt_name",
    "balance",
    "payment",
    "interest",
    "paid_off",
    "total_balance",
    "cumulative_interest",
)
