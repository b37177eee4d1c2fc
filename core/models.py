"""
Input records consumed by the forecasting engine.

These mirror the rows the storage layer hands over. Field-level constraints
(non-negative money, anchor ranges) are enforced on construction; cross-field
rule consistency is checked by the recurrence expander, so a malformed rule
surfaces when it is actually used.

Money is Decimal throughout. Floats and numeric strings are accepted and
coerced, since the storage layer frequently returns either.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .schema import AccountType, Frequency, GoalType, DAY_STEPS, MONTH_STEPS
from .utils import sunday_weekday


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)


class RecurringRule(_Record):
    """
    When a recurring event fires.

    anchor_day_of_week uses 0 = Sunday ... 6 = Saturday.
    """

    frequency: Frequency
    anchor_date: date
    anchor_day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    anchor_day_of_month: Optional[int] = Field(default=None, ge=1, le=31)

    @classmethod
    def from_anchor(cls, frequency: Frequency, anchor_date: date) -> "RecurringRule":
        """Build a rule whose anchor field is taken from the anchor date itself."""
        frequency = Frequency(frequency)
        if frequency in DAY_STEPS:
            return cls(
                frequency=frequency,
                anchor_date=anchor_date,
                anchor_day_of_week=sunday_weekday(anchor_date),
            )
        if frequency in MONTH_STEPS:
            return cls(
                frequency=frequency,
                anchor_date=anchor_date,
                anchor_day_of_month=anchor_date.day,
            )
        return cls(frequency=frequency, anchor_date=anchor_date)

    @classmethod
    def once(cls, on: date) -> "RecurringRule":
        return cls(frequency=Frequency.ONCE, anchor_date=on)


class IncomeEntry(_Record):
    source: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    rule: RecurringRule
    enabled: bool = True


class Bill(_Record):
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    rule: RecurringRule
    active: bool = True
    is_one_off: bool = False

    @property
    def effective_rule(self) -> RecurringRule:
        """One-off bills fire once on their anchor date whatever the frequency says."""
        if self.is_one_off and self.rule.frequency is not Frequency.ONCE:
            return RecurringRule.once(self.rule.anchor_date)
        return self.rule


class Account(_Record):
    """
    A balance-holding account.

    For credit, loan and debt accounts the balance is stored as the positive
    amount owed. The interest fields only matter for loan/debt accounts.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    type: AccountType
    balance: Decimal
    is_asset: bool = True

    interest_rate: Optional[Decimal] = Field(default=None, ge=0)  # annual percent
    payment_frequency: Optional[Frequency] = None
    interest_last_applied: Optional[date] = None
    created_at: Optional[date] = None

    @field_validator("payment_frequency")
    @classmethod
    def accrual_frequency(cls, v: Optional[Frequency]) -> Optional[Frequency]:
        if v is not None and v not in (Frequency.WEEKLY, Frequency.FORTNIGHTLY, Frequency.MONTHLY):
            raise ValueError("payment_frequency must be weekly, fortnightly or monthly")
        return v


class Debt(_Record):
    id: str
    name: str
    balance: Decimal = Field(..., ge=0)
    annual_rate_percent: Decimal = Field(default=Decimal("0"), ge=0)
    minimum_payment: Decimal = Field(default=Decimal("0"), ge=0)

    @classmethod
    def from_account(cls, account: Account, minimum_payment) -> "Debt":
        if account.id is None:
            raise ValueError("account has no id")
        return cls(
            id=account.id,
            name=account.name or account.id,
            balance=max(account.balance, Decimal("0")),
            annual_rate_percent=account.interest_rate or Decimal("0"),
            minimum_payment=minimum_payment,
        )


class NetWorthSnapshot(_Record):
    snapshot_date: date
    net_worth: float
    total_assets: float = 0.0
    total_liabilities: float = 0.0


class Goal(_Record):
    id: str
    name: str
    target_amount: float = Field(..., ge=0)
    goal_type: GoalType = GoalType.SAVINGS
