"""
Compounding interest accrual on revolving balances.

Interest compounds period by period at annual_rate / 100 / periods_per_year,
with full Decimal precision between periods. Only the reported totals are
rounded to cents, so catching up N missed periods in one call gives the same
result as N single-period calls chained without intermediate rounding. The debt
simulator uses the same monthly formula for its per-month interest.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Tuple

from core.models import Account
from core.schema import INTEREST_BEARING_TYPES, PERIODS_PER_YEAR, Frequency
from core.utils import ZERO, Number, add_months, datedif_months, round_money, to_decimal, whole_weeks

PERIOD_LABELS = {
    Frequency.WEEKLY: "week",
    Frequency.FORTNIGHTLY: "fortnight",
    Frequency.MONTHLY: "month",
}


@dataclass(frozen=True)
class InterestAccrual:
    interest_amount: Decimal
    new_balance: Decimal


@dataclass(frozen=True)
class InterestDue:
    """Outcome of checking an account for unapplied interest."""
    should_apply: bool
    periods_to_apply: int
    interest_amount: Decimal
    new_balance: Decimal
    next_due_date: Optional[date]


def _accrual_frequency(frequency) -> Frequency:
    freq = Frequency(frequency)
    if freq not in PERIODS_PER_YEAR:
        raise ValueError(
            f"Interest compounds weekly, fortnightly or monthly, not {freq.value!r}."
        )
    return freq


def period_rate(annual_rate_percent: Number, frequency=Frequency.MONTHLY) -> Decimal:
    """Per-period rate for an annual percentage rate, e.g. 12 (%) monthly -> 0.01."""
    freq = _accrual_frequency(frequency)
    return to_decimal(annual_rate_percent) / 100 / PERIODS_PER_YEAR[freq]


def compound(balance: Number, rate: Decimal, periods: int) -> Tuple[Decimal, Decimal]:
    """Unrounded (interest, new_balance) after compounding `periods` times."""
    bal = to_decimal(balance)
    total = ZERO
    for _ in range(max(int(periods), 0)):
        interest = bal * rate
        total += interest
        bal += interest
    return total, bal


def monthly_interest(balance: Number, annual_rate_percent: Number) -> Decimal:
    """One month of unrounded interest; nothing accrues on a zero or negative balance."""
    bal = to_decimal(balance)
    if bal <= 0:
        return ZERO
    return bal * period_rate(annual_rate_percent, Frequency.MONTHLY)


def accrue(
    balance: Number,
    annual_rate_percent: Number,
    periods_elapsed: int,
    frequency=Frequency.MONTHLY,
) -> InterestAccrual:
    """
    Compound interest owed over `periods_elapsed` periods.

    Parameters
    ----------
    balance : number
        Balance the interest is charged on.
    annual_rate_percent : number
        Annual rate in percent (19.99, not 0.1999).
    periods_elapsed : int
        Whole periods since interest was last applied. <= 0 is a no-op.
    frequency : Frequency
        weekly (52/yr), fortnightly (26/yr) or monthly (12/yr).

    Returns
    -------
    InterestAccrual with interest_amount and new_balance rounded to cents. When
    no period has elapsed the balance is returned exactly as given.
    """
    rate = period_rate(annual_rate_percent, frequency)
    bal = to_decimal(balance)
    if periods_elapsed <= 0:
        return InterestAccrual(interest_amount=round_money(ZERO), new_balance=bal)

    interest, new_balance = compound(bal, rate, periods_elapsed)
    return InterestAccrual(
        interest_amount=round_money(interest),
        new_balance=round_money(new_balance),
    )


def periods_elapsed(last_applied: date, as_of: date, frequency) -> int:
    """Whole accrual periods between two dates (weeks, pairs of weeks, or calendar months)."""
    freq = _accrual_frequency(frequency)
    if freq is Frequency.WEEKLY:
        return whole_weeks(last_applied, as_of)
    if freq is Frequency.FORTNIGHTLY:
        return int(whole_weeks(last_applied, as_of) / 2)
    return datedif_months(last_applied, as_of)


def shift_periods(start: date, periods: int, frequency) -> date:
    freq = _accrual_frequency(frequency)
    if freq is Frequency.WEEKLY:
        return start + timedelta(weeks=periods)
    if freq is Frequency.FORTNIGHTLY:
        return start + timedelta(weeks=2 * periods)
    return add_months(start, periods)


def _last_applied(account: Account) -> Optional[date]:
    return account.interest_last_applied or account.created_at


def calculate_interest_due(account: Account, as_of: date) -> InterestDue:
    """
    Interest an account owes since it was last charged.

    Only loan and debt accounts with a positive rate and a payment frequency
    accrue. When interest has never been applied the account's creation date is
    the starting point.
    """
    bal = to_decimal(account.balance)
    not_due = InterestDue(
        should_apply=False,
        periods_to_apply=0,
        interest_amount=round_money(ZERO),
        new_balance=round_money(bal),
        next_due_date=None,
    )

    if not account.interest_rate or account.interest_rate <= 0:
        return not_due
    if account.type not in INTEREST_BEARING_TYPES:
        return not_due
    if account.payment_frequency is None:
        return not_due

    start = _last_applied(account)
    if start is None:
        return not_due

    freq = account.payment_frequency
    periods = periods_elapsed(start, as_of, freq)
    next_due = shift_periods(start, max(periods, 0) + 1, freq)

    if periods <= 0:
        return InterestDue(
            should_apply=False,
            periods_to_apply=0,
            interest_amount=round_money(ZERO),
            new_balance=round_money(bal),
            next_due_date=next_due,
        )

    accrual = accrue(bal, account.interest_rate, periods, freq)
    return InterestDue(
        should_apply=True,
        periods_to_apply=periods,
        interest_amount=accrual.interest_amount,
        new_balance=accrual.new_balance,
        next_due_date=next_due,
    )


def interest_applied_date(account: Account, periods_applied: int) -> date:
    """New value for interest_last_applied after charging `periods_applied` periods."""
    start = _last_applied(account)
    if start is None:
        raise ValueError("Account has neither interest_last_applied nor created_at.")
    return shift_periods(start, periods_applied, account.payment_frequency or Frequency.MONTHLY)


def describe_interest(account: Account, result: InterestDue) -> str:
    """Transaction description, e.g. '19.99% p.a. interest for 2 months'."""
    label = PERIOD_LABELS[account.payment_frequency or Frequency.MONTHLY]
    plural = "s" if result.periods_to_apply > 1 else ""
    return f"{account.interest_rate}% p.a. interest for {result.periods_to_apply} {label}{plural}"
