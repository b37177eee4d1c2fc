"""
Debt payoff simulation: month-by-month amortization of several debts at once.

Each simulated month:
  1. Interest & minimums, in input order. A debt already at zero frees its
     minimum payment into this month's extra pool; every other debt accrues one
     month of interest and pays min(minimum, balance + interest).
  2. Extra payments, in strategy order (avalanche = highest rate first,
     snowball = lowest starting balance first, ties keep input order). The pool
     (extra + freed minimums) goes to each debt in turn, capped at its balance.
  3. Snapshot. Balances and interest carry full precision between months; only
     the emitted MonthlyProjection is rounded to cents.

The run stops when every balance is zero or after max_months. Hitting the cap
with money still owed is a valid outcome (minimums below accruing interest);
check it with is_paid_off().
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from core.log import get_logger
from core.models import Debt
from core.schema import SCHEDULE_COLUMNS, PayoffStrategy
from core.utils import ZERO, Number, first_of_month, round_money, to_decimal

from .interest import monthly_interest

log = get_logger(__name__)


@dataclass(frozen=True)
class DebtMonth:
    id: str
    name: str
    balance: Decimal
    payment: Decimal
    interest: Decimal
    paid_off: bool


@dataclass(frozen=True)
class MonthlyProjection:
    """State of all debts at the end of one simulated month (month 1 = first)."""
    month: int
    date: Optional[date]
    debts: Tuple[DebtMonth, ...]
    total_balance: Decimal
    total_payment: Decimal
    total_interest: Decimal
    cumulative_interest: Decimal


@dataclass(frozen=True)
class StrategySummary:
    months: int
    total_interest: Decimal


@dataclass(frozen=True)
class StrategyComparison:
    avalanche: StrategySummary
    snowball: StrategySummary
    interest_saved: Decimal     # snowball interest - avalanche interest
    months_difference: int      # snowball months - avalanche months


def order_debts(debts: Sequence[Debt], strategy) -> List[int]:
    """Indices of `debts` in the order extra payments are applied (stable)."""
    strategy = PayoffStrategy(strategy)
    idx = range(len(debts))
    if strategy is PayoffStrategy.AVALANCHE:
        return sorted(idx, key=lambda i: -debts[i].annual_rate_percent)
    if strategy is PayoffStrategy.SNOWBALL:
        return sorted(idx, key=lambda i: debts[i].balance)
    raise ValueError(f"Unknown payoff strategy: {strategy!r}")


def simulate(
    debts: Sequence[Debt],
    extra_monthly_payment: Number = 0,
    strategy=PayoffStrategy.AVALANCHE,
    max_months: int = 360,
    *,
    start_date: Optional[date] = None,
) -> List[MonthlyProjection]:
    """
    Run the payoff schedule.

    Parameters
    ----------
    debts : sequence of Debt
        Debts to pay down. Output rows keep this order.
    extra_monthly_payment : number
        Budget on top of the minimums, applied in strategy order each month.
    strategy : PayoffStrategy
        "avalanche" or "snowball".
    max_months : int
        Hard cap on simulated months.
    start_date : date, optional
        When given, month k is dated the 1st of the k-th month after it.

    Returns
    -------
    List of MonthlyProjection, one per simulated month (empty for no debts).
    """
    strategy = PayoffStrategy(strategy)
    if max_months < 1:
        raise ValueError(f"max_months must be >= 1, got {max_months}.")
    extra = to_decimal(extra_monthly_payment)
    if extra < 0:
        raise ValueError("extra_monthly_payment must be >= 0.")
    if not debts:
        return []

    order = order_debts(debts, strategy)
    balances: List[Decimal] = [to_decimal(d.balance) for d in debts]
    cumulative_interest = ZERO
    projections: List[MonthlyProjection] = []

    for month in range(1, max_months + 1):
        pool = extra
        month_interest = ZERO
        payments: List[Decimal] = [ZERO] * len(debts)
        interests: List[Decimal] = [ZERO] * len(debts)

        # Interest & minimum pass
        for i, debt in enumerate(debts):
            if balances[i] <= 0:
                pool += debt.minimum_payment
                continue
            interest = monthly_interest(balances[i], debt.annual_rate_percent)
            owed = balances[i] + interest
            payment = min(debt.minimum_payment, owed)
            balances[i] = max(ZERO, owed - payment)
            payments[i] = payment
            interests[i] = interest
            month_interest += interest

        # Extra-payment pass
        for i in order:
            if pool <= 0:
                break
            if balances[i] <= 0:
                continue
            applied = min(pool, balances[i])
            balances[i] -= applied
            payments[i] += applied
            pool -= applied

        cumulative_interest += month_interest
        total_balance = sum(balances, ZERO)

        projections.append(
            MonthlyProjection(
                month=month,
                date=first_of_month(start_date, month) if start_date is not None else None,
                debts=tuple(
                    DebtMonth(
                        id=debt.id,
                        name=debt.name,
                        balance=round_money(balances[i]),
                        payment=round_money(payments[i]),
                        interest=round_money(interests[i]),
                        paid_off=balances[i] <= 0,
                    )
                    for i, debt in enumerate(debts)
                ),
                total_balance=round_money(total_balance),
                total_payment=round_money(sum(payments, ZERO)),
                total_interest=round_money(month_interest),
                cumulative_interest=round_money(cumulative_interest),
            )
        )

        if total_balance <= 0:
            break

    last = projections[-1]
    if last.total_balance > 0:
        log.warning(
            "debt_payoff_not_converged",
            strategy=strategy.value,
            max_months=max_months,
            remaining_balance=str(last.total_balance),
        )
    else:
        log.debug(
            "debt_schedule_built",
            strategy=strategy.value,
            months=len(projections),
            total_interest=str(last.cumulative_interest),
        )
    return projections


def is_paid_off(schedule: Sequence[MonthlyProjection]) -> bool:
    """True when the schedule ends with nothing owed (an empty schedule owes nothing)."""
    return not schedule or schedule[-1].total_balance <= 0


def total_interest(
    debts: Sequence[Debt],
    extra_monthly_payment: Number = 0,
    strategy=PayoffStrategy.AVALANCHE,
) -> Decimal:
    schedule = simulate(debts, extra_monthly_payment, strategy)
    return schedule[-1].cumulative_interest if schedule else round_money(ZERO)


def months_to_payoff(
    debts: Sequence[Debt],
    extra_monthly_payment: Number = 0,
    strategy=PayoffStrategy.AVALANCHE,
) -> int:
    return len(simulate(debts, extra_monthly_payment, strategy))


def _summarise(schedule: Sequence[MonthlyProjection]) -> StrategySummary:
    return StrategySummary(
        months=len(schedule),
        total_interest=schedule[-1].cumulative_interest if schedule else round_money(ZERO),
    )


def compare_strategies(
    debts: Sequence[Debt],
    extra_monthly_payment: Number = 0,
    max_months: int = 360,
) -> StrategyComparison:
    """Run avalanche and snowball on identical inputs and report the difference."""
    avalanche = _summarise(simulate(debts, extra_monthly_payment, PayoffStrategy.AVALANCHE, max_months))
    snowball = _summarise(simulate(debts, extra_monthly_payment, PayoffStrategy.SNOWBALL, max_months))
    return StrategyComparison(
        avalanche=avalanche,
        snowball=snowball,
        interest_saved=snowball.total_interest - avalanche.total_interest,
        months_difference=snowball.months - avalanche.months,
    )


def available_funds(
    monthly_income: Number,
    monthly_bills: Number,
    minimum_debt_payments: Number,
) -> Decimal:
    """Money left for extra repayments after bills and minimums (never negative)."""
    available = to_decimal(monthly_income) - to_decimal(monthly_bills) - to_decimal(minimum_debt_payments)
    return round_money(max(ZERO, available))


def format_payoff_time(months: int) -> str:
    """'Paid off', '7 months', '2 years', '3y 4m'."""
    if months <= 0:
        return "Paid off"
    years, rem = divmod(months, 12)
    if years == 0:
        return f"{rem} month{'s' if rem != 1 else ''}"
    if rem == 0:
        return f"{years} year{'s' if years != 1 else ''}"
    return f"{years}y {rem}m"


def schedule_to_frame(schedule: Sequence[MonthlyProjection]) -> pd.DataFrame:
    """Long format: one row per (month, debt)."""
    rows = []
    for proj in schedule:
        for d in proj.debts:
            rows.append({
                "month": proj.month,
                "date": pd.Timestamp(proj.date) if proj.date is not None else pd.NaT,
                "debt_id": d.id,
                "debt_name": d.name,
                "balance": float(d.balance),
                "payment": float(d.payment),
                "interest": float(d.interest),
                "paid_off": d.paid_off,
                "total_balance": float(proj.total_balance),
                "cumulative_interest": float(proj.cumulative_interest),
            })
    return pd.DataFrame(rows, columns=list(SCHEDULE_COLUMNS))
