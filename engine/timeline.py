"""
Cash-flow timeline: a per-day running balance projection.

Starting point is the spendable balance (bank + cash minus what is owed on
credit cards). Every enabled income entry and active bill is expanded into
occurrences over the event horizon [start, start + days - 1]; the timeline
itself has days + 1 entries, the last one being the closing balance of the
horizon. Each day applies its income first, then its bills, so the balance on
day d depends only on day d-1 and day d's own events.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from core.log import get_logger
from core.models import Account, Bill, IncomeEntry
from core.schema import OWED_CREDIT_TYPES, SPENDABLE_TYPES, TIMELINE_COLUMNS, EventType
from core.utils import ZERO, round_money, to_decimal
from schedule.recurrence import expand

log = get_logger(__name__)


@dataclass(frozen=True)
class TimelineEvent:
    type: EventType
    name: str
    amount: Decimal


@dataclass(frozen=True)
class TimelineDay:
    date: date
    projected_balance: Decimal
    events: Tuple[TimelineEvent, ...]
    is_negative: bool

    @property
    def income(self) -> Decimal:
        return sum((e.amount for e in self.events if e.type is EventType.INCOME), ZERO)

    @property
    def bills(self) -> Decimal:
        return sum((e.amount for e in self.events if e.type is EventType.BILL), ZERO)


@dataclass(frozen=True)
class LowestBalance:
    date: date
    balance: Decimal


def spendable_balance(accounts: Iterable[Account]) -> Decimal:
    """Bank and cash balances less the amounts owed on credit accounts."""
    total = ZERO
    for account in accounts:
        if account.type in SPENDABLE_TYPES:
            total += to_decimal(account.balance)
        elif account.type in OWED_CREDIT_TYPES:
            total -= to_decimal(account.balance)
    return total


def _collect_events(
    income_entries: Sequence[IncomeEntry],
    bills: Sequence[Bill],
    start: date,
    end: date,
) -> Tuple[Dict[date, List[TimelineEvent]], Dict[date, List[TimelineEvent]]]:
    incomes: Dict[date, List[TimelineEvent]] = defaultdict(list)
    outgoings: Dict[date, List[TimelineEvent]] = defaultdict(list)

    for entry in income_entries:
        if not entry.enabled:
            continue
        for d in expand(entry.rule, start, end):
            incomes[d].append(TimelineEvent(EventType.INCOME, entry.source, entry.amount))

    for bill in bills:
        if not bill.active:
            continue
        for d in expand(bill.effective_rule, start, end):
            outgoings[d].append(TimelineEvent(EventType.BILL, bill.name, bill.amount))

    return incomes, outgoings


def build_timeline(
    *,
    days: int,
    accounts: Sequence[Account],
    income_entries: Sequence[IncomeEntry],
    bills: Sequence[Bill],
    start_date: date,
) -> List[TimelineDay]:
    """
    Project the spendable balance day by day.

    Parameters
    ----------
    days : int
        Horizon length; the result has days + 1 entries starting at start_date.
        Events are collected for the first `days` days only, so the last entry
        is a closing-balance row with no events of its own.
    accounts : sequence of Account
        Source of the starting spendable balance.
    income_entries, bills : sequences
        Recurring definitions. Disabled income and inactive bills are ignored;
        one-off bills fire once on their anchor date.
    start_date : date
        First day of the projection.

    Raises
    ------
    InvalidRuleError
        If any enabled/active entry carries a malformed rule.
    ValueError
        If days is negative.
    """
    if days < 0:
        raise ValueError(f"days must be >= 0, got {days}.")

    horizon_end = start_date + timedelta(days=days - 1)
    incomes, outgoings = _collect_events(income_entries, bills, start_date, horizon_end)

    running = spendable_balance(accounts)
    timeline: List[TimelineDay] = []

    for offset in range(days + 1):
        current = start_date + timedelta(days=offset)
        day_incomes = incomes.get(current, [])
        day_bills = outgoings.get(current, [])

        for event in day_incomes:
            running += event.amount
        for event in day_bills:
            running -= event.amount

        timeline.append(
            TimelineDay(
                date=current,
                projected_balance=round_money(running),
                events=tuple(day_incomes) + tuple(day_bills),
                is_negative=running < 0,
            )
        )

    log.debug(
        "timeline_built",
        start_date=start_date.isoformat(),
        days=days,
        n_income=sum(len(v) for v in incomes.values()),
        n_bills=sum(len(v) for v in outgoings.values()),
        closing_balance=str(timeline[-1].projected_balance),
    )
    return timeline


def find_lowest_balance(timeline: Sequence[TimelineDay]) -> Optional[LowestBalance]:
    """Earliest day holding the minimum projected balance."""
    if not timeline:
        return None
    lowest = timeline[0]
    for day in timeline:
        if day.projected_balance < lowest.projected_balance:
            lowest = day
    return LowestBalance(date=lowest.date, balance=lowest.projected_balance)


def has_negative_balance(timeline: Sequence[TimelineDay]) -> bool:
    return any(day.is_negative for day in timeline)


def get_first_negative_date(timeline: Sequence[TimelineDay]) -> Optional[date]:
    for day in timeline:
        if day.is_negative:
            return day.date
    return None


def timeline_to_frame(timeline: Sequence[TimelineDay]) -> pd.DataFrame:
    """One row per day, ready for charting."""
    rows = [
        {
            "date": pd.Timestamp(day.date),
            "projected_balance": float(day.projected_balance),
            "income": float(day.income),
            "bills": float(day.bills),
            "n_events": len(day.events),
            "is_negative": day.is_negative,
        }
        for day in timeline
    ]
    return pd.DataFrame(rows, columns=list(TIMELINE_COLUMNS))
