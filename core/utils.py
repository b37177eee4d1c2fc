from __future__ import annotations

import calendar
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

import pandas as pd
from dateutil.relativedelta import relativedelta

CENT = Decimal("0.01")
ZERO = Decimal("0")

Number = Union[Decimal, int, float, str]


def require_columns(df: pd.DataFrame, cols: Iterable[str]) -> None:
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")


def to_decimal(value: Number) -> Decimal:
    """Coerce a number to Decimal; floats go through repr so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_money(x: Number) -> Decimal:
    """Round to cents, half away from zero (Excel ROUND semantics)."""
    return to_decimal(x).quantize(CENT, rounding=ROUND_HALF_UP)


def round_half_up(x: float) -> int:
    """Integer rounding with .5 going up, as a spreadsheet or JS Math.round would."""
    return int(Decimal(repr(float(x))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def add_months(d: date, months: int) -> date:
    """Calendar-month shift; the day is clamped to the target month's last day."""
    return d + relativedelta(months=months)


def month_with_day(year: int, month: int, day: int) -> date:
    """date(year, month, day) with day clamped to the month length."""
    last = calendar.monthrange(year, month)[1]
    return date(year, month, min(day, last))


def month_index(d: date) -> int:
    return d.year * 12 + (d.month - 1)


def from_month_index(idx: int, day: int) -> date:
    year, month0 = divmod(idx, 12)
    return month_with_day(year, month0 + 1, day)


def datedif_months(start: date, end: date) -> int:
    """Excel DATEDIF(start, end, "m"): complete months between two dates (negative if end < start)."""
    if end < start:
        return -datedif_months(end, start)
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return int(months)


def whole_weeks(start: date, end: date) -> int:
    """Complete weeks from start to end, truncated toward zero."""
    days = (end - start).days
    return int(days / 7)


def sunday_weekday(d: date) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return (d.weekday() + 1) % 7


def first_of_month(d: date, months_ahead: int = 0) -> date:
    return add_months(date(d.year, d.month, 1), months_ahead)
