"""
Recurring-rule expansion: turns a RecurringRule into concrete occurrence dates.

Occurrence k of a rule is always computed from the anchor, never from
occurrence k-1:
  - weekly / fortnightly:       anchor + k * 7 / 14 days
  - monthly / quarterly / yearly: anchor month + k * 1 / 3 / 12 months, on the
    anchor day of month clamped to the length of the target month

so an anchor on the 31st gives Jan 31, Feb 28/29, Mar 31 rather than sliding
to the 28th forever. Occurrences never precede the anchor.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import List, Optional

from core.errors import InvalidRuleError
from core.models import RecurringRule
from core.schema import DAY_STEPS, MONTH_STEPS, Frequency
from core.utils import from_month_index, month_index, month_with_day, sunday_weekday


def validate_rule(rule: RecurringRule) -> None:
    """
    Raise InvalidRuleError unless the rule has exactly the anchor its frequency needs.

    Weekly/fortnightly rules need anchor_day_of_week, monthly/quarterly/yearly
    rules need anchor_day_of_month, and `once` takes neither. The anchor day must
    also agree with anchor_date (for month rules: after clamping to that month).
    """
    if rule.anchor_date is None:
        raise InvalidRuleError("rule has no anchor_date", rule=rule)

    dow = rule.anchor_day_of_week
    dom = rule.anchor_day_of_month
    freq = rule.frequency

    if freq is Frequency.ONCE:
        if dow is not None or dom is not None:
            raise InvalidRuleError("a one-time rule takes no anchor day", rule=rule)
    elif freq in DAY_STEPS:
        if dow is None:
            raise InvalidRuleError(f"{freq.value} rule is missing anchor_day_of_week", rule=rule)
        if dom is not None:
            raise InvalidRuleError(
                f"{freq.value} rule cannot have anchor_day_of_month", rule=rule
            )
        if dow != sunday_weekday(rule.anchor_date):
            raise InvalidRuleError(
                f"anchor_day_of_week {dow} does not match anchor_date "
                f"{rule.anchor_date.isoformat()}",
                rule=rule,
            )
    elif freq in MONTH_STEPS:
        if dom is None:
            raise InvalidRuleError(f"{freq.value} rule is missing anchor_day_of_month", rule=rule)
        if dow is not None:
            raise InvalidRuleError(
                f"{freq.value} rule cannot have anchor_day_of_week", rule=rule
            )
        a = rule.anchor_date
        if month_with_day(a.year, a.month, dom) != a:
            raise InvalidRuleError(
                f"anchor_day_of_month {dom} does not match anchor_date {a.isoformat()}",
                rule=rule,
            )
    else:
        raise InvalidRuleError(f"unsupported frequency: {freq!r}", rule=rule)


def _occurrence(rule: RecurringRule, k: int) -> date:
    if rule.frequency in DAY_STEPS:
        return rule.anchor_date + timedelta(days=k * DAY_STEPS[rule.frequency])
    idx = month_index(rule.anchor_date) + k * MONTH_STEPS[rule.frequency]
    return from_month_index(idx, rule.anchor_day_of_month)


def _first_index(rule: RecurringRule, on_or_after: date) -> int:
    """Smallest k >= 0 whose occurrence falls on or after the given date."""
    anchor = rule.anchor_date
    if anchor >= on_or_after:
        return 0
    if rule.frequency in DAY_STEPS:
        step = DAY_STEPS[rule.frequency]
        return -(-(on_or_after - anchor).days // step)

    step = MONTH_STEPS[rule.frequency]
    k = (month_index(on_or_after) - month_index(anchor)) // step
    while _occurrence(rule, k) < on_or_after:
        k += 1
    return k


def expand(rule: RecurringRule, window_start: date, window_end: date) -> List[date]:
    """
    All occurrences of `rule` in [window_start, window_end], both ends inclusive.

    Parameters
    ----------
    rule : RecurringRule
        The rule to expand. Validated first; a malformed rule raises
        InvalidRuleError rather than quietly producing nothing.
    window_start, window_end : date
        Inclusive window. An inverted window yields an empty list.

    Returns
    -------
    Sorted list of dates (possibly empty).
    """
    validate_rule(rule)
    if window_end < window_start:
        return []

    if rule.frequency is Frequency.ONCE:
        return [rule.anchor_date] if window_start <= rule.anchor_date <= window_end else []

    out: List[date] = []
    k = _first_index(rule, window_start)
    occ = _occurrence(rule, k)
    while occ <= window_end:
        out.append(occ)
        k += 1
        occ = _occurrence(rule, k)
    return out


def next_occurrence(rule: RecurringRule, on_or_after: date) -> Optional[date]:
    """First occurrence on or after the given date; None once a one-time rule has passed."""
    validate_rule(rule)
    if rule.frequency is Frequency.ONCE:
        return rule.anchor_date if rule.anchor_date >= on_or_after else None
    return _occurrence(rule, _first_index(rule, on_or_after))
