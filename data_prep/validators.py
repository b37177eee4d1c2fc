"""
Data quality checks on engine inputs before a projection is run.

Catches problems early:
- Recurring rules the expander would reject
- Debts whose minimum payment never outruns the interest
- Rates that look like decimals rather than percentages
- Snapshot histories too thin or oddly dated to estimate growth from
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import List, Sequence

import numpy as np

from core.errors import InvalidRuleError
from core.models import Account, Bill, Debt, IncomeEntry, NetWorthSnapshot
from core.schema import SPENDABLE_TYPES
from engine.interest import monthly_interest
from schedule.recurrence import validate_rule


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a set of inputs."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_cashflow_inputs(
    accounts: Sequence[Account],
    income_entries: Sequence[IncomeEntry],
    bills: Sequence[Bill],
) -> ValidationResult:
    """Errors for rules the timeline would fail on; warnings for suspicious setups."""
    result = ValidationResult()

    if not any(a.type in SPENDABLE_TYPES for a in accounts):
        result.warnings.append("No bank or cash accounts; starting balance only reflects credit owed.")

    for entry in income_entries:
        if not entry.enabled:
            continue
        try:
            validate_rule(entry.rule)
        except InvalidRuleError as exc:
            result.errors.append(f"Income {entry.source!r}: {exc}")
        if entry.amount == 0:
            result.warnings.append(f"Income {entry.source!r} has zero amount.")

    for bill in bills:
        if not bill.active:
            continue
        try:
            validate_rule(bill.effective_rule)
        except InvalidRuleError as exc:
            result.errors.append(f"Bill {bill.name!r}: {exc}")

    return result


def validate_debts(debts: Sequence[Debt]) -> ValidationResult:
    result = ValidationResult()
    if len(debts) == 0:
        result.warnings.append("No debts supplied.")
        return result

    # --- IDs ---
    dupes = [i for i, n in Counter(d.id for d in debts).items() if n > 1]
    if dupes:
        result.warnings.append(f"{len(dupes)} duplicate debt ids found: {sorted(dupes)}.")

    # --- Rates ---
    rates = np.array([float(d.annual_rate_percent) for d in debts], dtype=float)
    n_decimal = int(((rates > 0) & (rates < 1)).sum())
    n_high = int((rates > 100).sum())
    if n_decimal > 0:
        result.warnings.append(
            f"{n_decimal} debts have a rate below 1%; check if rates are in "
            f"percent vs decimal form."
        )
    if n_high > 0:
        result.warnings.append(f"{n_high} debts have a rate above 100%.")

    # --- Minimums vs interest ---
    for d in debts:
        if d.balance <= 0:
            continue
        if d.minimum_payment <= monthly_interest(d.balance, d.annual_rate_percent):
            result.warnings.append(
                f"Debt {d.name!r}: minimum payment {d.minimum_payment} does not cover "
                f"monthly interest; it will not shrink without extra payments."
            )

    return result


def validate_snapshots(
    snapshots: Sequence[NetWorthSnapshot],
    *,
    as_of: date,
) -> ValidationResult:
    result = ValidationResult()
    if len(snapshots) == 0:
        result.warnings.append("No snapshots; growth will be reported as 0.")
        return result

    n_future = sum(1 for s in snapshots if s.snapshot_date > as_of)
    if n_future > 0:
        result.warnings.append(f"{n_future} snapshots are dated after {as_of.isoformat()}.")

    n_dup = sum(n - 1 for n in Counter(s.snapshot_date for s in snapshots).values() if n > 1)
    if n_dup > 0:
        result.warnings.append(f"{n_dup} duplicate snapshot dates found.")

    values = np.array([s.net_worth for s in snapshots], dtype=float)
    if not np.isfinite(values).all():
        result.errors.append("Snapshots contain non-finite net worth values.")

    return result
