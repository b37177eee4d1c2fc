"""
Coerce tabular exports (CSV / DataFrame) into engine input records.

Storage exports typically carry string decimals, ISO date strings and
NaN for empty cells; everything is normalised here so the engine only ever
sees validated records.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import pandas as pd

from core.models import Account, Bill, Debt, IncomeEntry, NetWorthSnapshot, RecurringRule
from core.utils import require_columns


def load_csv(path: str, *, low_memory: bool = False) -> pd.DataFrame:
    return pd.read_csv(path, low_memory=low_memory)


def _rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    clean = df.astype(object).where(pd.notna(df), None)
    return clean.to_dict("records")


def _to_date(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, date) and not isinstance(value, pd.Timestamp):
        return value
    ts = pd.to_datetime(value, errors="coerce")
    if pd.isna(ts):
        raise ValueError(f"Unparseable date: {value!r}")
    return ts.date()


def _to_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "t")
    return bool(value)


def accounts_from_frame(df: pd.DataFrame) -> List[Account]:
    require_columns(df, ["type", "balance"])
    out = []
    for row in _rows(df):
        for col in ("interest_last_applied", "created_at"):
            if col in row:
                row[col] = _to_date(row[col])
        if "is_asset" in row:
            row["is_asset"] = _to_bool(row["is_asset"], True)
        if "id" in row and row["id"] is not None:
            row["id"] = str(row["id"])
        out.append(Account.model_validate(row))
    return out


def income_from_frame(df: pd.DataFrame) -> List[IncomeEntry]:
    """Columns: source, amount, frequency, anchor_date[, enabled]."""
    require_columns(df, ["source", "amount", "frequency", "anchor_date"])
    out = []
    for row in _rows(df):
        rule = RecurringRule.from_anchor(row["frequency"], _to_date(row["anchor_date"]))
        out.append(
            IncomeEntry(
                source=row["source"],
                amount=row["amount"],
                rule=rule,
                enabled=_to_bool(row.get("enabled"), True),
            )
        )
    return out


def bills_from_frame(df: pd.DataFrame) -> List[Bill]:
    """Columns: name, amount, frequency, next_due[, active, is_one_off]."""
    require_columns(df, ["name", "amount", "frequency", "next_due"])
    out = []
    for row in _rows(df):
        rule = RecurringRule.from_anchor(row["frequency"], _to_date(row["next_due"]))
        out.append(
            Bill(
                name=row["name"],
                amount=row["amount"],
                rule=rule,
                active=_to_bool(row.get("active"), True),
                is_one_off=_to_bool(row.get("is_one_off"), False),
            )
        )
    return out


def debts_from_frame(df: pd.DataFrame) -> List[Debt]:
    require_columns(df, ["id", "name", "balance", "annual_rate_percent", "minimum_payment"])
    out = []
    for row in _rows(df):
        row["id"] = str(row["id"])
        out.append(Debt.model_validate(row))
    return out


def snapshots_from_frame(df: pd.DataFrame) -> List[NetWorthSnapshot]:
    require_columns(df, ["snapshot_date", "net_worth"])
    out = []
    for row in _rows(df):
        row["snapshot_date"] = _to_date(row["snapshot_date"])
        for col in ("total_assets", "total_liabilities"):
            if row.get(col) is None:
                row.pop(col, None)
        out.append(NetWorthSnapshot.model_validate(row))
    return out
