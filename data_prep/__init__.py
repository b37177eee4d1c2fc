"""
Data preparation: coercing tabular exports into records, and input validation.
"""

from .loader import (
    accounts_from_frame,
    bills_from_frame,
    debts_from_frame,
    income_from_frame,
    load_csv,
    snapshots_from_frame,
)
from .validators import (
    ValidationResult,
    validate_cashflow_inputs,
    validate_debts,
    validate_snapshots,
)

__all__ = [
    "load_csv",
    "accounts_from_frame",
    "bills_from_frame",
    "debts_from_frame",
    "income_from_frame",
    "snapshots_from_frame",
    "ValidationResult",
    "validate_cashflow_inputs",
    "validate_debts",
    "validate_snapshots",
]
