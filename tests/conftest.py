from datetime import date

import pytest

from core.models import Account, Bill, Debt, IncomeEntry, NetWorthSnapshot, RecurringRule
from core.schema import AccountType, Frequency


@pytest.fixture
def start():
    # A Monday
    return date(2024, 3, 4)


@pytest.fixture
def bank_1000():
    return Account(id="chq", name="Everyday", type=AccountType.BANK, balance="1000.00")


@pytest.fixture
def weekly_bill(start):
    return Bill(
        name="Groceries",
        amount="50.00",
        rule=RecurringRule.from_anchor(Frequency.WEEKLY, start),
    )


@pytest.fixture
def card_and_loan():
    return [
        Debt(id="card", name="Card", balance="1000", annual_rate_percent="22", minimum_payment="50"),
        Debt(id="loan", name="Loan", balance="5000", annual_rate_percent="8", minimum_payment="120"),
    ]


@pytest.fixture
def salary(start):
    return IncomeEntry(
        source="Salary",
        amount="1500.00",
        rule=RecurringRule.from_anchor(Frequency.FORTNIGHTLY, start),
    )


@pytest.fixture
def as_of():
    return date(2024, 6, 15)


@pytest.fixture
def steady_history():
    """+1000 every month for three months, ending at 9000 a month before as_of."""
    return [
        NetWorthSnapshot(snapshot_date=date(2024, 3, 15), net_worth=7000),
        NetWorthSnapshot(snapshot_date=date(2024, 4, 15), net_worth=8000),
        NetWorthSnapshot(snapshot_date=date(2024, 5, 15), net_worth=9000),
    ]
