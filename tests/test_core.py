import json
import logging
from datetime import date
from decimal import Decimal

import pytest
import structlog
from pydantic import ValidationError

from core.config import DEFAULT_CONFIG, ForecastConfig
from core.log import configure_logging, get_logger
from core.models import Account, Bill, Debt, IncomeEntry, RecurringRule
from core.schema import AccountType, Frequency
from core.utils import datedif_months, round_half_up, round_money, sunday_weekday, to_decimal


class TestRounding:

    def test_round_money_half_away_from_zero(self):
        assert round_money(Decimal("2.345")) == Decimal("2.35")
        assert round_money(Decimal("-2.345")) == Decimal("-2.35")
        assert round_money(Decimal("2.344")) == Decimal("2.34")

    def test_floats_keep_their_short_repr(self):
        assert to_decimal(0.1) == Decimal("0.1")
        assert round_money(1.005) == Decimal("1.01")

    def test_round_half_up(self):
        assert round_half_up(42.5) == 43
        assert round_half_up(42.49) == 42
        assert round_half_up(-0.4) == 0


class TestDates:

    def test_datedif_counts_complete_months(self):
        assert datedif_months(date(2024, 1, 31), date(2024, 3, 30)) == 1
        assert datedif_months(date(2024, 1, 15), date(2024, 4, 15)) == 3
        assert datedif_months(date(2024, 6, 15), date(2024, 7, 1)) == 0

    def test_datedif_negative_when_reversed(self):
        assert datedif_months(date(2024, 4, 15), date(2024, 1, 15)) == -3

    def test_sunday_is_zero(self):
        assert sunday_weekday(date(2024, 3, 3)) == 0   # Sunday
        assert sunday_weekday(date(2024, 3, 4)) == 1   # Monday
        assert sunday_weekday(date(2024, 3, 9)) == 6   # Saturday


class TestRecords:

    def test_from_anchor_sets_matching_field(self):
        weekly = RecurringRule.from_anchor(Frequency.WEEKLY, date(2024, 3, 4))
        assert weekly.anchor_day_of_week == 1
        assert weekly.anchor_day_of_month is None

        monthly = RecurringRule.from_anchor("monthly", date(2024, 1, 31))
        assert monthly.frequency is Frequency.MONTHLY
        assert monthly.anchor_day_of_month == 31
        assert monthly.anchor_day_of_week is None

        once = RecurringRule.from_anchor(Frequency.ONCE, date(2024, 1, 31))
        assert once.anchor_day_of_week is None and once.anchor_day_of_month is None

    def test_money_is_coerced_to_decimal(self):
        bill = Bill(
            name="Power",
            amount="120.50",
            rule=RecurringRule.from_anchor(Frequency.MONTHLY, date(2024, 1, 5)),
        )
        assert bill.amount == Decimal("120.50")
        debt = Debt(id="d", name="D", balance=100, annual_rate_percent=19.99, minimum_payment=10)
        assert isinstance(debt.balance, Decimal)

    def test_one_off_bill_fires_once(self):
        bill = Bill(
            name="Rego",
            amount=300,
            rule=RecurringRule.from_anchor(Frequency.YEARLY, date(2024, 5, 1)),
            is_one_off=True,
        )
        assert bill.effective_rule.frequency is Frequency.ONCE
        assert bill.effective_rule.anchor_date == date(2024, 5, 1)

    def test_bill_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            Bill(name="Free", amount=0, rule=RecurringRule.once(date(2024, 1, 1)))

    def test_income_amount_may_be_zero_but_not_negative(self):
        rule = RecurringRule.once(date(2024, 1, 1))
        IncomeEntry(source="Gift", amount=0, rule=rule)
        with pytest.raises(ValidationError):
            IncomeEntry(source="Gift", amount=-1, rule=rule)

    def test_anchor_day_ranges(self):
        with pytest.raises(ValidationError):
            RecurringRule(frequency=Frequency.WEEKLY, anchor_date=date(2024, 1, 1), anchor_day_of_week=7)
        with pytest.raises(ValidationError):
            RecurringRule(frequency=Frequency.MONTHLY, anchor_date=date(2024, 1, 1), anchor_day_of_month=0)

    def test_account_rejects_non_accrual_frequency(self):
        with pytest.raises(ValidationError):
            Account(type=AccountType.LOAN, balance=10, payment_frequency=Frequency.YEARLY)

    def test_debt_from_account(self):
        account = Account(id="a1", name="Visa", type=AccountType.CREDIT_CARD, balance="850", interest_rate="19.99")
        debt = Debt.from_account(account, minimum_payment=25)
        assert debt.id == "a1"
        assert debt.annual_rate_percent == Decimal("19.99")
        assert debt.minimum_payment == Decimal("25")

    def test_records_are_immutable(self):
        debt = Debt(id="d", name="D", balance=100)
        with pytest.raises(ValidationError):
            debt.balance = Decimal("5")


def test_default_config():
    assert DEFAULT_CONFIG == ForecastConfig()
    assert DEFAULT_CONFIG.max_months == 360
    assert DEFAULT_CONFIG.snapshot_tolerance_days == 5


def test_configure_logging_renders_json(caplog):
    configure_logging(logging.DEBUG)
    try:
        with caplog.at_level(logging.DEBUG, logger="sprout.test"):
            get_logger("sprout.test").info("checked", answer=42)
        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "checked"
        assert payload["answer"] == 42
        assert payload["level"] == "info"
    finally:
        structlog.reset_defaults()
