from datetime import date
from decimal import Decimal

import pytest

from debt_plan.utils import (
    decimal_from_str,
    format_currency,
    format_percent,
    frequency_factor,
    months_between,
    next_payday,
    parse_iso_date,
    per_period_minimum,
    period_days,
    period_interest,
)
from tests.conftest import make_debt


def test_frequency_factors():
    assert frequency_factor("weekly") == Decimal(12) / Decimal(52)
    assert frequency_factor("biweekly") == Decimal(12) / Decimal(26)
    assert frequency_factor("monthly") == Decimal(1)


@pytest.mark.parametrize("value", ["fortnightly", "", "WEEKLY", "semi-monthly"])
def test_unknown_frequency_falls_back_to_biweekly(value):
    # Unrecognized values never raise; they use the biweekly factor and step.
    assert frequency_factor(value) == frequency_factor("biweekly")
    assert period_days(value) == 14


def test_period_days():
    assert period_days("weekly") == 7
    assert period_days("biweekly") == 14
    assert period_days("monthly") == 30


def test_period_interest_monthly_is_one_twelfth_of_apr():
    assert period_interest(Decimal("1200"), Decimal("0.12"), "monthly") == Decimal("12")


def test_period_interest_scales_with_frequency():
    monthly = period_interest(Decimal("1000"), Decimal("0.24"), "monthly")
    weekly = period_interest(Decimal("1000"), Decimal("0.24"), "weekly")
    assert weekly == monthly * Decimal(12) / Decimal(52)
    assert period_interest(Decimal("1000"), Decimal("0"), "weekly") == 0


def test_per_period_minimum():
    debts = [make_debt("a", 100, "0.1", 26), make_debt("b", 100, "0.1", 52)]
    assert per_period_minimum(debts, "monthly") == {"a": Decimal("26"), "b": Decimal("52")}
    weekly = per_period_minimum(debts, "weekly")
    assert weekly["a"] == Decimal(26) * Decimal(12) / Decimal(52)
    assert weekly["b"] == Decimal(52) * Decimal(12) / Decimal(52)


def test_next_payday_future_start_is_the_payday():
    assert next_payday(date(2030, 5, 1), "weekly", today=date(2030, 4, 1)) == date(2030, 5, 1)


def test_next_payday_advances_past_today():
    assert next_payday(date(2026, 1, 1), "weekly", today=date(2026, 1, 20)) == date(2026, 1, 22)
    # A payday that falls on today is already spent.
    assert next_payday(date(2026, 1, 1), "biweekly", today=date(2026, 1, 15)) == date(2026, 1, 29)
    assert next_payday(date(2026, 1, 1), "monthly", today=date(2026, 1, 1)) == date(2026, 1, 31)


def test_months_between_counts_whole_months():
    assert months_between(date(2026, 1, 15), date(2026, 3, 14)) == 1
    assert months_between(date(2026, 1, 15), date(2027, 1, 15)) == 12
    assert months_between(date(2026, 1, 15), date(2026, 1, 20)) == 0


def test_parse_iso_date():
    assert parse_iso_date("2030-02-28") == date(2030, 2, 28)
    assert parse_iso_date(date(2030, 2, 28)) == date(2030, 2, 28)
    with pytest.raises(ValueError):
        parse_iso_date("2030-02-30")
    with pytest.raises(ValueError):
        parse_iso_date("next friday")


def test_decimal_from_str():
    assert decimal_from_str("1,234.50") == Decimal("1234.50")
    assert decimal_from_str(0.1) == Decimal("0.1")
    assert decimal_from_str(7) == Decimal("7")
    for bad in ("abc", "nan", "inf", True):
        with pytest.raises(ValueError):
            decimal_from_str(bad)


def test_formatting():
    assert format_currency(Decimal("1234.5")) == "$1,234.50"
    assert format_currency(Decimal("-3")) == "-$3.00"
    assert format_percent(Decimal("0.2499")) == "24.99%"
