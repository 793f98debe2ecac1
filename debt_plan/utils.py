"""Utility functions for the debt payoff planner.

This module provides the frequency and amortization helpers the engine is
built on (pay frequency factors, periodic interest, per-period minimums) as
well as helpers for parsing user input and stepping dates. Month spans are
measured with ``dateutil.relativedelta``.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal, getcontext
from typing import Dict, Iterable, Optional, Union

from dateutil.relativedelta import relativedelta

from .data_models import Debt

getcontext().prec = 28  # increase decimal precision to avoid rounding errors

Number = Union[Decimal, int, float, str]

# Monthly multiplier of one pay period.
FREQUENCY_FACTORS: Dict[str, Decimal] = {
    "weekly": Decimal(12) / Decimal(52),
    "biweekly": Decimal(12) / Decimal(26),
    "monthly": Decimal(1),
}

# Monthly cadence uses a fixed 30-day step, not calendar months.
PERIOD_DAYS: Dict[str, int] = {
    "weekly": 7,
    "biweekly": 14,
    "monthly": 30,
}

DEFAULT_FREQUENCY = "biweekly"


def frequency_factor(frequency: str) -> Decimal:
    """Return the share of a month covered by one pay period.

    Weekly is ``12/52``, biweekly ``12/26`` and monthly ``1``. Any other value
    falls back to the biweekly factor instead of raising, so the function is
    total over arbitrary strings.
    """
    return FREQUENCY_FACTORS.get(frequency, FREQUENCY_FACTORS[DEFAULT_FREQUENCY])


def period_days(frequency: str) -> int:
    """Return the number of days between two paydays (14 for unknown values)."""
    return PERIOD_DAYS.get(frequency, PERIOD_DAYS[DEFAULT_FREQUENCY])


def monthly_interest(balance: Decimal, apr: Decimal) -> Decimal:
    return balance * (apr / Decimal(12))


def period_interest(balance: Decimal, apr: Decimal, frequency: str) -> Decimal:
    """Return simple interest accrued on ``balance`` over one pay period.

    The formula is ``balance * (apr / 12) * frequency_factor``. Interest does
    not compound inside a period; it compounds across periods only because
    the engine adds it to the balance before the next accrual.
    """
    return monthly_interest(balance, apr) * frequency_factor(frequency)


def per_period_minimum(debts: Iterable[Debt], frequency: str) -> Dict[str, Decimal]:
    """Map each debt id to its monthly minimum scaled to one pay period."""
    factor = frequency_factor(frequency)
    return {debt.id: debt.min_payment * factor for debt in debts}


def next_payday(start: date, frequency: str, today: Optional[date] = None) -> date:
    """Return the first payday on the cadence anchored at ``start``.

    A start date in the future is itself the next payday. Otherwise ``start``
    is stepped forward by the period length until it lands strictly after
    ``today``.
    """
    if today is None:
        today = date.today()
    if start > today:
        return start
    step = timedelta(days=period_days(frequency))
    payday = start
    while payday <= today:
        payday += step
    return payday


def months_between(start: date, end: date) -> int:
    """Return the number of whole months from ``start`` to ``end``."""
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def parse_iso_date(value: Union[date, str]) -> date:
    """Parse a ``YYYY-MM-DD`` string into a ``date``.

    Raises
    ------
    ValueError
        If the string is not a valid calendar date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except (AttributeError, ValueError) as exc:
        raise ValueError(f"Invalid ISO date: {value}") from exc


def decimal_from_str(value: Number) -> Decimal:
    """Convert a numeric value or string into a ``Decimal``.

    Commas are stripped from strings. Floats are converted through ``str`` so
    ``0.1`` becomes ``Decimal("0.1")`` rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value}")
    try:
        cleaned = str(value).replace(",", "").strip()
        result = Decimal(cleaned)
    except Exception as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def format_currency(amount: Decimal) -> str:
    """Format ``amount`` as US dollars, e.g. ``$1,234.50``."""
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"


def format_percent(fraction: Decimal) -> str:
    return f"{fraction * 100:.2f}%"
