"""Shared fixtures and factories for the debt planner tests."""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest

from debt_plan.data_models import Debt, PlanInput, Strategy

START = date(2030, 1, 4)


def make_debt(debt_id, balance, apr, min_payment, name=None, **kwargs) -> Debt:
    return Debt(
        id=debt_id,
        name=name or debt_id,
        balance=Decimal(str(balance)),
        apr=Decimal(str(apr)),
        min_payment=Decimal(str(min_payment)),
        **kwargs,
    )


def make_plan(
    debts,
    extra,
    strategy=Strategy.AVALANCHE,
    frequency="biweekly",
    start=START,
    custom_priority=None,
) -> PlanInput:
    return PlanInput(
        debts=list(debts),
        strategy=strategy,
        extra_payment=Decimal(str(extra)),
        pay_frequency=frequency,
        start_date=start,
        custom_priority=custom_priority,
    )


def allocation_for(entry, debt_id) -> Decimal:
    for allocation in entry.allocations:
        if allocation.debt_id == debt_id:
            return allocation.amount
    return Decimal("0")


@pytest.fixture
def two_cards():
    return [
        make_debt("a", 500, "0.25", 25, name="Card A"),
        make_debt("b", 2000, "0.10", 40, name="Card B"),
    ]


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("debt_plan")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


def close(actual, expected, tolerance=Decimal("1e-9")) -> bool:
    """Compare Decimals that went through different rounding paths."""
    return abs(Decimal(actual) - Decimal(expected)) <= tolerance
