"""Core allocation and simulation engine for the debt payoff planner.

This module steps a working copy of the debts forward one pay period at a
time. Each period interest is accrued, the per-period share of every minimum
payment is covered from the period's cash, and whatever is left goes to the
single target debt chosen by the plan's strategy. Results are returned as a
list of ``ScheduleEntry`` objects, a ``PlanSummary`` and a ``NextMove``.

The caller's ``Debt`` records are never modified: every run builds its own
mutable ``_WorkingDebt`` copies and discards them when it returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, timedelta
from decimal import Decimal, getcontext
from typing import Dict, Iterable, List, Optional, Tuple

from .data_models import NextMove, PaymentAllocation, PlanInput, PlanSummary, ScheduleEntry, Strategy
from .strategies import choose_target, strategy_label
from .utils import (
    format_currency,
    months_between,
    next_payday,
    per_period_minimum,
    period_days,
    period_interest,
)

getcontext().prec = 28  # increase precision for financial calculations

logger = logging.getLogger(__name__)

# Balances at or below one cent count as paid off.
EPSILON = Decimal("0.01")
# Roughly ten years of biweekly paychecks.
MAX_PERIODS = 520

ZERO = Decimal("0")


@dataclass
class _WorkingDebt:
    id: str
    name: str
    apr: Decimal
    balance: Decimal


def _working_copies(config: PlanInput) -> List[_WorkingDebt]:
    return [_WorkingDebt(id=d.id, name=d.name, apr=d.apr, balance=d.balance) for d in config.debts]


def _allocate(
    allocations: List[PaymentAllocation],
    debt_id: str,
    amount: Decimal,
) -> None:
    """Add ``amount`` to the allocation for ``debt_id``, creating it if needed."""
    for allocation in allocations:
        if allocation.debt_id == debt_id:
            allocation.amount += amount
            return
    allocations.append(PaymentAllocation(debt_id=debt_id, amount=amount))


def _pay_period(
    working: List[_WorkingDebt],
    config: PlanInput,
    minimums: Dict[str, Decimal],
) -> Tuple[List[PaymentAllocation], Optional[_WorkingDebt]]:
    """Pay minimums then the target out of one period's cash.

    Balances in ``working`` are reduced in place. Returns the allocations and
    the target debt (``None`` when nothing is owed after minimums).
    """
    pool = config.extra_payment
    allocations: List[PaymentAllocation] = []

    for debt in working:
        if debt.balance <= 0:
            continue
        amount = min(minimums[debt.id], pool, debt.balance)
        if amount > 0:
            _allocate(allocations, debt.id, amount)
            debt.balance -= amount
            pool -= amount

    # Ranking is redone on post-minimum balances every period.
    target = choose_target(working, config.strategy, config.custom_priority)
    if pool > 0 and target is not None:
        extra = min(pool, target.balance)
        if extra > 0:
            _allocate(allocations, target.id, extra)
            target.balance -= extra

    return allocations, target


def compute_full_schedule(config: PlanInput) -> List[ScheduleEntry]:
    """Simulate pay periods until every debt is paid or the ceiling is hit.

    Parameters
    ----------
    config: PlanInput
        The plan to simulate. An empty debt list or a non-positive
        ``extra_payment`` yields an empty schedule.

    Returns
    -------
    List[ScheduleEntry]
        One entry per pay period in chronological order, starting on
        ``config.start_date`` and advancing by 7, 14 or 30 days.
    """
    if not config.debts or config.extra_payment <= 0:
        return []

    working = _working_copies(config)
    minimums = per_period_minimum(config.debts, config.pay_frequency)
    step = timedelta(days=period_days(config.pay_frequency))

    schedule: List[ScheduleEntry] = []
    current_date = config.start_date
    iterations = 0
    while any(d.balance > EPSILON for d in working) and iterations < MAX_PERIODS:
        iterations += 1

        interest_paid: Dict[str, Decimal] = {}
        for debt in working:
            if debt.balance > 0:
                accrued = period_interest(debt.balance, debt.apr, config.pay_frequency)
                interest_paid[debt.id] = accrued
                debt.balance += accrued

        allocations, _ = _pay_period(working, config, minimums)

        schedule.append(
            ScheduleEntry(
                date=current_date,
                allocations=allocations,
                total=config.extra_payment,
                disbursed=sum((a.amount for a in allocations), ZERO),
                remaining_balances={d.id: max(ZERO, d.balance) for d in working},
                interest_paid=interest_paid,
            )
        )
        current_date += step

    if iterations >= MAX_PERIODS and any(d.balance > EPSILON for d in working):
        logger.warning(
            "Schedule stopped after %d periods with %s still owed",
            MAX_PERIODS,
            sum((d.balance for d in working if d.balance > 0), ZERO),
        )
    logger.debug("Computed %d-period %s schedule", len(schedule), config.strategy.value)
    return schedule


def minimum_only_input(config: PlanInput) -> PlanInput:
    """Return ``config`` with its cash replaced by the sum of per-period minimums."""
    minimums = per_period_minimum(config.debts, config.pay_frequency)
    return replace(config, extra_payment=sum(minimums.values(), ZERO))


def compute_minimum_only_schedule(config: PlanInput) -> List[ScheduleEntry]:
    """Simulate paying only minimums, the baseline for interest saved."""
    return compute_full_schedule(minimum_only_input(config))


def schedule_interest(schedule: Iterable[ScheduleEntry]) -> Decimal:
    return sum((entry.total_interest for entry in schedule), ZERO)


def compute_plan_summary(
    config: PlanInput,
    schedule: Optional[List[ScheduleEntry]] = None,
) -> PlanSummary:
    """Compute aggregate metrics for a plan.

    When ``schedule`` is omitted it is computed from ``config``. Interest
    saved compares against a second, minimum-only simulation and is never
    negative. An empty schedule gives a neutral summary anchored on the start
    date.
    """
    if schedule is None:
        schedule = compute_full_schedule(config)

    total_debt = sum((d.balance for d in config.debts), ZERO)

    if not schedule:
        return PlanSummary(
            projected_debt_free_date=config.start_date,
            total_interest_paid=ZERO,
            interest_saved_vs_minimums_only=ZERO,
            months_to_payoff=1,
            total_debt_amount=total_debt,
            fully_paid=all(d.balance <= EPSILON for d in config.debts),
        )

    total_interest = schedule_interest(schedule)
    debt_free_date = schedule[-1].date
    months = max(1, months_between(config.start_date, debt_free_date))

    baseline_interest = schedule_interest(compute_minimum_only_schedule(config))
    interest_saved = max(ZERO, baseline_interest - total_interest)

    return PlanSummary(
        projected_debt_free_date=debt_free_date,
        total_interest_paid=total_interest,
        interest_saved_vs_minimums_only=interest_saved,
        months_to_payoff=months,
        total_debt_amount=total_debt,
        fully_paid=all(v <= EPSILON for v in schedule[-1].remaining_balances.values()),
    )


def compute_next_move(config: PlanInput, today: Optional[date] = None) -> NextMove:
    """Recommend the payments for the upcoming payday.

    Only the minimum and target steps of one period run here, against the
    current balances and without accruing interest. The full simulation is
    still run to attach the projected payoff figures.
    """
    payday = next_payday(config.start_date, config.pay_frequency, today)
    working = _working_copies(config)
    minimums = per_period_minimum(config.debts, config.pay_frequency)
    allocations, target = _pay_period(working, config, minimums)

    summary = compute_plan_summary(config)

    names = {d.id: d.name for d in config.debts}
    target_allocation = None
    if target is not None:
        target_allocation = next((a for a in allocations if a.debt_id == target.id), None)

    if target_allocation is not None:
        headline = (
            f"Pay {format_currency(target_allocation.amount)} to {names[target.id]} "
            f"({strategy_label(config.strategy)})"
        )
    elif all(d.balance <= 0 for d in config.debts):
        headline = "All debts paid off!"
    else:
        headline = "No cash available for extra payments this payday"

    return NextMove(
        date=payday,
        payments=allocations,
        headline=headline,
        rationale=config.strategy,
        projected_debt_free_date=summary.projected_debt_free_date,
        interest_saved_vs_minimums_only=summary.interest_saved_vs_minimums_only,
        total_interest_paid=summary.total_interest_paid,
        months_to_payoff=summary.months_to_payoff,
        target_debt_id=target.id if target is not None else None,
        summary=summary,
    )


def compare_strategies(config: PlanInput) -> Dict[Strategy, PlanSummary]:
    """Summarize the same plan under each applicable strategy.

    ``CUSTOM`` is only included when the plan carries a custom priority.
    """
    strategies = [Strategy.AVALANCHE, Strategy.SNOWBALL]
    if config.custom_priority is not None:
        strategies.append(Strategy.CUSTOM)
    return {s: compute_plan_summary(replace(config, strategy=s)) for s in strategies}


def debt_payoff_dates(schedule: Iterable[ScheduleEntry]) -> Dict[str, date]:
    """Return the first period date at which each debt reaches zero."""
    paid: Dict[str, date] = {}
    for entry in schedule:
        for debt_id, balance in entry.remaining_balances.items():
            if debt_id not in paid and balance <= EPSILON:
                paid[debt_id] = entry.date
    return paid
