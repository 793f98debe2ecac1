"""Output helpers for the debt payoff planner.

This module renders next moves, plan summaries, schedules and strategy
comparisons as plain tabular text. Printing goes through ``click.echo`` so
output is captured correctly by the CLI test runner.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

import click

from .data_models import NextMove, PlanInput, PlanSummary, ScheduleEntry, Strategy
from .strategies import strategy_benefit, strategy_description, strategy_label
from .utils import format_currency, format_percent


def _debt_name(debt_id: str, names: Optional[Mapping[str, str]]) -> str:
    if names and debt_id in names:
        return names[debt_id]
    return debt_id


def print_next_move(move: NextMove, names: Optional[Mapping[str, str]] = None) -> None:
    """Print the recommendation for the upcoming payday."""
    click.echo("Next move")
    click.echo("-" * 72)
    click.echo(f"Payday             : {move.date.isoformat()}")
    click.echo(f"Action             : {move.headline}")
    click.echo(f"Strategy           : {strategy_label(move.rationale)}")
    for payment in move.payments:
        click.echo(f"  {_debt_name(payment.debt_id, names):30s} {format_currency(payment.amount):>14s}")
    click.echo(f"Debt-free date     : {move.projected_debt_free_date.isoformat()}")
    click.echo(f"Months to payoff   : {move.months_to_payoff}")
    click.echo(f"Total interest     : {format_currency(move.total_interest_paid)}")
    click.echo(f"Interest saved     : {format_currency(move.interest_saved_vs_minimums_only)}")
    click.echo("-" * 72)


def print_summary(summary: PlanSummary) -> None:
    """Print a summary of plan metrics in a human-readable format."""
    click.echo("Summary")
    click.echo("-" * 72)
    click.echo(f"Total debt         : {format_currency(summary.total_debt_amount)}")
    click.echo(f"Debt-free date     : {summary.projected_debt_free_date.isoformat()}")
    click.echo(f"Months to payoff   : {summary.months_to_payoff}")
    click.echo(f"Total interest     : {format_currency(summary.total_interest_paid)}")
    click.echo(f"Interest saved     : {format_currency(summary.interest_saved_vs_minimums_only)}")
    if not summary.fully_paid:
        click.echo("Warning            : payments do not clear the debt within the projection window")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[ScheduleEntry], names: Optional[Mapping[str, str]] = None) -> None:
    """Print the payoff schedule as a simple table, one row per pay period."""
    headers = ["Period", "Date", "Cash", "Paid", "Interest", "Remaining", "Payments"]
    click.echo("\t".join(headers))
    for period, entry in enumerate(schedule, start=1):
        payments = "; ".join(
            f"{_debt_name(a.debt_id, names)}: {format_currency(a.amount)}" for a in entry.allocations
        )
        row = [
            str(period),
            entry.date.isoformat(),
            f"{entry.total:.2f}",
            f"{entry.disbursed:.2f}",
            f"{entry.total_interest:.2f}",
            f"{entry.total_balance:.2f}",
            payments,
        ]
        click.echo("\t".join(row))


def print_comparison(summaries: Dict[Strategy, PlanSummary]) -> None:
    """Print plan summaries for several strategies side by side.

    The difference column is relative to the first strategy listed; a negative
    value means the other strategy is cheaper or faster.
    """
    strategies = list(summaries)
    click.echo("Comparison")
    click.echo("=" * 72)
    header = f"{'Metric':20s}" + "".join(f"{s.value:>17s}" for s in strategies)
    click.echo(header)
    rows = [
        ("total_interest", lambda s: f"{s.total_interest_paid:.2f}"),
        ("interest_saved", lambda s: f"{s.interest_saved_vs_minimums_only:.2f}"),
        ("months_to_payoff", lambda s: str(s.months_to_payoff)),
        ("debt_free_date", lambda s: s.projected_debt_free_date.isoformat()),
    ]
    for label, render in rows:
        click.echo(f"{label:20s}" + "".join(f"{render(summaries[s]):>17s}" for s in strategies))
    if len(strategies) > 1:
        base = summaries[strategies[0]].total_interest_paid
        for s in strategies[1:]:
            diff = summaries[s].total_interest_paid - base
            click.echo(f"{s.value} vs {strategies[0].value} interest difference: {diff:.2f}")
    click.echo("=" * 72)
    for s in strategies:
        click.echo(f"{strategy_label(s)}: {strategy_benefit(s)}")
        click.echo(f"  {strategy_description(s)}")


def print_scenario(name: str, plan: PlanInput, summary: Mapping[str, Any]) -> None:
    """Print a saved scenario: its debts, plan settings and stored summary."""
    click.echo(f"Scenario: {name}")
    click.echo("-" * 72)
    click.echo(f"Strategy           : {strategy_label(plan.strategy)}")
    click.echo(f"Extra per payday   : {format_currency(plan.extra_payment)} ({plan.pay_frequency})")
    click.echo(f"Start date         : {plan.start_date.isoformat()}")
    click.echo(f"{'Debt':30s} {'Balance':>14s} {'APR':>8s} {'Minimum':>12s}")
    for debt in plan.debts:
        click.echo(
            f"{debt.name[:30]:30s} {format_currency(debt.balance):>14s} "
            f"{format_percent(debt.apr):>8s} {format_currency(debt.min_payment):>12s}"
        )
    click.echo(f"Debt-free date     : {summary['projected_debt_free_date']}")
    click.echo(f"Months to payoff   : {summary['months_to_payoff']}")
    click.echo(f"Total interest     : {summary['total_interest_paid']:.2f}")
    click.echo(f"Interest saved     : {summary['interest_saved_vs_minimums_only']:.2f}")
    click.echo("-" * 72)
