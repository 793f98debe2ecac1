"""Command-line interface for the debt payoff planner.

This module uses the ``click`` library to implement a multi-command
interface. Users can ask for the next payday's recommended payments, compute
the full payoff schedule, view summaries, compare strategies side by side and
keep named plan scenarios in a small database. Results can be printed to the
terminal or exported to JSON files.
"""

from __future__ import annotations

import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

import click

from .config import Settings
from .data_models import PAY_FREQUENCIES, PlanInput, ScheduleEntry, PlanSummary, Strategy
from .engine import compare_strategies, compute_full_schedule, compute_next_move, compute_plan_summary
from .formatter import print_comparison, print_next_move, print_scenario, print_schedule, print_summary
from .logging_config import configure_logging
from .store import ScenarioStore, create_store_from_env
from .validators import PlanValidationError, debts_from_json, validate_plan_input

logger = logging.getLogger(__name__)


def parse_amount(value: str) -> float:
    """Parse a numeric string with optional suffixes.

    Accepts plain floats ("5000") and shorthand with ``k``/``m`` suffixes
    (e.g., "5k" meaning 5_000). Returns a float.
    """
    value = value.strip().lower()
    value = value.replace(",", "").lstrip("$")
    factor = 1.0
    if value.endswith("k"):
        factor = 1_000.0
        value = value[:-1]
    elif value.endswith("m"):
        factor = 1_000_000.0
        value = value[:-1]
    try:
        return float(value) * factor
    except ValueError:
        raise click.BadParameter(f"Invalid amount: {value}")


def parse_percent(value: str) -> float:
    """Parse an APR string (e.g. "24", "24%" or "0.24") into a fraction.

    A trailing ``%`` always marks a percentage, so "1%" is 0.01. Without it,
    numbers above 1 are read as percentages and the rest as fractions.
    """
    value = value.strip()
    explicit = value.endswith("%")
    if explicit:
        value = value[:-1].strip()
    try:
        p = float(value)
    except ValueError:
        raise click.BadParameter(f"Invalid percentage: {value}")
    # A bare number like 24 is read as 24%
    if explicit or p > 1:
        p = p / 100
    return p


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")
    return slug or uuid4().hex


def parse_debt_strings(values: Tuple[str, ...]) -> List[Dict[str, Any]]:
    """Parse ``NAME:BALANCE:APR:MIN[:ID]`` option values into debt dicts.

    Without an explicit ``ID`` the debt id is derived from its name, so
    ``"Card A"`` can be referred to as ``card-a`` in ``--priority``.
    """
    debts: List[Dict[str, Any]] = []
    for item in values:
        parts = item.split(":")
        if len(parts) not in (4, 5):
            raise click.BadParameter(
                f"Debt must be in NAME:BALANCE:APR:MIN[:ID] format; got {item}"
            )
        name, balance_str, apr_str, min_str = parts[:4]
        debt_id = parts[4] if len(parts) == 5 and parts[4].strip() else slugify(name)
        debts.append(
            {
                "id": debt_id,
                "name": name,
                "balance": str(parse_amount(balance_str)),
                "apr": str(parse_percent(apr_str)),
                "min_payment": str(parse_amount(min_str)),
            }
        )
    return debts


def load_debt_file(path: str) -> List[Dict[str, Any]]:
    try:
        with Path(path).open(encoding="utf-8") as f:
            payload = json.load(f)
    except OSError as exc:
        raise click.BadParameter(f"Cannot read debt file {path}: {exc}")
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"Debt file {path} is not valid JSON: {exc}")
    try:
        return debts_from_json(payload)
    except PlanValidationError as exc:
        raise click.BadParameter(str(exc))


def build_plan_from_options(
    debts_file: Optional[str],
    debt: Tuple[str, ...],
    strategy: str,
    priority: Tuple[str, ...],
    extra: str,
    frequency: str,
    start_date: Optional[str],
) -> PlanInput:
    raw_debts: List[Dict[str, Any]] = []
    if debts_file:
        raw_debts.extend(load_debt_file(debts_file))
    raw_debts.extend(parse_debt_strings(debt))
    data = {
        "debts": raw_debts,
        "strategy": strategy,
        "custom_priority": list(priority) if priority else None,
        "extra_payment": str(parse_amount(extra)),
        "pay_frequency": frequency,
        "start_date": start_date or date.today().isoformat(),
    }
    try:
        plan = validate_plan_input(data)
    except PlanValidationError as exc:
        raise click.BadParameter(str(exc))
    logger.debug("Built plan with %d debts (%s, %s)", len(plan.debts), plan.strategy.value, plan.pay_frequency)
    return plan


def plan_options(func):
    """Attach the options shared by every command that builds a plan."""
    options = [
        click.option("--debts", "debts_file", type=click.Path(dir_okay=False), help="JSON file with a list of debts"),
        click.option("--debt", "debt", multiple=True, help="Debt in NAME:BALANCE:APR:MIN[:ID] format"),
        click.option(
            "--strategy",
            "strategy",
            type=click.Choice([s.value for s in Strategy], case_sensitive=False),
            default=Strategy.AVALANCHE.value,
            help="Which debt receives the surplus",
        ),
        click.option("--priority", "priority", multiple=True, help="Debt id in custom priority order (repeatable)"),
        click.option("--extra", "extra", required=True, help="Cash available every pay period"),
        click.option(
            "--frequency",
            "frequency",
            type=click.Choice(PAY_FREQUENCIES),
            default="biweekly",
            help="Pay frequency",
        ),
        click.option("--start-date", "-s", "start_date", help="First payday (YYYY-MM-DD); defaults to today"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def export_to_json(path: Path, schedule: List[ScheduleEntry], summary: PlanSummary) -> None:
    """Export schedule and summary to a JSON file."""
    data = {
        "summary": summary.to_dict(),
        "schedule": [entry.to_dict() for entry in schedule],
    }
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _names(plan: PlanInput) -> Dict[str, str]:
    return {d.id: d.name for d in plan.debts}


def _store(ctx: click.Context) -> ScenarioStore:
    settings: Settings = ctx.obj["settings"]
    if "store" not in ctx.obj:
        ctx.obj["store"] = create_store_from_env(settings.database_url, settings.max_scenarios)
    return ctx.obj["store"]


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--database-url", "database_url", help="SQLAlchemy URL of the saved scenario store")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, database_url: Optional[str]) -> None:
    """A paycheck-aware debt payoff planner."""
    try:
        settings = Settings.from_env()
    except ValueError as exc:
        raise click.UsageError(str(exc))
    if database_url:
        settings = Settings(
            database_url=database_url,
            max_scenarios=settings.max_scenarios,
            log_level=settings.log_level,
        )
    configure_logging("DEBUG" if verbose else settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command("next-move")
@plan_options
@click.option("--json", "as_json", is_flag=True, help="Print the recommendation as JSON")
def next_move(
    debts_file: Optional[str],
    debt: Tuple[str, ...],
    strategy: str,
    priority: Tuple[str, ...],
    extra: str,
    frequency: str,
    start_date: Optional[str],
    as_json: bool,
) -> None:
    """Show what to pay on the upcoming payday."""
    plan = build_plan_from_options(debts_file, debt, strategy, priority, extra, frequency, start_date)
    move = compute_next_move(plan)
    if as_json:
        click.echo(json.dumps(move.to_dict(), indent=2))
    else:
        print_next_move(move, _names(plan))


@cli.command()
@plan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
@click.option("--rows", "rows", type=int, default=120, show_default=True, help="Maximum rows to print")
def schedule(
    debts_file: Optional[str],
    debt: Tuple[str, ...],
    strategy: str,
    priority: Tuple[str, ...],
    extra: str,
    frequency: str,
    start_date: Optional[str],
    output: Optional[str],
    rows: int,
) -> None:
    """Compute and print the full payoff schedule."""
    plan = build_plan_from_options(debts_file, debt, strategy, priority, extra, frequency, start_date)
    schedule_entries = compute_full_schedule(plan)
    summary_data = compute_plan_summary(plan, schedule_entries)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Unsupported output format; use .json")
        export_to_json(path, schedule_entries, summary_data)
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(summary_data)
    # Limit schedule length printed to avoid flooding the terminal
    if len(schedule_entries) > rows:
        click.echo(f"Schedule has {len(schedule_entries)} rows; showing first {rows} rows.")
        print_schedule(schedule_entries[:rows], _names(plan))
    else:
        print_schedule(schedule_entries, _names(plan))


@cli.command()
@plan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    debts_file: Optional[str],
    debt: Tuple[str, ...],
    strategy: str,
    priority: Tuple[str, ...],
    extra: str,
    frequency: str,
    start_date: Optional[str],
    output: Optional[str],
) -> None:
    """Compute and print only the summary metrics for a plan."""
    plan = build_plan_from_options(debts_file, debt, strategy, priority, extra, frequency, start_date)
    summary_data = compute_plan_summary(plan)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": summary_data.to_dict()}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(summary_data)


@cli.command()
@plan_options
def compare(
    debts_file: Optional[str],
    debt: Tuple[str, ...],
    strategy: str,
    priority: Tuple[str, ...],
    extra: str,
    frequency: str,
    start_date: Optional[str],
) -> None:
    """Compare the same debts and cash under each strategy.

    The custom strategy is included when ``--priority`` is given, for example:

        debt-plan compare --debt "Card A:500:25:25" --debt "Loan:2000:10:40" \\
            --extra 150 --priority loan
    """
    plan = build_plan_from_options(debts_file, debt, strategy, priority, extra, frequency, start_date)
    print_comparison(compare_strategies(plan))


@cli.command()
@plan_options
@click.option("--name", "name", required=True, help="Scenario name")
@click.pass_context
def save(
    ctx: click.Context,
    debts_file: Optional[str],
    debt: Tuple[str, ...],
    strategy: str,
    priority: Tuple[str, ...],
    extra: str,
    frequency: str,
    start_date: Optional[str],
    name: str,
) -> None:
    """Compute a plan and keep it as a named scenario."""
    plan = build_plan_from_options(debts_file, debt, strategy, priority, extra, frequency, start_date)
    summary_data = compute_plan_summary(plan)
    scenario_id = uuid4().hex
    _store(ctx).add_scenario(scenario_id, name.strip() or "Scenario", plan, summary_data)
    click.echo(f"Saved scenario {scenario_id}")


@cli.command()
@click.pass_context
def scenarios(ctx: click.Context) -> None:
    """List saved scenarios, oldest first."""
    rows = _store(ctx).list_scenarios()
    if not rows:
        click.echo("No saved scenarios.")
        return
    click.echo(f"{'ID':34s} {'Name':20s} {'Strategy':10s} {'Debt-free':>10s} {'Interest':>12s}")
    for row in rows:
        s = row["summary"]
        click.echo(
            f"{row['id']:34s} {row['name'][:20]:20s} {row['input']['strategy']:10s} "
            f"{s['projected_debt_free_date']:>10s} {s['total_interest_paid']:12.2f}"
        )


@cli.command()
@click.argument("scenario_id")
@click.pass_context
def show(ctx: click.Context, scenario_id: str) -> None:
    """Print one saved scenario with its debts and summary."""
    row = _store(ctx).get_scenario(scenario_id)
    if row is None:
        raise click.BadParameter(f"No saved scenario with id {scenario_id}")
    try:
        plan = validate_plan_input(row["input"])
    except PlanValidationError as exc:
        raise click.ClickException(f"Saved scenario {scenario_id} is invalid: {exc}")
    print_scenario(row["name"], plan, row["summary"])


@cli.command()
@click.argument("scenario_id")
@click.pass_context
def forget(ctx: click.Context, scenario_id: str) -> None:
    """Delete one saved scenario."""
    if not _store(ctx).remove_scenario(scenario_id):
        raise click.BadParameter(f"No saved scenario with id {scenario_id}")
    click.echo(f"Removed scenario {scenario_id}")


@cli.command()
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete every saved scenario."""
    _store(ctx).clear_scenarios()
    click.echo("Cleared saved scenarios.")


if __name__ == "__main__":
    cli()
