import json

import pytest
from click.testing import CliRunner

from debt_plan.main import cli, parse_amount, parse_debt_strings, parse_percent, slugify

CARDS = ["--debt", "Card A:500:25:25", "--debt", "Card B:2k:10%:40"]
FUTURE = ["--start-date", "2099-01-02"]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def env(tmp_path):
    return {"DEBT_PLAN_DATABASE_URL": f"sqlite:///{tmp_path / 'cli.sqlite3'}"}


def invoke(runner, env, *args):
    return runner.invoke(cli, list(args), env=env)


def test_parse_helpers():
    assert parse_amount("2k") == 2000.0
    assert parse_amount("$1,250") == 1250.0
    assert parse_percent("24") == pytest.approx(0.24)
    assert parse_percent("24%") == pytest.approx(0.24)
    assert parse_percent("0.24") == pytest.approx(0.24)
    assert parse_percent("1%") == pytest.approx(0.01)
    assert parse_percent("0.5%") == pytest.approx(0.005)
    assert parse_percent("1") == pytest.approx(1.0)
    assert slugify("Card A") == "card-a"
    debts = parse_debt_strings(("Car Loan:9000:6.5:250:auto",))
    assert debts[0]["id"] == "auto"
    assert float(debts[0]["apr"]) == pytest.approx(0.065)


def test_next_move_json(runner, env):
    result = invoke(runner, env, "next-move", *CARDS, "--extra", "200", *FUTURE, "--json")
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["date"] == "2099-01-02"
    assert data["rationale"] == "AVALANCHE"
    assert data["target_debt_id"] == "card-a"
    assert data["headline"] == "Pay $181.54 to Card A (Highest Interest First)"
    assert {p["debt_id"] for p in data["payments"]} == {"card-a", "card-b"}


def test_next_move_text(runner, env):
    result = invoke(runner, env, "next-move", *CARDS, "--extra", "200", "--strategy", "snowball", *FUTURE)
    assert result.exit_code == 0, result.output
    assert "Smallest Balance First" in result.output
    assert "Card B" in result.output


def test_small_explicit_percent_apr(runner, env):
    result = invoke(
        runner, env, "next-move", "--debt", "Promo:1000:1%:25", "--extra", "100", *FUTURE, "--json"
    )
    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    # 1% APR on $1,000 paid off within a year costs only a few dollars.
    assert data["total_interest_paid"] < 10
    assert data["interest_saved_vs_minimums_only"] < 10
    assert data["months_to_payoff"] <= 12


def test_schedule_prints_summary_and_rows(runner, env):
    result = invoke(runner, env, "schedule", *CARDS, "--extra", "200", *FUTURE, "--rows", "3")
    assert result.exit_code == 0, result.output
    assert "Summary" in result.output
    assert "showing first 3 rows" in result.output
    assert "2099-01-02" in result.output


def test_schedule_json_export(runner, env, tmp_path):
    out = tmp_path / "plan.json"
    result = invoke(runner, env, "schedule", *CARDS, "--extra", "200", *FUTURE, "--output", str(out))
    assert result.exit_code == 0, result.output
    data = json.loads(out.read_text())
    assert data["schedule"][0]["date"] == "2099-01-02"
    assert data["summary"]["total_debt_amount"] == 2500.0
    assert data["summary"]["projected_debt_free_date"] == data["schedule"][-1]["date"]


def test_schedule_rejects_other_formats(runner, env, tmp_path):
    result = invoke(runner, env, "schedule", *CARDS, "--extra", "200", "--output", str(tmp_path / "plan.csv"))
    assert result.exit_code == 2
    assert "use .json" in result.output


def test_summary_from_debt_file(runner, env, tmp_path):
    debts = tmp_path / "debts.json"
    debts.write_text(
        json.dumps(
            {"debts": [{"id": "loan", "name": "Loan", "balance": 1000, "apr": 0.12, "min_payment": 50}]}
        )
    )
    out = tmp_path / "summary.json"
    result = invoke(
        runner, env, "summary", "--debts", str(debts), "--extra", "50", *FUTURE, "--output", str(out)
    )
    assert result.exit_code == 0, result.output
    summary = json.loads(out.read_text())["summary"]
    assert summary["fully_paid"] is True
    assert summary["interest_saved_vs_minimums_only"] > 0


def test_compare_includes_custom_with_priority(runner, env):
    result = invoke(
        runner, env, "compare", "--debt", "Store:3000:30:60", "--debt", "Family:400:5:20",
        "--extra", "300", "--priority", "family", *FUTURE,
    )
    assert result.exit_code == 0, result.output
    assert "AVALANCHE" in result.output
    assert "SNOWBALL" in result.output
    assert "CUSTOM" in result.output
    assert "highest APR" in result.output


@pytest.mark.parametrize(
    "args, message",
    [
        (["--debt", "Card:500:25", "--extra", "100"], "NAME:BALANCE:APR:MIN"),
        (["--debt", "Card:500:25:25", "--extra", "0"], "greater than 0"),
        (["--debt", "Card:500:250:25", "--extra", "100"], "between 0 and 1"),
        (["--debt", "Card:500:25:25", "--extra", "100", "--start-date", "soon"], "Invalid ISO date"),
        (["--extra", "100"], "At least one debt"),
    ],
)
def test_invalid_input_is_a_usage_error(runner, env, args, message):
    result = invoke(runner, env, "summary", *args)
    assert result.exit_code == 2
    assert message in result.output


def test_missing_debt_file(runner, env, tmp_path):
    result = invoke(runner, env, "summary", "--debts", str(tmp_path / "nope.json"), "--extra", "100")
    assert result.exit_code == 2
    assert "Cannot read debt file" in result.output


def test_saved_scenarios(runner, env):
    result = invoke(runner, env, "scenarios")
    assert result.exit_code == 0
    assert "No saved scenarios." in result.output

    result = invoke(runner, env, "save", "--name", "Plan A", *CARDS, "--extra", "200", *FUTURE)
    assert result.exit_code == 0, result.output
    scenario_id = result.output.strip().split()[-1]

    result = invoke(runner, env, "scenarios")
    assert scenario_id in result.output
    assert "Plan A" in result.output

    result = invoke(runner, env, "show", scenario_id)
    assert result.exit_code == 0, result.output
    assert "Scenario: Plan A" in result.output
    assert "Highest Interest First" in result.output
    assert "25.00%" in result.output
    assert "10.00%" in result.output
    assert "$2,000.00" in result.output

    result = invoke(runner, env, "forget", scenario_id)
    assert result.exit_code == 0
    result = invoke(runner, env, "forget", scenario_id)
    assert result.exit_code == 2
    assert invoke(runner, env, "show", scenario_id).exit_code == 2

    invoke(runner, env, "save", "--name", "Plan B", *CARDS, "--extra", "200", *FUTURE)
    result = invoke(runner, env, "clear")
    assert result.exit_code == 0
    assert "No saved scenarios." in invoke(runner, env, "scenarios").output


def test_verbose_flag(runner, env):
    result = invoke(runner, env, "--verbose", "summary", *CARDS, "--extra", "200", *FUTURE)
    assert result.exit_code == 0, result.output
