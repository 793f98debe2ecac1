import pytest

from debt_plan.config import DEFAULT_DATABASE_URL, Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.database_url == DEFAULT_DATABASE_URL
    assert settings.max_scenarios == 10
    assert settings.log_level == "WARNING"


def test_environment_overrides():
    settings = Settings.from_env(
        {
            "DEBT_PLAN_DATABASE_URL": "sqlite:///other.db",
            "DEBT_PLAN_MAX_SCENARIOS": "3",
            "DEBT_PLAN_LOG_LEVEL": "debug",
        }
    )
    assert settings == Settings("sqlite:///other.db", 3, "DEBUG")


def test_bad_max_scenarios():
    with pytest.raises(ValueError, match="DEBT_PLAN_MAX_SCENARIOS"):
        Settings.from_env({"DEBT_PLAN_MAX_SCENARIOS": "many"})
