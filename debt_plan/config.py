"""Runtime settings read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_DATABASE_URL = "sqlite:///debt_plan.sqlite3"


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    max_scenarios: int = 10
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``DEBT_PLAN_*`` environment variables.

        Raises
        ------
        ValueError
            If ``DEBT_PLAN_MAX_SCENARIOS`` is not an integer.
        """
        env = os.environ if environ is None else environ
        raw_max = env.get("DEBT_PLAN_MAX_SCENARIOS", "10")
        try:
            max_scenarios = int(raw_max)
        except ValueError as exc:
            raise ValueError(f"DEBT_PLAN_MAX_SCENARIOS must be an integer; got {raw_max}") from exc
        return cls(
            database_url=env.get("DEBT_PLAN_DATABASE_URL") or DEFAULT_DATABASE_URL,
            max_scenarios=max_scenarios,
            log_level=env.get("DEBT_PLAN_LOG_LEVEL", "WARNING").upper(),
        )
