"""Persistence layer for saved plan scenarios.

Saved scenarios let a user keep a plan (its full input and the summary it
produced) and look at it again later, for example to compare a snowball plan
against an avalanche plan computed last week. It defaults to SQLite for local
use, but accepts any SQLAlchemy-compatible URL.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import Column, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import DEFAULT_DATABASE_URL
from .data_models import PlanInput, PlanSummary

logger = logging.getLogger(__name__)

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlanScenarioModel(Base):
    __tablename__ = "plan_scenarios"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    input_json = Column(Text, nullable=False)
    summary_json = Column(Text, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class ScenarioStore:
    """Database-backed scenario store."""

    def __init__(self, url: str, *, max_scenarios: int = 10) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)
        self._max_scenarios = max_scenarios

    def list_scenarios(self) -> List[Dict[str, Any]]:
        with self._session_factory() as session:
            rows: Iterable[PlanScenarioModel] = session.execute(
                select(PlanScenarioModel).order_by(PlanScenarioModel.seq.asc())
            ).scalars()
            return [self._to_dict(row) for row in rows]

    def get_scenario(self, scenario_id: str) -> Optional[Dict[str, Any]]:
        with self._session_factory() as session:
            row = session.execute(
                select(PlanScenarioModel).where(PlanScenarioModel.id == scenario_id)
            ).scalar_one_or_none()
            return self._to_dict(row) if row is not None else None

    def add_scenario(
        self,
        scenario_id: str,
        name: str,
        plan_input: PlanInput,
        summary: PlanSummary,
    ) -> None:
        payload = PlanScenarioModel(
            id=scenario_id,
            name=name,
            input_json=json.dumps(plan_input.to_dict()),
            summary_json=json.dumps(summary.to_dict()),
        )
        with self._session_factory() as session:
            session.add(payload)
            session.commit()
        logger.debug("Saved scenario %s (%s)", scenario_id, name)
        self._trim()

    def remove_scenario(self, scenario_id: str) -> bool:
        """Delete a scenario. Returns ``False`` when it does not exist."""
        with self._session_factory() as session:
            row = session.execute(
                select(PlanScenarioModel).where(PlanScenarioModel.id == scenario_id)
            ).scalar_one_or_none()
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

    def clear_scenarios(self) -> None:
        with self._session_factory() as session:
            session.execute(PlanScenarioModel.__table__.delete())
            session.commit()

    def _trim(self) -> None:
        if not self._max_scenarios or self._max_scenarios < 0:
            return
        with self._session_factory() as session:
            rows = session.execute(
                select(PlanScenarioModel).order_by(PlanScenarioModel.seq.desc())
            ).scalars().all()
            if len(rows) <= self._max_scenarios:
                return
            for row in rows[self._max_scenarios :]:
                session.delete(row)
            session.commit()

    @staticmethod
    def _to_dict(row: PlanScenarioModel) -> Dict[str, Any]:
        return {
            "id": row.id,
            "name": row.name,
            "input": json.loads(row.input_json),
            "summary": json.loads(row.summary_json),
            "created_at": row.created_at.isoformat(),
        }


def create_store_from_env(url: Optional[str], max_scenarios: int = 10) -> ScenarioStore:
    return ScenarioStore(url or DEFAULT_DATABASE_URL, max_scenarios=max_scenarios)
