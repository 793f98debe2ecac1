"""Data models for the debt payoff planner.

This module defines dataclasses representing the entities the planner works
with: debts, the plan input that configures one simulation, the per-period
payment allocations and schedule entries, and the aggregate summary and
next-move recommendation. Using dataclasses makes it easy to construct,
inspect and serialize these structures.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

PAY_FREQUENCIES = ("weekly", "biweekly", "monthly")
DEBT_TYPES = ("credit_card", "loan", "mortgage", "other")


class Strategy(str, Enum):
    """How surplus cash is directed once minimums are covered."""

    AVALANCHE = "AVALANCHE"
    SNOWBALL = "SNOWBALL"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class Debt:
    """A named, interest-bearing liability.

    Attributes
    ----------
    id: str
        Stable identifier used to key allocations and balances.
    balance: Decimal
        Current outstanding balance.
    apr: Decimal
        Annual rate as a fraction of principal (``Decimal("0.24")`` is 24 %).
    min_payment: Decimal
        Minimum required payment per billing month.
    due_day: Optional[int]
        Day of month the payment is due (1-31), informational only.
    type: Optional[str]
        One of ``DEBT_TYPES``.
    """

    id: str
    name: str
    balance: Decimal
    apr: Decimal
    min_payment: Decimal
    due_day: Optional[int] = None
    type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "balance": float(self.balance),
            "apr": float(self.apr),
            "min_payment": float(self.min_payment),
            "due_day": self.due_day,
            "type": self.type,
        }


@dataclass(frozen=True)
class PlanInput:
    """Configuration of one simulation run.

    ``extra_payment`` is the cash available every pay period. Minimums are
    paid out of it first and whatever remains goes to the target debt.
    """

    debts: List[Debt]
    strategy: Strategy
    extra_payment: Decimal
    pay_frequency: str
    start_date: date
    custom_priority: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "debts": [d.to_dict() for d in self.debts],
            "strategy": self.strategy.value,
            "custom_priority": list(self.custom_priority) if self.custom_priority is not None else None,
            "extra_payment": float(self.extra_payment),
            "pay_frequency": self.pay_frequency,
            "start_date": self.start_date.isoformat(),
        }


@dataclass
class PaymentAllocation:
    """Money assigned to one debt in one period."""

    debt_id: str
    amount: Decimal

    def to_dict(self) -> Dict[str, Any]:
        return {"debt_id": self.debt_id, "amount": float(self.amount)}


@dataclass
class ScheduleEntry:
    """One simulated pay period.

    ``total`` is the configured cash for the period, while ``disbursed`` is
    what was actually allocated. The two differ only in the final periods,
    once less cash is needed than is available.
    """

    date: date
    allocations: List[PaymentAllocation]
    total: Decimal
    disbursed: Decimal
    remaining_balances: Dict[str, Decimal]
    interest_paid: Dict[str, Decimal]

    @property
    def total_interest(self) -> Decimal:
        return sum(self.interest_paid.values(), Decimal("0"))

    @property
    def total_balance(self) -> Decimal:
        return sum(self.remaining_balances.values(), Decimal("0"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "allocations": [a.to_dict() for a in self.allocations],
            "total": float(self.total),
            "disbursed": float(self.disbursed),
            "remaining_balances": {k: float(v) for k, v in self.remaining_balances.items()},
            "interest_paid": {k: float(v) for k, v in self.interest_paid.items()},
        }


@dataclass
class PlanSummary:
    """Aggregate metrics over an entire schedule."""

    projected_debt_free_date: date
    total_interest_paid: Decimal
    interest_saved_vs_minimums_only: Decimal
    months_to_payoff: int
    total_debt_amount: Decimal
    fully_paid: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projected_debt_free_date": self.projected_debt_free_date.isoformat(),
            "total_interest_paid": float(self.total_interest_paid),
            "interest_saved_vs_minimums_only": float(self.interest_saved_vs_minimums_only),
            "months_to_payoff": self.months_to_payoff,
            "total_debt_amount": float(self.total_debt_amount),
            "fully_paid": self.fully_paid,
        }


@dataclass
class NextMove:
    """The single recommended action for the upcoming payday."""

    date: date
    payments: List[PaymentAllocation]
    headline: str
    rationale: Strategy
    projected_debt_free_date: date
    interest_saved_vs_minimums_only: Decimal
    total_interest_paid: Decimal
    months_to_payoff: int
    target_debt_id: Optional[str] = None
    summary: Optional[PlanSummary] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "payments": [p.to_dict() for p in self.payments],
            "headline": self.headline,
            "rationale": self.rationale.value,
            "target_debt_id": self.target_debt_id,
            "projected_debt_free_date": self.projected_debt_free_date.isoformat(),
            "interest_saved_vs_minimums_only": float(self.interest_saved_vs_minimums_only),
            "total_interest_paid": float(self.total_interest_paid),
            "months_to_payoff": self.months_to_payoff,
        }
