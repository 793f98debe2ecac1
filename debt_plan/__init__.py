"""Paycheck-aware debt payoff planner."""

from .data_models import Debt, NextMove, PaymentAllocation, PlanInput, PlanSummary, ScheduleEntry, Strategy
from .engine import compute_full_schedule, compute_next_move, compute_plan_summary

__all__ = [
    "Debt",
    "NextMove",
    "PaymentAllocation",
    "PlanInput",
    "PlanSummary",
    "ScheduleEntry",
    "Strategy",
    "compute_full_schedule",
    "compute_next_move",
    "compute_plan_summary",
]
