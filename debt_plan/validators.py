"""Validation of untrusted plan data.

The engine assumes its input is already valid. This module is the boundary
that turns loosely typed dictionaries (parsed JSON, CLI options, stored
scenarios) into ``Debt`` and ``PlanInput`` objects, raising
``PlanValidationError`` with a message naming the offending field.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional
from uuid import uuid4

from .data_models import DEBT_TYPES, PAY_FREQUENCIES, Debt, PlanInput, Strategy
from .utils import decimal_from_str, parse_iso_date


class PlanValidationError(ValueError):
    """Raised when plan data is outside the documented input domain."""


def _number(data: Mapping[str, Any], key: str, label: str, default: Any = None) -> Decimal:
    value = data.get(key, default)
    if value is None:
        raise PlanValidationError(f"{label} is required")
    try:
        return decimal_from_str(value)
    except ValueError as exc:
        raise PlanValidationError(f"{label} must be a number; got {value!r}") from exc


def validate_debt(data: Mapping[str, Any]) -> Debt:
    """Build a ``Debt`` from a mapping, checking every field.

    ``min_payment`` may also be given as ``minimum_payment``. A missing ``id``
    is replaced by a random hex identifier.
    """
    if not isinstance(data, Mapping):
        raise PlanValidationError(f"Debt must be an object; got {type(data).__name__}")

    name = str(data.get("name") or "").strip()
    if not name:
        raise PlanValidationError("Debt name is required")

    debt_id = data.get("id")
    if debt_id is None or str(debt_id).strip() == "":
        debt_id = uuid4().hex
    debt_id = str(debt_id).strip()

    balance = _number(data, "balance", f"Balance of {name}")
    if balance < 0:
        raise PlanValidationError(f"Balance of {name} cannot be negative")

    apr = _number(data, "apr", f"APR of {name}")
    if apr < 0 or apr > 1:
        raise PlanValidationError(f"APR of {name} must be between 0 and 1 (0% to 100%)")

    min_payment = _number(
        data, "min_payment", f"Minimum payment of {name}", data.get("minimum_payment", 0)
    )
    if min_payment < 0:
        raise PlanValidationError(f"Minimum payment of {name} cannot be negative")

    due_day = data.get("due_day")
    if due_day is not None:
        try:
            due_day = int(due_day)
        except (TypeError, ValueError) as exc:
            raise PlanValidationError(f"Due day of {name} must be a whole number") from exc
        if not 1 <= due_day <= 31:
            raise PlanValidationError(f"Due day of {name} must be between 1 and 31")

    debt_type = data.get("type")
    if debt_type is not None:
        debt_type = str(debt_type).lower()
        if debt_type not in DEBT_TYPES:
            raise PlanValidationError(
                f"Debt type of {name} must be one of {', '.join(DEBT_TYPES)}; got {debt_type}"
            )

    return Debt(
        id=debt_id,
        name=name,
        balance=balance,
        apr=apr,
        min_payment=min_payment,
        due_day=due_day,
        type=debt_type,
    )


def validate_debts(items: Iterable[Mapping[str, Any]]) -> List[Debt]:
    debts = [validate_debt(item) for item in items]
    if not debts:
        raise PlanValidationError("At least one debt is required")
    seen = set()
    for debt in debts:
        if debt.id in seen:
            raise PlanValidationError(f"Duplicate debt id: {debt.id}")
        seen.add(debt.id)
    return debts


def parse_strategy(value: Any) -> Strategy:
    if isinstance(value, Strategy):
        return value
    try:
        return Strategy(str(value).strip().upper())
    except ValueError as exc:
        choices = ", ".join(s.value for s in Strategy)
        raise PlanValidationError(f"Strategy must be one of {choices}; got {value}") from exc


def validate_plan_input(data: Mapping[str, Any]) -> PlanInput:
    """Build a ``PlanInput`` from a mapping such as ``PlanInput.to_dict()`` output.

    Raises
    ------
    PlanValidationError
        If any field is missing or out of range.
    """
    if not isinstance(data, Mapping):
        raise PlanValidationError("Plan must be an object")

    debts = validate_debts(data.get("debts") or [])
    strategy = parse_strategy(data.get("strategy", Strategy.AVALANCHE.value))

    custom_priority: Optional[List[str]] = data.get("custom_priority")
    if custom_priority is not None:
        if not isinstance(custom_priority, (list, tuple)):
            raise PlanValidationError("Custom priority must be a list of debt ids")
        custom_priority = [str(item) for item in custom_priority]

    extra_payment = _number(data, "extra_payment", "Extra payment")
    if extra_payment <= 0:
        raise PlanValidationError("Extra payment must be greater than 0")

    frequency = str(data.get("pay_frequency", "biweekly")).strip().lower()
    if frequency not in PAY_FREQUENCIES:
        raise PlanValidationError(
            f"Pay frequency must be one of {', '.join(PAY_FREQUENCIES)}; got {frequency}"
        )

    raw_start = data.get("start_date")
    if raw_start is None:
        raise PlanValidationError("Start date is required")
    try:
        start_date = parse_iso_date(raw_start)
    except ValueError as exc:
        raise PlanValidationError(str(exc)) from exc

    return PlanInput(
        debts=debts,
        strategy=strategy,
        custom_priority=custom_priority,
        extra_payment=extra_payment,
        pay_frequency=frequency,
        start_date=start_date,
    )


def debts_from_json(payload: Any) -> List[Dict[str, Any]]:
    """Return the raw debt list from a JSON document.

    Accepts either a bare list of debt objects or an object with a ``debts``
    key.
    """
    if isinstance(payload, Mapping):
        payload = payload.get("debts")
    if not isinstance(payload, list):
        raise PlanValidationError("Debt file must contain a list of debts or an object with a 'debts' list")
    return payload
