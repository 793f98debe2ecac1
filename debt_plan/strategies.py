"""Payoff strategies.

Each strategy is a ranking of the debts that still carry a balance. The first
debt in the ranking is the *target*: the only debt that receives cash beyond
its minimum in a given period. Rankings use Python's stable ``sorted`` so
ties keep the caller's order.

The functions accept any objects exposing ``id``, ``balance`` and ``apr``,
which lets the engine rank its working copies as well as ``Debt`` records.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from .data_models import Strategy

D = TypeVar("D")


def _rank_avalanche(debts: Sequence[D], custom_priority: Optional[Sequence[str]]) -> List[D]:
    return sorted(debts, key=lambda d: d.apr, reverse=True)


def _rank_snowball(debts: Sequence[D], custom_priority: Optional[Sequence[str]]) -> List[D]:
    return sorted(debts, key=lambda d: d.balance)


def _rank_custom(debts: Sequence[D], custom_priority: Optional[Sequence[str]]) -> List[D]:
    if custom_priority is None:
        return list(debts)
    positions: Dict[str, int] = {}
    for index, debt_id in enumerate(custom_priority):
        positions.setdefault(debt_id, index)
    unlisted = len(custom_priority)
    return sorted(debts, key=lambda d: positions.get(d.id, unlisted))


_RANKERS: Dict[Strategy, Callable[[Sequence[D], Optional[Sequence[str]]], List[D]]] = {
    Strategy.AVALANCHE: _rank_avalanche,
    Strategy.SNOWBALL: _rank_snowball,
    Strategy.CUSTOM: _rank_custom,
}

_LABELS = {
    Strategy.AVALANCHE: "Highest Interest First",
    Strategy.SNOWBALL: "Smallest Balance First",
    Strategy.CUSTOM: "Custom Priority",
}

_DESCRIPTIONS = {
    Strategy.AVALANCHE: (
        "Pay minimums on all debts, then attack the highest APR debt with all "
        "extra funds to minimize total interest paid."
    ),
    Strategy.SNOWBALL: (
        "Pay minimums on all debts, then attack the smallest balance debt first "
        "for psychological wins and momentum."
    ),
    Strategy.CUSTOM: (
        "Pay debts in your custom order based on your personal priorities and "
        "circumstances."
    ),
}

_BENEFITS = {
    Strategy.AVALANCHE: "Minimizes total interest paid",
    Strategy.SNOWBALL: "Builds momentum with quick wins",
    Strategy.CUSTOM: "Flexible to your priorities",
}


def rank_debts(
    debts: Sequence[D],
    strategy: Strategy,
    custom_priority: Optional[Sequence[str]] = None,
) -> List[D]:
    """Return the debts with a positive balance, ordered by ``strategy``.

    Parameters
    ----------
    debts: Sequence
        Debts in caller order. The sequence itself is not modified.
    strategy: Strategy
        ``AVALANCHE`` sorts by descending APR, ``SNOWBALL`` by ascending
        balance. ``CUSTOM`` follows ``custom_priority``; debts whose ids are not
        listed sort after all listed ones, keeping their relative order. With
        no ``custom_priority`` the caller order is kept.
    """
    active = [d for d in debts if d.balance > 0]
    return _RANKERS[Strategy(strategy)](active, custom_priority)


def choose_target(
    debts: Sequence[D],
    strategy: Strategy,
    custom_priority: Optional[Sequence[str]] = None,
) -> Optional[D]:
    """Return the top-ranked debt, or ``None`` when nothing is owed."""
    ranked = rank_debts(debts, strategy, custom_priority)
    return ranked[0] if ranked else None


def strategy_label(strategy: Strategy) -> str:
    return _LABELS[Strategy(strategy)]


def strategy_description(strategy: Strategy) -> str:
    return _DESCRIPTIONS[Strategy(strategy)]


def strategy_benefit(strategy: Strategy) -> str:
    return _BENEFITS[Strategy(strategy)]
