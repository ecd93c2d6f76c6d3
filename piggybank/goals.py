"""Savings goal progress and next-goal selection.

Goal balances come from the backend; nothing here re-derives
``current_amount`` from goal-tagged transactions.
"""

from __future__ import annotations

from typing import Iterable, List, NamedTuple, Optional, Tuple

import numpy as np
import pandas as pd

from .anomalies import report_anomaly
from .data_processing import id_sort_key, minor_units, to_timestamp
from .models import GoalProgress, SavingsGoal

COMPLETED = 'Completed'
IN_PROGRESS = 'In Progress'


class _CheckedGoal(NamedTuple):
    goal: SavingsGoal
    target: Optional[float]
    current: float
    percent: int


def _amount(value: object) -> Optional[float]:
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    return amount if np.isfinite(amount) else None


def _balances(goal: SavingsGoal) -> Tuple[Optional[float], float]:
    """(target, current) with invalid values reported; target is None when unusable."""
    target = _amount(goal.target_amount)
    current = _amount(goal.current_amount)
    if target is None or target <= 0:
        report_anomaly('invalid_goal_target', 'goal target must be positive', goal_id=goal.id,
                       target_amount=repr(goal.target_amount))
        target = None
    if current is None or current < 0:
        report_anomaly('invalid_goal_balance', 'goal balance clamped to zero', goal_id=goal.id,
                       current_amount=repr(goal.current_amount))
        current = 0.0
    return target, current


def _percent(target: Optional[float], current: float) -> int:
    if target is None:
        return 0
    ratio = min(1.0, current / target)
    # Half-up rounding, matching how the progress rings display it
    return int(np.floor(ratio * 100 + 0.5))


def progress(goal: SavingsGoal) -> int:
    """Percent complete in ``[0, 100]``; balances above target clamp to 100."""
    target, current = _balances(goal)
    return _percent(target, current)


def _is_complete(target: Optional[float], current: float) -> bool:
    # 9960 of 10000 rounds to 100% yet still needs money
    return target is not None and current >= target


def _check(goals: Iterable[SavingsGoal]) -> List[_CheckedGoal]:
    checked = []
    for goal in goals:
        target, current = _balances(goal)
        checked.append(_CheckedGoal(goal, target, current, _percent(target, current)))
    return checked


def _next(checked: Iterable[_CheckedGoal]) -> Optional[_CheckedGoal]:
    candidates = [
        (item.target - item.current, _deadline_key(item.goal), id_sort_key(item.goal.id), item)
        for item in checked
        if item.target is not None and not _is_complete(item.target, item.current)
    ]
    if not candidates:
        return None
    candidates.sort(key=lambda entry: entry[:3])
    return candidates[0][3]


def _rows(checked: List[_CheckedGoal], limit: Optional[int]) -> Tuple[GoalProgress, ...]:
    if limit is not None:
        checked = checked[:max(int(limit), 0)]
    return tuple(
        GoalProgress(
            goal_id=item.goal.id,
            name=item.goal.name,
            current_amount=item.current,
            target_amount=item.target if item.target is not None else 0.0,
            progress=item.percent,
            remaining_amount=minor_units(max(0.0, (item.target or 0.0) - item.current)),
            status=COMPLETED if _is_complete(item.target, item.current) else IN_PROGRESS,
        )
        for item in checked
    )


def select_next_goal(goals: Iterable[SavingsGoal]) -> Optional[SavingsGoal]:
    """Pick the incomplete goal needing the least additional amount.

    A goal is complete once its balance reaches the target.  Ties go to the
    earliest deadline (goals without one sort last), then to the lowest id.
    """
    chosen = _next(_check(goals))
    return chosen.goal if chosen is not None else None


def goal_progress_rows(goals: Iterable[SavingsGoal], limit: Optional[int] = None) -> Tuple[GoalProgress, ...]:
    """Progress rows for the goals list, in input order."""
    return _rows(_check(goals), limit)


def evaluate_goals(
    goals: Iterable[SavingsGoal],
    limit: Optional[int] = None,
) -> Tuple[Optional[SavingsGoal], int, Tuple[GoalProgress, ...]]:
    """Next goal, its progress and the progress rows, validating each goal once."""
    checked = _check(goals)
    chosen = _next(checked)
    if chosen is None:
        return None, 0, _rows(checked, limit)
    return chosen.goal, chosen.percent, _rows(checked, limit)


def _deadline_key(goal: SavingsGoal) -> Tuple[int, pd.Timestamp]:
    if goal.deadline is None:
        return (1, pd.Timestamp.max)
    deadline = to_timestamp(goal.deadline)
    if deadline is None:
        report_anomaly('invalid_goal_deadline', 'deadline ignored', goal_id=goal.id, deadline=repr(goal.deadline))
        return (1, pd.Timestamp.max)
    return (0, deadline)
