"""Record types consumed and produced by the metrics core.

Input records mirror what the backend returns; output records are the
display-ready values the dashboard widgets render.  Everything is frozen:
the core reads a snapshot and builds new outputs on every call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

RecordId = Union[int, str]
Instant = Union[datetime, str]

DEPOSIT = 'deposit'
WITHDRAWAL = 'withdrawal'
EXPENSE = 'expense'
TRANSACTION_TYPES = (DEPOSIT, WITHDRAWAL, EXPENSE)


@dataclass(frozen=True)
class Transaction:
    id: RecordId
    amount: float
    date: Instant
    type: str
    category_id: Optional[RecordId] = None
    goal_id: Optional[RecordId] = None
    description: str = ''

    @property
    def is_inflow(self) -> bool:
        return self.type == DEPOSIT

    @property
    def funds_goal(self) -> bool:
        """A goal-funding deposit; the backend credits the goal balance."""
        return self.type == DEPOSIT and self.goal_id is not None


@dataclass(frozen=True)
class Category:
    id: RecordId
    name: str
    icon: str = ''
    color: str = ''


@dataclass(frozen=True)
class SavingsGoal:
    id: RecordId
    name: str
    target_amount: float
    current_amount: float = 0.0
    deadline: Optional[Instant] = None
    icon: str = ''
    color: str = ''

    @property
    def remaining_amount(self) -> float:
        return max(0.0, float(self.target_amount) - float(self.current_amount))


@dataclass(frozen=True)
class CategoryShare:
    category_id: RecordId
    name: str
    icon: str
    color: str
    amount: float
    percentage: float


@dataclass(frozen=True)
class TrendBucket:
    period_label: str
    # category id -> amount, ordered by descending amount; read-only
    per_category_amount: Mapping[RecordId, float] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        if not isinstance(self.per_category_amount, MappingProxyType):
            object.__setattr__(self, 'per_category_amount', MappingProxyType(dict(self.per_category_amount)))


@dataclass(frozen=True)
class GoalProgress:
    goal_id: RecordId
    name: str
    current_amount: float
    target_amount: float
    progress: int
    remaining_amount: float
    status: str


@dataclass(frozen=True)
class RecentTransaction:
    id: RecordId
    description: str
    type: str
    date: datetime
    amount: float
    display_amount: str


@dataclass(frozen=True)
class LedgerTotals:
    total_savings: float
    monthly_growth_percent: float
    last_deposit: Optional[Transaction]


@dataclass(frozen=True)
class DerivedSummary:
    """Everything the dashboard widgets render, built in one call."""

    total_savings: float
    monthly_growth_percent: float
    last_deposit: Optional[Transaction]
    next_goal: Optional[SavingsGoal]
    next_goal_progress: int
    category_breakdown: Tuple[CategoryShare, ...]
    trend_series: Tuple[TrendBucket, ...]
    trend_categories: Tuple[RecordId, ...]
    goal_progress: Tuple[GoalProgress, ...]
    recent_transactions: Tuple[RecentTransaction, ...]
    generated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view with camelCase keys, as the widgets expect."""
        last = self.last_deposit
        goal = self.next_goal
        return {
            'totalSavings': self.total_savings,
            'monthlyGrowth': self.monthly_growth_percent,
            'lastDeposit': None if last is None else {
                'amount': last.amount,
                'date': _iso(last.date),
            },
            'nextGoal': None if goal is None else {
                'id': goal.id,
                'name': goal.name,
                'targetAmount': goal.target_amount,
                'currentAmount': goal.current_amount,
                'progress': self.next_goal_progress,
            },
            'categoryBreakdown': [
                {
                    'categoryId': share.category_id,
                    'name': share.name,
                    'icon': share.icon,
                    'color': share.color,
                    'amount': share.amount,
                    'percentage': share.percentage,
                }
                for share in self.category_breakdown
            ],
            'trends': [
                {
                    'period': bucket.period_label,
                    'data': [
                        {'categoryId': key, 'amount': amount}
                        for key, amount in bucket.per_category_amount.items()
                    ],
                }
                for bucket in self.trend_series
            ],
            'trendCategories': list(self.trend_categories),
            'goals': [
                {
                    'id': row.goal_id,
                    'name': row.name,
                    'currentAmount': row.current_amount,
                    'targetAmount': row.target_amount,
                    'progress': row.progress,
                    'remainingAmount': row.remaining_amount,
                    'status': row.status,
                }
                for row in self.goal_progress
            ],
            'recentTransactions': [
                {
                    'id': row.id,
                    'description': row.description,
                    'type': row.type,
                    'date': _iso(row.date),
                    'amount': row.amount,
                    'displayAmount': row.display_amount,
                }
                for row in self.recent_transactions
            ],
            'generatedAt': _iso(self.generated_at),
        }


def _iso(value: Instant) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)
