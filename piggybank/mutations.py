"""Deposit and transfer requests sent to the ledger backend.

The metrics core never sends these itself.  The presentation layer builds
them here so the validation rules (positive amount, a goal for transfers,
no implicit category) live next to the code that consumes the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

import numpy as np

from .data_processing import as_datetime, require_timestamp
from .exceptions import InvalidMutationError
from .models import DEPOSIT, Instant, RecordId, SavingsGoal

GENERAL_DEPOSIT_DESCRIPTION = 'General deposit'


@dataclass(frozen=True)
class MutationRequest:
    amount: float
    description: str
    type: str
    date: datetime
    category_id: Optional[RecordId] = None
    goal_id: Optional[RecordId] = None

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the transactions endpoint; optional ids are omitted when unset."""
        payload: Dict[str, Any] = {
            'amount': self.amount,
            'description': self.description,
            'type': self.type,
            'date': self.date.isoformat(timespec='milliseconds') + 'Z',
        }
        if self.category_id is not None:
            payload['categoryId'] = self.category_id
        if self.goal_id is not None:
            payload['goalId'] = self.goal_id
        return payload


@dataclass(frozen=True)
class MutationResult:
    """Outcome reported by the transport layer for one request."""

    ok: bool
    request: Optional[MutationRequest] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, request: Optional[MutationRequest] = None) -> 'MutationResult':
        return cls(ok=True, request=request)

    @classmethod
    def failure(cls, error: str, request: Optional[MutationRequest] = None) -> 'MutationResult':
        return cls(ok=False, request=request, error=error)


def _positive(amount: object) -> float:
    try:
        value = float(amount)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidMutationError('Please enter a positive amount') from None
    if not np.isfinite(value) or value <= 0:
        raise InvalidMutationError('Please enter a positive amount')
    return round(value, 2)


def deposit_request(
    amount: object,
    now: Instant,
    description: str = GENERAL_DEPOSIT_DESCRIPTION,
    category_id: Optional[RecordId] = None,
) -> MutationRequest:
    """Build an "Add Money" deposit.  Without ``category_id`` it stays uncategorized."""
    return MutationRequest(
        amount=_positive(amount),
        description=description or GENERAL_DEPOSIT_DESCRIPTION,
        type=DEPOSIT,
        date=as_datetime(require_timestamp(now)),
        category_id=category_id,
    )


def transfer_request(amount: object, goal: Optional[SavingsGoal], now: Instant) -> MutationRequest:
    """Build a transfer to ``goal``: a deposit tagged with the goal id.

    The backend credits the goal balance when the request succeeds.
    """
    value = _positive(amount)
    if goal is None:
        raise InvalidMutationError('Please select a goal')
    return MutationRequest(
        amount=value,
        description=f"Transfer to {goal.name}",
        type=DEPOSIT,
        date=as_datetime(require_timestamp(now)),
        goal_id=goal.id,
    )
