"""Ledger snapshots as delivered by the data source.

The backend returns plain JSON records with camelCase keys.  These helpers
turn such a document into the frozen record types; snake_case keys are
accepted too so hand-written fixture files stay readable.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

from .exceptions import SnapshotError
from .models import Category, SavingsGoal, Transaction


@dataclass(frozen=True)
class LedgerSnapshot:
    transactions: Tuple[Transaction, ...] = ()
    goals: Tuple[SavingsGoal, ...] = ()
    categories: Tuple[Category, ...] = ()


def _field(record: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in record:
        return record[camel]
    return record.get(snake, default)


def transaction_from_dict(record: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=record['id'],
        amount=record['amount'],
        date=record['date'],
        type=record['type'],
        category_id=_field(record, 'categoryId', 'category_id'),
        goal_id=_field(record, 'goalId', 'goal_id'),
        description=record.get('description') or '',
    )


def goal_from_dict(record: Mapping[str, Any]) -> SavingsGoal:
    return SavingsGoal(
        id=record['id'],
        name=record['name'],
        target_amount=_field(record, 'targetAmount', 'target_amount'),
        current_amount=_field(record, 'currentAmount', 'current_amount', 0.0),
        deadline=record.get('deadline'),
        icon=record.get('icon') or '',
        color=record.get('color') or '',
    )


def category_from_dict(record: Mapping[str, Any]) -> Category:
    return Category(
        id=record['id'],
        name=record['name'],
        icon=record.get('icon') or '',
        color=record.get('color') or '',
    )


_BUILDERS = {
    'transactions': transaction_from_dict,
    'goals': goal_from_dict,
    'categories': category_from_dict,
}


def snapshot_from_dict(data: Mapping[str, Any]) -> LedgerSnapshot:
    """Build a snapshot from a decoded JSON document.

    Raises:
        SnapshotError: If a section is not a list or a record lacks a
            required field
    """
    if not isinstance(data, Mapping):
        raise SnapshotError('Snapshot document must be a JSON object')

    sections: Dict[str, Tuple[Any, ...]] = {}
    for name, builder in _BUILDERS.items():
        raw = data.get(name) or []
        if not isinstance(raw, list):
            raise SnapshotError(f"Snapshot section '{name}' must be a list")
        records = []
        for index, record in enumerate(raw):
            try:
                records.append(builder(record))
            except (KeyError, TypeError, AttributeError) as e:
                raise SnapshotError(f"Invalid record {index} in '{name}': {e}") from e
        sections[name] = tuple(records)
    return LedgerSnapshot(**sections)


def load_snapshot(path: Path | str) -> LedgerSnapshot:
    """Read a snapshot JSON file.

    Raises:
        SnapshotError: If the file is missing, unreadable or malformed
    """
    target = Path(path)
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, OSError) as e:
        raise SnapshotError(f"Failed to read snapshot {target}: {e}") from e
    return snapshot_from_dict(data)
