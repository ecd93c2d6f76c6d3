"""Normalization helpers shared by every calculator.

Raw :class:`~piggybank.models.Transaction` records are converted into a
pandas DataFrame once, and every calculator works on that frame.  The
frame uses these columns:

* ``id`` – transaction id (object dtype, ids are never coerced)
* ``Transaction Date`` – naive UTC timestamp
* ``Amount`` – positive float
* ``Type`` – ``deposit`` / ``withdrawal`` / ``expense``
* ``Category Id`` / ``Goal Id`` – optional ids (object dtype)
* ``Description`` – free text
* ``Period`` – monthly :class:`pandas.Period` of the transaction date
* ``Record`` – the original transaction object

Invalid rows (non-positive amount, unparseable date, unknown type) are
dropped and reported as anomalies instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Union

import numpy as np
import pandas as pd

from .anomalies import report_anomaly
from .models import EXPENSE, TRANSACTION_TYPES, Instant, Transaction

FRAME_COLUMNS = [
    'id',
    'Transaction Date',
    'Amount',
    'Type',
    'Category Id',
    'Goal Id',
    'Description',
    'Period',
    'Record',
]

TransactionInput = Union[Iterable[Transaction], pd.DataFrame]

# ---------------------------------------------------------------------------
# Instants
# ---------------------------------------------------------------------------


def to_timestamp(value: Optional[Instant]) -> Optional[pd.Timestamp]:
    """Convert a datetime or ISO string to a naive UTC timestamp.

    Aware values are converted to UTC, naive values are taken as UTC.
    Returns ``None`` for missing or unparseable input.
    """
    if value is None:
        return None
    try:
        ts = pd.to_datetime(value, errors='coerce', utc=True)
    except (TypeError, ValueError, OverflowError):
        return None
    if not isinstance(ts, pd.Timestamp) or pd.isna(ts):
        return None
    return ts.tz_convert(None)


def require_timestamp(value: Instant, name: str = 'now') -> pd.Timestamp:
    """Like :func:`to_timestamp` but for caller-supplied reference instants."""
    ts = to_timestamp(value)
    if ts is None:
        raise ValueError(f"'{name}' must be a datetime or ISO-8601 string, got {value!r}")
    return ts


def month_period(value: Instant) -> pd.Period:
    return pd.Period(require_timestamp(value, 'as_of'), freq='M')


def period_label(period: pd.Period) -> str:
    """Month label used for trend buckets, e.g. ``2024-03``."""
    return f"{period.year}-{period.month:02d}"


# ---------------------------------------------------------------------------
# Aggregation windows
# ---------------------------------------------------------------------------

_PERIOD_FREQ = {'month': 'M', 'quarter': 'Q', 'year': 'Y'}


@dataclass(frozen=True)
class AggregationWindow:
    """Half-open ``[start, end)`` range a calculator sums records over."""

    start: pd.Timestamp
    end: pd.Timestamp

    @classmethod
    def for_period(cls, period: str, now: Instant) -> 'AggregationWindow':
        """Calendar month, quarter or year containing ``now``."""
        freq = _PERIOD_FREQ.get(period)
        if freq is None:
            raise ValueError(f"Unknown aggregation period '{period}'")
        current = pd.Period(require_timestamp(now), freq=freq)
        return cls(start=current.start_time, end=(current + 1).start_time)

    @classmethod
    def current_month(cls, now: Instant) -> 'AggregationWindow':
        return cls.for_period('month', now)

    @classmethod
    def last_n_months(cls, now: Instant, months: int) -> 'AggregationWindow':
        """The ``months`` calendar months ending with the month of ``now``."""
        current = pd.Period(require_timestamp(now), freq='M')
        months = max(int(months), 1)
        first = current - (months - 1)
        return cls(start=first.start_time, end=(current + 1).start_time)

    def mask(self, dates: pd.Series) -> pd.Series:
        return (dates >= self.start) & (dates < self.end)


# ---------------------------------------------------------------------------
# Frame construction
# ---------------------------------------------------------------------------


def _positive_amount(value: object) -> Optional[float]:
    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not np.isfinite(amount) or amount <= 0:
        return None
    return amount


def transactions_to_frame(transactions: TransactionInput) -> pd.DataFrame:
    """Normalize transactions into the shared analysis frame.

    A frame that was already produced by this function is returned as is,
    so calculators can be handed either raw records or a prepared frame.
    """
    if isinstance(transactions, pd.DataFrame):
        if transactions.attrs.get('normalized'):
            return transactions
        raise TypeError('DataFrame input must come from transactions_to_frame()')

    ids: List[object] = []
    dates: List[pd.Timestamp] = []
    amounts: List[float] = []
    types: List[str] = []
    category_ids: List[object] = []
    goal_ids: List[object] = []
    descriptions: List[str] = []
    records: List[Transaction] = []

    for txn in transactions:
        amount = _positive_amount(txn.amount)
        if amount is None:
            report_anomaly('invalid_amount', 'transaction skipped', transaction_id=txn.id, amount=repr(txn.amount))
            continue
        date = to_timestamp(txn.date)
        if date is None:
            report_anomaly('invalid_date', 'transaction skipped', transaction_id=txn.id, date=repr(txn.date))
            continue
        txn_type = str(txn.type or '').strip().lower()
        if txn_type not in TRANSACTION_TYPES:
            report_anomaly('invalid_type', 'transaction skipped', transaction_id=txn.id, type=repr(txn.type))
            continue
        if txn_type == EXPENSE and txn.category_id is None:
            # Still counted in totals, just absent from category views
            report_anomaly('uncategorized_expense', 'expense has no category', transaction_id=txn.id)

        ids.append(txn.id)
        dates.append(date)
        amounts.append(amount)
        types.append(txn_type)
        category_ids.append(txn.category_id)
        goal_ids.append(txn.goal_id)
        descriptions.append(txn.description or '')
        records.append(txn)

    frame = pd.DataFrame({
        'id': pd.Series(ids, dtype=object),
        'Transaction Date': pd.to_datetime(pd.Series(dates, dtype='datetime64[ns]')),
        'Amount': pd.Series(amounts, dtype=float),
        'Type': pd.Series(types, dtype=object),
        'Category Id': pd.Series(category_ids, dtype=object),
        'Goal Id': pd.Series(goal_ids, dtype=object),
        'Description': pd.Series(descriptions, dtype=object),
        'Record': pd.Series(records, dtype=object),
    })
    frame['Period'] = frame['Transaction Date'].dt.to_period('M')
    frame = frame[FRAME_COLUMNS]
    frame.attrs['normalized'] = True
    return frame


def signed_amounts(frame: pd.DataFrame) -> pd.Series:
    """Deposits positive, withdrawals and expenses negative."""
    return pd.Series(
        np.where(frame['Type'] == 'deposit', frame['Amount'], -frame['Amount']),
        index=frame.index,
        dtype=float,
    )


def minor_units(value: float) -> float:
    """Round an aggregated amount to two decimal places."""
    # + 0.0 folds -0.0 into 0.0
    return float(round(value, 2)) + 0.0


def plain_id(value: object) -> object:
    """Unwrap numpy scalars that pandas groupby hands back as index keys."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def id_sort_key(record_id: object) -> tuple:
    """Sort key that orders numeric ids before string ids without raising."""
    if isinstance(record_id, (int, float)) and not isinstance(record_id, bool):
        return (0, record_id, '')
    return (1, 0, str(record_id))


def as_datetime(value: pd.Timestamp) -> datetime:
    return value.to_pydatetime()
