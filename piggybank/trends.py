"""Month x category expense series for the trend chart.

Buckets are sparse: a category with no spend in a month is simply absent
from that month's mapping.  :func:`series_categories` fixes the order in
which categories get chart lines, and :func:`dense_trend_frame` zero-fills
the series for consumers that need a rectangular table.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .anomalies import report_anomaly
from .data_processing import (
    TransactionInput,
    id_sort_key,
    minor_units,
    period_label,
    plain_id,
    require_timestamp,
    transactions_to_frame,
)
from .models import EXPENSE, Category, Instant, RecordId, TrendBucket


def build_trend(transactions: TransactionInput, month_count: int, as_of: Instant) -> Tuple[TrendBucket, ...]:
    """Bucket expenses into the ``month_count`` calendar months ending at ``as_of``.

    Buckets are ordered oldest first and every month gets one, even when it
    has no spend.  Within a bucket categories are ordered by descending
    amount, ties by category id.
    """
    if month_count is None or int(month_count) < 1:
        report_anomaly('invalid_month_count', 'trend requested for no months', month_count=month_count)
        return ()
    month_count = int(month_count)

    as_of_ts = require_timestamp(as_of, 'as_of')
    current = pd.Period(as_of_ts, freq='M')
    periods = [current - offset for offset in range(month_count - 1, -1, -1)]

    frame = transactions_to_frame(transactions)
    mask = (
        (frame['Type'] == EXPENSE)
        & frame['Category Id'].notna()
        & (frame['Transaction Date'] <= as_of_ts)
        & (frame['Period'] >= periods[0])
    )
    expenses = frame[mask]

    sums: Dict[pd.Period, List[Tuple[RecordId, float]]] = {}
    if not expenses.empty:
        grouped = expenses.groupby(['Period', 'Category Id'], sort=False)['Amount'].sum()
        for (period, key), amount in grouped.items():
            sums.setdefault(period, []).append((plain_id(key), minor_units(amount)))

    buckets = []
    for period in periods:
        items = sorted(sums.get(period, []), key=lambda item: (-item[1], id_sort_key(item[0])))
        buckets.append(TrendBucket(period_label=period_label(period), per_category_amount=dict(items)))
    return tuple(buckets)


def series_categories(buckets: Iterable[TrendBucket]) -> Tuple[RecordId, ...]:
    """Union of categories in first-appearance order across the series.

    This order assigns chart-line identity, so it must stay stable across
    re-renders of the same data.
    """
    seen: Dict[RecordId, None] = {}
    for bucket in buckets:
        for key in bucket.per_category_amount:
            seen.setdefault(key, None)
    return tuple(seen)


def dense_trend_frame(
    buckets: Sequence[TrendBucket],
    categories: Optional[Iterable[Category]] = None,
    limit: Optional[int] = None,
) -> pd.DataFrame:
    """Zero-filled table: one row per month, one column per series category.

    Args:
        buckets: Output of :func:`build_trend`
        categories: When given, columns are labelled with category names
        limit: Keep only the first ``limit`` series categories

    Returns:
        DataFrame indexed by period label
    """
    keys = list(series_categories(buckets))
    if limit is not None:
        keys = keys[:max(int(limit), 0)]

    table = pd.DataFrame(
        [[bucket.per_category_amount.get(key, 0.0) for key in keys] for bucket in buckets],
        index=pd.Index([bucket.period_label for bucket in buckets], name='Period'),
        columns=keys,
        dtype=float,
    )
    if categories is not None:
        names = {category.id: category.name for category in categories}
        table = table.rename(columns=lambda key: names.get(key, key))
    return table
