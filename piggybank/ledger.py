"""Ledger totals: savings balance, month-over-month growth, latest deposit."""

from __future__ import annotations

from typing import Optional, Tuple

import pandas as pd

from .data_processing import (
    TransactionInput,
    as_datetime,
    id_sort_key,
    minor_units,
    require_timestamp,
    signed_amounts,
    transactions_to_frame,
)
from .formatting import format_transaction_amount
from .models import DEPOSIT, Instant, LedgerTotals, RecentTransaction, Transaction


def aggregate(transactions: TransactionInput, as_of: Instant) -> LedgerTotals:
    """Compute total savings, monthly growth and the last deposit as of ``as_of``.

    Only transactions dated at or before ``as_of`` are considered.  Expenses
    funded from goal transfers are still subtracted from the total since
    goal balances are tracked on the goals themselves.
    """
    as_of_ts = require_timestamp(as_of, 'as_of')
    frame = _up_to(transactions_to_frame(transactions), as_of_ts)

    total = minor_units(signed_amounts(frame).sum())

    current = pd.Period(as_of_ts, freq='M')
    growth = growth_rate(month_net(frame, current), month_net(frame, current - 1))

    return LedgerTotals(
        total_savings=total,
        monthly_growth_percent=growth,
        last_deposit=_latest_deposit(frame),
    )


def month_net(frame: pd.DataFrame, period: pd.Period) -> float:
    """Deposits minus withdrawals and expenses within one calendar month."""
    rows = frame[frame['Period'] == period]
    if rows.empty:
        return 0.0
    return minor_units(signed_amounts(rows).sum())


def growth_rate(current: float, previous: float) -> float:
    """Percent change between two monthly nets.

    A zero baseline gives 0 when the current month is also flat, otherwise
    +100 or -100 following the sign of the current month.
    """
    if previous == 0:
        if current == 0:
            return 0.0
        return 100.0 if current > 0 else -100.0
    return (current - previous) * 100.0 / abs(previous)


def last_deposit(transactions: TransactionInput) -> Optional[Transaction]:
    """The deposit with the latest date; ties go to the highest id."""
    return _latest_deposit(transactions_to_frame(transactions))


def _latest_deposit(frame: pd.DataFrame) -> Optional[Transaction]:
    deposits = frame[frame['Type'] == DEPOSIT]
    if deposits.empty:
        return None
    latest = deposits['Transaction Date'].max()
    tied = deposits.loc[deposits['Transaction Date'] == latest, 'Record']
    return max(tied, key=lambda record: id_sort_key(record.id))


def recent_transactions(
    transactions: TransactionInput,
    as_of: Instant,
    limit: int = 5,
) -> Tuple[RecentTransaction, ...]:
    """Newest ``limit`` transactions for the recent-activity list."""
    as_of_ts = require_timestamp(as_of, 'as_of')
    frame = _up_to(transactions_to_frame(transactions), as_of_ts)
    if frame.empty or limit <= 0:
        return ()

    rows = sorted(
        zip(frame['Transaction Date'], frame['Type'], frame['Record']),
        key=lambda item: (item[0], id_sort_key(item[2].id)),
        reverse=True,
    )[:limit]
    return tuple(
        RecentTransaction(
            id=record.id,
            description=record.description or '',
            type=txn_type,
            date=as_datetime(date),
            amount=float(record.amount),
            display_amount=format_transaction_amount(record),
        )
        for date, txn_type, record in rows
    )


def _up_to(frame: pd.DataFrame, as_of_ts: pd.Timestamp) -> pd.DataFrame:
    return frame[frame['Transaction Date'] <= as_of_ts]
