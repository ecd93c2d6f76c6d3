"""Category spend breakdown for the spending pie chart.

Only expense rows with a category take part.  Percentages are returned
unrounded; rounding them for display is the caller's job, so shares are not
forced to add up to exactly 100 after rounding.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from .data_processing import (
    AggregationWindow,
    TransactionInput,
    id_sort_key,
    minor_units,
    plain_id,
    transactions_to_frame,
)
from .models import EXPENSE, Category, CategoryShare

UNCATEGORIZED_NAME = 'Uncategorized'


def expense_totals_by_category(transactions: TransactionInput, window: Optional[AggregationWindow] = None):
    """Summed expense amount per category id within ``window`` (a pandas Series)."""
    frame = transactions_to_frame(transactions)
    mask = (frame['Type'] == EXPENSE) & frame['Category Id'].notna()
    if window is not None:
        mask &= window.mask(frame['Transaction Date'])
    expenses = frame[mask]
    return expenses.groupby('Category Id', sort=False)['Amount'].sum()


def breakdown(
    transactions: TransactionInput,
    categories: Iterable[Category],
    window: Optional[AggregationWindow] = None,
) -> Tuple[CategoryShare, ...]:
    """Rank categories by spend within ``window`` and attach percentage shares.

    Ordering is amount descending, then category name, then id, so identical
    input always produces identical output.  Expenses in categories missing
    from ``categories`` are still counted under an ``Uncategorized`` label.
    """
    totals = expense_totals_by_category(transactions, window)
    if totals.empty:
        return ()
    basis = float(totals.sum())
    if basis <= 0:
        return ()

    lookup = {category.id: category for category in categories}
    shares = []
    for key, amount in totals.items():
        category_id = plain_id(key)
        category = lookup.get(category_id)
        shares.append(CategoryShare(
            category_id=category_id,
            name=category.name if category else UNCATEGORIZED_NAME,
            icon=category.icon if category else '',
            color=category.color if category else '',
            amount=minor_units(amount),
            percentage=float(amount) * 100.0 / basis,
        ))

    shares.sort(key=lambda share: (-share.amount, share.name, id_sort_key(share.category_id)))
    return tuple(shares)
