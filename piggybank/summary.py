"""Aggregation facade: one call builds everything the dashboard renders.

:func:`summarize` is a pure function of its arguments.  Transactions are
normalized into a frame once and the same frame is handed to every
calculator.  The summary is only constructed after every calculator has
returned, so a failure never leaves a partially populated result.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from . import config
from .categories import breakdown
from .data_processing import AggregationWindow, TransactionInput, as_datetime, require_timestamp, transactions_to_frame
from .goals import evaluate_goals
from .ledger import aggregate, recent_transactions
from .models import Category, DerivedSummary, Instant, SavingsGoal
from .trends import build_trend, series_categories

logger = logging.getLogger(__name__)


def summarize(
    transactions: TransactionInput,
    goals: Iterable[SavingsGoal],
    categories: Iterable[Category],
    now: Instant,
    *,
    trend_months: Optional[int] = None,
    breakdown_window: Optional[AggregationWindow] = None,
    recent_limit: Optional[int] = None,
    goal_limit: Optional[int] = None,
) -> DerivedSummary:
    """Compose the ledger, category, trend and goal calculators.

    Args:
        transactions: Ledger transactions (records or a prepared frame)
        goals: Savings goals with backend-maintained balances
        categories: Category reference data
        now: Reference instant for every time window; no clock is read
        trend_months: Months in the trend series (configured default)
        breakdown_window: Window for the category breakdown, defaults to
            the configured calendar period containing ``now``
        recent_limit: Length of the recent-transactions list
        goal_limit: Number of goals in the goal progress list

    Returns:
        A freshly built :class:`DerivedSummary`
    """
    now_ts = require_timestamp(now)
    frame = transactions_to_frame(transactions)
    goals = tuple(goals)
    categories = tuple(categories)

    window = breakdown_window or AggregationWindow.for_period(config.BREAKDOWN_PERIOD, now_ts)
    months = config.TREND_MONTHS if trend_months is None else trend_months

    totals = aggregate(frame, now_ts)
    shares = breakdown(frame, categories, window)
    trend = build_trend(frame, months, now_ts)
    next_goal, next_progress, goal_rows = evaluate_goals(
        goals, config.GOAL_LIMIT if goal_limit is None else goal_limit,
    )
    recent = recent_transactions(frame, now_ts, config.RECENT_LIMIT if recent_limit is None else recent_limit)

    summary = DerivedSummary(
        total_savings=totals.total_savings,
        monthly_growth_percent=totals.monthly_growth_percent,
        last_deposit=totals.last_deposit,
        next_goal=next_goal,
        next_goal_progress=next_progress,
        category_breakdown=shares,
        trend_series=trend,
        trend_categories=series_categories(trend),
        goal_progress=goal_rows,
        recent_transactions=recent,
        generated_at=as_datetime(now_ts),
    )
    logger.debug(
        "Summarized %d transactions, %d goals, %d categories as of %s",
        len(frame), len(goals), len(categories), now_ts,
    )
    return summary
