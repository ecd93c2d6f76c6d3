#!/usr/bin/env python3
"""Print the dashboard summary for a ledger snapshot file."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from piggybank import config
from piggybank.exceptions import SnapshotError
from piggybank.formatting import format_currency, format_growth
from piggybank.snapshot import load_snapshot
from piggybank.summary import summarize
from piggybank.trends import dense_trend_frame


def main(path: Path, now: str | None = None, as_json: bool = False, months: int | None = None) -> int:
    try:
        snapshot = load_snapshot(path)
    except SnapshotError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    reference = now or pd.Timestamp.now(tz='UTC').isoformat()
    summary = summarize(
        snapshot.transactions,
        snapshot.goals,
        snapshot.categories,
        reference,
        trend_months=months,
    )

    if as_json:
        print(json.dumps(summary.to_dict(), indent=2, ensure_ascii=False))
        return 0

    print(f"Total savings:  {format_currency(summary.total_savings, signed=summary.total_savings < 0)}")
    print(f"Monthly growth: {format_growth(summary.monthly_growth_percent)}")
    if summary.last_deposit is not None:
        print(f"Last deposit:   {format_currency(summary.last_deposit.amount)} on {summary.last_deposit.date}")
    if summary.next_goal is not None:
        print(f"Next goal:      {summary.next_goal.name} ({summary.next_goal_progress}%)")

    if summary.category_breakdown:
        print("\nSpending by category:")
        for share in summary.category_breakdown:
            print(f"  {share.name:<20} {format_currency(share.amount):>14} {share.percentage:6.1f}%")

    table = dense_trend_frame(summary.trend_series, snapshot.categories, limit=config.TREND_LINE_LIMIT)
    if not table.empty:
        print("\nExpense trend:")
        print(table.to_string())

    if summary.recent_transactions:
        print("\nRecent transactions:")
        for row in summary.recent_transactions:
            print(f"  {row.date:%d %b %Y}  {row.description:<30} {row.display_amount:>14}")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Summarize a ledger snapshot for the dashboard.')
    parser.add_argument('path', type=Path, help='Snapshot JSON file with transactions, goals and categories')
    parser.add_argument('--now', help='Reference instant (ISO-8601); defaults to the current time')
    parser.add_argument('--months', type=int, default=None, help='Months in the trend series')
    parser.add_argument('--json', action='store_true', help='Print the summary as JSON')
    parser.add_argument('--log-level', default=None, help='Logging level (defaults to PIGGYBANK_LOG_LEVEL)')
    args = parser.parse_args()
    config.configure_logging(args.log_level)
    raise SystemExit(main(args.path, now=args.now, as_json=args.json, months=args.months))
