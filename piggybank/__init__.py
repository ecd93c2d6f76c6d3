"""Top-level package for the piggybank metrics core.

This package turns raw ledger records into the display-ready numbers the
savings dashboard renders.  The primary modules are:

* ``ledger`` – total savings, monthly growth and the latest deposit
* ``categories`` – category spend breakdown with percentage shares
* ``trends`` – month x category expense series for the trend chart
* ``goals`` – savings goal progress and next-goal selection
* ``summary`` – the facade that composes all of the above
* ``formatting`` – the single currency formatting rule shared by widgets

To summarize a snapshot file from the command line you can execute:

```bash
python scripts/summarize_snapshot.py data/snapshot.json
```
"""

from .categories import breakdown
from .data_processing import AggregationWindow
from .formatting import format_currency, format_growth, parse_currency
from .goals import progress, select_next_goal
from .ledger import aggregate
from .models import Category, DerivedSummary, SavingsGoal, Transaction
from .summary import summarize
from .trends import build_trend

__all__ = [
    "AggregationWindow",
    "Category",
    "DerivedSummary",
    "SavingsGoal",
    "Transaction",
    "aggregate",
    "breakdown",
    "build_trend",
    "format_currency",
    "format_growth",
    "parse_currency",
    "progress",
    "select_next_goal",
    "summarize",
]
