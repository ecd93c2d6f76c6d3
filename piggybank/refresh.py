"""Recompute-on-mutation contract between the dashboard and the core.

The dashboard keeps showing the last published summary until a mutation
has been committed by the backend.  Only then is the summary rebuilt, and
always from freshly fetched data: the core never patches its own output
optimistically.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from .models import DerivedSummary, Instant
from .mutations import MutationResult
from .snapshot import LedgerSnapshot
from .summary import summarize

logger = logging.getLogger(__name__)

SnapshotFetcher = Callable[[], LedgerSnapshot]


class SummaryRefresher:
    """Holds the published summary and decides when it is rebuilt."""

    def __init__(self, summarizer: Callable[..., DerivedSummary] = summarize, **options: Any):
        self._summarize = summarizer
        self._options = options
        self._current: Optional[DerivedSummary] = None

    @property
    def current(self) -> Optional[DerivedSummary]:
        return self._current

    def refresh(self, snapshot: LedgerSnapshot, now: Instant) -> DerivedSummary:
        """Rebuild from ``snapshot``.  The published summary only changes on success."""
        summary = self._summarize(
            snapshot.transactions,
            snapshot.goals,
            snapshot.categories,
            now,
            **self._options,
        )
        self._current = summary
        return summary

    def apply_mutation_result(
        self,
        result: MutationResult,
        fetch_snapshot: SnapshotFetcher,
        now: Instant,
    ) -> Optional[DerivedSummary]:
        """Recompute after a committed mutation; keep the old summary otherwise.

        ``fetch_snapshot`` is only called for successful mutations.  Errors
        from fetching or summarizing propagate and leave the published
        summary untouched.
        """
        if not result.ok:
            logger.info("Mutation failed (%s); keeping previous summary", result.error or 'unknown error')
            return self._current
        logger.debug("Mutation committed; recomputing summary")
        return self.refresh(fetch_snapshot(), now)
