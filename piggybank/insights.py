"""AI insight records.

Insights are produced by an external generator and treated as finished
text: they are normalized and sliced for display, never aggregated.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from . import config
from .anomalies import report_anomaly
from .models import RecordId

INSIGHT_TYPES = {'savings', 'investment', 'expense'}
GENERAL = 'general'


@dataclass(frozen=True)
class Insight:
    id: RecordId
    content: str
    type: str
    title: Optional[str] = None


def parse_insights(records: Iterable[Mapping[str, Any]]) -> Tuple[Insight, ...]:
    """Normalize generator output, skipping records without an id or content.

    Unknown types are kept and labelled ``general``.
    """
    insights = []
    for record in records or ():
        if not isinstance(record, Mapping):
            report_anomaly('invalid_insight', 'insight is not a mapping', record=repr(record))
            continue
        content = str(record.get('content') or '').strip()
        if record.get('id') is None or not content:
            report_anomaly('invalid_insight', 'insight skipped', insight_id=record.get('id'))
            continue
        kind = str(record.get('type') or '').strip().lower()
        title = record.get('title')
        insights.append(Insight(
            id=record['id'],
            content=content,
            type=kind if kind in INSIGHT_TYPES else GENERAL,
            title=str(title) if title else None,
        ))
    return tuple(insights)


def top_insights(insights: Sequence[Insight], limit: Optional[int] = None) -> Tuple[Insight, ...]:
    """The first ``limit`` insights, in generator order."""
    count = config.INSIGHT_LIMIT if limit is None else limit
    return tuple(insights[:max(int(count), 0)])
