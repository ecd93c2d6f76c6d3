"""Observability hook for invalid-input anomalies.

Calculators clamp bad input to a safe default instead of raising.  Every
such clamp is reported here so it is logged and can be forwarded to an
external monitoring hook.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

AnomalyHook = Callable[[str, str, Dict[str, Any]], None]

_HOOKS: List[AnomalyHook] = []


def register_hook(hook: AnomalyHook) -> None:
    """Register ``hook(kind, message, context)`` to receive anomalies."""
    if hook not in _HOOKS:
        _HOOKS.append(hook)


def unregister_hook(hook: AnomalyHook) -> None:
    if hook in _HOOKS:
        _HOOKS.remove(hook)


def clear_hooks() -> None:
    _HOOKS.clear()


def report_anomaly(kind: str, message: str, **context: Any) -> None:
    """Log an anomaly and fan it out to registered hooks.

    Hooks that raise are logged and skipped so a broken monitor cannot
    abort a summary computation.
    """
    logger.warning("%s: %s %s", kind, message, context or "")
    for hook in list(_HOOKS):
        try:
            hook(kind, message, dict(context))
        except Exception:
            logger.exception("Anomaly hook %r failed", hook)
