"""Formatting utilities for currency and percentage display.

Every amount shown on the dashboard goes through :func:`format_currency`
so that totals, category amounts and transaction amounts share one
rounding and grouping rule.  Grouping follows the lakh/crore convention:
the last three integer digits form one group and every group before it
has two digits (``12,34,567``).
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional, Union

import numpy as np

from . import config
from .anomalies import report_anomaly
from .models import DEPOSIT, Transaction

Number = Union[int, float, Decimal]

_MINOR_UNIT = Decimal('0.01')
_MINUS_SIGNS = ('-', '−')


def group_digits(digits: str) -> str:
    """Insert lakh/crore grouping commas into a string of integer digits.

    Example:
        >>> group_digits('1234567')
        '12,34,567'
        >>> group_digits('999')
        '999'
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    groups.append(tail)
    return ','.join(groups)


def _coerce(amount: object) -> Optional[float]:
    try:
        value = float(amount)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not np.isfinite(value):
        return None
    return value


def format_currency(amount: Number, signed: bool = False, symbol: Optional[str] = None) -> str:
    """Format an amount with the currency glyph and lakh/crore grouping.

    Args:
        amount: The amount to format
        signed: Render an explicit ``+``/``-`` sign.  Only signed output may
            represent a negative amount.
        symbol: Currency glyph, defaults to the configured symbol

    Returns:
        Formatted string; minor units are shown only when non-zero.
        Never raises: NaN, non-numeric or (unsigned) negative input renders
        as zero and is reported as an anomaly.

    Example:
        >>> format_currency(1234567)
        '₹12,34,567'
        >>> format_currency(1234.5, signed=True)
        '+₹1,234.50'
    """
    glyph = config.CURRENCY_SYMBOL if symbol is None else symbol
    value = _coerce(amount)
    if value is None:
        report_anomaly('invalid_amount', 'non-numeric amount rendered as zero', amount=repr(amount))
        value = 0.0
    elif value < 0 and not signed:
        report_anomaly('negative_amount', 'negative amount rendered as zero', amount=value)
        value = 0.0

    sign = ''
    if signed:
        sign = '-' if value < 0 else '+'

    exact = Decimal(repr(abs(value)))
    with localcontext() as ctx:
        # Room for every integer digit plus the minor units
        ctx.prec = max(ctx.prec, exact.adjusted() + 4)
        magnitude = exact.quantize(_MINOR_UNIT, rounding=ROUND_HALF_UP)
    integer, _, fraction = f"{magnitude:f}".partition('.')
    text = group_digits(integer)
    if fraction.strip('0'):
        text = f"{text}.{fraction}"
    return f"{sign}{glyph}{text}"


def parse_currency(text: Union[str, Number], symbol: Optional[str] = None) -> float:
    """Parse a string produced by :func:`format_currency` back to a number.

    Unparseable input returns ``0.0`` and is reported as an anomaly.

    Example:
        >>> parse_currency('-₹12,34,567.50')
        -1234567.5
    """
    if not isinstance(text, str):
        value = _coerce(text)
        if value is None:
            report_anomaly('invalid_amount', 'could not parse amount', text=repr(text))
            return 0.0
        return value

    glyph = config.CURRENCY_SYMBOL if symbol is None else symbol
    cleaned = text.strip()
    negative = False
    if cleaned[:1] in _MINUS_SIGNS:
        negative = True
        cleaned = cleaned[1:]
    elif cleaned[:1] == '+':
        cleaned = cleaned[1:]
    if glyph:
        cleaned = cleaned.replace(glyph, '')
    cleaned = cleaned.replace(',', '').strip()

    try:
        value = float(Decimal(cleaned))
    except (InvalidOperation, ValueError):
        report_anomaly('invalid_amount', 'could not parse amount', text=text)
        return 0.0
    if not np.isfinite(value):
        report_anomaly('invalid_amount', 'could not parse amount', text=text)
        return 0.0
    return -value if negative else value


def format_growth(percent: Number) -> str:
    """Format a growth percentage with one decimal and a leading ``+`` when non-negative.

    Example:
        >>> format_growth(12.345)
        '+12.3%'
    """
    value = _coerce(percent)
    if value is None:
        report_anomaly('invalid_percent', 'non-numeric growth rendered as zero', percent=repr(percent))
        value = 0.0
    prefix = '+' if value >= 0 else ''
    return f"{prefix}{value:.1f}%"


def format_transaction_amount(transaction: Transaction, symbol: Optional[str] = None) -> str:
    """Signed display amount: deposits are ``+``, withdrawals and expenses ``-``."""
    value = _coerce(transaction.amount)
    if value is None or value < 0:
        report_anomaly(
            'invalid_amount',
            'transaction amount rendered as zero',
            transaction_id=transaction.id,
            amount=repr(transaction.amount),
        )
        value = 0.0
    if str(transaction.type or '').strip().lower() != DEPOSIT:
        value = -value
        if value == 0:
            return f"-{config.CURRENCY_SYMBOL if symbol is None else symbol}0"
    return format_currency(value, signed=True, symbol=symbol)
