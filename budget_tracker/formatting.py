"""Formatting utilities for currency and budget status display."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from . import config
from .display import setting
from .models import BudgetStatus


def _group_digits(digits: str, grouping: str) -> str:
    if grouping == 'western' or len(digits) <= 3:
        return f"{int(digits):,}"
    # Indian grouping: last three digits, then pairs (1,23,45,678)
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ','.join(pairs + [tail])


def format_currency(
    amount: Union[float, int, Decimal],
    symbol: Optional[str] = None,
    grouping: Optional[str] = None,
) -> str:
    """Format an amount as whole currency units with digit grouping.

    Rounding only happens here; sums elsewhere keep full precision.

    Args:
        amount: The amount to format
        symbol: Currency symbol, defaults to ``config.CURRENCY_SYMBOL``
        grouping: 'indian' or 'western', defaults to ``config.DIGIT_GROUPING``

    Returns:
        Formatted currency string

    Raises:
        ValueError: If ``grouping`` is not a known digit grouping

    Example:
        >>> format_currency(123456.5)
        '₹1,23,457'
        >>> format_currency(-500, symbol='$', grouping='western')
        '-$500'
    """
    symbol = config.CURRENCY_SYMBOL if symbol is None else symbol
    grouping = (grouping or config.DIGIT_GROUPING).lower()
    if grouping not in config.DIGIT_GROUPINGS:
        raise ValueError(f"Unknown digit grouping '{grouping}'")

    rounded = Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    sign = '-' if rounded < 0 else ''
    return f"{sign}{symbol}{_group_digits(str(abs(int(rounded))), grouping)}"


def status_label(status: Union[BudgetStatus, str]) -> str:
    """Human readable label for a budget status ('On Track', ...)."""
    key = status.value if isinstance(status, BudgetStatus) else str(status)
    fallback = setting('fallback', 'label', default='Unknown')
    return setting('status_labels', key, default=fallback)


def status_color(status: Union[BudgetStatus, str]) -> str:
    """Display colour token for a budget status."""
    key = status.value if isinstance(status, BudgetStatus) else str(status)
    fallback = setting('fallback', 'color', default='text-muted-foreground')
    return setting('status_colors', key, default=fallback)


def progress_color(percentage: float) -> str:
    """Colour token for a progress bar filled to ``percentage``."""
    bands = setting('progress_colors', default=[])
    for band in bands:
        ceiling = band.get('max_percentage')
        if ceiling is None or percentage <= ceiling:
            return band['color']
    return setting('fallback', 'color', default='text-muted-foreground')
