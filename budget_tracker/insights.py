"""Category insights for income and expense charts.

Groups a window of transactions by category and ranks the categories by
total amount.  Time-window presets used by the insights page are provided as
a convenience; the aggregation itself only takes explicit dates.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Tuple, Union

import pandas as pd

from .models import (
    CategoryInsight,
    CategoryInsights,
    Records,
    TransactionType,
    naive_timestamp,
    transactions_to_frame,
)

logger = logging.getLogger(__name__)

_UNCATEGORIZED_KEY = '__uncategorized__'


class Timeframe(str, Enum):
    DAILY = 'daily'
    MONTHLY = 'monthly'
    YEARLY = 'yearly'


def timeframe_window(
    timeframe: Union[Timeframe, str],
    now: datetime,
) -> Tuple[datetime, datetime]:
    """Return the (start, end) window for a timeframe preset ending at ``now``.

    Raises:
        ValueError: If ``timeframe`` is not daily, monthly or yearly
    """
    try:
        timeframe = Timeframe(timeframe)
    except ValueError:
        raise ValueError(f"Unknown timeframe: {timeframe!r}") from None

    if timeframe is Timeframe.DAILY:
        start = datetime(now.year, now.month, now.day)
    elif timeframe is Timeframe.MONTHLY:
        start = datetime(now.year, now.month, 1)
    else:
        start = datetime(now.year, 1, 1)
    return start, now


def aggregate_by_category(
    transactions: Records,
    type: Union[TransactionType, str],
    start_date: Union[date, datetime],
    end_date: Union[date, datetime],
) -> CategoryInsights:
    """Sum transaction amounts per category within a window.

    Args:
        transactions: Transactions to aggregate
        type: Only transactions of this type ('income' or 'expense') count
        start_date: Inclusive window start
        end_date: Inclusive window end; a date without a time includes
            that whole day

    Returns:
        CategoryInsights with categories sorted by total descending (ties keep
        the order in which categories were first seen) and the grand total.
        Transactions without a category share one Uncategorized bucket.
    """
    txn_type = TransactionType.parse(type)
    data = transactions_to_frame(transactions)
    start = naive_timestamp(start_date)
    end = naive_timestamp(end_date)
    if not isinstance(end_date, datetime):
        # A bare date covers the whole day
        end = end + pd.Timedelta(days=1) - pd.Timedelta(1, unit='ns')

    window = data[
        (data['type'] == txn_type.value)
        & (data['transaction_date'] >= start)
        & (data['transaction_date'] <= end)
    ].copy()
    if window.empty:
        return CategoryInsights(categories=(), total=0.0)

    window['group_key'] = window['category_id'].where(window['category_id'].notna(), _UNCATEGORIZED_KEY)
    grouped = window.groupby('group_key', sort=False).agg(
        category_id=('category_id', 'first'),
        name=('category_name', 'first'),
        color=('category_color', 'first'),
        icon=('category_icon', 'first'),
        total_amount=('amount', 'sum'),
    )
    grouped = grouped.sort_values('total_amount', ascending=False, kind='stable')

    categories = tuple(
        CategoryInsight(
            category_id=None if key == _UNCATEGORIZED_KEY else row['category_id'],
            name=row['name'],
            color=row['color'],
            icon=row['icon'],
            total_amount=float(row['total_amount']),
        )
        for key, row in grouped.iterrows()
    )
    total = sum(category.total_amount for category in categories)
    logger.debug(
        "Aggregated %d %s transactions into %d categories",
        len(window), txn_type.value, len(categories),
    )
    return CategoryInsights(categories=categories, total=total)


def insights_frame(insights: CategoryInsights) -> pd.DataFrame:
    """Chart-ready DataFrame with each category's share of the total.

    Returns:
        DataFrame with columns: name, color, icon, total_amount, share
    """
    rows = [
        {
            'name': category.name,
            'color': category.color,
            'icon': category.icon,
            'total_amount': category.total_amount,
            'share': category.share_of(insights.total),
        }
        for category in insights.categories
    ]
    return pd.DataFrame(rows, columns=['name', 'color', 'icon', 'total_amount', 'share'])
