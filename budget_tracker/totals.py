"""Daily, monthly and calendar totals of income and expenses."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Union

import numpy as np
import pandas as pd

from .models import Records, TransactionType, to_date, transactions_to_frame


@dataclass(frozen=True)
class PeriodTotals:
    income: float
    expenses: float

    @property
    def balance(self) -> float:
        return self.income - self.expenses


def _totals(data: pd.DataFrame) -> PeriodTotals:
    by_type = data.groupby('type')['amount'].sum()
    return PeriodTotals(
        income=float(by_type.get(TransactionType.INCOME.value, 0.0)),
        expenses=float(by_type.get(TransactionType.EXPENSE.value, 0.0)),
    )


def daily_totals(transactions: Records, day: Union[date, datetime]) -> PeriodTotals:
    """Income and expense totals for transactions dated on ``day``."""
    data = transactions_to_frame(transactions)
    return _totals(data[data['transaction_date'].dt.date == to_date(day)])


def monthly_totals(transactions: Records, month: int, year: int) -> PeriodTotals:
    """Income and expense totals for one calendar month (``month`` is 1-12)."""
    data = transactions_to_frame(transactions)
    dates = data['transaction_date']
    return _totals(data[(dates.dt.year == year) & (dates.dt.month == month)])


def calendar_day_summaries(transactions: Records, month: int, year: int) -> pd.DataFrame:
    """Per-day transaction count and net amount for a month's calendar view.

    Income counts positive and expenses negative.  Days without transactions
    are omitted.

    Returns:
        DataFrame indexed by day of month with columns: count, net
    """
    data = transactions_to_frame(transactions)
    dates = data['transaction_date']
    month_rows = data[(dates.dt.year == year) & (dates.dt.month == month)].copy()
    if month_rows.empty:
        return pd.DataFrame(columns=['count', 'net'], index=pd.Index([], name='day'))

    month_rows['signed'] = np.where(
        month_rows['type'] == TransactionType.INCOME.value,
        month_rows['amount'],
        -month_rows['amount'],
    )
    month_rows['day'] = month_rows['transaction_date'].dt.day
    summary = month_rows.groupby('day').agg(
        count=('signed', 'size'),
        net=('signed', 'sum'),
    )
    return summary.sort_index()
