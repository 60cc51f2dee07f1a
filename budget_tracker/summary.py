"""Monthly budget summary calculations.

This module derives how much of a month's budget has been spent, what is
left, and how much can be spent per remaining day.  All functions are pure:
budgets, transactions and the reference date are passed in by the caller.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Tuple, Union

import pandas as pd

from .formatting import format_currency
from .models import (
    BudgetRecords,
    BudgetStatus,
    BudgetSummary,
    Records,
    TransactionType,
    budgets_to_frame,
    to_date,
    transactions_to_frame,
)

logger = logging.getLogger(__name__)

WARNING_THRESHOLD = 80.0
DANGER_THRESHOLD = 100.0

ALERT_APPROACHING = 'approaching'
ALERT_EXCEEDED = 'exceeded'
ALERT_DAILY_LIMIT = 'daily_limit'


@dataclass(frozen=True)
class BudgetAlert:
    alert_type: str
    message: str


def month_bounds(month: int, year: int) -> Tuple[date, date]:
    """Return the first and last calendar day of ``month``/``year``."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_left_in_period(month: int, year: int, today: Union[date, datetime]) -> int:
    """Count days from ``today`` (inclusive) through the end of the month.

    A ``today`` after the period yields 0; one before the period yields the
    full month length.
    """
    start, end = month_bounds(month, year)
    today = to_date(today)
    if today > end:
        return 0
    if today < start:
        return end.day
    return max(0, end.day - today.day + 1)


def classify_status(percentage: float) -> BudgetStatus:
    """Map a percentage of budget used onto safe / warning / danger."""
    if percentage > DANGER_THRESHOLD:
        return BudgetStatus.DANGER
    if percentage > WARNING_THRESHOLD:
        return BudgetStatus.WARNING
    return BudgetStatus.SAFE


def _expenses_in_month(transactions: pd.DataFrame, month: int, year: int) -> pd.DataFrame:
    start, end = month_bounds(month, year)
    days = transactions['transaction_date'].dt.date
    mask = (
        (transactions['type'] == TransactionType.EXPENSE.value)
        & (days >= start)
        & (days <= end)
    )
    return transactions[mask]


def compute_budget_summary(
    budgets: BudgetRecords,
    transactions: Records,
    month: int,
    year: int,
    today: Union[date, datetime],
) -> BudgetSummary:
    """Compute the budget summary for one month.

    Args:
        budgets: Budget rows already filtered to the user and period; every
            row is summed without re-checking its month/year
        transactions: The user's transactions, possibly spanning many months
        month: Target month (1-12)
        year: Target year
        today: Reference date used to count the days left

    Returns:
        BudgetSummary for the period. Degenerate inputs (no budget, no
        spending, no days left) produce zero values rather than errors.

    Example:
        >>> summary = compute_budget_summary(
        ...     [Budget(10000, 3, 2024)],
        ...     [Transaction(6000, 'expense', datetime(2024, 3, 5))],
        ...     3, 2024, date(2024, 3, 22),
        ... )
        >>> summary.daily_allowance
        400.0
    """
    budget_frame = budgets_to_frame(budgets)
    transaction_frame = transactions_to_frame(transactions)

    total_budget = float(budget_frame['amount'].sum())
    total_spent = float(_expenses_in_month(transaction_frame, month, year)['amount'].sum())
    remaining = total_budget - total_spent

    days_left = days_left_in_period(month, year, today)
    daily_allowance = max(0.0, remaining / days_left) if days_left > 0 else 0.0
    percentage = (total_spent / total_budget) * 100 if total_budget > 0 else 0.0

    summary = BudgetSummary(
        total_budget=total_budget,
        total_spent=total_spent,
        remaining=remaining,
        days_left=days_left,
        daily_allowance=daily_allowance,
        percentage=percentage,
        status=classify_status(percentage),
    )
    logger.debug("Budget summary for %04d-%02d: %s", year, month, summary)
    return summary


def budget_recommendation(summary: BudgetSummary, symbol: Optional[str] = None) -> str:
    """Return the advisory message shown under the budget summary."""
    if summary.status is BudgetStatus.DANGER:
        overage = format_currency(abs(summary.remaining), symbol=symbol)
        return f"You're {overage} over budget. Consider reducing expenses."

    if summary.status is BudgetStatus.WARNING:
        left = format_currency(summary.remaining, symbol=symbol)
        return f"Budget alert! You have {left} left for {summary.days_left} days."

    if summary.days_left > 0:
        allowance = format_currency(summary.daily_allowance, symbol=symbol)
        return f"You can spend {allowance} per day for the next {summary.days_left} days."

    return 'Great job staying within budget this month!'


def category_budget_breakdown(
    budgets: BudgetRecords,
    transactions: Records,
    month: int,
    year: int,
) -> pd.DataFrame:
    """Compare each category-scoped budget with the month's spending.

    The whole-period (uncategorized) budget row is not included.

    Returns:
        DataFrame with columns: category_id, budget, spent, remaining,
        percentage, status
    """
    columns = ['category_id', 'budget', 'spent', 'remaining', 'percentage', 'status']
    budget_frame = budgets_to_frame(budgets)
    scoped = budget_frame[budget_frame['category_id'].notna()]
    if scoped.empty:
        return pd.DataFrame(columns=columns)

    expenses = _expenses_in_month(transactions_to_frame(transactions), month, year)
    spent_by_category = (
        expenses[expenses['category_id'].notna()]
        .groupby('category_id', sort=False)['amount']
        .sum()
    )

    rows = []
    for _, row in scoped.iterrows():
        budget = float(row['amount'])
        spent = float(spent_by_category.get(row['category_id'], 0.0))
        percentage = (spent / budget) * 100 if budget > 0 else 0.0
        rows.append({
            'category_id': row['category_id'],
            'budget': budget,
            'spent': spent,
            'remaining': budget - spent,
            'percentage': percentage,
            'status': classify_status(percentage).value,
        })

    return pd.DataFrame(rows, columns=columns)


def budget_alerts(
    summary: BudgetSummary,
    daily_spent: Optional[float] = None,
    symbol: Optional[str] = None,
) -> List[BudgetAlert]:
    """Derive budget notifications from a summary.

    Args:
        summary: The month's budget summary
        daily_spent: Amount spent today; when given and above the daily
            allowance (while days remain) a daily-limit alert is raised
        symbol: Currency symbol for the messages

    Returns:
        List of BudgetAlert, empty when nothing needs attention
    """
    alerts: List[BudgetAlert] = []

    if summary.status is BudgetStatus.DANGER:
        alerts.append(BudgetAlert(
            ALERT_EXCEEDED,
            f"Budget exceeded by {format_currency(abs(summary.remaining), symbol=symbol)} "
            f"({summary.percentage:.0f}% used).",
        ))
    elif summary.status is BudgetStatus.WARNING:
        alerts.append(BudgetAlert(
            ALERT_APPROACHING,
            f"{summary.percentage:.0f}% of the budget used; "
            f"{format_currency(summary.remaining, symbol=symbol)} left.",
        ))

    if daily_spent is not None and summary.days_left > 0 and daily_spent > summary.daily_allowance:
        alerts.append(BudgetAlert(
            ALERT_DAILY_LIMIT,
            f"Spent {format_currency(daily_spent, symbol=symbol)} today, above the daily "
            f"allowance of {format_currency(summary.daily_allowance, symbol=symbol)}.",
        ))

    return alerts
