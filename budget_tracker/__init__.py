"""Top-level package for the budget tracker.

Budget and insight calculations over a user's transaction and budget
records.  The primary modules are:

* ``summary`` – monthly budget summary, advisory message and alerts
* ``insights`` – per-category totals for charts and progress bars
* ``totals`` – daily, monthly and calendar totals
* ``refresh`` – cached results invalidated by storage change events
* ``formatting`` – currency and status display helpers

Storage, authentication and rendering belong to the caller; every
calculation takes its records and reference date as arguments.
"""

from .models import (
    Budget,
    BudgetStatus,
    BudgetSummary,
    Category,
    CategoryInsight,
    CategoryInsights,
    CategoryRef,
    Transaction,
    TransactionType,
    UNCATEGORIZED,
)
from .summary import (
    BudgetAlert,
    budget_alerts,
    budget_recommendation,
    category_budget_breakdown,
    classify_status,
    compute_budget_summary,
    days_left_in_period,
    month_bounds,
)
from .insights import Timeframe, aggregate_by_category, insights_frame, timeframe_window
from .totals import PeriodTotals, calendar_day_summaries, daily_totals, monthly_totals
from .refresh import ChangeEvent, FrameRecordSource, SummaryCache
from .formatting import format_currency, progress_color, status_color, status_label

__all__ = [
    # Records
    'Budget',
    'BudgetStatus',
    'BudgetSummary',
    'Category',
    'CategoryInsight',
    'CategoryInsights',
    'CategoryRef',
    'Transaction',
    'TransactionType',
    'UNCATEGORIZED',
    # Budget summary
    'BudgetAlert',
    'budget_alerts',
    'budget_recommendation',
    'category_budget_breakdown',
    'classify_status',
    'compute_budget_summary',
    'days_left_in_period',
    'month_bounds',
    # Insights
    'Timeframe',
    'aggregate_by_category',
    'insights_frame',
    'timeframe_window',
    # Totals
    'PeriodTotals',
    'calendar_day_summaries',
    'daily_totals',
    'monthly_totals',
    # Refresh
    'ChangeEvent',
    'FrameRecordSource',
    'SummaryCache',
    # Formatting
    'format_currency',
    'progress_color',
    'status_color',
    'status_label',
]
