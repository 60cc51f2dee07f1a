"""Cached summaries that are recomputed when records change.

Storage pushes a ``ChangeEvent`` whenever a user's transactions, budgets or
categories change.  ``SummaryCache`` drops that user's cached results that
depend on the table so the next read fetches fresh records and runs the pure
calculators again.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Dict, Hashable, NamedTuple, Optional, Protocol, Tuple, Union

import pandas as pd

from .insights import aggregate_by_category
from .models import (
    BUDGET_COLUMNS,
    TRANSACTION_COLUMNS,
    BudgetSummary,
    CategoryInsights,
    TransactionType,
    naive_timestamp,
    parse_timestamps,
)
from .summary import compute_budget_summary, month_bounds

logger = logging.getLogger(__name__)

# Cached result kinds that depend on each table
TABLE_DEPENDENTS = {
    'transactions': {'summary', 'insights'},
    'budgets': {'summary'},
    'categories': {'insights'},
}


class RecordSource(Protocol):
    """Read access to a user's budget and transaction rows."""

    def fetch_budgets(self, user_id: str, month: int, year: int) -> pd.DataFrame:
        ...

    def fetch_transactions(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> pd.DataFrame:
        ...


class ChangeEvent(NamedTuple):
    table: str
    user_id: str


class FrameRecordSource:
    """In-memory ``RecordSource`` backed by two DataFrames.

    Both frames need a ``user_id`` column next to the usual record columns.
    """

    def __init__(
        self,
        budgets: Optional[pd.DataFrame] = None,
        transactions: Optional[pd.DataFrame] = None,
    ):
        self.budgets = budgets if budgets is not None else pd.DataFrame(columns=['user_id'] + BUDGET_COLUMNS)
        self.transactions = (
            transactions if transactions is not None
            else pd.DataFrame(columns=['user_id'] + TRANSACTION_COLUMNS)
        )

    def fetch_budgets(self, user_id: str, month: int, year: int) -> pd.DataFrame:
        data = self.budgets
        mask = (data['user_id'] == user_id) & (data['month'] == month) & (data['year'] == year)
        return data[mask].copy()

    def fetch_transactions(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> pd.DataFrame:
        data = self.transactions
        dates = parse_timestamps(data['transaction_date'])
        mask = data['user_id'] == user_id
        if start is not None:
            mask &= dates >= naive_timestamp(start)
        if end is not None:
            mask &= dates <= naive_timestamp(end)
        return data[mask].copy()


class SummaryCache:
    """Per-user cache of budget summaries and category insights."""

    def __init__(self, source: RecordSource):
        self.source = source
        self._entries: Dict[Tuple[str, Hashable], Union[BudgetSummary, CategoryInsights]] = {}

    def budget_summary(
        self,
        user_id: str,
        month: int,
        year: int,
        today: Union[date, datetime],
    ) -> BudgetSummary:
        """Return the cached summary for the period, computing it if needed."""
        key = (user_id, ('summary', month, year, today))
        if key not in self._entries:
            start, end = month_bounds(month, year)
            budgets = self.source.fetch_budgets(user_id, month, year)
            transactions = self.source.fetch_transactions(
                user_id,
                datetime.combine(start, time.min),
                datetime.combine(end, time.max),
            )
            self._entries[key] = compute_budget_summary(budgets, transactions, month, year, today)
        return self._entries[key]

    def category_insights(
        self,
        user_id: str,
        type: Union[TransactionType, str],
        start: datetime,
        end: datetime,
    ) -> CategoryInsights:
        """Return cached category insights for the window, computing them if needed."""
        txn_type = TransactionType.parse(type)
        key = (user_id, ('insights', txn_type.value, start, end))
        if key not in self._entries:
            transactions = self.source.fetch_transactions(user_id, start, end)
            self._entries[key] = aggregate_by_category(transactions, txn_type, start, end)
        return self._entries[key]

    def handle_change(self, event: ChangeEvent) -> int:
        """Invalidate the user's cached results that depend on ``event.table``.

        Budget changes drop summaries, category changes drop insights (they
        carry category names, colours and icons), transaction changes drop
        both.

        Returns:
            Number of cache entries dropped
        """
        kinds = TABLE_DEPENDENTS.get(event.table, set())
        stale = [
            key for key in self._entries
            if key[0] == event.user_id and key[1][0] in kinds
        ]
        for key in stale:
            del self._entries[key]
        logger.debug("Change on %s for %s dropped %d cached results", event.table, event.user_id, len(stale))
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
