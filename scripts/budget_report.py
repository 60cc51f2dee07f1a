#!/usr/bin/env python3
"""Print a month's budget summary from exported CSV files."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_tracker import (
    aggregate_by_category,
    budget_recommendation,
    category_budget_breakdown,
    compute_budget_summary,
    format_currency,
    insights_frame,
    month_bounds,
    status_label,
)
from budget_tracker.config import DATA_DIR


def main(transactions_csv: Path, budgets_csv: Path, month: int, year: int, today: date) -> int:
    if not 1 <= month <= 12:
        print(f"Month must be between 1 and 12, got {month}")
        return 1
    try:
        transactions = pd.read_csv(transactions_csv)
        budgets = pd.read_csv(budgets_csv)
    except FileNotFoundError as exc:
        print(f"Could not read input: {exc}")
        return 1

    budgets = budgets[(budgets['month'] == month) & (budgets['year'] == year)]
    summary = compute_budget_summary(budgets, transactions, month, year, today)

    print(f"Budget {year}-{month:02d} ({status_label(summary.status)})")
    print(f"  Budget:    {format_currency(summary.total_budget)}")
    print(f"  Spent:     {format_currency(summary.total_spent)} ({summary.percentage:.1f}%)")
    print(f"  Remaining: {format_currency(summary.remaining)}")
    print(f"  Per day:   {format_currency(summary.daily_allowance)} for {summary.days_left} days")
    print(f"\n{budget_recommendation(summary)}")

    breakdown = category_budget_breakdown(budgets, transactions, month, year)
    if not breakdown.empty:
        print("\nCategory budgets:")
        print(breakdown.to_string(index=False))

    start, end = month_bounds(month, year)
    insights = aggregate_by_category(transactions, 'expense', start, end)
    if insights.is_empty:
        print("\nNo expenses recorded this month.")
        return 0

    print(f"\nSpending by category (total {format_currency(insights.total)}):")
    chart = insights_frame(insights)
    chart['share'] = (chart['share'] * 100).round(1)
    print(chart[['icon', 'name', 'total_amount', 'share']].to_string(index=False))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show the budget summary for a month.')
    parser.add_argument('--transactions', type=Path, default=DATA_DIR / 'transactions.csv',
                        help='CSV with amount, type, transaction_date, category_id columns')
    parser.add_argument('--budgets', type=Path, default=DATA_DIR / 'budgets.csv',
                        help='CSV with amount, month, year, category_id columns')
    parser.add_argument('--month', type=int, default=date.today().month)
    parser.add_argument('--year', type=int, default=date.today().year)
    parser.add_argument('--today', type=date.fromisoformat, default=date.today(),
                        help='Reference date for days left (YYYY-MM-DD)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    raise SystemExit(main(args.transactions, args.budgets, args.month, args.year, args.today))
