from datetime import date, datetime, timedelta, timezone

import pandas as pd
import pytest

from budget_tracker.insights import Timeframe, aggregate_by_category, insights_frame, timeframe_window
from budget_tracker.models import (
    UNCATEGORIZED_COLOR,
    UNCATEGORIZED_ICON,
    Category,
    Transaction,
    TransactionType,
)

FOOD = Category('cat-food', 'Food', '#F97316', TransactionType.EXPENSE, '🍔')
TRANSPORT = Category('cat-transport', 'Transport', '#3B82F6', TransactionType.EXPENSE, '🚌')
SALARY = Category('cat-salary', 'Salary', '#10B981', TransactionType.INCOME, '💼')

MARCH_START = datetime(2024, 3, 1)
MARCH_END = datetime(2024, 3, 31, 23, 59, 59)


def _txn(amount, day, category=None, type='expense'):
    when = datetime(2024, 3, day, 12, 0)
    if category is None:
        return Transaction(amount, type, when)
    return Transaction(amount, type, when, category.ref())


def _sample_transactions():
    return [
        _txn(400, 2, FOOD),
        _txn(300, 3, TRANSPORT),
        _txn(200, 4),
        _txn(600, 5, FOOD),
        _txn(500, 6, TRANSPORT),
        _txn(500, 7, FOOD),
        _txn(50000, 1, SALARY, type='income'),
    ]


def test_groups_and_ranks_categories():
    result = aggregate_by_category(_sample_transactions(), 'expense', MARCH_START, MARCH_END)

    assert [(c.name, c.total_amount) for c in result.categories] == [
        ('Food', 1500),
        ('Transport', 800),
        ('Uncategorized', 200),
    ]
    assert result.total == 2500


def test_uncategorized_bucket_uses_fixed_display():
    result = aggregate_by_category(_sample_transactions(), 'expense', MARCH_START, MARCH_END)
    uncategorized = result.categories[-1]

    assert uncategorized.category_id is None
    assert uncategorized.color == UNCATEGORIZED_COLOR
    assert uncategorized.icon == UNCATEGORIZED_ICON


def test_category_metadata_comes_from_the_join():
    result = aggregate_by_category(_sample_transactions(), 'expense', MARCH_START, MARCH_END)
    food = result.categories[0]

    assert food.category_id == 'cat-food'
    assert food.color == '#F97316'
    assert food.icon == '🍔'


def test_filters_by_type():
    result = aggregate_by_category(_sample_transactions(), TransactionType.INCOME, MARCH_START, MARCH_END)

    assert [c.name for c in result.categories] == ['Salary']
    assert result.total == 50000


def test_window_is_inclusive():
    transactions = [
        Transaction(10, 'expense', datetime(2024, 3, 1, 0, 0), FOOD.ref()),
        Transaction(20, 'expense', datetime(2024, 3, 10, 8, 0), FOOD.ref()),
        Transaction(40, 'expense', datetime(2024, 3, 10, 8, 1), FOOD.ref()),
    ]
    result = aggregate_by_category(transactions, 'expense', datetime(2024, 3, 1), datetime(2024, 3, 10, 8, 0))
    assert result.total == 30


def test_date_end_covers_whole_day():
    transactions = [Transaction(75, 'expense', datetime(2024, 3, 31, 22, 15), FOOD.ref())]
    result = aggregate_by_category(transactions, 'expense', date(2024, 3, 1), date(2024, 3, 31))
    assert result.total == 75


def test_empty_window_returns_empty_insights():
    result = aggregate_by_category(_sample_transactions(), 'expense', datetime(2024, 4, 1), datetime(2024, 4, 30))

    assert result.is_empty
    assert result.categories == ()
    assert result.total == 0


def test_ties_keep_encounter_order():
    transactions = [
        _txn(100, 2, TRANSPORT),
        _txn(100, 3, FOOD),
        _txn(300, 4),
    ]
    result = aggregate_by_category(transactions, 'expense', MARCH_START, MARCH_END)
    assert [c.name for c in result.categories] == ['Uncategorized', 'Transport', 'Food']


def test_category_totals_sum_to_total():
    transactions = [
        _txn(0.1, 2, FOOD),
        _txn(0.2, 3, TRANSPORT),
        _txn(0.3, 4),
        _txn(19.99, 5, FOOD),
    ]
    result = aggregate_by_category(transactions, 'expense', MARCH_START, MARCH_END)
    assert sum(c.total_amount for c in result.categories) == result.total


def test_order_of_input_does_not_change_totals():
    forward = aggregate_by_category(_sample_transactions(), 'expense', MARCH_START, MARCH_END)
    backward = aggregate_by_category(list(reversed(_sample_transactions())), 'expense', MARCH_START, MARCH_END)

    assert forward.total == backward.total
    assert {(c.name, c.total_amount) for c in forward.categories} == {
        (c.name, c.total_amount) for c in backward.categories
    }


def test_accepts_storage_rows_with_embedded_category():
    rows = [
        {
            'amount': 120,
            'type': 'expense',
            'transaction_date': '2024-03-09T10:00:00',
            'category_id': 'cat-food',
            'categories': {'name': 'Food', 'color': '#F97316', 'icon': '🍔'},
        },
        {'amount': 80, 'type': 'expense', 'transaction_date': '2024-03-10T10:00:00', 'category_id': None},
    ]
    result = aggregate_by_category(rows, 'expense', MARCH_START, MARCH_END)
    assert [(c.name, c.total_amount) for c in result.categories] == [('Food', 120), ('Uncategorized', 80)]


def test_offset_timestamps_compare_with_naive_window():
    rows = [
        {'amount': 120, 'type': 'expense', 'transaction_date': '2024-03-09T10:00:00Z', 'category_id': None},
        {'amount': 80, 'type': 'expense', 'transaction_date': '2024-03-10T10:00:00.500+00:00',
         'category_id': None},
        {'amount': 50, 'type': 'expense', 'transaction_date': '2024-04-01T00:30:00+00:00',
         'category_id': None},
    ]
    result = aggregate_by_category(rows, 'expense', MARCH_START, MARCH_END)
    assert result.total == 200

    frame_result = aggregate_by_category(pd.DataFrame(rows), 'expense', MARCH_START, MARCH_END)
    assert frame_result.total == 200


def test_offset_window_bounds_are_converted_to_utc():
    rows = pd.DataFrame([
        {'amount': 10, 'type': 'expense', 'transaction_date': '2024-03-09'},
        {'amount': 20, 'type': 'expense', 'transaction_date': '2024-03-09T20:00:00'},
    ])
    start = datetime(2024, 3, 9, 5, 0, tzinfo=timezone(timedelta(hours=5)))
    end = datetime(2024, 3, 10, 0, 0, tzinfo=timezone.utc)
    result = aggregate_by_category(rows, 'expense', start, end)
    assert result.total == 30


def test_unknown_type_is_rejected():
    with pytest.raises(ValueError):
        aggregate_by_category([], 'transfer', MARCH_START, MARCH_END)


def test_insights_frame_shares():
    result = aggregate_by_category(_sample_transactions(), 'expense', MARCH_START, MARCH_END)
    frame = insights_frame(result)

    assert list(frame['name']) == ['Food', 'Transport', 'Uncategorized']
    assert frame['share'].sum() == pytest.approx(1.0)
    assert frame.loc[0, 'share'] == pytest.approx(0.6)


def test_insights_frame_for_empty_result():
    frame = insights_frame(aggregate_by_category([], 'expense', MARCH_START, MARCH_END))
    assert frame.empty
    assert 'share' in frame.columns


def test_timeframe_windows():
    now = datetime(2024, 3, 15, 14, 30)
    assert timeframe_window('daily', now) == (datetime(2024, 3, 15), now)
    assert timeframe_window(Timeframe.MONTHLY, now) == (datetime(2024, 3, 1), now)
    assert timeframe_window('yearly', now) == (datetime(2024, 1, 1), now)


def test_unknown_timeframe_is_rejected():
    with pytest.raises(ValueError):
        timeframe_window('weekly', datetime(2024, 3, 15))
