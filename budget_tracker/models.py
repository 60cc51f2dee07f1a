"""Record types and DataFrame conversion for budget tracking.

Transactions, budgets and categories are owned by the storage layer; this
module gives them a typed shape and converts them into the normalized
DataFrames the calculators operate on.  Results produced by the calculators
(``BudgetSummary``, ``CategoryInsight``) are defined here as well.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

UNCATEGORIZED_NAME = 'Uncategorized'
UNCATEGORIZED_COLOR = '#6B7280'
UNCATEGORIZED_ICON = '📄'
DEFAULT_CATEGORY_ICON = '📊'

TRANSACTION_COLUMNS = [
    'amount',
    'type',
    'transaction_date',
    'category_id',
    'category_name',
    'category_color',
    'category_icon',
]
BUDGET_COLUMNS = ['amount', 'month', 'year', 'category_id']


class TransactionType(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'

    @classmethod
    def parse(cls, value: Union['TransactionType', str]) -> 'TransactionType':
        """Return the member for ``value`` (case-insensitive).

        Raises:
            ValueError: If ``value`` is not 'income' or 'expense'
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown transaction type: {value!r}") from None


class BudgetStatus(str, Enum):
    SAFE = 'safe'
    WARNING = 'warning'
    DANGER = 'danger'


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str
    type: TransactionType
    icon: Optional[str] = None

    def ref(self) -> 'CategoryRef':
        return CategoryRef(id=self.id, name=self.name, color=self.color, icon=self.icon)


@dataclass(frozen=True)
class CategoryRef:
    """Category data joined onto a transaction.

    ``id is None`` marks the Uncategorized variant; use ``UNCATEGORIZED``
    rather than building one by hand.
    """

    id: Optional[str]
    name: str
    color: str
    icon: Optional[str] = None

    @property
    def is_uncategorized(self) -> bool:
        return self.id is None


UNCATEGORIZED = CategoryRef(
    id=None,
    name=UNCATEGORIZED_NAME,
    color=UNCATEGORIZED_COLOR,
    icon=UNCATEGORIZED_ICON,
)


@dataclass(frozen=True)
class Transaction:
    amount: float
    type: TransactionType
    transaction_date: datetime
    category: CategoryRef = UNCATEGORIZED
    id: Optional[str] = None
    description: str = ''

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Transaction amount cannot be negative: {self.amount}")
        object.__setattr__(self, 'transaction_date', naive_timestamp(self.transaction_date).to_pydatetime())
        object.__setattr__(self, 'type', TransactionType.parse(self.type))

    @property
    def category_id(self) -> Optional[str]:
        return self.category.id

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'Transaction':
        """Build a transaction from a storage row.

        The row may carry the joined category under ``categories`` (a mapping
        with ``name``/``color``/``icon``), the way the storage client returns
        embedded relations.
        """
        return cls(
            amount=float(row.get('amount') or 0),
            type=row.get('type', TransactionType.EXPENSE),
            transaction_date=naive_timestamp(row['transaction_date']).to_pydatetime(),
            category=_category_ref_from_row(row),
            id=row.get('id'),
            description=row.get('description') or '',
        )


@dataclass(frozen=True)
class Budget:
    amount: float
    month: int
    year: int
    category_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise ValueError(f"Budget amount cannot be negative: {self.amount}")

    @property
    def is_total(self) -> bool:
        """True for the whole-period budget that is not scoped to a category."""
        return self.category_id is None


@dataclass(frozen=True)
class BudgetSummary:
    total_budget: float
    total_spent: float
    remaining: float
    days_left: int
    daily_allowance: float
    percentage: float
    status: BudgetStatus

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalBudget': self.total_budget,
            'totalSpent': self.total_spent,
            'remaining': self.remaining,
            'dailyAllowance': self.daily_allowance,
            'daysLeft': self.days_left,
            'percentage': self.percentage,
            'status': self.status.value,
        }


@dataclass(frozen=True)
class CategoryInsight:
    category_id: Optional[str]
    name: str
    color: str
    icon: Optional[str]
    total_amount: float

    def share_of(self, total: float) -> float:
        """Fraction of ``total`` contributed by this category (0.0 when total is 0)."""
        return self.total_amount / total if total else 0.0


@dataclass(frozen=True)
class CategoryInsights:
    categories: Tuple[CategoryInsight, ...] = field(default_factory=tuple)
    total: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.categories


Records = Union[pd.DataFrame, Iterable[Union[Transaction, Mapping[str, Any]]]]
BudgetRecords = Union[pd.DataFrame, Iterable[Union[Budget, Mapping[str, Any]]]]


def _category_ref_from_row(row: Mapping[str, Any]) -> CategoryRef:
    category_id = row.get('category_id')
    joined = row.get('categories') or {}
    if category_id is None or (isinstance(category_id, float) and pd.isna(category_id)):
        return UNCATEGORIZED
    return CategoryRef(
        id=str(category_id),
        name=joined.get('name') or str(category_id),
        color=joined.get('color') or UNCATEGORIZED_COLOR,
        icon=joined.get('icon') or DEFAULT_CATEGORY_ICON,
    )


def transactions_from_rows(rows: Iterable[Mapping[str, Any]]) -> List[Transaction]:
    """Convert storage rows into ``Transaction`` records."""
    return [Transaction.from_row(row) for row in rows]


def _transaction_row(record: Union[Transaction, Mapping[str, Any]]) -> Dict[str, Any]:
    if not isinstance(record, Transaction):
        record = Transaction.from_row(record)
    category = record.category
    return {
        'amount': record.amount,
        'type': record.type.value,
        'transaction_date': record.transaction_date,
        'category_id': category.id,
        'category_name': category.name,
        'category_color': category.color,
        'category_icon': category.icon,
    }


def transactions_to_frame(records: Records) -> pd.DataFrame:
    """Return transactions as a normalized DataFrame.

    Accepts ``Transaction`` records, storage rows, or a DataFrame that
    already uses the column names in ``TRANSACTION_COLUMNS``.  Rows without a
    category receive the Uncategorized name, colour and icon.
    """
    if isinstance(records, pd.DataFrame):
        data = records.copy()
        for column in TRANSACTION_COLUMNS:
            if column not in data.columns:
                data[column] = None
    else:
        data = pd.DataFrame([_transaction_row(r) for r in records], columns=TRANSACTION_COLUMNS)

    data['amount'] = pd.to_numeric(data['amount'], errors='coerce').fillna(0.0).astype(float)
    data['type'] = data['type'].fillna('').astype(str).str.strip().str.lower()
    data['transaction_date'] = parse_timestamps(data['transaction_date'])

    # Normalize missing category ids to None so they group together
    data['category_id'] = data['category_id'].astype(object).where(data['category_id'].notna(), None)
    uncategorized = data['category_id'].isna()
    for column in ('category_name', 'category_color', 'category_icon'):
        data[column] = data[column].astype(object)
    data.loc[uncategorized, 'category_name'] = UNCATEGORIZED_NAME
    data.loc[uncategorized, 'category_color'] = UNCATEGORIZED_COLOR
    data.loc[uncategorized, 'category_icon'] = UNCATEGORIZED_ICON
    data['category_name'] = data['category_name'].fillna(data['category_id'].astype(str))
    data['category_color'] = data['category_color'].fillna(UNCATEGORIZED_COLOR)
    data['category_icon'] = data['category_icon'].fillna(DEFAULT_CATEGORY_ICON)

    return data[TRANSACTION_COLUMNS + [c for c in data.columns if c not in TRANSACTION_COLUMNS]]


def budgets_to_frame(records: BudgetRecords) -> pd.DataFrame:
    """Return budgets as a DataFrame with the columns in ``BUDGET_COLUMNS``."""
    if isinstance(records, pd.DataFrame):
        data = records.copy()
        for column in BUDGET_COLUMNS:
            if column not in data.columns:
                data[column] = None
    else:
        rows: List[Dict[str, Any]] = []
        for record in records:
            if isinstance(record, Budget):
                rows.append({
                    'amount': record.amount,
                    'month': record.month,
                    'year': record.year,
                    'category_id': record.category_id,
                })
            else:
                rows.append({column: record.get(column) for column in BUDGET_COLUMNS})
        data = pd.DataFrame(rows, columns=BUDGET_COLUMNS)

    data['amount'] = pd.to_numeric(data['amount'], errors='coerce').fillna(0.0).astype(float)
    data['category_id'] = data['category_id'].astype(object).where(data['category_id'].notna(), None)
    return data


def to_date(value: Union[date, datetime, str, pd.Timestamp]) -> date:
    """Coerce ``value`` to a calendar date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return pd.Timestamp(value).date()


def naive_timestamp(value: Union[date, datetime, str, pd.Timestamp]) -> pd.Timestamp:
    """Parse ``value`` as a timestamp without a timezone.

    Offsets are converted to UTC before the timezone is dropped.
    """
    stamp = pd.Timestamp(value)
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert(None)
    return stamp


def parse_timestamps(values: pd.Series) -> pd.Series:
    """Parse a column of ISO timestamps into naive ``datetime64`` values.

    Rows may mix precisions ('10:00:00' and '10:00:00.250'), bare dates,
    and UTC offsets; offsets are converted to UTC and dropped.
    """
    if pd.api.types.is_datetime64_any_dtype(values):
        parsed = values
    else:
        parsed = pd.to_datetime(values.astype(object), format='ISO8601', utc=True)
    if parsed.dt.tz is not None:
        parsed = parsed.dt.tz_convert(None)
    return parsed
