"""Totals, category/department breakdowns and the monthly trend series.

Grouping is by exact, case-sensitive key: ``"Food"`` and ``"food"`` stay
separate groups.  Groups are listed in the order their first transaction
appears, which is what keeps the downstream top-N tie-breaking stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Union

import pandas as pd

from .matching import percent_used
from .models import CategoryTotal, PeriodRange, Transaction, TrendPoint
from .periods import DateLike, month_range, shift_month
from .ranking import top_n
from .transactions import TransactionBatch, filter_by_period, load_transactions, transactions_frame


@dataclass(frozen=True)
class Aggregate:
    total_income: float = 0.0
    total_expense: float = 0.0
    by_category: List[CategoryTotal] = field(default_factory=list)
    by_department: List[CategoryTotal] = field(default_factory=list)

    @property
    def category_totals(self) -> Dict[str, float]:
        return {row.name: row.amount for row in self.by_category}

    @property
    def department_totals(self) -> Dict[str, float]:
        return {row.name: row.amount for row in self.by_department}

    @property
    def net(self) -> float:
        return self.total_income - self.total_expense


def _grouped_totals(expense: pd.DataFrame, column: str) -> List[CategoryTotal]:
    if expense.empty:
        return []
    grouped = expense.groupby(column, sort=False)['Amount'].sum()
    total = float(sum(float(value) for value in grouped.values))
    return [
        CategoryTotal(name=str(name), amount=float(amount), percentage=percent_used(float(amount), total))
        for name, amount in grouped.items()
    ]


def aggregate(transactions: Iterable[Transaction]) -> Aggregate:
    """Sum amounts by type, and expense amounts by category and by department.

    ``total_expense`` equals the sum of the ``by_category`` amounts exactly.
    Income is totalled but not broken down.
    """
    frame = transactions_frame(transactions)
    if frame.empty:
        return Aggregate()

    income = frame[frame['Type'] == 'income']
    expense = frame[frame['Type'] == 'expense']

    by_category = _grouped_totals(expense, 'Category')
    by_department = _grouped_totals(expense, 'Department')
    return Aggregate(
        total_income=float(income['Amount'].sum()) if not income.empty else 0.0,
        total_expense=float(sum(row.amount for row in by_category)),
        by_category=by_category,
        by_department=by_department,
    )


def _month_period(start: date) -> PeriodRange:
    first, last = month_range(start.year, start.month)
    return PeriodRange(start=first, end=last, days_remaining=0)


def spending_for_month(transactions: Union[TransactionBatch, Iterable[Transaction]], day: DateLike) -> Dict[str, float]:
    """Expense totals by category for the calendar month containing ``day``."""
    in_month = filter_by_period(_as_batch(transactions), _month_period(day))
    return aggregate(in_month.transactions).category_totals


def trend_series(
    transactions: Union[TransactionBatch, Iterable[Transaction]],
    now: DateLike,
    months: int = 3,
) -> List[TrendPoint]:
    """Income, expense and net for the ``months`` calendar months ending at ``now``.

    The window always walks calendar months, whatever period the report
    itself covers.  Points are ordered oldest first.
    """
    batch = _as_batch(transactions)
    points: List[TrendPoint] = []
    for offset in range(months - 1, -1, -1):
        first_day = shift_month(now, -offset)
        in_month = filter_by_period(batch, _month_period(first_day))
        totals = aggregate(in_month.transactions)
        points.append(TrendPoint(
            period_label=str(pd.Period(year=first_day.year, month=first_day.month, freq='M')),
            income=totals.total_income,
            expense=totals.total_expense,
            net=totals.net,
        ))
    return points


def top_categories(by_category: Iterable[CategoryTotal], limit: int = 5) -> List[CategoryTotal]:
    """Largest expense categories, ties in first-seen order."""
    return top_n(list(by_category), limit, key=lambda row: row.amount)


def _as_batch(transactions: Union[TransactionBatch, Iterable[Transaction]]) -> TransactionBatch:
    if isinstance(transactions, TransactionBatch):
        return transactions
    return load_transactions(transactions)
