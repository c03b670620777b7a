"""Value objects shared by every stage of the budget engine.

Inputs (:class:`Transaction`, :class:`Budget`) are owned by the caller and
treated as read-only.  Everything else is derived on each call to
:func:`budget_engine.report.compute_budget_report` and never mutated.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .errors import InvalidPeriod


class PeriodName(str, Enum):
    WEEK = 'Week'
    MONTH = 'Month'
    QUARTER = 'Quarter'
    YEAR = 'Year'

    @classmethod
    def parse(cls, value: Any) -> 'PeriodName':
        """Return the period for ``value`` or raise :class:`InvalidPeriod`.

        Accepts the enum itself, its value (``'Month'``) or the adjective
        form the budget screens use (``'Monthly'``).  Matching is
        case-sensitive and there is no fallback period.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value in (member.value, PERIOD_ALIASES[member]):
                    return member
        raise InvalidPeriod(value)


PERIOD_ALIASES: Dict[PeriodName, str] = {
    PeriodName.WEEK: 'Weekly',
    PeriodName.MONTH: 'Monthly',
    PeriodName.QUARTER: 'Quarterly',
    PeriodName.YEAR: 'Yearly',
}


class TransactionType(str, Enum):
    INCOME = 'income'
    EXPENSE = 'expense'


DEFAULT_CATEGORY = 'other'
DEFAULT_DEPARTMENT = 'General'


@dataclass(frozen=True)
class Transaction:
    id: str
    type: TransactionType
    amount: float
    date: date
    category: str = DEFAULT_CATEGORY
    department: str = DEFAULT_DEPARTMENT
    description: str = ''

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE


@dataclass(frozen=True)
class Budget:
    id: str
    category: str
    period: PeriodName
    amount: float
    name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.category

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Budget':
        """Build a budget from a mapping as stored by the budget collaborator.

        Raises:
            InvalidPeriod: If ``period`` is not a known period name.
            ValueError: If ``amount`` is missing, non-numeric, negative or not finite.
        """
        period = PeriodName.parse(record.get('period'))
        try:
            amount = float(record.get('amount'))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Budget amount must be numeric, got {record.get('amount')!r}") from exc
        if not math.isfinite(amount) or amount < 0:
            raise ValueError(f"Budget {record.get('id') or record.get('category')!r} has an invalid amount: {amount}")
        category = str(record.get('category') or DEFAULT_CATEGORY)
        return cls(
            id=str(record.get('id') or f"{category}-{period.value}"),
            category=category,
            period=period,
            amount=amount,
            name=record.get('name') or None,
        )


@dataclass(frozen=True)
class PeriodRange:
    start: date
    end: date
    days_remaining: int

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


@dataclass(frozen=True)
class UtilizationRecord:
    budget_id: str
    name: str
    category: str
    category_color: str
    budget_amount: float
    spent_amount: float
    remaining_amount: float
    percent_used: int


@dataclass(frozen=True)
class Alert:
    id: str
    severity: str
    subject_name: str
    message: str
    percent_used: int


@dataclass(frozen=True)
class Recommendation:
    kind: str
    title: str
    message: str
    subject: str
    amount: float
    suggestions: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CategoryTotal:
    name: str
    amount: float
    percentage: int = 0


@dataclass(frozen=True)
class TrendPoint:
    period_label: str
    income: float
    expense: float
    net: float


@dataclass(frozen=True)
class BudgetInsights:
    top_category: Optional[str]
    top_amount: float
    average_spent: float
    on_track: int
    warning: int
    over_budget: int


@dataclass(frozen=True)
class BudgetReport:
    period: PeriodName
    period_range: PeriodRange
    total_budget: float
    total_spent: float
    total_remaining: float
    percent_used: int
    total_income: float
    total_expense: float
    net: float
    profit_margin: float
    by_category: List[CategoryTotal]
    by_department: List[CategoryTotal]
    utilizations: List[UtilizationRecord]
    alerts: List[Alert]
    recommendations: List[Recommendation]
    top_categories: List[CategoryTotal]
    trend: List[TrendPoint]
    unbudgeted_spent: float
    insights: BudgetInsights
    skipped_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable representation of the report."""
        payload = asdict(self)
        payload['period'] = self.period.value
        payload['period_range'] = {
            'start': self.period_range.start.isoformat(),
            'end': self.period_range.end.isoformat(),
            'days_remaining': self.period_range.days_remaining,
        }
        return payload
