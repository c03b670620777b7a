"""Transaction loading, period filtering and classification.

Records arrive from the transaction collaborator either as
:class:`~budget_engine.models.Transaction` objects or as plain mappings
(the shape the document store returns).  Each record is coerced once;
records that cannot be coerced are skipped and counted rather than
allowed to abort the whole report.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Union

import pandas as pd

from .errors import MalformedTransaction
from .models import (
    DEFAULT_CATEGORY,
    DEFAULT_DEPARTMENT,
    PeriodRange,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

TransactionRecord = Union[Transaction, Mapping[str, Any]]

DATE_FALLBACK_FIELDS = ('created_at', 'createdAt')


class Classification(NamedTuple):
    type: TransactionType
    category: str
    department: str


@dataclass(frozen=True)
class TransactionBatch:
    """Coerced transactions plus the number of records that were skipped."""

    transactions: List[Transaction] = field(default_factory=list)
    skipped: int = 0

    def __iter__(self):
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self.transactions)


def parse_date(value: Any) -> Optional[date]:
    """Parse a calendar date, returning ``None`` when ``value`` is not a date.

    Example:
        >>> parse_date('2024-02-15T10:30:00Z')
        datetime.date(2024, 2, 15)
        >>> parse_date('not-a-date') is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return None if pd.isna(value) else value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = pd.to_datetime(value.strip(), errors='coerce')
    if pd.isna(parsed):
        return None
    return parsed.date()


def _parse_amount(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not pd.api.types.is_scalar(value):
        return None
    try:
        amount = pd.to_numeric(value, errors='coerce')
    except (TypeError, ValueError):
        return None
    if amount is None or pd.isna(amount):
        return None
    amount = float(amount)
    return amount if math.isfinite(amount) else None


def _clean_key(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def coerce_transaction(record: TransactionRecord, fallback_id: str = '') -> Transaction:
    """Validate ``record`` and return it as a :class:`Transaction`.

    Mappings may carry ``date`` or, when that is absent, ``created_at`` /
    ``createdAt``.  Missing categories become ``"other"`` and missing
    departments ``"General"``.

    Raises:
        MalformedTransaction: If the date is unparseable, the amount is
            non-numeric or negative, or the type is not income/expense.
    """
    if isinstance(record, Transaction):
        try:
            txn_type = TransactionType(record.type.lower() if isinstance(record.type, str) else record.type)
        except ValueError:
            raise MalformedTransaction(f"unknown type {record.type!r}", record.id) from None
        txn_date = parse_date(record.date)
        if txn_date is None:
            raise MalformedTransaction(f"unparseable date {record.date!r}", record.id)
        amount = _parse_amount(record.amount)
        if amount is None or amount < 0:
            raise MalformedTransaction(f"invalid amount {record.amount!r}", record.id)
        return replace(record, type=txn_type, date=txn_date, amount=amount)

    if not isinstance(record, Mapping):
        raise MalformedTransaction(f"unsupported record {type(record).__name__}", fallback_id)

    record_id = _clean_key(record.get('id'), fallback_id)

    raw_type = str(record.get('type') or '').strip().lower()
    try:
        txn_type = TransactionType(raw_type)
    except ValueError:
        raise MalformedTransaction(f"unknown type {record.get('type')!r}", record_id) from None

    amount = _parse_amount(record.get('amount'))
    if amount is None:
        raise MalformedTransaction(f"non-numeric amount {record.get('amount')!r}", record_id)
    if amount < 0:
        raise MalformedTransaction(f"negative amount {amount}", record_id)

    raw_date = record.get('date')
    if raw_date in (None, ''):
        raw_date = next((record.get(key) for key in DATE_FALLBACK_FIELDS if record.get(key)), None)
    txn_date = parse_date(raw_date)
    if txn_date is None:
        raise MalformedTransaction(f"unparseable date {raw_date!r}", record_id)

    return Transaction(
        id=record_id,
        type=txn_type,
        amount=amount,
        date=txn_date,
        category=_clean_key(record.get('category'), DEFAULT_CATEGORY),
        department=_clean_key(record.get('department'), DEFAULT_DEPARTMENT),
        description=str(record.get('description') or ''),
    )


def load_transactions(records: Optional[Iterable[TransactionRecord]]) -> TransactionBatch:
    """Coerce every record, skipping and counting the malformed ones."""
    valid: List[Transaction] = []
    skipped = 0
    for index, record in enumerate(records or []):
        try:
            valid.append(coerce_transaction(record, fallback_id=f"txn-{index}"))
        except MalformedTransaction as exc:
            skipped += 1
            logger.warning("Skipping malformed transaction: %s", exc)
    return TransactionBatch(valid, skipped)


def filter_by_period(
    records: Optional[Iterable[TransactionRecord]],
    period_range: PeriodRange,
) -> TransactionBatch:
    """Select the transactions dated within ``period_range`` (both ends inclusive).

    Malformed records are excluded and reported through ``skipped``.
    """
    batch = records if isinstance(records, TransactionBatch) else load_transactions(records)
    selected = [txn for txn in batch.transactions if txn.date in period_range]
    return TransactionBatch(selected, batch.skipped)


def classify(transaction: TransactionRecord) -> Classification:
    """Return the type, category and department of ``transaction`` with defaults filled."""
    txn = coerce_transaction(transaction)
    return Classification(
        type=txn.type,
        category=_clean_key(txn.category, DEFAULT_CATEGORY),
        department=_clean_key(txn.department, DEFAULT_DEPARTMENT),
    )


def categorize_description(description: Optional[str], keywords: Optional[Mapping[str, Iterable[str]]] = None) -> str:
    """Guess a category from a free-text description.

    The first category whose keyword appears (case-insensitively) in the
    description wins; anything unmatched is ``"other"``.

    Example:
        >>> categorize_description('Uber trip to airport')
        'transport'
    """
    if not description or len(description.strip()) < 2:
        return DEFAULT_CATEGORY
    if keywords is None:
        from .config import default_config
        keywords = default_config().category_keywords

    lowered = description.lower()
    for category, words in keywords.items():
        if any(word.lower() in lowered for word in words):
            return category
    return DEFAULT_CATEGORY


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Tabulate coerced transactions for pandas-based aggregation."""
    rows: List[Dict[str, Any]] = [
        {
            'id': txn.id,
            'Type': txn.type.value,
            'Amount': txn.amount,
            'Category': txn.category,
            'Department': txn.department,
            'Transaction Date': txn.date,
            'Description': txn.description,
        }
        for txn in transactions
    ]
    columns = ['id', 'Type', 'Amount', 'Category', 'Department', 'Transaction Date', 'Description']
    return pd.DataFrame(rows, columns=columns)
