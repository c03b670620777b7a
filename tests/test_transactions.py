from datetime import date, datetime

import pytest

from budget_engine.errors import MalformedTransaction
from budget_engine.models import Transaction, TransactionType
from budget_engine.periods import resolve_period
from budget_engine.report import compute_budget_report
from budget_engine.transactions import (
    categorize_description,
    classify,
    coerce_transaction,
    filter_by_period,
    load_transactions,
    parse_date,
)


def _expense(txn_id, day, amount=10.0, **extra):
    record = {'id': txn_id, 'type': 'expense', 'amount': amount, 'date': day}
    record.update(extra)
    return record


def test_missing_category_and_department_get_defaults():
    txn = coerce_transaction(_expense('t1', '2024-02-10'))

    assert txn.category == 'other'
    assert txn.department == 'General'
    assert txn.type is TransactionType.EXPENSE


def test_malformed_records_are_skipped_and_counted():
    records = [_expense(f't{i}', f'2024-02-{i + 1:02d}') for i in range(9)]
    records.append(_expense('bad', 'not-a-date'))

    batch = load_transactions(records)

    assert len(batch) == 9
    assert batch.skipped == 1


@pytest.mark.parametrize('record', [
    {'id': 'x', 'type': 'expense', 'amount': 'ten', 'date': '2024-02-01'},
    {'id': 'x', 'type': 'expense', 'amount': -5, 'date': '2024-02-01'},
    {'id': 'x', 'type': 'expense', 'amount': True, 'date': '2024-02-01'},
    {'id': 'x', 'type': 'transfer', 'amount': 5, 'date': '2024-02-01'},
    {'id': 'x', 'type': 'expense', 'amount': 5},
    'expense,5,2024-02-01',
    {'id': 'x', 'type': 'expense', 'amount': [1, 2], 'date': '2024-02-01'},
    {'id': 'x', 'type': 'expense', 'amount': {'value': 5}, 'date': '2024-02-01'},
])
def test_coerce_rejects_bad_records(record):
    with pytest.raises(MalformedTransaction):
        coerce_transaction(record)


def test_numeric_strings_and_created_at_fallback():
    txn = coerce_transaction({'id': 'a', 'type': 'Income', 'amount': '12.50', 'createdAt': '2024-02-03T08:00:00Z'})

    assert txn.amount == 12.5
    assert txn.date == date(2024, 2, 3)
    assert txn.type is TransactionType.INCOME


def test_valid_transaction_objects_are_kept_as_is():
    txn = Transaction(id='t', type=TransactionType.EXPENSE, amount=3.0, date=date(2024, 2, 1))

    assert coerce_transaction(txn) == txn


def test_transaction_objects_are_normalised():
    txn = Transaction(id='t', type='Expense', amount='50', date=datetime(2024, 2, 10, 9, 30))

    coerced = coerce_transaction(txn)

    assert coerced.type is TransactionType.EXPENSE
    assert coerced.amount == 50.0
    assert coerced.date == date(2024, 2, 10)
    assert type(coerced.date) is date


@pytest.mark.parametrize('txn', [
    Transaction(id='t', type='transfer', amount=5.0, date=date(2024, 2, 1)),
    Transaction(id='t', type=TransactionType.EXPENSE, amount='ten', date=date(2024, 2, 1)),
    Transaction(id='t', type=TransactionType.EXPENSE, amount=5.0, date='someday'),
])
def test_bad_transaction_objects_are_rejected(txn):
    with pytest.raises(MalformedTransaction):
        coerce_transaction(txn)


def test_datetime_and_plain_string_type_objects_reach_the_report():
    records = [
        Transaction(id='t1', type='expense', amount=90.0, date=datetime(2024, 2, 10, 9), category='food'),
        Transaction(id='t2', type=TransactionType.EXPENSE, amount='20', date=date(2024, 2, 11), category='food'),
    ]

    report = compute_budget_report(records, [{'id': 'b', 'category': 'food', 'amount': 100, 'period': 'Month'}],
                                   'Month', date(2024, 2, 15))

    assert report.total_spent == 110.0
    assert report.skipped_count == 0
    assert report.alerts[0].severity == 'high'


def test_filter_bounds_are_inclusive():
    records = [
        _expense('before', '2024-01-31'),
        _expense('first', '2024-02-01'),
        _expense('last', '2024-02-29'),
        _expense('after', '2024-03-01'),
        _expense('broken', None),
    ]

    batch = filter_by_period(records, resolve_period('Month', date(2024, 2, 15)))

    assert [txn.id for txn in batch] == ['first', 'last']
    assert batch.skipped == 1


def test_classify_fills_defaults():
    result = classify({'type': 'expense', 'amount': 5, 'date': '2024-01-01', 'category': '  '})

    assert result.type is TransactionType.EXPENSE
    assert result.category == 'other'
    assert result.department == 'General'


def test_parse_date_variants():
    assert parse_date('2024-02-15') == date(2024, 2, 15)
    assert parse_date(date(2024, 2, 15)) == date(2024, 2, 15)
    assert parse_date('not-a-date') is None
    assert parse_date(42) is None


def test_categorize_description():
    assert categorize_description('Uber trip to airport') == 'transport'
    assert categorize_description('Electricity BILL') == 'bills'
    assert categorize_description('x') == 'other'
    assert categorize_description('mystery charge') == 'other'
    assert categorize_description('gym', {'fitness': ['Gym']}) == 'fitness'
