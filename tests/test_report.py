import importlib.util
import json
from datetime import date
from pathlib import Path

import pytest

from budget_engine.errors import InvalidPeriod
from budget_engine.report import compute_budget_report

SCRIPT_PATH = Path(__file__).resolve().parents[1] / 'scripts' / 'budget_report.py'
AS_OF = date(2024, 2, 15)


def _sample_transactions():
    return [
        {'id': 't1', 'type': 'expense', 'category': 'food', 'amount': 900, 'date': '2024-02-03', 'department': 'Kitchen'},
        {'id': 't2', 'type': 'expense', 'category': 'food', 'amount': 200, 'date': '2024-02-10'},
        {'id': 't3', 'type': 'income', 'category': 'salary', 'amount': 3000, 'date': '2024-02-01'},
        {'id': 't4', 'type': 'expense', 'category': 'travel', 'amount': 150, 'date': '2024-01-20'},
    ]


def _sample_budgets():
    return [
        {'id': 'b1', 'category': 'food', 'amount': 1000, 'period': 'Month'},
        {'id': 'b2', 'category': 'food', 'amount': 100, 'period': 'Week'},
    ]


def _load_script():
    spec = importlib.util.spec_from_file_location('budget_report_script', SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_overspent_category_raises_single_high_alert():
    report = compute_budget_report(_sample_transactions(), _sample_budgets(), 'Month', AS_OF)

    assert report.total_budget == 1000.0
    assert report.total_spent == 1100.0
    assert report.total_remaining == -100.0
    assert report.percent_used == 110
    assert len(report.alerts) == 1
    assert report.alerts[0].severity == 'high'
    assert report.alerts[0].message == 'food has exceeded budget (110% used)'


def test_report_totals_and_breakdowns():
    report = compute_budget_report(_sample_transactions(), _sample_budgets(), 'Month', AS_OF)

    assert report.total_income == 3000.0
    assert report.net == 1900.0
    assert report.profit_margin == pytest.approx(1900 / 3000 * 100)
    assert [(row.name, row.amount) for row in report.by_department] == [('Kitchen', 900.0), ('General', 200.0)]
    assert report.unbudgeted_spent == 0.0
    assert report.period_range.days_remaining == 14
    assert [point.period_label for point in report.trend] == ['2023-12', '2024-01', '2024-02']
    assert report.trend[1].expense == 150.0
    assert report.insights.over_budget == 1


def test_report_recommendations():
    report = compute_budget_report(_sample_transactions(), _sample_budgets(), 'Month', AS_OF)

    assert report.recommendations[0].title == 'Food Budget Exceeded!'
    assert report.recommendations[0].message == "You've exceeded your budget by 100"
    assert report.recommendations[1].title == 'Spending Pattern'


def test_report_is_idempotent():
    first = compute_budget_report(_sample_transactions(), _sample_budgets(), 'Month', AS_OF)
    second = compute_budget_report(_sample_transactions(), _sample_budgets(), 'Month', AS_OF)

    assert first == second


def test_spend_is_conserved_across_breakdowns():
    report = compute_budget_report(_sample_transactions(), [], 'Quarter', AS_OF)

    assert report.total_spent == sum(row.amount for row in report.by_category)
    assert sum(row.amount for row in report.by_department) == pytest.approx(report.total_spent)
    assert report.total_spent == 1250.0
    assert report.unbudgeted_spent == 1250.0


def test_empty_inputs_give_zero_report():
    report = compute_budget_report([], [], 'Week', AS_OF)

    assert report.total_budget == 0.0
    assert report.total_spent == 0.0
    assert report.percent_used == 0
    assert report.alerts == []
    assert report.utilizations == []
    assert report.insights.top_category is None
    assert len(report.trend) == 3


def test_malformed_transactions_are_counted():
    records = _sample_transactions() + [{'id': 'bad', 'type': 'expense', 'amount': 'n/a', 'date': '2024-02-05'}]

    report = compute_budget_report(records, _sample_budgets(), 'Month', AS_OF)

    assert report.skipped_count == 1
    assert report.total_spent == 1100.0


def test_unknown_period_is_rejected():
    with pytest.raises(InvalidPeriod):
        compute_budget_report(_sample_transactions(), _sample_budgets(), 'Fortnight', AS_OF)


def test_report_serialises_to_json():
    report = compute_budget_report(_sample_transactions(), _sample_budgets(), 'Month', AS_OF)

    payload = json.loads(json.dumps(report.to_dict()))

    assert payload['period'] == 'Month'
    assert payload['period_range']['start'] == '2024-02-01'
    assert payload['utilizations'][0]['budget_id'] == 'b1'


def test_budget_report_script_prints_summary(tmp_path, capsys):
    transactions = tmp_path / 'transactions.json'
    budgets = tmp_path / 'budgets.json'
    transactions.write_text(json.dumps(_sample_transactions()))
    budgets.write_text(json.dumps(_sample_budgets()))

    module = _load_script()
    exit_code = module.main([str(transactions), str(budgets), '--as-of', '2024-02-15'])

    output = capsys.readouterr().out
    assert exit_code == 0
    assert 'Month: 2024-02-01 to 2024-02-29' in output
    assert '[high] food has exceeded budget (110% used)' in output


def test_budget_report_script_rejects_unknown_period(tmp_path, capsys):
    path = tmp_path / 'empty.json'
    path.write_text('[]')

    module = _load_script()

    assert module.main([str(path), str(path), '--period', 'Daily', '--as-of', '2024-02-15']) == 2
    assert 'Unknown budget period' in capsys.readouterr().out
