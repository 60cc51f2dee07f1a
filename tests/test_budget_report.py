import importlib.util
from datetime import date
from pathlib import Path

import pandas as pd

SCRIPT_PATH = Path(__file__).resolve().parents[1] / 'scripts' / 'budget_report.py'


def _load_script_module():
    spec = importlib.util.spec_from_file_location('budget_report_test', SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _write_inputs(tmp_path):
    transactions = tmp_path / 'transactions.csv'
    budgets = tmp_path / 'budgets.csv'
    pd.DataFrame([
        {'amount': 1500, 'type': 'expense', 'transaction_date': '2024-03-02 10:00:00', 'category_id': 'food'},
        {'amount': 800, 'type': 'expense', 'transaction_date': '2024-03-05 10:00:00', 'category_id': 'transport'},
        {'amount': 200, 'type': 'expense', 'transaction_date': '2024-03-07 10:00:00', 'category_id': None},
        {'amount': 40000, 'type': 'income', 'transaction_date': '2024-03-01 10:00:00', 'category_id': None},
    ]).to_csv(transactions, index=False)
    pd.DataFrame([
        {'amount': 10000, 'month': 3, 'year': 2024, 'category_id': None},
        {'amount': 2000, 'month': 3, 'year': 2024, 'category_id': 'food'},
        {'amount': 99999, 'month': 4, 'year': 2024, 'category_id': None},
    ]).to_csv(budgets, index=False)
    return transactions, budgets


def test_report_prints_summary(tmp_path, capsys):
    module = _load_script_module()
    transactions, budgets = _write_inputs(tmp_path)

    assert module.main(transactions, budgets, 3, 2024, date(2024, 3, 22)) == 0
    output = capsys.readouterr().out

    assert 'Budget 2024-03 (On Track)' in output
    assert '₹12,000' in output
    assert '₹2,500' in output
    assert 'food' in output
    assert 'Uncategorized' in output


def test_report_rejects_bad_month(tmp_path, capsys):
    module = _load_script_module()
    transactions, budgets = _write_inputs(tmp_path)
    assert module.main(transactions, budgets, 13, 2024, date(2024, 3, 22)) == 1


def test_report_missing_file(tmp_path):
    module = _load_script_module()
    missing = tmp_path / 'missing.csv'
    assert module.main(missing, missing, 3, 2024, date(2024, 3, 22)) == 1
