#!/usr/bin/env python3
"""Print a budget report for transactions and budgets stored as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from budget_engine import InvalidPeriod, compute_budget_report, load_config
from budget_engine.transactions import parse_date


def _read_list(path: Path) -> list:
    with path.open('r', encoding='utf-8') as handle:
        data = json.load(handle)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list")
    return data


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Compute a budget report from JSON exports.')
    parser.add_argument('transactions', type=Path, help='JSON list of transaction records')
    parser.add_argument('budgets', type=Path, help='JSON list of budget records')
    parser.add_argument('--period', default='Month', help='Week, Month, Quarter or Year')
    parser.add_argument('--as-of', default=None, help='Reference date (YYYY-MM-DD), defaults to today')
    parser.add_argument('--config', type=Path, default=None, help='JSON file overriding the engine defaults')
    parser.add_argument('--json', action='store_true', help='Print the full report as JSON')
    args = parser.parse_args(argv)

    as_of = parse_date(args.as_of) if args.as_of else date.today()
    if as_of is None:
        print(f"Invalid --as-of date: {args.as_of}")
        return 2

    try:
        report = compute_budget_report(
            _read_list(args.transactions),
            _read_list(args.budgets),
            args.period,
            as_of,
            config=load_config(args.config) if args.config else None,
        )
    except InvalidPeriod as exc:
        print(str(exc))
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return 0

    span = report.period_range
    print(f"{report.period.value}: {span.start} to {span.end} ({span.days_remaining} days remaining)")
    print(f"Budget {report.total_budget:,.2f} | Spent {report.total_spent:,.2f} | "
          f"Remaining {report.total_remaining:,.2f} ({report.percent_used}% used)")
    for record in report.utilizations:
        print(f"  {record.name:<20} {record.spent_amount:>12,.2f} / {record.budget_amount:>12,.2f}  {record.percent_used:>4}%")
    if report.alerts:
        print("\nAlerts:")
        for alert in report.alerts:
            print(f"  [{alert.severity}] {alert.message}")
    if report.recommendations:
        print("\nAdvisor:")
        for rec in report.recommendations:
            print(f"  [{rec.kind}] {rec.title}: {rec.message}")
    if report.skipped_count:
        print(f"\nSkipped {report.skipped_count} malformed transaction(s).")
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
