"""Streamlit budget page.

A thin caller of :func:`budget_engine.report.compute_budget_report`: it
loads transactions and budgets from uploaded files, lets the user pick a
period and renders the resulting report.  No aggregation happens here.

To run the page from the command line::

    streamlit run budget_engine/dashboard.py
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd
import streamlit as st

# Support both ``streamlit run budget_engine/dashboard.py`` and package imports.
if __package__:
    from . import visualization as viz
    from .errors import InvalidPeriod
    from .models import BudgetReport, PeriodName
    from .recent_actions import RecentAction, RecentActionsStore
    from .report import compute_budget_report
    from .transactions import categorize_description
else:
    PARENT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from budget_engine import visualization as viz  # type: ignore
    from budget_engine.errors import InvalidPeriod  # type: ignore
    from budget_engine.models import BudgetReport, PeriodName  # type: ignore
    from budget_engine.recent_actions import RecentAction, RecentActionsStore  # type: ignore
    from budget_engine.report import compute_budget_report  # type: ignore
    from budget_engine.transactions import categorize_description  # type: ignore

SEVERITY_RENDERERS = {'high': 'error', 'medium': 'warning', 'low': 'info'}


def read_records(file: Any) -> List[Dict[str, Any]]:
    """Read a CSV or JSON upload into a list of plain dict records.

    Missing CSV cells become ``None`` so the engine applies its defaults.

    Raises:
        ValueError: If the extension is not supported or JSON is not a list.
    """
    name = getattr(file, 'name', str(file))
    ext = Path(name).suffix.lower()
    if ext == '.csv':
        df = pd.read_csv(file)
        df = df.astype(object).where(pd.notna(df), None)
        return df.to_dict(orient='records')
    if ext == '.json':
        data = json.load(file) if hasattr(file, 'read') else json.loads(Path(file).read_text(encoding='utf-8'))
        if not isinstance(data, list):
            raise ValueError("JSON upload must contain a list of records")
        return data
    raise ValueError(f"Unsupported file extension '{ext}'.")


def fill_missing_categories(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Guess a category from the description for rows that have none.

    Rows that already carry a category, or have no description, are
    returned unchanged.
    """
    filled = []
    for record in records:
        if not record.get('category') and record.get('description'):
            record = {**record, 'category': categorize_description(str(record['description']))}
        filled.append(record)
    return filled


def _load_upload(label: str) -> List[Dict[str, Any]]:
    upload = st.sidebar.file_uploader(label, type=['csv', 'json'], accept_multiple_files=False)
    if upload is None:
        return []
    try:
        return read_records(upload)
    except Exception as exc:  # pragma: no cover - UI display only
        st.error(f"Failed to read {upload.name}: {exc}")
        return []


def render_report(report: BudgetReport) -> None:
    """Render a report with Streamlit widgets."""
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total budget", f"{report.total_budget:,.2f}")
    col2.metric("Spent", f"{report.total_spent:,.2f}", f"{report.percent_used}% used")
    col3.metric("Remaining", f"{report.total_remaining:,.2f}")
    col4.metric("Days remaining", report.period_range.days_remaining)

    if report.skipped_count:
        st.warning(f"{report.skipped_count} transaction(s) could not be read and were skipped.")

    if report.alerts:
        st.subheader("Alerts")
        for alert in report.alerts:
            getattr(st, SEVERITY_RENDERERS.get(alert.severity, 'info'))(alert.message)

    if report.recommendations:
        st.subheader("Budget advisor")
        for recommendation in report.recommendations:
            with st.expander(f"{recommendation.title}: {recommendation.message}"):
                for suggestion in recommendation.suggestions:
                    st.markdown(f"- {suggestion}")

    st.subheader("Budgets")
    st.plotly_chart(viz.create_utilization_chart(report.utilizations))
    if report.unbudgeted_spent:
        st.caption(f"Out of budget spending: {report.unbudgeted_spent:,.2f}")

    left, right = st.columns(2)
    with left:
        st.plotly_chart(viz.create_top_categories_chart(report.top_categories))
    with right:
        st.plotly_chart(viz.create_trend_chart(report.trend))

    if report.by_department:
        st.subheader("By department")
        st.dataframe(pd.DataFrame([asdict(row) for row in report.by_department]))


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="Budget", layout="wide", initial_sidebar_state="expanded")
    st.title("Budget")

    RecentActionsStore().push(RecentAction(id='budget', name='Budget', icon='wallet', color='#4CAF50'))

    transactions = fill_missing_categories(_load_upload("Transactions (CSV or JSON)"))
    budgets = _load_upload("Budgets (CSV or JSON)")
    period = st.sidebar.selectbox("Period", options=[name.value for name in PeriodName], index=1)
    as_of = st.sidebar.date_input("As of", value=date.today())

    if not transactions and not budgets:
        st.info("Upload transactions and budgets to begin.")
        st.stop()

    try:
        report = compute_budget_report(transactions, budgets, period, as_of)
    except (InvalidPeriod, ValueError) as exc:
        st.error(f"Could not build the budget report: {exc}")
        st.stop()
    render_report(report)


if __name__ == "__main__":  # pragma: no cover
    main()
