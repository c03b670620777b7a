"""Plotly figures for a :class:`~budget_engine.models.BudgetReport`.

Each function takes part of a report and returns a
``plotly.graph_objects.Figure`` that Streamlit can render with
``st.plotly_chart``.  Empty inputs give an empty figure titled
"No data to display" rather than raising.
"""

from __future__ import annotations

from typing import Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .models import CategoryTotal, TrendPoint, UtilizationRecord


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_utilization_chart(utilizations: Sequence[UtilizationRecord], title: str | None = None) -> go.Figure:
    """Grouped bars of budget vs spent for every budget in the report.

    Parameters
    ----------
    utilizations : sequence of UtilizationRecord
        Records from ``BudgetReport.utilizations``.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Bar chart with one "Budget" and one "Spent" bar per budget.
    """
    if not utilizations:
        return _empty_figure()
    names = [record.name for record in utilizations]
    fig = go.Figure()
    fig.add_trace(go.Bar(name="Budget", x=names, y=[record.budget_amount for record in utilizations]))
    fig.add_trace(go.Bar(
        name="Spent",
        x=names,
        y=[record.spent_amount for record in utilizations],
        marker_color=[record.category_color for record in utilizations],
        text=[f"{record.percent_used}%" for record in utilizations],
        textposition="outside",
    ))
    fig.update_layout(
        barmode="group",
        title=title or "Budget utilization",
        xaxis_title="Budget",
        yaxis_title="Amount",
    )
    return fig


def create_trend_chart(trend: Sequence[TrendPoint], title: str | None = None) -> go.Figure:
    """Line chart of income, expense and net per trend period."""
    if not trend:
        return _empty_figure()
    df = pd.DataFrame(
        [
            {"Period": point.period_label, "Income": point.income, "Expense": point.expense, "Net": point.net}
            for point in trend
        ]
    )
    long_df = df.melt(id_vars="Period", value_vars=["Income", "Expense", "Net"], var_name="Metric", value_name="Amount")
    fig = px.line(long_df, x="Period", y="Amount", color="Metric", markers=True)
    fig.update_layout(
        title=title or "Income vs expenses",
        xaxis_title="Period",
        yaxis_title="Amount",
    )
    return fig


def create_top_categories_chart(top_categories: Sequence[CategoryTotal], title: str | None = None) -> go.Figure:
    """Pie chart of the largest expense categories."""
    if not top_categories:
        return _empty_figure()
    df = pd.DataFrame([{"Category": row.name, "Amount": row.amount} for row in top_categories])
    fig = px.pie(df, names="Category", values="Amount")
    fig.update_layout(title=title or "Top expense categories")
    return fig
