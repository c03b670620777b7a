"""Single entry point that turns transactions and budgets into a report.

Every budget and reporting screen calls :func:`compute_budget_report` with
its own slice of transactions and budgets instead of aggregating inline.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from .aggregation import aggregate, top_categories, trend_series
from .alerts import budget_recommendations, generate_alerts
from .config import EngineConfig, default_config
from .matching import BudgetRecord, budget_insights, match_budgets, percent_used, unbudgeted_spending
from .models import BudgetReport, PeriodName
from .periods import DateLike, resolve_period
from .transactions import TransactionRecord, filter_by_period, load_transactions

logger = logging.getLogger(__name__)


def compute_budget_report(
    transactions: Optional[Iterable[TransactionRecord]],
    budgets: Optional[Iterable[BudgetRecord]],
    period: Union[PeriodName, str],
    now: DateLike,
    config: Optional[EngineConfig] = None,
) -> BudgetReport:
    """Compute the full budget report for the ``period`` instance containing ``now``.

    Args:
        transactions: Transaction objects or mappings from the transaction store.
        budgets: Budget objects or mappings from the budget store.  Only
            budgets scoped to ``period`` take part.
        period: ``Week``, ``Month``, ``Quarter`` or ``Year``.
        now: Reference date; the report never reads the clock itself.
        config: Thresholds and caps.  Defaults to :func:`default_config`.

    Returns:
        A freshly built :class:`BudgetReport`.  Identical inputs give equal reports.

    Raises:
        InvalidPeriod: If ``period`` (or a budget's period) is unknown.

    Example:
        >>> from datetime import date
        >>> report = compute_budget_report(
        ...     [{'id': '1', 'type': 'expense', 'category': 'food', 'amount': 1100, 'date': '2024-02-10'}],
        ...     [{'id': 'b1', 'category': 'food', 'amount': 1000, 'period': 'Month'}],
        ...     'Month',
        ...     date(2024, 2, 15),
        ... )
        >>> report.alerts[0].message
        'food has exceeded budget (110% used)'
    """
    config = config or default_config()
    period_name = PeriodName.parse(period)
    period_range = resolve_period(period_name, now)

    batch = load_transactions(transactions)
    in_period = filter_by_period(batch, period_range)
    totals = aggregate(in_period.transactions)
    category_totals = totals.category_totals

    utilizations = match_budgets(budgets or [], category_totals, period_name, palette=config.palette)
    total_budget = float(sum(record.budget_amount for record in utilizations))
    total_spent = totals.total_expense

    report = BudgetReport(
        period=period_name,
        period_range=period_range,
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
        percent_used=percent_used(total_spent, total_budget),
        total_income=totals.total_income,
        total_expense=totals.total_expense,
        net=totals.net,
        profit_margin=(totals.net / totals.total_income * 100) if totals.total_income > 0 else 0.0,
        by_category=totals.by_category,
        by_department=totals.by_department,
        utilizations=utilizations,
        alerts=generate_alerts(utilizations, config),
        recommendations=budget_recommendations(utilizations, batch.transactions, now, config),
        top_categories=top_categories(totals.by_category, config.top_category_cap),
        trend=trend_series(batch, now, config.trend_months),
        unbudgeted_spent=unbudgeted_spending(category_totals, utilizations),
        insights=budget_insights(utilizations, config.insight_warning_floor),
        skipped_count=batch.skipped,
    )
    logger.debug(
        "Budget report for %s %s..%s: spent=%.2f budget=%.2f alerts=%d skipped=%d",
        period_name.value,
        period_range.start,
        period_range.end,
        total_spent,
        total_budget,
        len(report.alerts),
        batch.skipped,
    )
    return report
