"""Threshold alerts and advisory recommendations.

Two independent sources feed the alert UI:

* :func:`generate_alerts` turns utilisation records into ``medium`` or
  ``high`` alerts once spending crosses the configured thresholds.
* :func:`savings_tips` scans expense descriptions for non-essential spend
  (coffee, snacks, dining out ...) and suggests savings whether or not a
  budget exists for that category.

:func:`budget_recommendations` combines both into the advisor feed, ranked
and capped.  Nothing here keeps state between calls; dismissal is the
caller's business.
"""

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from .aggregation import spending_for_month
from .config import EngineConfig, default_config
from .models import Alert, Recommendation, Transaction, UtilizationRecord
from .periods import DateLike, as_date, shift_month
from .ranking import top_n

SEVERITY_MEDIUM = 'medium'
SEVERITY_HIGH = 'high'

KIND_PRIORITY = {'critical': 3, 'warning': 2, 'tip': 1}


@dataclass(frozen=True)
class NonEssentialAnalysis:
    breakdown: Dict[str, float] = field(default_factory=dict)
    total: float = 0.0


def _title_case(name: str) -> str:
    return name[:1].upper() + name[1:]


def _humanize(key: str) -> str:
    """``'diningOut'`` -> ``'dining out'``."""
    return re.sub(r'(?<!^)(?=[A-Z])', ' ', key).lower()


def generate_alerts(utilizations: Iterable[UtilizationRecord], config: Optional[EngineConfig] = None) -> List[Alert]:
    """Emit an alert for every record above the warning threshold.

    ``percent_used`` at or below ``warning_threshold`` is fine, up to and
    including ``critical_threshold`` is ``medium``, above it is ``high``.
    Alerts follow the order of ``utilizations``.
    """
    config = config or default_config()
    alerts: List[Alert] = []
    for record in utilizations:
        used = record.percent_used
        if used <= config.warning_threshold:
            continue
        if used <= config.critical_threshold:
            severity = SEVERITY_MEDIUM
            message = f"{record.name} is approaching budget limit ({used}% used)"
        else:
            severity = SEVERITY_HIGH
            message = f"{record.name} has exceeded budget ({used}% used)"
        alerts.append(Alert(
            id=record.budget_id,
            severity=severity,
            subject_name=record.name,
            message=message,
            percent_used=used,
        ))
    return alerts


def analyze_non_essentials(
    transactions: Iterable[Transaction],
    now: DateLike,
    config: Optional[EngineConfig] = None,
) -> NonEssentialAnalysis:
    """Sum recent expense spend per non-essential keyword group.

    Only expenses dated on or after ``now - lookback_days`` count.  The
    description is matched case-insensitively and the first group with a
    matching keyword takes the whole amount.
    """
    config = config or default_config()
    cutoff = as_date(now) - timedelta(days=config.lookback_days)

    breakdown: Dict[str, float] = {}
    total = 0.0
    for txn in transactions:
        if not txn.is_expense or txn.date < cutoff:
            continue
        description = txn.description.lower()
        for group, keywords in config.non_essential_keywords.items():
            if any(keyword.lower() in description for keyword in keywords):
                breakdown[group] = breakdown.get(group, 0.0) + txn.amount
                total += txn.amount
                break
    return NonEssentialAnalysis(breakdown=breakdown, total=total)


def savings_tips(analysis: NonEssentialAnalysis, config: Optional[EngineConfig] = None) -> List[Recommendation]:
    """Turn non-essential spend of at least ``min_savings_amount`` into ``tip`` recommendations.

    Largest spend first.
    """
    config = config or default_config()
    qualifying = [
        (group, amount)
        for group, amount in analysis.breakdown.items()
        if amount >= config.min_savings_amount
    ]
    tips: List[Recommendation] = []
    for group, amount in top_n(qualifying, len(qualifying), key=lambda pair: pair[1]):
        label = _humanize(group)
        saving = amount * config.savings_share
        tips.append(Recommendation(
            kind='tip',
            title=config.savings_titles.get(group, 'Savings Opportunity'),
            message=f"You've spent {amount:.0f} on {label} recently.",
            subject=group,
            amount=amount,
            suggestions=[
                f"Cut {label} expenses to save {saving:.0f}",
                config.savings_alternatives.get(group, 'Find cheaper alternatives'),
            ],
        ))
    return tips


def _category_suggestions(category: str, severity: str, config: EngineConfig) -> List[str]:
    by_severity = config.category_suggestions.get(category) or {}
    return list(by_severity.get(severity) or config.default_suggestions)


def _budget_recommendation(record: UtilizationRecord, config: EngineConfig) -> Optional[Recommendation]:
    budget = record.budget_amount
    spent = record.spent_amount
    ratio = spent / budget if budget > 0 else 0.0
    title = _title_case(record.name)

    if ratio >= config.advisor_exceeded_ratio:
        return Recommendation(
            kind='critical',
            title=f"{title} Budget Exceeded!",
            message=f"You've exceeded your budget by {spent - budget:.0f}",
            subject=record.category,
            amount=spent,
            suggestions=[
                f"Stop all non-essential {record.name} expenses",
                'Review and cut unnecessary spending',
                'Consider adjusting your budget for next month',
            ],
        )
    if ratio >= config.advisor_critical_ratio:
        return Recommendation(
            kind='critical',
            title=f"{title} Budget Critical",
            message=f"{record.percent_used}% used! Only {budget - spent:.0f} left",
            subject=record.category,
            amount=spent,
            suggestions=_category_suggestions(record.category, 'critical', config),
        )
    if ratio >= config.advisor_warning_ratio:
        return Recommendation(
            kind='warning',
            title=f"{title} Budget Alert",
            message=f"{record.percent_used}% used ({spent:.0f}/{budget:.0f})",
            subject=record.category,
            amount=spent,
            suggestions=_category_suggestions(record.category, 'warning', config),
        )
    return None


def _spending_pattern(transactions: Sequence[Transaction], now: DateLike, config: EngineConfig) -> Optional[Recommendation]:
    last_month = shift_month(now, -1)
    spending = spending_for_month(transactions, last_month)

    top_category, top_amount = None, 0.0
    for category, amount in spending.items():
        if amount > top_amount:
            top_category, top_amount = category, amount
    if top_category is None:
        return None

    month_name = calendar.month_name[last_month.month]
    return Recommendation(
        kind='tip',
        title='Spending Pattern',
        message=f"In {month_name}, spending was highest in {top_category} ({top_amount:.0f}).",
        subject=top_category,
        amount=top_amount,
        suggestions=[
            f"Review your {top_category} expenses",
            f"Try to keep it under {top_amount * config.pattern_target_ratio:.0f} this month",
        ],
    )


def budget_recommendations(
    utilizations: Iterable[UtilizationRecord],
    transactions: Sequence[Transaction],
    now: DateLike,
    config: Optional[EngineConfig] = None,
) -> List[Recommendation]:
    """Build the advisor feed: budget warnings, savings tips and a fallback insight.

    Recommendations are ranked critical, warning, tip (stable within a
    kind) and capped at ``max_suggestions``.  When fewer than that many are
    found, last month's largest expense category is added as a tip.
    """
    config = config or default_config()
    recommendations: List[Recommendation] = []
    for record in utilizations:
        recommendation = _budget_recommendation(record, config)
        if recommendation is not None:
            recommendations.append(recommendation)

    recommendations.extend(savings_tips(analyze_non_essentials(transactions, now, config), config))

    if len(recommendations) < config.max_suggestions:
        pattern = _spending_pattern(transactions, now, config)
        if pattern is not None:
            recommendations.append(pattern)

    return top_n(recommendations, config.max_suggestions, key=lambda rec: KIND_PRIORITY.get(rec.kind, 0))
