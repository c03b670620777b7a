"""Join budgets to aggregated spend and summarise utilisation."""

from __future__ import annotations

from dataclasses import asdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Union

from .models import Budget, BudgetInsights, PeriodName, UtilizationRecord

DEFAULT_PALETTE = ('#4CAF50', '#FF9800', '#2196F3', '#9C27B0', '#607D8B')

BudgetRecord = Union[Budget, Mapping[str, Any]]


def percent_used(part: float, whole: float) -> int:
    """Return ``part / whole * 100`` rounded half-up, or 0 when ``whole`` is not positive.

    Example:
        >>> percent_used(1100, 1000)
        110
        >>> percent_used(50, 0)
        0
    """
    if not whole or whole <= 0:
        return 0
    ratio = Decimal(str(part)) * 100 / Decimal(str(whole))
    return int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def as_budget(record: BudgetRecord) -> Budget:
    return Budget.from_record(asdict(record) if isinstance(record, Budget) else record)


def match_budgets(
    budgets: Iterable[BudgetRecord],
    by_category_totals: Mapping[str, float],
    period: Union[PeriodName, str],
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> List[UtilizationRecord]:
    """Build one utilisation record per budget scoped to ``period``.

    Budgets for other granularities are left out.  Records keep the input
    order; colours are assigned by each budget's position in the list
    sorted by id so they do not shift between calls.

    Raises:
        InvalidPeriod: If ``period`` or any budget's period is unknown.
    """
    active_period = PeriodName.parse(period)
    active = [budget for budget in map(as_budget, budgets) if budget.period is active_period]

    colour_index: Dict[str, int] = {}
    for position, budget in enumerate(sorted(active, key=lambda b: b.id)):
        colour_index.setdefault(budget.id, position)

    records: List[UtilizationRecord] = []
    for budget in active:
        spent = float(by_category_totals.get(budget.category, 0.0))
        colour = palette[colour_index[budget.id] % len(palette)] if palette else ''
        records.append(UtilizationRecord(
            budget_id=budget.id,
            name=budget.display_name,
            category=budget.category,
            category_color=colour,
            budget_amount=budget.amount,
            spent_amount=spent,
            remaining_amount=budget.amount - spent,
            percent_used=percent_used(spent, budget.amount),
        ))
    return records


def unbudgeted_spending(by_category_totals: Mapping[str, float], utilizations: Iterable[UtilizationRecord]) -> float:
    """Spend in categories that have no budget for the active period."""
    budgeted = {record.category for record in utilizations}
    return float(sum(amount for category, amount in by_category_totals.items() if category not in budgeted))


def budget_insights(utilizations: Sequence[UtilizationRecord], warning_floor: float = 75) -> BudgetInsights:
    """Summarise utilisation into top spender, average spend and status counts.

    Over budget means more than 100% used; warning means ``warning_floor``
    to 100% inclusive; everything else is on track.
    """
    if not utilizations:
        return BudgetInsights(top_category=None, top_amount=0.0, average_spent=0.0, on_track=0, warning=0, over_budget=0)

    top = utilizations[0]
    for record in utilizations[1:]:
        if record.spent_amount > top.spent_amount:
            top = record

    over = sum(1 for record in utilizations if record.percent_used > 100)
    warning = sum(1 for record in utilizations if warning_floor <= record.percent_used <= 100)
    total_spent = sum(record.spent_amount for record in utilizations)
    return BudgetInsights(
        top_category=top.name,
        top_amount=top.spent_amount,
        average_spent=total_spent / len(utilizations),
        on_track=len(utilizations) - over - warning,
        warning=warning,
        over_budget=over,
    )
