"""Exception types raised by the budget engine."""

from __future__ import annotations

from typing import Any, Optional


class BudgetEngineError(Exception):
    """Base class for all budget engine errors."""


class InvalidPeriod(BudgetEngineError, ValueError):
    """Raised when a period name is not one of Week, Month, Quarter or Year."""

    def __init__(self, period: Any):
        self.period = period
        super().__init__(f"Unknown budget period: {period!r}")


class MalformedTransaction(BudgetEngineError, ValueError):
    """Raised when a transaction record cannot be coerced.

    The loader catches this, logs it and counts the record as skipped, so
    callers of :func:`budget_engine.report.compute_budget_report` only see
    it through ``BudgetReport.skipped_count``.
    """

    def __init__(self, reason: str, record_id: Optional[str] = None):
        self.reason = reason
        self.record_id = record_id
        label = f"Transaction {record_id!r}" if record_id else "Transaction"
        super().__init__(f"{label}: {reason}")
