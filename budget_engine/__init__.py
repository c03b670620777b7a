"""Top-level package for the Budget Engine.

The engine turns transaction records and user-defined budgets into a
:class:`~budget_engine.models.BudgetReport`: period totals, category and
department breakdowns, a monthly trend, threshold alerts and advisor
recommendations.  The primary modules are:

* ``periods`` – period boundaries (Week, Month, Quarter, Year)
* ``transactions`` – record coercion, period filtering and classification
* ``aggregation`` – totals, breakdowns and the trend series
* ``matching`` – budget utilisation
* ``alerts`` – threshold alerts, savings tips and advisor recommendations
* ``report`` – :func:`compute_budget_report`, the one entry point callers use

To view a report in the browser you can execute:

```bash
streamlit run budget_engine/dashboard.py
```
"""

from .config import EngineConfig, load_config  # noqa: F401
from .errors import BudgetEngineError, InvalidPeriod, MalformedTransaction  # noqa: F401
from .models import (  # noqa: F401
    Alert,
    Budget,
    BudgetReport,
    PeriodName,
    PeriodRange,
    Recommendation,
    Transaction,
    TransactionType,
    UtilizationRecord,
)
from .periods import resolve_period  # noqa: F401
from .ranking import top_n  # noqa: F401
from .report import compute_budget_report  # noqa: F401

__all__ = [
    "Alert",
    "Budget",
    "BudgetEngineError",
    "BudgetReport",
    "EngineConfig",
    "InvalidPeriod",
    "MalformedTransaction",
    "PeriodName",
    "PeriodRange",
    "Recommendation",
    "Transaction",
    "TransactionType",
    "UtilizationRecord",
    "compute_budget_report",
    "load_config",
    "resolve_period",
    "top_n",
]
