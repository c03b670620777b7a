"""Configuration management for the budget engine.

Defaults live in ``defaults.json`` next to this module.  A JSON file named
by the ``BUDGET_ENGINE_CONFIG`` environment variable (or passed to
:func:`load_config`) is deep-merged over them, so thresholds, keyword
taxonomies and caps can change without touching the alerting code.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

DEFAULTS_PATH = Path(__file__).parent / 'defaults.json'

# Base project root - assumes this file is in budget_engine/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv('BUDGET_ENGINE_DATA_DIR', _PROJECT_ROOT / 'data'))
RECENT_ACTIONS_PATH = DATA_DIR / 'recent_actions.json'


def _deep_merge(base: Any, incoming: Any) -> Any:
    """Recursively merge two configuration fragments (``incoming`` wins)."""
    if isinstance(base, dict) and isinstance(incoming, dict):
        merged: Dict[str, Any] = dict(base)
        for key, value in incoming.items():
            merged[key] = _deep_merge(merged[key], value) if key in merged else value
        return merged
    return incoming


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    with path.open('r', encoding='utf-8') as handle:
        data = json.load(handle)
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a JSON object: {path}")
    return data


def load_raw_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the default configuration merged with an optional override file.

    Args:
        path: Override file.  Defaults to ``$BUDGET_ENGINE_CONFIG`` when set.

    Raises:
        FileNotFoundError: If an override file is named but missing
        json.JSONDecodeError: If a configuration file is invalid JSON
    """
    config = _read_json(DEFAULTS_PATH)
    override = path or os.getenv('BUDGET_ENGINE_CONFIG')
    if override:
        config = _deep_merge(config, _read_json(Path(override)))
    return config


@dataclass(frozen=True)
class EngineConfig:
    """Every tunable the engine reads.

    Percent thresholds are on the 0-100 scale of ``percent_used``; the
    advisor ratios are on the 0-1 scale of spent / budget.
    """

    warning_threshold: float = 80
    critical_threshold: float = 95
    advisor_warning_ratio: float = 0.7
    advisor_critical_ratio: float = 0.9
    advisor_exceeded_ratio: float = 1.0
    min_savings_amount: float = 100
    lookback_days: int = 30
    max_suggestions: int = 3
    savings_share: float = 0.5
    pattern_target_ratio: float = 0.9
    top_category_cap: int = 5
    trend_months: int = 3
    insight_warning_floor: float = 75
    palette: Tuple[str, ...] = ('#4CAF50', '#FF9800', '#2196F3', '#9C27B0', '#607D8B')
    non_essential_keywords: Mapping[str, List[str]] = field(default_factory=dict)
    savings_titles: Mapping[str, str] = field(default_factory=dict)
    savings_alternatives: Mapping[str, str] = field(default_factory=dict)
    category_suggestions: Mapping[str, Mapping[str, List[str]]] = field(default_factory=dict)
    default_suggestions: Tuple[str, ...] = ()
    category_keywords: Mapping[str, List[str]] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'EngineConfig':
        alerts = data.get('alerts', {})
        advisor = data.get('advisor', {})
        report = data.get('report', {})
        defaults = cls()
        return cls(
            warning_threshold=float(alerts.get('warning_threshold', defaults.warning_threshold)),
            critical_threshold=float(alerts.get('critical_threshold', defaults.critical_threshold)),
            advisor_warning_ratio=float(advisor.get('warning_ratio', defaults.advisor_warning_ratio)),
            advisor_critical_ratio=float(advisor.get('critical_ratio', defaults.advisor_critical_ratio)),
            advisor_exceeded_ratio=float(advisor.get('exceeded_ratio', defaults.advisor_exceeded_ratio)),
            min_savings_amount=float(advisor.get('min_savings_amount', defaults.min_savings_amount)),
            lookback_days=int(advisor.get('lookback_days', defaults.lookback_days)),
            max_suggestions=int(advisor.get('max_suggestions', defaults.max_suggestions)),
            savings_share=float(advisor.get('savings_share', defaults.savings_share)),
            pattern_target_ratio=float(advisor.get('pattern_target_ratio', defaults.pattern_target_ratio)),
            top_category_cap=int(report.get('top_category_cap', defaults.top_category_cap)),
            trend_months=int(report.get('trend_months', defaults.trend_months)),
            insight_warning_floor=float(report.get('insight_warning_floor', defaults.insight_warning_floor)),
            palette=tuple(report.get('palette') or defaults.palette),
            non_essential_keywords={
                group: [kw.lower() for kw in words]
                for group, words in (data.get('non_essential_keywords') or {}).items()
            },
            savings_titles=dict(data.get('savings_titles') or {}),
            savings_alternatives=dict(data.get('savings_alternatives') or {}),
            category_suggestions=dict(data.get('category_suggestions') or {}),
            default_suggestions=tuple(data.get('default_suggestions') or ()),
            category_keywords=dict(data.get('category_keywords') or {}),
        )


def load_config(path: Optional[Path] = None) -> EngineConfig:
    """Load an :class:`EngineConfig` from the defaults plus an optional override.

    Example:
        >>> config = load_config()
        >>> config.warning_threshold, config.critical_threshold
        (80.0, 95.0)
    """
    return EngineConfig.from_mapping(load_raw_config(path))


@lru_cache(maxsize=1)
def default_config() -> EngineConfig:
    """Return the process-wide default configuration (read once)."""
    return load_config()
