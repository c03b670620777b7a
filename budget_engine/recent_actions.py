"""Bounded "recently used" list kept on behalf of the budget screens."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import RECENT_ACTIONS_PATH

DEFAULT_LIMIT = 4


@dataclass(frozen=True)
class RecentAction:
    id: str
    name: str
    icon: str = ''
    color: str = ''
    timestamp: float = field(default_factory=time.time)


class RecentActionsStore:
    """JSON-file backed list of the most recent actions, newest first.

    Pushing an action that is already present moves it to the front; the
    list never grows beyond ``limit`` entries.
    """

    def __init__(self, path: Optional[Path] = None, limit: int = DEFAULT_LIMIT):
        self.path = Path(path) if path else RECENT_ACTIONS_PATH
        self.limit = limit

    def load(self) -> List[RecentAction]:
        if not self.path.exists():
            return []
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (json.JSONDecodeError, OSError):
            return []
        if not isinstance(data, list):
            return []
        actions: List[RecentAction] = []
        for entry in data:
            if isinstance(entry, dict) and entry.get('id'):
                actions.append(_action_from_dict(entry))
        return actions[:self.limit]

    def push(self, action: RecentAction) -> List[RecentAction]:
        actions = [existing for existing in self.load() if existing.id != action.id]
        actions.insert(0, action)
        actions = actions[:self.limit]
        self._save(actions)
        return actions

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    def _save(self, actions: List[RecentAction]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w', encoding='utf-8') as handle:
            json.dump([asdict(action) for action in actions], handle, indent=2)


def _action_from_dict(entry: Dict[str, Any]) -> RecentAction:
    return RecentAction(
        id=str(entry['id']),
        name=str(entry.get('name') or entry['id']),
        icon=str(entry.get('icon') or ''),
        color=str(entry.get('color') or ''),
        timestamp=float(entry.get('timestamp') or 0.0),
    )
