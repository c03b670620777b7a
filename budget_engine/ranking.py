"""Stable top-N selection used by category breakdowns and recommendations."""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Optional, TypeVar

T = TypeVar('T')


def _default_key(item: Any) -> float:
    if isinstance(item, dict):
        return item['amount']
    return getattr(item, 'amount')


def top_n(items: Iterable[T], n: int, key: Optional[Callable[[T], float]] = None) -> List[T]:
    """Return the ``n`` largest items by ``key``, ties kept in first-seen order.

    ``sorted`` is stable, so equal keys never swap.  The input is not
    modified.  Without ``key`` the item's ``amount`` (attribute or dict
    entry) is used.

    Example:
        >>> rows = [{'name': 'a', 'amount': 50}, {'name': 'b', 'amount': 50}, {'name': 'c', 'amount': 80}]
        >>> [row['name'] for row in top_n(rows, 2)]
        ['c', 'a']
    """
    if n <= 0:
        return []
    key_fn = key or _default_key
    return sorted(items, key=key_fn, reverse=True)[:n]
