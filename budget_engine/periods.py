"""Period boundary helpers.

All ranges are inclusive calendar dates.  Weeks start on Sunday.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta
from typing import Tuple, Union

from .models import PeriodName, PeriodRange

DateLike = Union[date, datetime]


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    return datetime(value.year, value.month, value.day)


def as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def month_range(year: int, month: int) -> Tuple[date, date]:
    """Return the first and last calendar day of ``year``/``month``.

    Example:
        >>> month_range(2024, 2)
        (datetime.date(2024, 2, 1), datetime.date(2024, 2, 29))
    """
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_month(day: DateLike, offset: int) -> date:
    """Return the first day of the month ``offset`` months away from ``day``."""
    index = day.year * 12 + (day.month - 1) + offset
    return date(index // 12, index % 12 + 1, 1)


def days_until(end: date, now: DateLike) -> int:
    """Whole days left until midnight at the start of ``end``, never negative."""
    delta = _as_datetime(end) - _as_datetime(now)
    return max(0, math.ceil(delta.total_seconds() / 86400))


def resolve_period(period: Union[PeriodName, str], now: DateLike) -> PeriodRange:
    """Compute the inclusive range of the ``period`` instance containing ``now``.

    Args:
        period: ``Week``, ``Month``, ``Quarter`` or ``Year`` (or the
            ``Weekly``/``Monthly`` style aliases).
        now: Reference date or datetime.

    Returns:
        The period range with the number of days remaining in it.

    Raises:
        InvalidPeriod: If ``period`` is not a known period name.

    Example:
        >>> resolve_period('Month', date(2024, 2, 15))
        PeriodRange(start=datetime.date(2024, 2, 1), end=datetime.date(2024, 2, 29), days_remaining=14)
    """
    name = PeriodName.parse(period)
    today = as_date(now)

    if name is PeriodName.WEEK:
        # date.weekday() counts from Monday; shift so Sunday is 0
        start = today - timedelta(days=(today.weekday() + 1) % 7)
        end = start + timedelta(days=6)
    elif name is PeriodName.MONTH:
        start, end = month_range(today.year, today.month)
    elif name is PeriodName.QUARTER:
        first_month = ((today.month - 1) // 3) * 3 + 1
        start = date(today.year, first_month, 1)
        end = month_range(today.year, first_month + 2)[1]
    else:
        start, end = date(today.year, 1, 1), date(today.year, 12, 31)

    return PeriodRange(start=start, end=end, days_remaining=days_until(end, now))
