from datetime import date, datetime

import pytest

from budget_engine.errors import InvalidPeriod
from budget_engine.models import PeriodName
from budget_engine.periods import days_until, month_range, resolve_period, shift_month


def test_month_range_handles_leap_february():
    period = resolve_period('Month', date(2024, 2, 15))

    assert period.start == date(2024, 2, 1)
    assert period.end == date(2024, 2, 29)
    assert period.days_remaining == 14


def test_week_starts_on_sunday():
    period = resolve_period(PeriodName.WEEK, date(2024, 2, 15))  # Thursday

    assert period.start == date(2024, 2, 11)
    assert period.end == date(2024, 2, 17)
    assert period.days_remaining == 2


def test_week_containing_a_sunday_starts_that_day():
    period = resolve_period('Week', date(2024, 2, 11))

    assert period.start == date(2024, 2, 11)
    assert period.end == date(2024, 2, 17)


def test_quarter_and_year_bounds():
    quarter = resolve_period('Quarter', date(2024, 2, 15))
    year = resolve_period('Year', date(2024, 2, 15))

    assert (quarter.start, quarter.end) == (date(2024, 1, 1), date(2024, 3, 31))
    assert quarter.days_remaining == 45
    assert (year.start, year.end) == (date(2024, 1, 1), date(2024, 12, 31))
    assert year.days_remaining == 320


def test_fourth_quarter_ends_on_december_31():
    quarter = resolve_period('Quarter', date(2023, 11, 3))

    assert (quarter.start, quarter.end) == (date(2023, 10, 1), date(2023, 12, 31))


def test_days_remaining_rounds_partial_days_up():
    period = resolve_period('Month', datetime(2024, 2, 15, 12, 0))

    assert period.days_remaining == 14


def test_days_until_is_never_negative():
    assert days_until(date(2024, 2, 1), date(2024, 2, 15)) == 0


def test_period_aliases_are_accepted():
    assert resolve_period('Monthly', date(2024, 2, 15)) == resolve_period('Month', date(2024, 2, 15))
    assert PeriodName.parse('Weekly') is PeriodName.WEEK


@pytest.mark.parametrize('name', ['Fortnight', 'month', '', None])
def test_unknown_period_raises(name):
    with pytest.raises(InvalidPeriod) as excinfo:
        resolve_period(name, date(2024, 2, 15))
    assert excinfo.value.period == name


def test_month_helpers():
    assert month_range(2023, 2) == (date(2023, 2, 1), date(2023, 2, 28))
    assert shift_month(date(2024, 1, 31), -1) == date(2023, 12, 1)
    assert shift_month(date(2024, 11, 5), 2) == date(2025, 1, 1)
