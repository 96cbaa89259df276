"""
Tests for recurrence normalization and expansion.
"""

from datetime import date, timedelta

import pytest

from deskbook.core.exceptions import InternalError, ValidationError
from deskbook.domain import recurrence
from deskbook.domain.recurrence import (
    Frequency,
    RecurrenceSpec,
    expand_recurrence,
    next_weekday,
    normalize_recurrence,
    recurrence_stepper,
)


def test_normalize_count_one_is_single_booking():
    assert normalize_recurrence("daily", 1) is None
    assert normalize_recurrence("weekly", 1) is None


def test_normalize_returns_spec():
    spec = normalize_recurrence("weekday", 10)
    assert spec == RecurrenceSpec(frequency=Frequency.WEEKDAY, count=10)
    assert spec.as_dict() == {"frequency": "weekday", "count": 10}


@pytest.mark.parametrize("frequency", ["monthly", "", None, "DAILY"])
def test_normalize_rejects_unknown_frequency(frequency):
    with pytest.raises(ValidationError) as exc_info:
        normalize_recurrence(frequency, 3)
    assert exc_info.value.field == "frequency"
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("count", [0, -2, 53, 2.5, "3", True])
def test_normalize_rejects_bad_count(count):
    with pytest.raises(ValidationError) as exc_info:
        normalize_recurrence("daily", count)
    assert exc_info.value.field == "count"


def test_normalize_accepts_upper_bound():
    assert normalize_recurrence("daily", 52).count == 52


def test_single_booking_expands_to_start():
    assert expand_recurrence(date(2024, 6, 10), None) == [date(2024, 6, 10)]


def test_daily_expansion():
    dates = expand_recurrence(date(2024, 6, 10), RecurrenceSpec(Frequency.DAILY, 5))
    assert dates == [date(2024, 6, 10) + timedelta(days=i) for i in range(5)]


def test_daily_expansion_crosses_month_boundary():
    dates = expand_recurrence(date(2024, 2, 28), RecurrenceSpec(Frequency.DAILY, 3))
    assert dates == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]


def test_weekly_expansion():
    dates = expand_recurrence(date(2024, 6, 10), RecurrenceSpec(Frequency.WEEKLY, 4))
    assert dates == [date(2024, 6, 10), date(2024, 6, 17), date(2024, 6, 24), date(2024, 7, 1)]


def test_weekday_expansion_from_friday():
    """Friday start skips the weekend."""
    dates = expand_recurrence(date(2024, 6, 14), RecurrenceSpec(Frequency.WEEKDAY, 5))
    assert dates == [
        date(2024, 6, 14),
        date(2024, 6, 17),
        date(2024, 6, 18),
        date(2024, 6, 19),
        date(2024, 6, 20),
    ]


def test_weekday_expansion_from_weekend_starts_monday():
    dates = expand_recurrence(date(2024, 6, 15), RecurrenceSpec(Frequency.WEEKDAY, 3))
    assert dates == [date(2024, 6, 17), date(2024, 6, 18), date(2024, 6, 19)]


@pytest.mark.parametrize("offset", range(14))
@pytest.mark.parametrize("count", [2, 5, 23, 52])
def test_weekday_expansion_shape(offset, count):
    """Exactly `count` weekdays, strictly increasing, never more than 3 days apart."""
    start = date(2024, 6, 1) + timedelta(days=offset)
    dates = expand_recurrence(start, RecurrenceSpec(Frequency.WEEKDAY, count))

    assert len(dates) == count
    assert all(day.weekday() < 5 for day in dates)
    assert dates[0] >= start
    for previous, current in zip(dates, dates[1:]):
        assert 1 <= (current - previous).days <= 3


def test_weekday_expansion_fails_loudly_when_stuck(monkeypatch):
    """A successor that never advances trips the iteration guard."""
    monkeypatch.setattr(recurrence, "next_weekday", lambda day: day)

    with pytest.raises(InternalError):
        expand_recurrence(date(2024, 6, 15), RecurrenceSpec(Frequency.WEEKDAY, 2))


def test_next_weekday():
    assert next_weekday(date(2024, 6, 14)) == date(2024, 6, 17)  # Fri -> Mon
    assert next_weekday(date(2024, 6, 15)) == date(2024, 6, 17)  # Sat -> Mon
    assert next_weekday(date(2024, 6, 10)) == date(2024, 6, 11)


def test_stepper_per_frequency():
    assert recurrence_stepper(None) is None

    daily = recurrence_stepper(RecurrenceSpec(Frequency.DAILY, 2))
    weekly = recurrence_stepper(RecurrenceSpec(Frequency.WEEKLY, 2))
    weekday = recurrence_stepper(RecurrenceSpec(Frequency.WEEKDAY, 2))

    assert daily(date(2024, 6, 14)) == date(2024, 6, 15)
    assert weekly(date(2024, 6, 14)) == date(2024, 6, 21)
    assert weekday(date(2024, 6, 14)) == date(2024, 6, 17)
