"""
Recurrence expansion: start date + (frequency, count) -> ordered calendar dates.

All dates are timezone-naive calendar days.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Any, Callable, Optional

from deskbook.core.exceptions import InternalError, ValidationError

MAX_RECURRENCE_OCCURRENCES = 52

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)


class Frequency(str, Enum):
    DAILY = "daily"
    WEEKDAY = "weekday"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class RecurrenceSpec:
    frequency: Frequency
    count: int

    def as_dict(self) -> dict[str, Any]:
        return {"frequency": self.frequency.value, "count": self.count}


def normalize_recurrence(frequency: Any, count: Any) -> Optional[RecurrenceSpec]:
    """
    Validate a raw (frequency, count) pair.

    Returns None for a count of 1: a single booking, not a series.
    """
    try:
        freq = Frequency(frequency)
    except ValueError:
        raise ValidationError(
            'Recurrence frequency must be "daily", "weekday" or "weekly".',
            field="frequency",
        ) from None

    if isinstance(count, bool) or not isinstance(count, int):
        raise ValidationError("Recurrence count must be a whole number.", field="count")
    if count < 1:
        raise ValidationError("Recurrence count must be at least 1.", field="count")
    if count > MAX_RECURRENCE_OCCURRENCES:
        raise ValidationError(
            f"Recurrence count must not exceed {MAX_RECURRENCE_OCCURRENCES}.",
            field="count",
        )

    if count == 1:
        return None
    return RecurrenceSpec(frequency=freq, count=count)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def next_weekday(day: date) -> date:
    """First Monday-Friday strictly after `day`."""
    candidate = day + ONE_DAY
    while is_weekend(candidate):
        candidate += ONE_DAY
    return candidate


def _weekday_dates(start: date, count: int) -> list[date]:
    dates: list[date] = []
    current = start
    iterations = 0
    max_iterations = count * 7 + 14

    while len(dates) < count:
        if not is_weekend(current):
            dates.append(current)
        current = next_weekday(current)
        iterations += 1
        if iterations > max_iterations:
            raise InternalError(
                f"Weekday expansion from {start.isoformat()} exceeded {max_iterations} steps."
            )

    return dates


def expand_recurrence(start: date, recurrence: Optional[RecurrenceSpec]) -> list[date]:
    if recurrence is None:
        return [start]

    if recurrence.frequency is Frequency.WEEKDAY:
        return _weekday_dates(start, recurrence.count)

    step = ONE_DAY if recurrence.frequency is Frequency.DAILY else ONE_WEEK
    return [start + step * index for index in range(recurrence.count)]


def recurrence_stepper(
    recurrence: Optional[RecurrenceSpec],
) -> Optional[Callable[[date], date]]:
    """
    The successor function of a frequency, used to decide whether two
    available dates are adjacent in a run. None for single bookings.
    """
    if recurrence is None:
        return None
    if recurrence.frequency is Frequency.DAILY:
        return lambda day: day + ONE_DAY
    if recurrence.frequency is Frequency.WEEKLY:
        return lambda day: day + ONE_WEEK
    return next_weekday
