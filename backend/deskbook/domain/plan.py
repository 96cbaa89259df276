"""
Booking plan builder: which requested dates are free for a seat and which collide.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Iterator, Optional

from deskbook.core.exceptions import InternalError
from deskbook.domain.recurrence import RecurrenceSpec, expand_recurrence
from deskbook.domain.records import BookingRecord


class BookingIndex:
    """
    Date -> booking lookup for a single seat.

    A seat holds at most one booking per date, so this is a plain mapping.
    """

    def __init__(self, seat_id: str, bookings: Iterable[BookingRecord] = ()):
        self.seat_id = seat_id
        self._by_date: dict[date, BookingRecord] = {
            booking.date: booking for booking in bookings if booking.seat_id == seat_id
        }

    def get(self, day: date) -> Optional[BookingRecord]:
        return self._by_date.get(day)

    def has_any(self, days: Iterable[date]) -> bool:
        return any(day in self._by_date for day in days)

    def __contains__(self, day: object) -> bool:
        return day in self._by_date

    def __len__(self) -> int:
        return len(self._by_date)

    def __iter__(self) -> Iterator[date]:
        return iter(sorted(self._by_date))


@dataclass(frozen=True)
class Conflict:
    date: date
    booking: BookingRecord

    def to_public(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "seat_id": self.booking.seat_id,
            "booking_id": self.booking.id,
            "user_name": self.booking.user_name,
            "series_id": self.booking.series_id,
        }


@dataclass(frozen=True)
class BookingPlan:
    seat_id: str
    start_date: date
    recurrence: Optional[RecurrenceSpec]
    target_dates: tuple[date, ...]
    available_dates: tuple[date, ...]
    conflicts: tuple[Conflict, ...]
    index: BookingIndex

    @property
    def requested_count(self) -> int:
        return len(self.target_dates)

    @property
    def conflict_dates(self) -> list[date]:
        return [conflict.date for conflict in self.conflicts]

    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicts) > 0

    def recurrence_payload(self) -> dict[str, Any]:
        if self.recurrence is not None:
            return self.recurrence.as_dict()
        return {"frequency": "single", "count": self.requested_count}


def build_booking_plan(
    seat_id: str,
    start_date: date,
    recurrence: Optional[RecurrenceSpec],
    index: BookingIndex,
) -> BookingPlan:
    """Expand the request and split it against the seat's existing bookings."""
    if index.seat_id != seat_id:
        raise InternalError(f"Index for seat {index.seat_id} used to plan seat {seat_id}")

    target_dates = expand_recurrence(start_date, recurrence)

    available: list[date] = []
    conflicts: list[Conflict] = []
    for day in target_dates:
        existing = index.get(day)
        if existing is None:
            available.append(day)
        else:
            conflicts.append(Conflict(date=day, booking=existing))

    return BookingPlan(
        seat_id=seat_id,
        start_date=start_date,
        recurrence=recurrence,
        target_dates=tuple(target_dates),
        available_dates=tuple(available),
        conflicts=tuple(conflicts),
        index=index,
    )
