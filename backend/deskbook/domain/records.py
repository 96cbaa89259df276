"""
Plain, immutable records the engine works on.

The repository converts ORM rows into these so nothing in `deskbook.domain`
knows about sessions or tables.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional


@dataclass(frozen=True)
class SeatRecord:
    id: str
    label: str


@dataclass(frozen=True)
class BookingRecord:
    id: str
    seat_id: str
    date: date
    user_name: str
    created_at: Optional[datetime] = None
    series_id: Optional[str] = None


@dataclass(frozen=True)
class CancellationEntry:
    booking_id: str
    seat_id: str
    date: date
    user_name: str
    source: str  # "single" | "series"
    cancelled_at: Optional[datetime] = None

    @classmethod
    def for_booking(
        cls, booking: BookingRecord, source: str, cancelled_at: datetime
    ) -> "CancellationEntry":
        return cls(
            booking_id=booking.id,
            seat_id=booking.seat_id,
            date=booking.date,
            user_name=booking.user_name,
            source=source,
            cancelled_at=cancelled_at,
        )
