"""
Analytics aggregator: summary counts and rankings over an inclusive date range.

Three different clocks are in play:
  active    bookings whose reserved `date` is in range
  created   bookings whose `created_at` day is in range
  canceled  cancellation entries whose `cancelled_at` day is in range
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from deskbook.core.exceptions import ValidationError
from deskbook.domain.records import BookingRecord, CancellationEntry, SeatRecord

TOP_SEATS_LIMIT = 5
TOP_USERS_LIMIT = 5
TOP_CANCELLATIONS_LIMIT = 5
BUSIEST_DAYS_LIMIT = 7


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    @property
    def days(self) -> int:
        return max(1, (self.end - self.start).days + 1)

    def __contains__(self, day: object) -> bool:
        return isinstance(day, date) and self.start <= day <= self.end


@dataclass(frozen=True)
class RankedCount:
    key: str
    count: int
    label: Optional[str] = None


@dataclass(frozen=True)
class AnalyticsSummary:
    range: DateRange
    created: int
    canceled: int
    active: int
    unique_users: int
    top_seats: list[RankedCount] = field(default_factory=list)
    top_users: list[RankedCount] = field(default_factory=list)
    top_cancellations: list[RankedCount] = field(default_factory=list)
    busiest_days: list[RankedCount] = field(default_factory=list)

    @property
    def average_daily_bookings(self) -> float:
        return self.active / self.range.days


def _day_of(moment: Optional[datetime]) -> Optional[date]:
    return moment.date() if moment is not None else None


def rank(counts: Counter, limit: int) -> list[tuple[str, int]]:
    """Descending by count, ties ascending by key."""
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return ordered[:limit]


def validate_range(date_from: Optional[date], date_to: Optional[date]) -> None:
    if date_from is not None and date_to is not None and date_from > date_to:
        raise ValidationError("'from' must not be after 'to'.", field="from")


def resolve_range(
    bookings: Sequence[BookingRecord],
    cancellations: Sequence[CancellationEntry],
    date_from: Optional[date],
    date_to: Optional[date],
    today: date,
) -> DateRange:
    """
    Fill in missing bounds from the data: earliest/latest of booking dates,
    creation days, cancelled booking dates and cancellation days. No data at
    all collapses to today..today.
    """
    validate_range(date_from, date_to)

    if date_from is not None and date_to is not None:
        return DateRange(date_from, date_to)

    observed: list[date] = []
    for booking in bookings:
        observed.append(booking.date)
        created = _day_of(booking.created_at)
        if created is not None:
            observed.append(created)
    for entry in cancellations:
        observed.append(entry.date)
        cancelled = _day_of(entry.cancelled_at)
        if cancelled is not None:
            observed.append(cancelled)

    fallback_start = min(observed) if observed else today
    fallback_end = max(observed) if observed else today

    return DateRange(
        date_from if date_from is not None else fallback_start,
        date_to if date_to is not None else fallback_end,
    )


def summarize(
    bookings: Iterable[BookingRecord],
    seats: Iterable[SeatRecord],
    cancellations: Iterable[CancellationEntry],
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    today: Optional[date] = None,
) -> AnalyticsSummary:
    bookings = list(bookings)
    cancellations = list(cancellations)
    labels = {seat.id: seat.label for seat in seats}

    period = resolve_range(bookings, cancellations, date_from, date_to, today or date.today())

    active = [booking for booking in bookings if booking.date in period]
    created = [booking for booking in bookings if _day_of(booking.created_at) in period]
    canceled = [entry for entry in cancellations if _day_of(entry.cancelled_at) in period]

    unique_users = {booking.user_name for booking in active if booking.user_name.strip()}

    seat_counts = Counter(booking.seat_id for booking in active if booking.seat_id)
    user_counts = Counter(booking.user_name for booking in active if booking.user_name)
    cancel_counts = Counter(entry.user_name for entry in canceled if entry.user_name)
    day_counts = Counter(booking.date.isoformat() for booking in active)

    return AnalyticsSummary(
        range=period,
        created=len(created),
        canceled=len(canceled),
        active=len(active),
        unique_users=len(unique_users),
        top_seats=[
            RankedCount(key=seat_id, count=count, label=labels.get(seat_id, seat_id))
            for seat_id, count in rank(seat_counts, TOP_SEATS_LIMIT)
        ],
        top_users=[
            RankedCount(key=name, count=count) for name, count in rank(user_counts, TOP_USERS_LIMIT)
        ],
        top_cancellations=[
            RankedCount(key=name, count=count)
            for name, count in rank(cancel_counts, TOP_CANCELLATIONS_LIMIT)
        ],
        busiest_days=[
            RankedCount(key=day, count=count) for day, count in rank(day_counts, BUSIEST_DAYS_LIMIT)
        ],
    )
