"""
Series partitioner for bulk cancellation.
"""

from datetime import date
from typing import Iterable

from deskbook.domain.records import BookingRecord


def partition_series(
    bookings: Iterable[BookingRecord],
    series_id: str,
    cutoff: date,
) -> tuple[list[BookingRecord], list[BookingRecord]]:
    """
    Split bookings into (kept, removed).

    Removed: occurrences of `series_id` dated on or after `cutoff`. Past
    occurrences already happened and stay on record.
    """
    kept: list[BookingRecord] = []
    removed: list[BookingRecord] = []

    for booking in bookings:
        if booking.series_id == series_id and booking.date >= cutoff:
            removed.append(booking)
        else:
            kept.append(booking)

    return kept, removed
