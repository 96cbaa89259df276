"""
Tests for series partitioning used by bulk cancellation.
"""

from datetime import date

from deskbook.domain.records import BookingRecord
from deskbook.domain.series import partition_series


def record(booking_id, day, series_id=None):
    return BookingRecord(id=booking_id, seat_id="S1", date=day, user_name="dana", series_id=series_id)


def test_only_occurrences_from_cutoff_are_removed():
    past = record("past", date(2023, 12, 30), "abc")
    upcoming = record("upcoming", date(2024, 1, 2), "abc")

    kept, removed = partition_series([past, upcoming], "abc", date(2024, 1, 1))

    assert removed == [upcoming]
    assert kept == [past]


def test_cutoff_day_itself_is_removed():
    today = record("today", date(2024, 1, 1), "abc")
    kept, removed = partition_series([today], "abc", date(2024, 1, 1))
    assert removed == [today]
    assert kept == []


def test_other_series_and_single_bookings_are_kept():
    bookings = [
        record("mine", date(2024, 2, 1), "abc"),
        record("other-series", date(2024, 2, 1), "xyz"),
        record("single", date(2024, 2, 2)),
    ]

    kept, removed = partition_series(bookings, "abc", date(2024, 1, 1))

    assert [b.id for b in removed] == ["mine"]
    assert [b.id for b in kept] == ["other-series", "single"]


def test_partition_preserves_every_booking():
    bookings = [record(f"b{i}", date(2024, 1, 1 + i), "abc" if i % 2 else None) for i in range(10)]

    kept, removed = partition_series(bookings, "abc", date(2024, 1, 5))

    assert len(kept) + len(removed) == len(bookings)
    assert {b.id for b in kept}.isdisjoint({b.id for b in removed})
    assert all(b.date >= date(2024, 1, 5) and b.series_id == "abc" for b in removed)


def test_fully_past_series_removes_nothing():
    bookings = [record("a", date(2023, 5, 1), "abc"), record("b", date(2023, 5, 2), "abc")]
    kept, removed = partition_series(bookings, "abc", date(2024, 1, 1))
    assert removed == []
    assert kept == bookings
