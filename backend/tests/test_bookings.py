"""
Tests for booking endpoints: single and recurring creation, conflicts,
previews and cancellations.
"""

from datetime import date, timedelta

import pytest
from httpx import AsyncClient
from structlog.testing import capture_logs

from deskbook.api.routes import bookings as bookings_routes
from deskbook.core.exceptions import InternalError
from deskbook.domain import plan as plan_module


@pytest.mark.asyncio
async def test_create_single_booking(client: AsyncClient, seats):
    response = await client.post(
        "/api/v1/bookings/",
        json={"seatId": "S1", "date": "2024-06-10", "userName": "alice"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["seatId"] == "S1"
    assert data["date"] == "2024-06-10"
    assert data["userName"] == "alice"
    assert data["seriesId"] is None

    listed = await client.get("/api/v1/bookings/", params={"date": "2024-06-10"})
    assert [b["id"] for b in listed.json()] == [data["id"]]


@pytest.mark.asyncio
async def test_double_booking_is_rejected(client: AsyncClient, seats, add_booking):
    """Booking a seat that is already taken returns 409 with the conflict."""
    existing = await add_booking("S1", date(2024, 6, 10), user_name="bob")

    response = await client.post(
        "/api/v1/bookings/",
        json={"seatId": "S1", "date": "2024-06-10", "userName": "alice"},
    )
    assert response.status_code == 409
    data = response.json()
    assert data["message"] == "Seat S1 is already booked for 2024-06-10."
    assert data["conflicts"][0]["bookingId"] == existing.id
    assert data["conflicts"][0]["userName"] == "bob"


@pytest.mark.asyncio
async def test_same_date_on_other_seat_is_fine(client: AsyncClient, seats, add_booking):
    await add_booking("S2", date(2024, 6, 10))

    response = await client.post(
        "/api/v1/bookings/",
        json={"seatId": "S1", "date": "2024-06-10", "userName": "alice"},
    )
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_create_daily_series(client: AsyncClient, seats):
    response = await client.post(
        "/api/v1/bookings/",
        json={
            "seatId": "S1",
            "date": "2024-06-10",
            "userName": "alice",
            "recurrence": {"frequency": "daily", "count": 5},
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Created 5 bookings."
    assert data["seriesId"]
    assert data["requestedCount"] == 5
    assert data["recurrence"] == {"frequency": "daily", "count": 5}
    assert [b["date"] for b in data["created"]] == [
        "2024-06-10",
        "2024-06-11",
        "2024-06-12",
        "2024-06-13",
        "2024-06-14",
    ]
    assert {b["seriesId"] for b in data["created"]} == {data["seriesId"]}


@pytest.mark.asyncio
async def test_series_conflict_returns_suggestions(client: AsyncClient, seats, add_booking):
    await add_booking("S1", date(2024, 6, 12), user_name="bob")

    response = await client.post(
        "/api/v1/bookings/",
        json={
            "seatId": "S1",
            "date": "2024-06-10",
            "userName": "alice",
            "recurrence": {"frequency": "daily", "count": 5},
        },
    )
    assert response.status_code == 409
    data = response.json()
    assert data["message"] == "Seat S1 is already booked for 2024-06-12."

    preview = data["preview"]
    assert preview["requestedCount"] == 5
    assert preview["available"] == ["2024-06-10", "2024-06-11", "2024-06-13", "2024-06-14"]
    assert preview["suggestions"]["shorten"] == {"count": 2, "dates": ["2024-06-10", "2024-06-11"]}
    assert preview["suggestions"]["contiguousBlock"] == {
        "startDate": "2024-06-10",
        "count": 2,
        "dates": ["2024-06-10", "2024-06-11"],
    }
    assert preview["suggestions"]["adjustStart"]["startDate"] == "2024-06-13"

    # All-or-nothing: none of the free dates were booked
    listed = await client.get("/api/v1/bookings/")
    assert len(listed.json()) == 1


@pytest.mark.asyncio
async def test_skip_conflicts_books_free_dates(client: AsyncClient, seats, add_booking):
    await add_booking("S1", date(2024, 6, 12), user_name="bob")

    response = await client.post(
        "/api/v1/bookings/",
        json={
            "seatId": "S1",
            "date": "2024-06-10",
            "userName": "alice",
            "recurrence": {"frequency": "daily", "count": 5},
            "skipConflicts": True,
        },
    )
    assert response.status_code == 201
    data = response.json()
    assert len(data["created"]) == 4
    assert data["skipped"][0]["date"] == "2024-06-12"
    assert data["skipped"][0]["reason"] == "conflict"
    assert data["skipped"][0]["booking"]["userName"] == "bob"

    listed = await client.get("/api/v1/bookings/")
    assert len(listed.json()) == 5


@pytest.mark.asyncio
async def test_skip_conflicts_with_every_date_taken(client: AsyncClient, seats, add_booking):
    await add_booking("S1", date(2024, 6, 10))

    response = await client.post(
        "/api/v1/bookings/",
        json={"seatId": "S1", "date": "2024-06-10", "userName": "alice", "skipConflicts": True},
    )
    assert response.status_code == 409
    assert response.json()["message"] == "Seat S1 is not available on any of the requested dates."


@pytest.mark.asyncio
async def test_invalid_recurrence_returns_400(client: AsyncClient, seats):
    response = await client.post(
        "/api/v1/bookings/",
        json={
            "seatId": "S1",
            "date": "2024-06-10",
            "userName": "alice",
            "recurrence": {"frequency": "monthly", "count": 3},
        },
    )
    assert response.status_code == 400
    assert response.json()["field"] == "frequency"


@pytest.mark.asyncio
async def test_unknown_seat_returns_404(client: AsyncClient, seats):
    response = await client.post(
        "/api/v1/bookings/",
        json={"seatId": "Z9", "date": "2024-06-10", "userName": "alice"},
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Seat Z9 does not exist."


@pytest.mark.asyncio
async def test_blank_user_name_is_rejected(client: AsyncClient, seats):
    response = await client.post(
        "/api/v1/bookings/",
        json={"seatId": "S1", "date": "2024-06-10", "userName": "   "},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_preview_without_conflicts(client: AsyncClient, seats):
    response = await client.post(
        "/api/v1/bookings/preview",
        json={"seatId": "S1", "date": "2024-06-14", "recurrence": {"frequency": "weekday", "count": 3}},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["requestedDates"] == ["2024-06-14", "2024-06-17", "2024-06-18"]
    assert data["conflicts"] == []
    assert data["suggestions"]["shorten"]["count"] == 3
    assert "adjustStart" not in data["suggestions"]


@pytest.mark.asyncio
async def test_cancel_booking(client: AsyncClient, seats, add_booking):
    booking = await add_booking("S1", date(2024, 6, 10))

    response = await client.delete(f"/api/v1/bookings/{booking.id}")
    assert response.status_code == 200
    assert response.json()["removed"]["id"] == booking.id

    again = await client.delete(f"/api/v1/bookings/{booking.id}")
    assert again.status_code == 404
    assert again.json()["message"] == f"Booking {booking.id} not found."


@pytest.mark.asyncio
async def test_cancel_series_from_today(client: AsyncClient, seats):
    start = date.today() - timedelta(days=2)
    created = await client.post(
        "/api/v1/bookings/",
        json={
            "seatId": "S1",
            "date": start.isoformat(),
            "userName": "alice",
            "recurrence": {"frequency": "daily", "count": 5},
        },
    )
    assert created.status_code == 201
    series_id = created.json()["seriesId"]

    response = await client.delete(f"/api/v1/bookings/series/{series_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["seriesId"] == series_id
    assert [r["date"] for r in data["removed"]] == [
        (date.today() + timedelta(days=offset)).isoformat() for offset in range(3)
    ]

    remaining = await client.get("/api/v1/bookings/")
    assert sorted(b["date"] for b in remaining.json()) == [
        start.isoformat(),
        (start + timedelta(days=1)).isoformat(),
    ]

    again = await client.delete(f"/api/v1/bookings/series/{series_id}")
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_analytics_cache_cleared_only_after_commit(client: AsyncClient, seats, db_session, monkeypatch):
    """A summary recomputed right after invalidation must already see the write."""
    open_transaction_at_invalidation = []

    async def record_invalidation():
        open_transaction_at_invalidation.append(db_session.in_transaction())

    monkeypatch.setattr(bookings_routes, "invalidate_analytics_cache", record_invalidation)

    created = await client.post(
        "/api/v1/bookings/",
        json={
            "seatId": "S1",
            "date": date.today().isoformat(),
            "userName": "alice",
            "recurrence": {"frequency": "daily", "count": 3},
        },
    )
    assert created.status_code == 201
    first_id = created.json()["created"][0]["id"]
    series_id = created.json()["seriesId"]

    assert (await client.delete(f"/api/v1/bookings/{first_id}")).status_code == 200

    cancelled = await client.delete(f"/api/v1/bookings/series/{series_id}")
    assert cancelled.status_code == 200
    assert len(cancelled.json()["removed"]) == 2

    assert len(open_transaction_at_invalidation) == 3
    assert not any(open_transaction_at_invalidation)


@pytest.mark.asyncio
async def test_internal_error_becomes_generic_500(client: AsyncClient, seats, monkeypatch):
    def broken_expansion(start, recurrence):
        raise InternalError("weekday stepping stalled at 2024-06-15")

    monkeypatch.setattr(plan_module, "expand_recurrence", broken_expansion)

    with capture_logs() as logs:
        response = await client.post(
            "/api/v1/bookings/preview",
            json={"seatId": "S1", "date": "2024-06-10"},
        )

    assert response.status_code == 500
    assert response.json() == {"message": "Unexpected server error."}
    assert "stalled" not in response.text

    errors = [entry for entry in logs if entry["event"] == "internal_error"]
    assert len(errors) == 1
    assert errors[0]["log_level"] == "error"
    assert errors[0]["error"] == "weekday stepping stalled at 2024-06-15"


@pytest.mark.asyncio
async def test_single_date_with_skip_conflicts_returns_series_id(client: AsyncClient, seats):
    response = await client.post(
        "/api/v1/bookings/",
        json={"seatId": "S1", "date": "2024-06-10", "userName": "alice", "skipConflicts": True},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["seriesId"]
    assert data["created"][0]["seriesId"] == data["seriesId"]
