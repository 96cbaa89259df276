"""
Booking service: create, preview and cancel desk bookings.

CONCURRENCY STRATEGY: Seat Revision + Retry
===========================================

Problem:
  Two people request overlapping dates on the same desk at the same time.
  Both read the seat's bookings, both compute a conflict-free plan, both write.
  Result: the desk is double-booked.

Solution:
  Every seat carries a `version` revision counter.

  1. Read the seat revision
  2. Read the seat's bookings, build the plan (pure, in memory)
  3. UPDATE seats SET version = version + 1
     WHERE id = :seat_id AND version = :read_version
  4. If rows_affected == 0 someone else wrote to this seat after step 1:
     roll back and start over from step 1 with fresh data

  The unique (seat_id, date) constraint stays as the final safety net.

Cancellations only remove rows and never create a double booking, so they do
not claim the revision.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Optional, Union

from deskbook.core.config import get_settings
from deskbook.core.exceptions import ConflictError, NotFoundError, ValidationError
from deskbook.core.logging import get_logger
from deskbook.core.metrics import (
    plan_latency,
    record_booking_request,
    record_cancellations,
    seat_revision_retries,
)
from deskbook.domain.plan import BookingIndex, BookingPlan, build_booking_plan
from deskbook.domain.recurrence import RecurrenceSpec, normalize_recurrence
from deskbook.domain.records import BookingRecord, CancellationEntry
from deskbook.domain.series import partition_series
from deskbook.domain.suggestions import compute_suggestions
from deskbook.schemas.booking import (
    BookingCreate,
    BookingPreviewRequest,
    BookingResponse,
    ConflictResponse,
    PreviewResponse,
    RecurrenceRequest,
    RecurrenceResponse,
    RemovedOccurrence,
    SeriesCancelResponse,
    SeriesCreatedResponse,
    SkippedOccurrence,
    dump,
)
from deskbook.services.interfaces.booking_repository import BookingRepository

logger = get_logger(__name__)


def resolve_recurrence(recurrence: Optional[RecurrenceRequest]) -> Optional[RecurrenceSpec]:
    if recurrence is None:
        return None
    return normalize_recurrence(recurrence.frequency, recurrence.count)


def build_preview(plan: BookingPlan) -> PreviewResponse:
    with plan_latency.time():
        suggestions = compute_suggestions(plan)
    return PreviewResponse.from_plan(plan, suggestions)


def public_conflicts(plan: BookingPlan) -> list[ConflictResponse]:
    return [ConflictResponse(**conflict.to_public()) for conflict in plan.conflicts]


async def _plan_for_seat(
    repo: BookingRepository,
    seat_id: str,
    start_date: date,
    recurrence: Optional[RecurrenceSpec],
) -> tuple[int, BookingPlan]:
    revision = await repo.get_seat_revision(seat_id)
    if revision is None:
        raise NotFoundError(f"Seat {seat_id} does not exist.")

    existing = await repo.get_bookings_for_seat(seat_id)
    plan = build_booking_plan(seat_id, start_date, recurrence, BookingIndex(seat_id, existing))
    if not plan.target_dates:
        raise ValidationError("Requested booking dates could not be resolved.", field="date")
    return revision, plan


async def preview_booking(repo: BookingRepository, request: BookingPreviewRequest) -> PreviewResponse:
    """Plan and suggestions without writing anything."""
    recurrence = resolve_recurrence(request.recurrence)
    _, plan = await _plan_for_seat(repo, request.seat_id, request.date, recurrence)

    logger.debug(
        "booking_preview_computed",
        seat_id=plan.seat_id,
        occurrences=plan.requested_count,
        conflicts=len(plan.conflicts),
    )
    return build_preview(plan)


def _reject(plan: BookingPlan, message: str) -> ConflictError:
    record_booking_request("conflict")
    logger.warning(
        "booking_conflict",
        seat_id=plan.seat_id,
        conflict_dates=[day.isoformat() for day in plan.conflict_dates],
        requested=plan.requested_count,
    )
    return ConflictError(
        message,
        conflicts=[dump(conflict) for conflict in public_conflicts(plan)],
        preview=dump(build_preview(plan)),
    )


async def create_booking(
    repo: BookingRepository,
    request: BookingCreate,
) -> Union[SeriesCreatedResponse, BookingResponse]:
    """
    Book a seat for one date or a recurring series.

    Without `skip_conflicts` any collision rejects the whole request (409).
    With it, the free dates are booked and the taken ones reported as skipped.
    """
    recurrence = resolve_recurrence(request.recurrence)
    max_attempts = get_settings().BOOKING_MAX_RETRY_ATTEMPTS

    logger.info(
        "booking_requested",
        seat_id=request.seat_id,
        date=request.date.isoformat(),
        skip_conflicts=request.skip_conflicts,
        recurrence=recurrence.as_dict() if recurrence else "single",
    )

    for attempt in range(1, max_attempts + 1):
        revision, plan = await _plan_for_seat(repo, request.seat_id, request.date, recurrence)

        if plan.has_conflicts and not request.skip_conflicts:
            dates = ", ".join(day.isoformat() for day in plan.conflict_dates)
            raise _reject(plan, f"Seat {plan.seat_id} is already booked for {dates}.")

        if not plan.available_dates:
            raise _reject(
                plan, f"Seat {plan.seat_id} is not available on any of the requested dates."
            )

        if not await repo.claim_seat_revision(plan.seat_id, revision):
            seat_revision_retries.inc()
            logger.info(
                "booking_retry",
                seat_id=plan.seat_id,
                attempt=attempt,
                reason="seat_revision_changed",
            )
            await repo.discard_pending()
            continue

        created_at = datetime.now(timezone.utc)
        # A bare booking object is returned only for a plain single-date request;
        # every series-shaped result gets its own series id
        single_result = plan.requested_count == 1 and not request.skip_conflicts
        series_id = None if single_result else str(uuid.uuid4())
        records = [
            BookingRecord(
                id=str(uuid.uuid4()),
                seat_id=plan.seat_id,
                date=day,
                user_name=request.user_name,
                created_at=created_at,
                series_id=series_id,
            )
            for day in plan.available_dates
        ]
        await repo.append_bookings(records)

        outcome = "partial" if plan.has_conflicts else "created"
        record_booking_request(outcome, created=len(records))
        logger.info(
            "booking_created",
            seat_id=plan.seat_id,
            series_id=series_id,
            created=len(records),
            skipped=len(plan.conflicts),
            attempt=attempt,
        )

        created = [BookingResponse.model_validate(record) for record in records]
        if single_result:
            return created[0]

        message = f"Created {len(created)} bookings."
        if plan.has_conflicts:
            message = f"Created {len(created)} bookings and skipped {len(plan.conflicts)}."

        conflicts = public_conflicts(plan)
        return SeriesCreatedResponse(
            message=message,
            series_id=series_id,
            created=created,
            skipped=[SkippedOccurrence(date=item.date, booking=item) for item in conflicts],
            conflicts=conflicts,
            requested_count=plan.requested_count,
            recurrence=RecurrenceResponse(**plan.recurrence_payload()),
            preview=build_preview(plan),
        )

    record_booking_request("conflict")
    raise ConflictError("Booking failed due to concurrent changes to this seat. Please try again.")


async def list_bookings(repo: BookingRepository, on_date: Optional[date] = None) -> list[BookingRecord]:
    bookings = await repo.list_bookings(on_date)
    logger.debug("bookings_listed", filter_date=on_date.isoformat() if on_date else "all", count=len(bookings))
    return bookings


async def cancel_booking(repo: BookingRepository, booking_id: str) -> BookingRecord:
    """Remove one booking and log it as a single cancellation."""
    booking = await repo.get_booking(booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found.")

    if not await repo.remove_bookings([booking.id]):
        # Lost the race to another cancellation, which already logged it
        raise NotFoundError(f"Booking {booking_id} not found.")
    await repo.append_cancellations(
        [CancellationEntry.for_booking(booking, "single", datetime.now(timezone.utc))]
    )
    record_cancellations("single")

    logger.info(
        "booking_cancelled",
        booking_id=booking.id,
        seat_id=booking.seat_id,
        date=booking.date.isoformat(),
    )
    return booking


async def cancel_series(
    repo: BookingRepository,
    series_id: str,
    cutoff: Optional[date] = None,
) -> SeriesCancelResponse:
    """
    Cancel the remaining occurrences of a series (dated cutoff or later,
    cutoff defaulting to today). Past occurrences are kept.
    """
    cutoff = cutoff or date.today()
    bookings = await repo.get_series_bookings(series_id)
    _, upcoming = partition_series(bookings, series_id, cutoff)

    deleted = set(await repo.remove_bookings([booking.id for booking in upcoming]))
    removed = [booking for booking in upcoming if booking.id in deleted]
    if not removed:
        raise NotFoundError(f"No upcoming bookings found for series {series_id}.")

    cancelled_at = datetime.now(timezone.utc)
    await repo.append_cancellations(
        [CancellationEntry.for_booking(booking, "series", cancelled_at) for booking in removed]
    )
    record_cancellations("series", len(removed))

    logger.info(
        "series_cancelled",
        series_id=series_id,
        removed=len(removed),
        kept=len(bookings) - len(removed),
        cutoff=cutoff.isoformat(),
    )
    return SeriesCancelResponse(
        series_id=series_id,
        removed=[RemovedOccurrence.model_validate(booking) for booking in removed],
    )
