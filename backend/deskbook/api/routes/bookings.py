"""
Booking endpoints: create (single or recurring), preview, list, cancel.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from deskbook.api.dependencies import get_booking_repository
from deskbook.schemas.booking import (
    BookingCreate,
    BookingPreviewRequest,
    BookingRemovedResponse,
    BookingResponse,
    CreateBookingResponse,
    PreviewResponse,
    SeriesCancelResponse,
)
from deskbook.services.booking_service import (
    cancel_booking,
    cancel_series,
    create_booking,
    list_bookings,
    preview_booking,
)
from deskbook.services.cache_service import invalidate_analytics_cache
from deskbook.services.interfaces.booking_repository import BookingRepository

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.get("/", response_model=list[BookingResponse])
async def list_bookings_endpoint(
    on_date: Optional[date] = Query(None, alias="date"),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """All bookings, or only those for one calendar day."""
    return await list_bookings(repo, on_date)


@router.post("/", response_model=CreateBookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    repo: BookingRepository = Depends(get_booking_repository),
):
    """
    Book a seat for a date, optionally as a daily / weekday / weekly series.

    Conflicting dates reject the request with 409 and a preview of alternatives,
    unless `skipConflicts` is set, in which case the free dates are booked.
    """
    result = await create_booking(repo, booking_data)
    # Commit first so a summary recomputed after invalidation sees the new rows
    await repo.commit()
    await invalidate_analytics_cache()
    return result


@router.post("/preview", response_model=PreviewResponse)
async def preview_booking_endpoint(
    preview_data: BookingPreviewRequest,
    repo: BookingRepository = Depends(get_booking_repository),
):
    """Resolve dates, conflicts and suggestions without booking anything."""
    return await preview_booking(repo, preview_data)


@router.delete("/series/{series_id}", response_model=SeriesCancelResponse)
async def cancel_series_endpoint(
    series_id: str,
    repo: BookingRepository = Depends(get_booking_repository),
):
    """Cancel all occurrences of a series from today onward."""
    result = await cancel_series(repo, series_id)
    await repo.commit()
    await invalidate_analytics_cache()
    return result


@router.delete("/{booking_id}", response_model=BookingRemovedResponse)
async def cancel_booking_endpoint(
    booking_id: str,
    repo: BookingRepository = Depends(get_booking_repository),
):
    booking = await cancel_booking(repo, booking_id)
    await repo.commit()
    await invalidate_analytics_cache()
    return BookingRemovedResponse(removed=BookingResponse.model_validate(booking))
