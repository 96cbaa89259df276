"""
Seat service: floor plan administration.
"""

import math
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.core.exceptions import ConflictError, NotFoundError, ValidationError
from deskbook.core.logging import get_logger
from deskbook.models.booking import Booking
from deskbook.models.seat import Seat
from deskbook.schemas.seat import SeatCreate, SeatUpdate

logger = get_logger(__name__)


def normalize_text(value: Any) -> Optional[str]:
    """Trimmed string, or None when missing/blank."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def parse_coordinate(value: Any) -> Optional[float]:
    """Percentage position on the plan, clamped to [0, 100], 3 decimals."""
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            value = float(value)
        except ValueError:
            return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return round(min(100.0, max(0.0, float(value))), 3)


async def list_seats(db: AsyncSession) -> list[Seat]:
    result = await db.execute(select(Seat).order_by(Seat.id))
    return list(result.scalars().all())


async def get_seat(db: AsyncSession, seat_id: str) -> Seat:
    result = await db.execute(select(Seat).where(Seat.id == seat_id))
    seat = result.scalar_one_or_none()
    if not seat:
        raise NotFoundError(f"Seat {seat_id} does not exist.")
    return seat


async def create_seat(db: AsyncSession, seat_data: SeatCreate) -> Seat:
    seat_id = normalize_text(seat_data.id)
    x = parse_coordinate(seat_data.x)
    y = parse_coordinate(seat_data.y)

    if not seat_id or x is None or y is None:
        raise ValidationError("Seat id, x and y are required and must be valid numbers (0-100).")

    existing = await db.execute(select(Seat.id).where(Seat.id == seat_id))
    if existing.scalar_one_or_none():
        raise ConflictError(f'Seat with ID "{seat_id}" already exists.')

    seat = Seat(
        id=seat_id,
        label=normalize_text(seat_data.label) or seat_id,
        x=x,
        y=y,
        zone=normalize_text(seat_data.zone),
        notes=normalize_text(seat_data.notes),
    )
    db.add(seat)
    await db.flush()
    await db.refresh(seat)

    logger.info("seat_created", seat_id=seat.id)
    return seat


async def update_seat(db: AsyncSession, seat_id: str, seat_data: SeatUpdate) -> Seat:
    """Partial update: only fields present in the request are touched."""
    seat = await get_seat(db, seat_id)
    provided = seat_data.model_fields_set

    if "label" in provided:
        label = normalize_text(seat_data.label)
        if not label:
            raise ValidationError("Label must not be empty.", field="label")
        seat.label = label

    # Blank zone/notes clear the value
    if "zone" in provided:
        seat.zone = normalize_text(seat_data.zone)
    if "notes" in provided:
        seat.notes = normalize_text(seat_data.notes)

    for axis in ("x", "y"):
        if axis in provided:
            parsed = parse_coordinate(getattr(seat_data, axis))
            if parsed is None:
                raise ValidationError(f"{axis} must be a number between 0 and 100.", field=axis)
            setattr(seat, axis, parsed)

    await db.flush()
    await db.refresh(seat)

    logger.info("seat_updated", seat_id=seat_id, fields=sorted(provided))
    return seat


async def delete_seat(db: AsyncSession, seat_id: str) -> Seat:
    seat = await get_seat(db, seat_id)

    booking_count = (
        await db.execute(select(func.count()).select_from(Booking).where(Booking.seat_id == seat_id))
    ).scalar()
    if booking_count:
        logger.warning("seat_delete_blocked", seat_id=seat_id, bookings=booking_count)
        raise ConflictError(f"Seat {seat_id} has existing bookings. Please cancel them first.")

    await db.delete(seat)
    await db.flush()

    logger.info("seat_removed", seat_id=seat_id)
    return seat
