"""
SQLAlchemy implementation of the booking repository.

Seat revision claim uses the same optimistic-locking UPDATE as a versioned row:

  UPDATE seats SET version = version + 1
  WHERE id = :seat_id AND version = :expected

rowcount == 0 means another transaction bumped the revision after we read it.
"""

from datetime import date
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.core.logging import get_logger
from deskbook.domain.records import BookingRecord, CancellationEntry, SeatRecord
from deskbook.models.booking import Booking
from deskbook.models.cancellation import Cancellation
from deskbook.models.seat import Seat
from deskbook.services.interfaces.booking_repository import BookingRepository

logger = get_logger(__name__)


def to_booking_record(booking: Booking) -> BookingRecord:
    return BookingRecord(
        id=booking.id,
        seat_id=booking.seat_id,
        date=booking.date,
        user_name=booking.user_name,
        created_at=booking.created_at,
        series_id=booking.series_id,
    )


def to_cancellation_entry(row: Cancellation) -> CancellationEntry:
    return CancellationEntry(
        booking_id=row.booking_id,
        seat_id=row.seat_id,
        date=row.date,
        user_name=row.user_name,
        source=row.source,
        cancelled_at=row.cancelled_at,
    )


class SqlBookingRepository(BookingRepository):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_seat_revision(self, seat_id: str) -> Optional[int]:
        result = await self.db.execute(select(Seat.version).where(Seat.id == seat_id))
        return result.scalar_one_or_none()

    async def claim_seat_revision(self, seat_id: str, expected: int) -> bool:
        result = await self.db.execute(
            update(Seat)
            .where(Seat.id == seat_id, Seat.version == expected)
            .values(version=Seat.version + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def get_bookings_for_seat(self, seat_id: str) -> list[BookingRecord]:
        result = await self.db.execute(
            select(Booking).where(Booking.seat_id == seat_id).order_by(Booking.date)
        )
        return [to_booking_record(row) for row in result.scalars().all()]

    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        result = await self.db.execute(select(Booking).where(Booking.id == booking_id))
        row = result.scalar_one_or_none()
        return to_booking_record(row) if row else None

    async def get_series_bookings(self, series_id: str) -> list[BookingRecord]:
        result = await self.db.execute(
            select(Booking).where(Booking.series_id == series_id).order_by(Booking.date)
        )
        return [to_booking_record(row) for row in result.scalars().all()]

    async def list_bookings(self, on_date: Optional[date] = None) -> list[BookingRecord]:
        query = select(Booking)
        if on_date is not None:
            query = query.where(Booking.date == on_date)
        result = await self.db.execute(query.order_by(Booking.date, Booking.seat_id))
        return [to_booking_record(row) for row in result.scalars().all()]

    async def list_seats(self) -> list[SeatRecord]:
        result = await self.db.execute(select(Seat.id, Seat.label).order_by(Seat.id))
        return [SeatRecord(id=row.id, label=row.label) for row in result.all()]

    async def list_cancellations(self) -> list[CancellationEntry]:
        result = await self.db.execute(select(Cancellation).order_by(Cancellation.id))
        return [to_cancellation_entry(row) for row in result.scalars().all()]

    async def append_bookings(self, bookings: list[BookingRecord]) -> None:
        self.db.add_all(
            [
                Booking(
                    id=record.id,
                    seat_id=record.seat_id,
                    date=record.date,
                    user_name=record.user_name,
                    series_id=record.series_id,
                    created_at=record.created_at,
                )
                for record in bookings
            ]
        )
        await self.db.flush()
        logger.debug("bookings_appended", count=len(bookings))

    async def remove_bookings(self, booking_ids: list[str]) -> list[str]:
        if not booking_ids:
            return []
        # A concurrent cancel may already have deleted some of these rows
        result = await self.db.execute(
            delete(Booking)
            .where(Booking.id.in_(booking_ids))
            .returning(Booking.id)
            .execution_options(synchronize_session=False)
        )
        removed = list(result.scalars().all())
        logger.debug("bookings_removed", requested=len(booking_ids), removed=len(removed))
        return removed

    async def append_cancellations(self, entries: list[CancellationEntry]) -> None:
        self.db.add_all(
            [
                Cancellation(
                    booking_id=entry.booking_id,
                    seat_id=entry.seat_id,
                    date=entry.date,
                    user_name=entry.user_name,
                    source=entry.source,
                    cancelled_at=entry.cancelled_at,
                )
                for entry in entries
            ]
        )
        await self.db.flush()
        logger.debug("cancellations_recorded", count=len(entries))

    async def discard_pending(self) -> None:
        await self.db.rollback()

    async def commit(self) -> None:
        await self.db.commit()
