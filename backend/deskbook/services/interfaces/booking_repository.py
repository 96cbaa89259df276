"""
Storage contract the booking services depend on.
Keeps the engine storage-agnostic: services only see domain records.
"""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from deskbook.domain.records import BookingRecord, CancellationEntry, SeatRecord


class BookingRepository(ABC):
    """
    Interface for booking persistence.

    Implementations:
    - SqlBookingRepository: SQLAlchemy async session (PostgreSQL / SQLite)

    Concurrency contract: a caller that plans against a seat's bookings must
    read the seat revision first and claim it with `claim_seat_revision` before
    appending. A failed claim means another writer changed the seat; the
    caller discards its plan and starts over.
    """

    @abstractmethod
    async def get_seat_revision(self, seat_id: str) -> Optional[int]:
        """Current revision of the seat, or None if the seat does not exist."""
        pass

    @abstractmethod
    async def claim_seat_revision(self, seat_id: str, expected: int) -> bool:
        """
        Advance the seat revision iff it still equals `expected`.

        Returns:
            True if claimed (safe to write)
            False if someone else wrote first
        """
        pass

    @abstractmethod
    async def get_bookings_for_seat(self, seat_id: str) -> list[BookingRecord]:
        pass

    @abstractmethod
    async def get_booking(self, booking_id: str) -> Optional[BookingRecord]:
        pass

    @abstractmethod
    async def get_series_bookings(self, series_id: str) -> list[BookingRecord]:
        pass

    @abstractmethod
    async def list_bookings(self, on_date: Optional[date] = None) -> list[BookingRecord]:
        pass

    @abstractmethod
    async def list_seats(self) -> list[SeatRecord]:
        pass

    @abstractmethod
    async def list_cancellations(self) -> list[CancellationEntry]:
        pass

    @abstractmethod
    async def append_bookings(self, bookings: list[BookingRecord]) -> None:
        pass

    @abstractmethod
    async def remove_bookings(self, booking_ids: list[str]) -> list[str]:
        """Delete bookings; returns the ids this call actually removed."""
        pass

    @abstractmethod
    async def append_cancellations(self, entries: list[CancellationEntry]) -> None:
        pass

    @abstractmethod
    async def discard_pending(self) -> None:
        """Roll back uncommitted work after a failed revision claim."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes visible to other sessions."""
        pass
