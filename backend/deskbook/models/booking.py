"""
Booking model: one seat reserved for one calendar day.

Key design decisions:
- Unique constraint on (seat_id, date): a seat is booked at most once per day
- Bookings are never updated; cancelling deletes the row and logs a Cancellation
- `series_id` groups the occurrences created by one recurring request
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Index, String, UniqueConstraint, func
from sqlalchemy.orm import relationship

from deskbook.db.base import Base


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True)
    seat_id = Column(String(64), ForeignKey("seats.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    user_name = Column(String(255), nullable=False)
    series_id = Column(String(36), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    seat = relationship("Seat", back_populates="bookings", lazy="raise")

    __table_args__ = (
        UniqueConstraint("seat_id", "date", name="uq_seat_date_booking"),
        Index("ix_bookings_date", "date"),
        Index("ix_bookings_series_id", "series_id"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, seat={self.seat_id}, date={self.date}, series={self.series_id})>"
