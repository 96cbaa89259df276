"""
Append-only cancellation log, read only by analytics.

No foreign keys: the booking (and possibly the seat) is gone by the time the
entry is read.
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, CheckConstraint, Index, func

from deskbook.db.base import Base


class Cancellation(Base):
    __tablename__ = "cancellations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(String(36), nullable=False)
    seat_id = Column(String(64), nullable=False)
    date = Column(Date, nullable=False)
    user_name = Column(String(255), nullable=False)
    source = Column(String(20), nullable=False)  # single, series
    cancelled_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        CheckConstraint("source IN ('single', 'series')", name="check_cancellation_source"),
        Index("ix_cancellations_cancelled_at", "cancelled_at"),
    )

    def __repr__(self) -> str:
        return f"<Cancellation(booking={self.booking_id}, source={self.source})>"
