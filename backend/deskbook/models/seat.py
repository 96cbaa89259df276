"""
Seat model: a bookable desk placed on the floor plan.

Key design decisions:
- `id` is the human-chosen desk code ("A-12"), not a surrogate key
- x/y are percentages of the floor plan image (0-100)
- `version` is the seat's booking revision; every booking write bumps it so
  two requests planning against the same seat cannot both commit
"""

from sqlalchemy import Column, Integer, String, Float, CheckConstraint
from sqlalchemy.orm import relationship

from deskbook.db.base import Base, TimestampMixin


class Seat(Base, TimestampMixin):
    __tablename__ = "seats"

    id = Column(String(64), primary_key=True)
    label = Column(String(255), nullable=False)
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    zone = Column(String(255), nullable=True)
    notes = Column(String(1000), nullable=True)

    # Optimistic locking revision counter
    version = Column(Integer, nullable=False, default=1)

    # Never traversed implicitly under asyncio; seat deletion checks for bookings first
    bookings = relationship("Booking", back_populates="seat", lazy="raise", passive_deletes=True)

    __table_args__ = (
        CheckConstraint("x >= 0 AND x <= 100", name="check_seat_x_range"),
        CheckConstraint("y >= 0 AND y <= 100", name="check_seat_y_range"),
    )

    def __repr__(self) -> str:
        return f"<Seat(id={self.id}, label={self.label}, version={self.version})>"
