from deskbook.models.seat import Seat
from deskbook.models.booking import Booking
from deskbook.models.cancellation import Cancellation

__all__ = ["Seat", "Booking", "Cancellation"]
