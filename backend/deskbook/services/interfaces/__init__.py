"""
Service interfaces for dependency inversion.
Allows swapping storage implementations without changing booking logic.
"""

from .booking_repository import BookingRepository

__all__ = ['BookingRepository']
