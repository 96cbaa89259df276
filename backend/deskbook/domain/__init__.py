"""
Booking-plan and recurrence-resolution engine.
Pure functions over in-memory records: no I/O, no framework state.
"""

from .records import BookingRecord, CancellationEntry, SeatRecord
from .recurrence import (
    Frequency,
    RecurrenceSpec,
    expand_recurrence,
    normalize_recurrence,
)
from .plan import BookingIndex, BookingPlan, Conflict, build_booking_plan
from .suggestions import Suggestions, compute_suggestions
from .series import partition_series
from .analytics import AnalyticsSummary, summarize

__all__ = [
    'BookingRecord', 'CancellationEntry', 'SeatRecord',
    'Frequency', 'RecurrenceSpec', 'expand_recurrence', 'normalize_recurrence',
    'BookingIndex', 'BookingPlan', 'Conflict', 'build_booking_plan',
    'Suggestions', 'compute_suggestions',
    'partition_series',
    'AnalyticsSummary', 'summarize',
]
