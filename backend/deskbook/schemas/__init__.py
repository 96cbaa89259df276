from deskbook.schemas.booking import (
    BookingCreate, BookingPreviewRequest, BookingResponse, PreviewResponse,
    SeriesCreatedResponse, BookingRemovedResponse, SeriesCancelResponse,
)
from deskbook.schemas.seat import SeatCreate, SeatUpdate, SeatResponse, SeatRemovedResponse
from deskbook.schemas.analytics import AnalyticsSummaryResponse

__all__ = [
    "BookingCreate", "BookingPreviewRequest", "BookingResponse", "PreviewResponse",
    "SeriesCreatedResponse", "BookingRemovedResponse", "SeriesCancelResponse",
    "SeatCreate", "SeatUpdate", "SeatResponse", "SeatRemovedResponse",
    "AnalyticsSummaryResponse",
]
