"""
Pydantic schemas for booking requests, previews and results.
The wire format is camelCase; Python attributes stay snake_case.
"""

from datetime import date, datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from deskbook.domain.plan import BookingPlan
from deskbook.domain.suggestions import Suggestions


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RecurrenceRequest(CamelModel):
    frequency: str
    count: int


class BookingCreate(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    seat_id: str = Field(..., min_length=1, max_length=64)
    date: date
    user_name: str = Field(..., min_length=1, max_length=255)
    recurrence: Optional[RecurrenceRequest] = None
    skip_conflicts: bool = False


class BookingPreviewRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    seat_id: str = Field(..., min_length=1, max_length=64)
    date: date
    recurrence: Optional[RecurrenceRequest] = None


class BookingResponse(CamelModel):
    id: str
    seat_id: str
    date: date
    user_name: str
    series_id: Optional[str] = None
    created_at: Optional[datetime] = None


class ConflictResponse(CamelModel):
    date: date
    seat_id: str
    booking_id: str
    user_name: str
    series_id: Optional[str] = None


class RecurrenceResponse(CamelModel):
    frequency: str
    count: int


class RunSuggestion(CamelModel):
    count: int
    dates: list[date]


class BlockSuggestion(CamelModel):
    start_date: date
    count: int
    dates: list[date]


class StartSuggestion(CamelModel):
    start_date: date
    dates: list[date]


class SuggestionsResponse(CamelModel):
    shorten: Optional[RunSuggestion] = None
    contiguous_block: Optional[BlockSuggestion] = None
    adjust_start: Optional[StartSuggestion] = None

    @model_serializer(mode="wrap")
    def _omit_missing(self, handler):
        # An absent suggestion is left out, never sent as null
        return {key: value for key, value in handler(self).items() if value is not None}

    @classmethod
    def from_domain(cls, suggestions: Suggestions) -> "SuggestionsResponse":
        return cls.model_validate(suggestions.to_payload())


class PreviewResponse(CamelModel):
    seat_id: str
    start_date: date
    requested_count: int
    requested_dates: list[date]
    recurrence: RecurrenceResponse
    available: list[date]
    conflicts: list[ConflictResponse]
    suggestions: SuggestionsResponse

    @classmethod
    def from_plan(cls, plan: BookingPlan, suggestions: Suggestions) -> "PreviewResponse":
        return cls(
            seat_id=plan.seat_id,
            start_date=plan.start_date,
            requested_count=plan.requested_count,
            requested_dates=list(plan.target_dates),
            recurrence=RecurrenceResponse(**plan.recurrence_payload()),
            available=list(plan.available_dates),
            conflicts=[ConflictResponse(**conflict.to_public()) for conflict in plan.conflicts],
            suggestions=SuggestionsResponse.from_domain(suggestions),
        )


class SkippedOccurrence(CamelModel):
    date: date
    reason: str = "conflict"
    booking: ConflictResponse


class SeriesCreatedResponse(CamelModel):
    message: str
    series_id: Optional[str] = None
    created: list[BookingResponse]
    skipped: list[SkippedOccurrence]
    conflicts: list[ConflictResponse]
    requested_count: int
    recurrence: RecurrenceResponse
    preview: PreviewResponse


CreateBookingResponse = Union[SeriesCreatedResponse, BookingResponse]


class BookingRemovedResponse(CamelModel):
    removed: BookingResponse


class RemovedOccurrence(CamelModel):
    id: str
    seat_id: str
    date: date
    user_name: str


class SeriesCancelResponse(CamelModel):
    series_id: str
    removed: list[RemovedOccurrence]


def dump(model: BaseModel) -> Any:
    """JSON-ready, camelCase payload (for bodies built outside response_model)."""
    return model.model_dump(mode="json", by_alias=True)
