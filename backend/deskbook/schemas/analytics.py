"""
Pydantic schemas for the analytics summary.
"""

from datetime import date

from pydantic import Field

from deskbook.domain.analytics import AnalyticsSummary
from deskbook.schemas.booking import CamelModel


class SummaryRange(CamelModel):
    date_from: date = Field(..., alias="from")
    date_to: date = Field(..., alias="to")
    days: int


class SummaryTotals(CamelModel):
    created: int
    canceled: int
    active: int
    unique_users: int


class SeatCount(CamelModel):
    seat_id: str
    label: str
    count: int


class UserCount(CamelModel):
    user_name: str
    count: int


class DayCount(CamelModel):
    date: date
    count: int


class AnalyticsSummaryResponse(CamelModel):
    range: SummaryRange
    totals: SummaryTotals
    top_seats: list[SeatCount]
    top_users: list[UserCount]
    top_cancellations: list[UserCount]
    busiest_days: list[DayCount]
    average_daily_bookings: float

    @classmethod
    def from_summary(cls, summary: AnalyticsSummary) -> "AnalyticsSummaryResponse":
        return cls(
            range=SummaryRange(
                date_from=summary.range.start,
                date_to=summary.range.end,
                days=summary.range.days,
            ),
            totals=SummaryTotals(
                created=summary.created,
                canceled=summary.canceled,
                active=summary.active,
                unique_users=summary.unique_users,
            ),
            top_seats=[
                SeatCount(seat_id=item.key, label=item.label or item.key, count=item.count)
                for item in summary.top_seats
            ],
            top_users=[UserCount(user_name=item.key, count=item.count) for item in summary.top_users],
            top_cancellations=[
                UserCount(user_name=item.key, count=item.count) for item in summary.top_cancellations
            ],
            busiest_days=[DayCount(date=item.key, count=item.count) for item in summary.busiest_days],
            average_daily_bookings=summary.average_daily_bookings,
        )
