"""
Analytics service: summary over bookings and the cancellation log, cached in Redis.
"""

from datetime import date
from typing import Optional

from deskbook.core.logging import get_logger
from deskbook.domain.analytics import summarize, validate_range
from deskbook.schemas.analytics import AnalyticsSummaryResponse
from deskbook.schemas.booking import dump
from deskbook.services.cache_service import get_cached_summary, set_cached_summary
from deskbook.services.interfaces.booking_repository import BookingRepository

logger = get_logger(__name__)


async def get_summary(
    repo: BookingRepository,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> AnalyticsSummaryResponse:
    validate_range(date_from, date_to)

    key_from = date_from.isoformat() if date_from else None
    key_to = date_to.isoformat() if date_to else None

    cached = await get_cached_summary(key_from, key_to)
    if cached:
        logger.info("analytics_summary_cache_hit", date_from=key_from or "auto", date_to=key_to or "auto")
        return AnalyticsSummaryResponse.model_validate(cached)

    bookings = await repo.list_bookings()
    seats = await repo.list_seats()
    cancellations = await repo.list_cancellations()

    summary = summarize(bookings, seats, cancellations, date_from, date_to)
    response = AnalyticsSummaryResponse.from_summary(summary)

    await set_cached_summary(key_from, key_to, dump(response))

    logger.info(
        "analytics_summary_computed",
        date_from=summary.range.start.isoformat(),
        date_to=summary.range.end.isoformat(),
        active=summary.active,
        unique_users=summary.unique_users,
    )
    return response
