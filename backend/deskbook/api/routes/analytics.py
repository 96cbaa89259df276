"""
Analytics endpoint with Redis caching.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from deskbook.api.dependencies import get_booking_repository
from deskbook.schemas.analytics import AnalyticsSummaryResponse
from deskbook.services.analytics_service import get_summary
from deskbook.services.interfaces.booking_repository import BookingRepository

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/summary", response_model=AnalyticsSummaryResponse)
async def analytics_summary_endpoint(
    date_from: Optional[date] = Query(None, alias="from"),
    date_to: Optional[date] = Query(None, alias="to"),
    repo: BookingRepository = Depends(get_booking_repository),
):
    """
    Usage summary over an inclusive date range.
    Missing bounds default to the earliest/latest date seen in the data.
    """
    return await get_summary(repo, date_from, date_to)
