from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.db.session import get_db
from deskbook.repositories.sql_booking_repository import SqlBookingRepository
from deskbook.services.interfaces.booking_repository import BookingRepository


async def get_booking_repository(db: AsyncSession = Depends(get_db)) -> BookingRepository:
    return SqlBookingRepository(db)
