"""
Seat endpoints. Reads are public; layout changes require the admin secret.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from deskbook.core.security import require_admin
from deskbook.db.session import get_db
from deskbook.schemas.seat import SeatCreate, SeatRemovedResponse, SeatResponse, SeatUpdate
from deskbook.services.seat_service import create_seat, delete_seat, list_seats, update_seat

router = APIRouter(prefix="/seats", tags=["Seats"])


@router.get("/", response_model=list[SeatResponse])
async def list_seats_endpoint(db: AsyncSession = Depends(get_db)):
    return await list_seats(db)


@router.post(
    "/",
    response_model=SeatResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_seat_endpoint(seat_data: SeatCreate, db: AsyncSession = Depends(get_db)):
    """Place a new desk on the floor plan."""
    return await create_seat(db, seat_data)


@router.put("/{seat_id}", response_model=SeatResponse, dependencies=[Depends(require_admin)])
async def update_seat_endpoint(
    seat_id: str,
    seat_data: SeatUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update; blank zone/notes clear the field."""
    return await update_seat(db, seat_id, seat_data)


@router.delete(
    "/{seat_id}",
    response_model=SeatRemovedResponse,
    dependencies=[Depends(require_admin)],
)
async def delete_seat_endpoint(seat_id: str, db: AsyncSession = Depends(get_db)):
    """Remove a desk. Refused while it still has bookings."""
    seat = await delete_seat(db, seat_id)
    return SeatRemovedResponse(removed=SeatResponse.model_validate(seat))
