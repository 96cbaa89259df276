"""
Pydantic schemas for seat administration.
"""

from typing import Optional, Union

from pydantic import Field

from deskbook.schemas.booking import CamelModel

# Accepts "12.5" as well as 12.5; range is enforced by the service (clamped, not rejected)
Coordinate = Union[float, str]


class SeatCreate(CamelModel):
    id: str = Field(..., max_length=64)
    label: Optional[str] = Field(None, max_length=255)
    x: Coordinate
    y: Coordinate
    zone: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=1000)


class SeatUpdate(CamelModel):
    label: Optional[str] = Field(None, max_length=255)
    x: Optional[Coordinate] = None
    y: Optional[Coordinate] = None
    zone: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = Field(None, max_length=1000)


class SeatResponse(CamelModel):
    id: str
    label: str
    x: float
    y: float
    zone: Optional[str] = None
    notes: Optional[str] = None


class SeatRemovedResponse(CamelModel):
    removed: SeatResponse


class AdminVerifyRequest(CamelModel):
    password: Optional[str] = None


class AdminVerifyResponse(CamelModel):
    authorized: bool
    password_required: bool
