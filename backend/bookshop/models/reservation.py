# backend/bookshop/models/reservation.py

from enum import Enum
from pydantic import Field
from typing import Optional
from datetime import datetime

from bookshop.models.common import CamelModel


class ReservationStatus(str, Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"

class ReservationCreate(CamelModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    branch: str = Field(..., min_length=1)
    phone_number: str = Field(..., min_length=1)
    reservation_date: str = Field(..., alias="date")
    reservation_time: str = Field(..., alias="time")
    persons: int = Field(..., ge=1)
    request: Optional[str] = None

class ReservationStatusUpdate(CamelModel):
    status: ReservationStatus

class Reservation(ReservationCreate):
    reservation_id: str
    status: ReservationStatus = ReservationStatus.PENDING
    created_at: datetime
