from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from salonbook.engine.wallclock import calendar_day, wall_clock
from salonbook.schemas.appointment import Appointment, AppointmentStatus
from salonbook.schemas.slot import Slot


class CustomerCreate(BaseModel):
    first_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    branch_id: Optional[int] = None
    email: Optional[str] = None


class Customer(BaseModel):
    id: int
    first_name: str
    phone: str
    branch_id: Optional[int] = None
    email: Optional[str] = None


class BookingRequest(BaseModel):
    """Booking from the customer wizard: a slot picked from ``GET /slots``."""

    employee_id: Optional[int] = None
    service_id: Optional[int] = None
    start_time: Optional[dt.datetime] = None
    end_time: Optional[dt.datetime] = None
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    comment: Optional[str] = None
    status: AppointmentStatus = "pending"
    company_id: Optional[int] = None
    branch_id: Optional[int] = None

    @field_validator("start_time", "end_time", mode="before")
    def _as_wall_clock(cls, value):
        if isinstance(value, (str, dt.datetime)):
            return wall_clock(value)
        return value


class QuickBookingRequest(BaseModel):
    """Booking created from a calendar cell in the staff dashboard."""

    employee_id: Optional[int] = None
    service_id: Optional[int] = None
    date: dt.date
    start: Optional[str] = Field(None, description="HH:MM")
    end: Optional[str] = Field(None, description="HH:MM, defaults to start plus the default length")
    client_id: Optional[int] = None
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    comment: Optional[str] = None
    status: AppointmentStatus = "pending"
    branch_id: Optional[int] = None

    @field_validator("date", mode="before")
    def _strip_time_component(cls, value):
        if isinstance(value, str):
            return calendar_day(value)
        return value


class BookingResponse(BaseModel):
    status: str
    appointment: Optional[Appointment] = None
    message: Optional[str] = None


class BookingConflictResponse(BaseModel):
    status: str = "conflict"
    message: str
    reason: Optional[str] = None
    slots: List[Slot] = Field(default_factory=list)
