from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, field_validator

from salonbook.engine.wallclock import wall_clock

AppointmentStatus = Literal["pending", "confirmed", "arrived", "no_show", "cancelled"]


class Appointment(BaseModel):
    """A booking of a service with an employee for a wall-clock interval."""

    id: int
    employee_id: int
    service_id: int
    client_id: Optional[int] = None
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus = "pending"
    comment: Optional[str] = None

    @field_validator("start_time", "end_time", mode="before")
    def _as_wall_clock(cls, value):
        # Zone suffixes are dropped, never converted.
        if isinstance(value, (str, datetime)):
            return wall_clock(value)
        return value

    @property
    def is_active(self) -> bool:
        return self.status != "cancelled"


class AppointmentListResponse(BaseModel):
    total: int
    items: List[Appointment]


class StatusUpdate(BaseModel):
    status: AppointmentStatus
