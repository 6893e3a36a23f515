from __future__ import annotations

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field

from salonbook.schemas.appointment import AppointmentStatus
from salonbook.schemas.shift import ShiftState


class Slot(BaseModel):
    """A computed candidate interval. Never persisted."""

    start_time: dt.datetime
    end_time: dt.datetime
    is_free: bool


class SlotListResponse(BaseModel):
    employee_id: int
    service_id: int
    date: dt.date
    duration_minutes: int
    shift: ShiftState
    total: int
    free: int
    slots: List[Slot]


class LayoutRequest(BaseModel):
    start_time: str = Field(..., description="Stored timestamp, e.g. 2026-01-30T12:05:00Z")
    end_time: str
    timeline_start_hour: Optional[int] = Field(None, ge=0, le=23)
    pixels_per_minute: Optional[int] = Field(None, ge=1)


class LayoutBlock(BaseModel):
    top_offset_px: int
    height_px: int
    clamped: bool = False


class TimelineCell(BaseModel):
    time: str  # HH:MM
    top_px: int
    is_working: bool


class AppointmentBlock(BaseModel):
    appointment_id: int
    service_id: int
    service_name: Optional[str] = None
    client_id: Optional[int] = None
    status: AppointmentStatus
    label: str
    layout: LayoutBlock


class EmployeeColumn(BaseModel):
    employee_id: int
    name: str
    position: Optional[str] = None
    shift: ShiftState
    cells: List[TimelineCell]
    appointments: List[AppointmentBlock]


class DayTimeline(BaseModel):
    date: dt.date
    start_hour: int
    end_hour: int
    step_minutes: int
    pixels_per_minute: int
    height_px: int
    columns: List[EmployeeColumn]


class BookingDraft(BaseModel):
    """Pre-filled booking form produced by clicking a working calendar cell."""

    employee_id: int
    date: dt.date
    start: str  # HH:MM
    end: str  # HH:MM
