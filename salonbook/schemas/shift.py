from __future__ import annotations

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from salonbook.engine.wallclock import calendar_day, parse_hhmm

ShiftType = Literal["work", "day_off", "sick_leave", "vacation", "unpaid_leave", "absence"]
EffectiveShiftType = Literal[
    "work", "day_off", "sick_leave", "vacation", "unpaid_leave", "absence", "unscheduled"
]


class Shift(BaseModel):
    """One employee's assignment for one calendar day."""

    id: Optional[int] = None
    employee_id: int
    branch_id: Optional[int] = None
    date: dt.date
    shift_type: Optional[ShiftType] = None
    is_day_off: Optional[bool] = None  # legacy flag, used when shift_type is absent
    start_time: Optional[str] = None  # HH:MM
    end_time: Optional[str] = None  # HH:MM

    @field_validator("date", mode="before")
    def _strip_time_component(cls, value):
        if isinstance(value, str):
            return calendar_day(value)
        return value

    @property
    def is_working(self) -> bool:
        if self.shift_type is not None:
            return self.shift_type == "work"
        return not self.is_day_off


class ShiftUpsert(BaseModel):
    employee_id: int
    branch_id: Optional[int] = None
    date: dt.date
    shift_type: ShiftType = "work"
    start_time: Optional[str] = Field(None, description="HH:MM, required for work shifts")
    end_time: Optional[str] = Field(None, description="HH:MM, required for work shifts")

    @field_validator("date", mode="before")
    def _strip_time_component(cls, value):
        if isinstance(value, str):
            return calendar_day(value)
        return value

    @model_validator(mode="after")
    def _check_window(self) -> "ShiftUpsert":
        if self.shift_type != "work":
            return self
        start = parse_hhmm(self.start_time)
        end = parse_hhmm(self.end_time)
        if start is None or end is None:
            raise ValueError("work shifts require start_time and end_time as HH:MM")
        if start >= end:
            raise ValueError("start_time must be before end_time")
        self.start_time = start.strftime("%H:%M")
        self.end_time = end.strftime("%H:%M")
        return self


class ShiftState(BaseModel):
    """Resolved working state of an employee on one day."""

    employee_id: int
    date: dt.date
    is_working: bool
    shift_type: EffectiveShiftType = "unscheduled"
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class ShiftSummary(BaseModel):
    employee_id: int
    shift_count: int
    total_hours: float


class ScheduleDay(BaseModel):
    date: dt.date
    state: ShiftState


class EmployeeSchedule(BaseModel):
    employee_id: int
    name: str
    position: Optional[str] = None
    summary: ShiftSummary
    days: List[ScheduleDay]


class ScheduleResponse(BaseModel):
    branch_id: int
    start: dt.date
    days: int
    employees: List[EmployeeSchedule]
