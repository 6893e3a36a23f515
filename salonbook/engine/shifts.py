"""Shift resolution: is an employee working on a given day, and when."""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional

from salonbook.engine.wallclock import minutes_of, parse_hhmm
from salonbook.schemas.directory import Employee
from salonbook.schemas.shift import Shift, ShiftState, ShiftSummary

logger = logging.getLogger(__name__)


def find_shift(employee_id: int, day: date, shifts: Iterable[Shift]) -> Optional[Shift]:
    """First shift of ``employee_id`` on the same calendar day as ``day``."""

    for shift in shifts:
        if shift.employee_id == employee_id and shift.date == day:
            return shift
    return None


def resolve_shift(employee_id: int, day: date, shifts: Iterable[Shift]) -> ShiftState:
    shift = find_shift(employee_id, day, shifts)
    if shift is None:
        return ShiftState(employee_id=employee_id, date=day, is_working=False)

    if not shift.is_working:
        shift_type = shift.shift_type or "day_off"
        return ShiftState(
            employee_id=employee_id,
            date=day,
            is_working=False,
            shift_type=shift_type,
        )

    start = parse_hhmm(shift.start_time)
    end = parse_hhmm(shift.end_time)
    if start is None or end is None or start >= end:
        logger.warning(
            "Ignoring work shift with unusable window %s-%s for employee %s on %s",
            shift.start_time,
            shift.end_time,
            employee_id,
            day,
        )
        return ShiftState(employee_id=employee_id, date=day, is_working=False, shift_type="work")

    return ShiftState(
        employee_id=employee_id,
        date=day,
        is_working=True,
        shift_type="work",
        start_time=start.strftime("%H:%M"),
        end_time=end.strftime("%H:%M"),
    )


def working_window(state: ShiftState) -> Optional[tuple[int, int]]:
    """Working window as minutes of day, ``None`` when not working."""

    if not state.is_working:
        return None
    start = parse_hhmm(state.start_time)
    end = parse_hhmm(state.end_time)
    if start is None or end is None:
        return None
    return minutes_of(start), minutes_of(end)


def is_working_at(state: ShiftState, minute_of_day: int) -> bool:
    window = working_window(state)
    if window is None:
        return False
    start, end = window
    return start <= minute_of_day < end


def working_employees(
    employees: Iterable[Employee], shifts: List[Shift], day: date
) -> List[Employee]:
    """Employees that populate the calendar columns for ``day``."""

    return [
        employee
        for employee in employees
        if employee.visible_in_booking
        and resolve_shift(employee.id, day, shifts).is_working
    ]


def summarize_shifts(employee_id: int, shifts: Iterable[Shift]) -> ShiftSummary:
    """Count of work shifts and hours worked over the given period."""

    count = 0
    total_minutes = 0
    for shift in shifts:
        if shift.employee_id != employee_id or shift.shift_type != "work":
            continue
        count += 1
        start = parse_hhmm(shift.start_time)
        end = parse_hhmm(shift.end_time)
        if start is not None and end is not None and end > start:
            total_minutes += minutes_of(end) - minutes_of(start)
    return ShiftSummary(
        employee_id=employee_id,
        shift_count=count,
        total_hours=round(total_minutes / 60, 2),
    )
