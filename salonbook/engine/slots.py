"""Slot generation and interval conflict checks."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

from salonbook.engine.grid import TimelineGrid
from salonbook.engine.shifts import working_window
from salonbook.schemas.appointment import Appointment
from salonbook.schemas.directory import Employee, Service
from salonbook.schemas.shift import ShiftState
from salonbook.schemas.slot import Slot


def resolve_duration(
    employee: Optional[Employee], service_id: int, services: Iterable[Service]
) -> Optional[int]:
    """Duration for ``service_id`` performed by ``employee``.

    The employee's override wins; unset or zero falls back to the service's
    base duration. ``None`` when neither is known, or when ``employee`` does
    not perform the service at all.
    """

    assignment = employee.assignment_for(service_id) if employee else None
    if employee is not None and assignment is None:
        return None
    if assignment is not None and assignment.duration_minutes:
        return assignment.duration_minutes
    service = next((item for item in services if item.id == service_id), None)
    if service is not None and service.duration_minutes:
        return service.duration_minutes
    return None


def resolve_price(
    employee: Optional[Employee], service_id: int, services: Iterable[Service]
) -> Optional[float]:
    assignment = employee.assignment_for(service_id) if employee else None
    if assignment is not None and assignment.price:
        return assignment.price
    service = next((item for item in services if item.id == service_id), None)
    return service.price if service is not None else None


def _overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    return start < other_end and other_start < end


def active_appointments(
    employee_id: int, day: date, appointments: Iterable[Appointment]
) -> List[Appointment]:
    """Non-cancelled appointments of the employee starting on ``day``."""

    return [
        item
        for item in appointments
        if item.employee_id == employee_id
        and item.is_active
        and item.start_time.date() == day
    ]


def find_conflict(
    state: ShiftState,
    appointments: Iterable[Appointment],
    start: datetime,
    end: datetime,
    *,
    exclude_id: Optional[int] = None,
) -> Optional[str]:
    """Reason why ``[start, end)`` cannot be booked, or ``None`` when it is free."""

    if end <= start:
        return "End time must be after start time"

    window = working_window(state)
    if window is None:
        return "Employee is not working on this day"

    midnight = datetime.combine(state.date, datetime.min.time())
    shift_start = midnight + timedelta(minutes=window[0])
    shift_end = midnight + timedelta(minutes=window[1])
    if start < shift_start or end > shift_end:
        return "Outside working hours"

    for item in active_appointments(state.employee_id, state.date, appointments):
        if exclude_id is not None and item.id == exclude_id:
            continue
        if _overlaps(start, end, item.start_time, item.end_time):
            return f"Overlaps appointment {item.id}"
    return None


def generate_slots(
    state: ShiftState,
    appointments: Iterable[Appointment],
    duration_minutes: Optional[int],
    grid: TimelineGrid,
) -> List[Slot]:
    """Every grid candidate of the day, in order, flagged free or busy.

    Candidates span the whole grid window regardless of the shift; the shift
    only decides which of them are free. Without a known duration candidates
    are one grid step long and all busy.
    """

    known_duration = bool(duration_minutes and duration_minutes > 0)
    length = timedelta(minutes=duration_minutes if known_duration else grid.step_minutes)
    booked = active_appointments(state.employee_id, state.date, appointments)

    slots: List[Slot] = []
    for start in grid.starts_on(state.date):
        end = start + length
        is_free = known_duration and find_conflict(state, booked, start, end) is None
        slots.append(Slot(start_time=start, end_time=end, is_free=is_free))
    return slots
