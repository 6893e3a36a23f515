"""Vertical timeline layout for the staff calendar.

Positions come from the literal wall-clock text of the stored timestamps, so a
block sits where the business booked it whatever the viewer's time zone.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Union

from salonbook.engine.grid import TimelineGrid
from salonbook.engine.shifts import is_working_at, resolve_shift, summarize_shifts, working_employees
from salonbook.engine.wallclock import clock_minutes, combine, format_hhmm, minutes_of
from salonbook.schemas.appointment import Appointment
from salonbook.schemas.directory import Employee, Service
from salonbook.schemas.shift import EmployeeSchedule, ScheduleDay, Shift, ShiftState
from salonbook.schemas.slot import (
    AppointmentBlock,
    BookingDraft,
    DayTimeline,
    EmployeeColumn,
    LayoutBlock,
    TimelineCell,
)

Timestamp = Union[str, datetime]


def layout(
    start: Timestamp,
    end: Timestamp,
    timeline_start_hour: int,
    pixels_per_minute: int = 2,
    *,
    timeline_end_hour: int = 24,
    min_minutes: int = 15,
) -> LayoutBlock:
    start_minutes = clock_minutes(start)
    end_minutes = clock_minutes(end)
    top = (start_minutes - timeline_start_hour * 60) * pixels_per_minute

    duration = end_minutes - start_minutes
    clamped = False
    if duration <= 0:
        # Crosses midnight or is empty: run the block to the bottom of the timeline.
        duration = max(timeline_end_hour * 60 - start_minutes, min_minutes)
        clamped = True
    return LayoutBlock(
        top_offset_px=top,
        height_px=duration * pixels_per_minute,
        clamped=clamped,
    )


def layout_appointment(appointment: Appointment, grid: TimelineGrid) -> LayoutBlock:
    return layout(
        appointment.start_time,
        appointment.end_time,
        grid.start_hour,
        grid.pixels_per_minute,
        timeline_end_hour=grid.end_hour,
        min_minutes=grid.step_minutes,
    )


def build_cells(state: ShiftState, grid: TimelineGrid) -> List[TimelineCell]:
    cells = []
    for index, minute in enumerate(grid.minutes()):
        cells.append(
            TimelineCell(
                time=f"{minute // 60:02d}:{minute % 60:02d}",
                top_px=index * grid.step_minutes * grid.pixels_per_minute,
                is_working=is_working_at(state, minute),
            )
        )
    return cells


def _block_label(appointment: Appointment) -> str:
    return f"{format_hhmm(appointment.start_time)}-{format_hhmm(appointment.end_time)}"


def build_day_timeline(
    day: date,
    employees: Iterable[Employee],
    shifts: List[Shift],
    appointments: Iterable[Appointment],
    services: Iterable[Service],
    grid: TimelineGrid,
    *,
    include_off_duty: bool = False,
) -> DayTimeline:
    """One column per visible employee working on ``day``.

    With ``include_off_duty`` visible employees who are not working get a
    column too, every cell shaded.
    """

    service_names: Dict[int, str] = {service.id: service.name for service in services}
    appointment_list = [
        item for item in appointments if item.is_active and item.start_time.date() == day
    ]

    columns: List[EmployeeColumn] = []
    if include_off_duty:
        shown = [employee for employee in employees if employee.visible_in_booking]
    else:
        shown = working_employees(employees, shifts, day)

    for employee in shown:
        state = resolve_shift(employee.id, day, shifts)
        blocks = [
            AppointmentBlock(
                appointment_id=item.id,
                service_id=item.service_id,
                service_name=service_names.get(item.service_id),
                client_id=item.client_id,
                status=item.status,
                label=_block_label(item),
                layout=layout_appointment(item, grid),
            )
            for item in sorted(appointment_list, key=lambda item: item.start_time)
            if item.employee_id == employee.id
        ]
        columns.append(
            EmployeeColumn(
                employee_id=employee.id,
                name=employee.name,
                position=employee.position,
                shift=state,
                cells=build_cells(state, grid),
                appointments=blocks,
            )
        )

    return DayTimeline(
        date=day,
        start_hour=grid.start_hour,
        end_hour=grid.end_hour,
        step_minutes=grid.step_minutes,
        pixels_per_minute=grid.pixels_per_minute,
        height_px=grid.height_px,
        columns=columns,
    )


def draft_for_cell(
    state: ShiftState, cell_time: time, grid: TimelineGrid
) -> Optional[BookingDraft]:
    """Booking form for a clicked cell; clicking a non-working cell does nothing."""

    if not is_working_at(state, minutes_of(cell_time)):
        return None
    start = combine(state.date, cell_time)
    end = start + timedelta(minutes=grid.default_booking_minutes)
    return BookingDraft(
        employee_id=state.employee_id,
        date=state.date,
        start=format_hhmm(start),
        end=format_hhmm(end),
    )


def build_schedule(
    days: List[date], employees: Iterable[Employee], shifts: List[Shift]
) -> List[EmployeeSchedule]:
    """Employee by day grid for the shift editor, with per-employee totals."""

    schedule = []
    for employee in employees:
        schedule.append(
            EmployeeSchedule(
                employee_id=employee.id,
                name=employee.name,
                position=employee.position,
                summary=summarize_shifts(employee.id, shifts),
                days=[
                    ScheduleDay(date=day, state=resolve_shift(employee.id, day, shifts))
                    for day in days
                ],
            )
        )
    return schedule
