from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import List, Optional

from salonbook.clients.api import BookingApiClient
from salonbook.engine.grid import TimelineGrid
from salonbook.engine.layout import build_day_timeline, draft_for_cell
from salonbook.engine.shifts import resolve_shift, working_employees
from salonbook.engine.slots import find_conflict, generate_slots, resolve_duration
from salonbook.schemas.directory import Employee
from salonbook.schemas.shift import Shift, ShiftState
from salonbook.schemas.slot import BookingDraft, DayTimeline, Slot, SlotListResponse
from salonbook.services.appointment import AppointmentService
from salonbook.services.directory import DirectoryService
from salonbook.services.schedule import ScheduleService

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Feeds fetched shifts and appointments through the availability engine.

    Both the booking wizard (``/slots``) and the staff calendar go through this
    class, so they share one set of conflict rules.
    """

    def __init__(
        self,
        client: BookingApiClient,
        *,
        grid: TimelineGrid | None = None,
        directory: DirectoryService | None = None,
        schedule: ScheduleService | None = None,
        appointments: AppointmentService | None = None,
    ) -> None:
        self._client = client
        self.grid = grid or TimelineGrid()
        self._directory = directory or DirectoryService(client)
        self._schedule = schedule or ScheduleService(client, directory=self._directory)
        self._appointments = appointments or AppointmentService(client)

    async def _shifts_for(self, employee: Employee, day: date) -> List[Shift]:
        return await self._schedule.list_shifts(employee.branch_id, day.replace(day=1))

    async def shift_state(self, employee_id: int, day: date) -> ShiftState:
        employee = await self._directory.get_employee(employee_id)
        shifts = await self._shifts_for(employee, day)
        return resolve_shift(employee_id, day, shifts)

    async def slots(self, employee_id: int, service_id: int, day: date) -> SlotListResponse:
        logger.info(
            "Generating slots for employee %s, service %s on %s", employee_id, service_id, day
        )
        employee = await self._directory.get_employee(employee_id)
        services = await self._directory.list_services(employee.branch_id)
        duration = resolve_duration(employee, service_id, services)
        if duration is None:
            logger.warning(
                "No duration known for service %s of employee %s; all slots busy",
                service_id,
                employee_id,
            )

        state = resolve_shift(employee_id, day, await self._shifts_for(employee, day))
        appointments = await self._appointments.list([employee_id], day)
        slots = generate_slots(state, appointments, duration, self.grid)
        return SlotListResponse(
            employee_id=employee_id,
            service_id=service_id,
            date=day,
            duration_minutes=duration or 0,
            shift=state,
            total=len(slots),
            free=sum(1 for slot in slots if slot.is_free),
            slots=slots,
        )

    async def refresh_slots(self, employee_id: int, service_id: int, day: date) -> List[Slot]:
        """Recompute slots after dropping every cached list they depend on."""

        self._client.invalidate("/appointments", "/shifts", "/slots")
        response = await self.slots(employee_id, service_id, day)
        return response.slots

    async def check_interval(
        self, employee_id: int, start: datetime, end: datetime
    ) -> Optional[str]:
        """Advisory client-side conflict check; the booking API has the final say."""

        day = start.date()
        employee = await self._directory.get_employee(employee_id)
        state = resolve_shift(employee_id, day, await self._shifts_for(employee, day))
        appointments = await self._appointments.list([employee_id], day)
        return find_conflict(state, appointments, start, end)

    async def day_timeline(
        self, branch_id: int, day: date, *, include_off_duty: bool = False
    ) -> DayTimeline:
        employees = await self._directory.list_employees(branch_id)
        shifts = await self._schedule.list_shifts(branch_id, day.replace(day=1))
        services = await self._directory.list_services(branch_id)
        columns = employees if include_off_duty else working_employees(employees, shifts, day)
        appointments = await self._appointments.list(
            [employee.id for employee in columns], day
        )
        return build_day_timeline(
            day,
            employees,
            shifts,
            appointments,
            services,
            self.grid,
            include_off_duty=include_off_duty,
        )

    async def cell_draft(
        self, employee_id: int, day: date, cell_time: time
    ) -> Optional[BookingDraft]:
        state = await self.shift_state(employee_id, day)
        return draft_for_cell(state, cell_time, self.grid)
