from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, Dict

from salonbook.clients.api import BookingApiClient
from salonbook.engine.slots import resolve_duration
from salonbook.engine.wallclock import combine, format_wall_clock, parse_hhmm
from salonbook.schemas.appointment import Appointment
from salonbook.schemas.booking import (
    BookingRequest,
    BookingResponse,
    Customer,
    CustomerCreate,
    QuickBookingRequest,
)
from salonbook.services.appointment import AppointmentService
from salonbook.services.availability import AvailabilityService
from salonbook.services.directory import DirectoryService
from salonbook.services.exceptions import (
    BookingConflictError,
    BookingValidationError,
    DownstreamServiceError,
)
from salonbook.services.mock_store import MockDataStore, get_mock_store
from salonbook.services.payloads import parse_one

logger = logging.getLogger(__name__)

# Status codes the booking API uses to reject an interval that is no longer free.
_CONFLICT_STATUS_CODES = {409, 422}


class BookingService:
    """Creates customers and bookings for the wizard and the staff calendar."""

    def __init__(
        self,
        client: BookingApiClient,
        *,
        availability: AvailabilityService | None = None,
        directory: DirectoryService | None = None,
        appointments: AppointmentService | None = None,
        store: MockDataStore | None = None,
    ) -> None:
        self._client = client
        self._directory = directory or DirectoryService(client)
        self._appointments = appointments or AppointmentService(client)
        self._availability = availability or AvailabilityService(
            client, directory=self._directory, appointments=self._appointments
        )
        self._store = store
        if self._client.use_mock_data:
            self._store = store or get_mock_store()

    async def create_customer(self, request: CustomerCreate) -> Customer:
        logger.info("Creating customer %s for branch %s", request.first_name, request.branch_id)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._store.customers.create(request)

        data = await self._client.post("/customers", request.model_dump(exclude_none=True))
        self._client.invalidate("/customers")
        return parse_one(Customer, data, "customer")

    @staticmethod
    def _validate(request: BookingRequest) -> None:
        if request.service_id is None:
            raise BookingValidationError("Please choose a service")
        if request.employee_id is None:
            raise BookingValidationError("Please choose an employee")
        if request.start_time is None:
            raise BookingValidationError("Please choose a time slot")
        if request.client_id is None and not (request.client_name and request.client_phone):
            raise BookingValidationError("Please enter the client's name and phone")
        if request.end_time is not None and request.end_time <= request.start_time:
            raise BookingValidationError("End time must be after start time")

    async def book(self, request: BookingRequest) -> BookingResponse:
        self._validate(request)
        logger.info(
            "Booking service %s with employee %s at %s",
            request.service_id,
            request.employee_id,
            request.start_time,
        )

        employee = await self._directory.get_employee(request.employee_id)
        if employee.assignment_for(request.service_id) is None:
            raise BookingValidationError("This employee does not perform the selected service")
        start = request.start_time
        end = request.end_time
        if end is None:
            services = await self._directory.list_services(employee.branch_id)
            duration = resolve_duration(employee, request.service_id, services)
            end = start + timedelta(minutes=duration or self._availability.grid.default_booking_minutes)

        reason = await self._availability.check_interval(employee.id, start, end)
        if reason is not None:
            raise await self._conflict(request, reason)

        client_id = request.client_id
        if client_id is None:
            customer = await self.create_customer(
                CustomerCreate(
                    first_name=request.client_name,
                    phone=request.client_phone,
                    branch_id=request.branch_id or employee.branch_id,
                    email=request.client_email,
                )
            )
            client_id = customer.id

        payload: Dict[str, Any] = {
            "employee_id": employee.id,
            "service_id": request.service_id,
            "client_id": client_id,
            "start_time": format_wall_clock(start),
            "end_time": format_wall_clock(end),
            "status": request.status,
            "comment": request.comment,
        }
        if request.company_id is not None:
            payload["company_id"] = request.company_id

        try:
            appointment = await self._submit(payload)
        except BookingConflictError as exc:
            raise await self._conflict(request, exc.reason or str(exc), cause=exc) from exc

        self._client.invalidate("/appointments", "/slots")
        return BookingResponse(status="created", appointment=appointment)

    async def _submit(self, payload: Dict[str, Any]) -> Appointment:
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            fields = {key: value for key, value in payload.items() if key != "company_id"}
            return await self._store.appointments.create(**fields)

        try:
            data = await self._client.post("/bookings", payload)
        except DownstreamServiceError as exc:
            if exc.status_code in _CONFLICT_STATUS_CODES:
                raise BookingConflictError(str(exc), reason=str(exc), cause=exc) from exc
            raise
        return parse_one(Appointment, data, "appointment")

    async def _conflict(
        self, request: BookingRequest, reason: str, *, cause: Exception | None = None
    ) -> BookingConflictError:
        logger.warning(
            "Booking for employee %s at %s rejected: %s",
            request.employee_id,
            request.start_time,
            reason,
        )
        slots = await self._availability.refresh_slots(
            request.employee_id, request.service_id, request.start_time.date()
        )
        return BookingConflictError(
            "The selected time is no longer available",
            reason=reason,
            slots=slots,
            cause=cause,
        )

    async def quick_book(self, request: QuickBookingRequest) -> BookingResponse:
        """Book from a calendar cell: wall-clock ``HH:MM`` on the calendar's day."""

        if request.service_id is None:
            raise BookingValidationError("Please choose a service")
        start_of_day = parse_hhmm(request.start)
        if start_of_day is None:
            raise BookingValidationError("Please choose a start time")

        start = combine(request.date, start_of_day)
        if request.end:
            end_of_day = parse_hhmm(request.end)
            if end_of_day is None:
                raise BookingValidationError("End time must be HH:MM")
            end = combine(request.date, end_of_day)
        else:
            end = start + timedelta(minutes=self._availability.grid.default_booking_minutes)

        booking = BookingRequest(
            employee_id=request.employee_id,
            service_id=request.service_id,
            start_time=start,
            end_time=end,
            client_id=request.client_id,
            client_name=request.client_name,
            client_phone=request.client_phone,
            comment=request.comment,
            status=request.status,
            branch_id=request.branch_id,
        )
        return await self.book(booking)
