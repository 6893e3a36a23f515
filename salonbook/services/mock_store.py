from __future__ import annotations

import itertools
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from salonbook.engine.shifts import resolve_shift
from salonbook.engine.slots import find_conflict
from salonbook.schemas.appointment import Appointment, AppointmentStatus
from salonbook.schemas.booking import Customer, CustomerCreate
from salonbook.schemas.directory import (
    Branch,
    Company,
    Employee,
    EmployeeServiceAssignment,
    Service,
)
from salonbook.schemas.shift import Shift, ShiftUpsert
from salonbook.services.exceptions import BookingConflictError, NotFoundError


class _BaseRepository:
    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)

    def _next_id(self) -> int:
        return next(self._counter)


class DirectoryRepository:
    """Companies, branches, services and staff of the mock tenant."""

    def __init__(self) -> None:
        self._companies: Dict[int, Company] = {}
        self._branches: Dict[int, List[Branch]] = {}
        self._services: Dict[int, Service] = {}
        self._employees: Dict[int, Employee] = {}
        self._seed()

    def _seed(self) -> None:
        self._companies[1] = Company(id=1, name="Studio Aurora")
        self._branches[1] = [
            Branch(id=10, name="Aurora Central", address="12 Market Street"),
            Branch(id=11, name="Aurora Riverside", address="4 Quay Lane"),
        ]

        for service in [
            Service(id=101, name="Women's Haircut", branch_id=10, category_id=1, price=45.0, duration_minutes=60),
            Service(id=102, name="Men's Haircut", branch_id=10, category_id=1, price=25.0, duration_minutes=30),
            Service(id=103, name="Manicure", branch_id=10, category_id=2, price=30.0, duration_minutes=45),
            Service(id=104, name="Hair Colouring", branch_id=10, category_id=1, price=90.0, duration_minutes=120),
            Service(id=201, name="Men's Haircut", branch_id=11, category_id=3, price=22.0, duration_minutes=30),
            Service(id=202, name="Beard Trim", branch_id=11, category_id=3, price=12.0, duration_minutes=15),
        ]:
            self._services[service.id] = service

        for employee in [
            Employee(
                id=1,
                name="Anna",
                branch_id=10,
                position="Senior stylist",
                services=[
                    EmployeeServiceAssignment(service_id=101, duration_minutes=50),
                    EmployeeServiceAssignment(service_id=102),
                    EmployeeServiceAssignment(service_id=104, price=110.0),
                ],
            ),
            Employee(
                id=2,
                name="Boris",
                branch_id=10,
                position="Barber",
                services=[EmployeeServiceAssignment(service_id=102, price=28.0, duration_minutes=0)],
            ),
            Employee(
                id=3,
                name="Clara",
                branch_id=10,
                position="Nail technician",
                services=[EmployeeServiceAssignment(service_id=103)],
            ),
            Employee(
                id=4,
                name="Dmitri",
                branch_id=10,
                position="Trainee",
                visible_in_booking=False,
                services=[EmployeeServiceAssignment(service_id=102)],
            ),
            Employee(
                id=5,
                name="Eva",
                branch_id=11,
                position="Barber",
                services=[
                    EmployeeServiceAssignment(service_id=201),
                    EmployeeServiceAssignment(service_id=202),
                ],
            ),
        ]:
            self._employees[employee.id] = employee

    def list_companies(self) -> List[Company]:
        return list(self._companies.values())

    def list_branches(self, company_id: int) -> List[Branch]:
        return list(self._branches.get(company_id, []))

    def list_employees(self, company_id: Optional[int] = None) -> List[Employee]:
        if company_id is None:
            return list(self._employees.values())
        branch_ids = {branch.id for branch in self._branches.get(company_id, [])}
        return [item for item in self._employees.values() if item.branch_id in branch_ids]

    def get_employee(self, employee_id: int) -> Optional[Employee]:
        return self._employees.get(employee_id)

    def list_services(self, branch_id: Optional[int] = None) -> List[Service]:
        if branch_id is None:
            return list(self._services.values())
        return [item for item in self._services.values() if item.branch_id == branch_id]

    def get_service(self, service_id: int) -> Optional[Service]:
        return self._services.get(service_id)


class ShiftRepository(_BaseRepository):
    def __init__(self, directory: DirectoryRepository) -> None:
        super().__init__()
        self._directory = directory
        self._shifts: Dict[int, Shift] = {}
        self._seed_defaults()

    def _seed_defaults(self) -> None:
        seeds = [
            dict(employee_id=1, date="2026-01-30T00:00:00Z", shift_type="work", start_time="09:00", end_time="18:00"),
            dict(employee_id=1, date="2026-01-31", shift_type="work", start_time="10:00", end_time="16:00"),
            dict(employee_id=2, date="2026-01-30", shift_type="work", start_time="12:00", end_time="21:00"),
            dict(employee_id=2, date="2026-01-31", shift_type="day_off"),
            dict(employee_id=3, date="2026-01-30", shift_type="vacation"),
            # legacy record written before shift types existed
            dict(employee_id=3, date="2026-01-31", is_day_off=False, start_time="09:00", end_time="15:00"),
            dict(employee_id=4, date="2026-01-30", shift_type="work", start_time="09:00", end_time="18:00"),
            dict(employee_id=5, date="2026-01-30", shift_type="work", start_time="10:00", end_time="19:00"),
        ]
        for record in seeds:
            shift_id = self._next_id()
            employee = self._directory.get_employee(record["employee_id"])
            self._shifts[shift_id] = Shift(
                id=shift_id,
                branch_id=employee.branch_id if employee else None,
                **record,
            )

    def _branch_employee_ids(self, branch_id: int) -> set[int]:
        return {
            employee.id
            for employee in self._directory.list_employees()
            if employee.branch_id == branch_id
        }

    async def list(self, branch_id: int, month: date) -> List[Shift]:
        employee_ids = self._branch_employee_ids(branch_id)
        return [
            shift.model_copy()
            for shift in self._shifts.values()
            if shift.employee_id in employee_ids
            and shift.date.year == month.year
            and shift.date.month == month.month
        ]

    async def upsert(self, requests: Iterable[ShiftUpsert]) -> List[Shift]:
        saved: List[Shift] = []
        for request in requests:
            employee = self._directory.get_employee(request.employee_id)
            if employee is None:
                raise NotFoundError(f"Employee '{request.employee_id}' not found")
            existing_id = next(
                (
                    shift_id
                    for shift_id, shift in self._shifts.items()
                    if shift.employee_id == request.employee_id and shift.date == request.date
                ),
                None,
            )
            shift_id = existing_id or self._next_id()
            shift = Shift(
                id=shift_id,
                employee_id=request.employee_id,
                branch_id=request.branch_id or employee.branch_id,
                date=request.date,
                shift_type=request.shift_type,
                start_time=request.start_time if request.shift_type == "work" else None,
                end_time=request.end_time if request.shift_type == "work" else None,
            )
            self._shifts[shift_id] = shift
            saved.append(shift.model_copy())
        return saved

    async def for_employee(self, employee_id: int) -> List[Shift]:
        return [shift for shift in self._shifts.values() if shift.employee_id == employee_id]

    async def delete(self, shift_id: str | int) -> bool:
        return self._shifts.pop(int(shift_id), None) is not None


class CustomerRepository(_BaseRepository):
    def __init__(self) -> None:
        super().__init__()
        self._customers: Dict[int, Customer] = {}

    async def create(self, request: CustomerCreate) -> Customer:
        """Create the customer, or return the existing one with the same phone and branch."""

        for customer in self._customers.values():
            if customer.phone == request.phone and customer.branch_id == request.branch_id:
                return customer
        customer = Customer(id=self._next_id(), **request.model_dump())
        self._customers[customer.id] = customer
        return customer

    async def get(self, customer_id: int) -> Optional[Customer]:
        return self._customers.get(customer_id)

    async def delete(self, customer_id: str | int) -> bool:
        return self._customers.pop(int(customer_id), None) is not None


class AppointmentRepository(_BaseRepository):
    """Appointment book. Plays the booking API's authoritative conflict check."""

    def __init__(self, shifts: ShiftRepository) -> None:
        super().__init__()
        self._shifts = shifts
        self._appointments: Dict[int, Appointment] = {}
        self._seed_defaults()

    def _seed_defaults(self) -> None:
        seeds = [
            dict(employee_id=1, service_id=102, client_id=None, start_time="2026-01-30T10:00:00", end_time="2026-01-30T10:30:00", status="confirmed"),
            # stored with a zone suffix; still 12:05 on the salon clock
            dict(employee_id=1, service_id=101, client_id=None, start_time="2026-01-30T12:05:00Z", end_time="2026-01-30T13:05:00", status="pending"),
            dict(employee_id=1, service_id=102, client_id=None, start_time="2026-01-30T14:00:00", end_time="2026-01-30T14:30:00", status="cancelled"),
            dict(employee_id=2, service_id=102, client_id=None, start_time="2026-01-30T13:00:00", end_time="2026-01-30T13:30:00", status="arrived"),
        ]
        for record in seeds:
            appointment_id = self._next_id()
            self._appointments[appointment_id] = Appointment(id=appointment_id, **record)

    async def list(
        self, employee_ids: Iterable[int] | None = None, day: Optional[date] = None
    ) -> List[Appointment]:
        wanted = set(employee_ids) if employee_ids is not None else None
        return [
            item.model_copy()
            for item in self._appointments.values()
            if (wanted is None or item.employee_id in wanted)
            and (day is None or item.start_time.date() == day)
        ]

    async def get(self, appointment_id: str | int) -> Optional[Appointment]:
        appointment = self._appointments.get(int(appointment_id))
        return appointment.model_copy() if appointment is not None else None

    async def create(
        self,
        *,
        employee_id: int,
        service_id: int,
        client_id: Optional[int],
        start_time,
        end_time,
        status: AppointmentStatus = "pending",
        comment: Optional[str] = None,
    ) -> Appointment:
        candidate = Appointment(
            id=0,
            employee_id=employee_id,
            service_id=service_id,
            client_id=client_id,
            start_time=start_time,
            end_time=end_time,
            status=status,
            comment=comment,
        )
        day = candidate.start_time.date()
        state = resolve_shift(employee_id, day, await self._shifts.for_employee(employee_id))
        reason = find_conflict(
            state,
            self._appointments.values(),
            candidate.start_time,
            candidate.end_time,
        )
        if reason is not None:
            raise BookingConflictError("The requested time is no longer available", reason=reason)

        appointment = candidate.model_copy(update={"id": self._next_id()})
        self._appointments[appointment.id] = appointment
        return appointment.model_copy()

    async def update_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment:
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError(f"Appointment '{appointment_id}' not found")

        # Reviving a cancelled booking must not overlap what took its place.
        if not appointment.is_active and status != "cancelled":
            day = appointment.start_time.date()
            state = resolve_shift(
                appointment.employee_id,
                day,
                await self._shifts.for_employee(appointment.employee_id),
            )
            reason = find_conflict(
                state,
                self._appointments.values(),
                appointment.start_time,
                appointment.end_time,
                exclude_id=appointment_id,
            )
            if reason is not None:
                raise BookingConflictError(
                    "The appointment's time is no longer available", reason=reason
                )

        updated = appointment.model_copy(update={"status": status})
        self._appointments[appointment_id] = updated
        return updated.model_copy()

    async def delete(self, appointment_id: str | int) -> bool:
        return self._appointments.pop(int(appointment_id), None) is not None


@dataclass
class MockDataStore:
    directory: DirectoryRepository
    shifts: ShiftRepository
    customers: CustomerRepository
    appointments: AppointmentRepository


_mock_store: Optional[MockDataStore] = None


def get_mock_store() -> MockDataStore:
    global _mock_store
    if _mock_store is None:
        directory = DirectoryRepository()
        shifts = ShiftRepository(directory)
        customers = CustomerRepository()
        appointments = AppointmentRepository(shifts)
        _mock_store = MockDataStore(
            directory=directory,
            shifts=shifts,
            customers=customers,
            appointments=appointments,
        )
    return _mock_store


def reset_mock_store() -> None:
    global _mock_store
    _mock_store = None
