from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from salonbook.dependencies.services import get_appointment_service, get_booking_service
from salonbook.routes.errors import http_error
from salonbook.schemas.appointment import Appointment, AppointmentListResponse, StatusUpdate
from salonbook.schemas.booking import (
    BookingRequest,
    BookingResponse,
    Customer,
    CustomerCreate,
    QuickBookingRequest,
)
from salonbook.services import AppointmentService, BookingService
from salonbook.services.exceptions import ServiceError

router = APIRouter()


@router.post("/bookings", response_model=BookingResponse, status_code=201)
async def create_booking(
    req: BookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.book(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/bookings/quick", response_model=BookingResponse, status_code=201)
async def create_quick_booking(
    req: QuickBookingRequest,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.quick_book(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/customers", response_model=Customer, status_code=201)
async def create_customer(
    req: CustomerCreate,
    service: BookingService = Depends(get_booking_service),
):
    try:
        return await service.create_customer(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/appointments", response_model=AppointmentListResponse)
async def list_appointments(
    employee_ids: str = Query(..., description="Comma separated employee ids"),
    date: date = Query(...),
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        ids = [int(item) for item in employee_ids.split(",") if item.strip()]
    except ValueError as exc:
        raise HTTPException(status_code=422, detail="employee_ids must be integers") from exc
    try:
        items = await service.list(ids, date)
    except ServiceError as exc:
        raise http_error(exc) from exc
    return AppointmentListResponse(total=len(items), items=items)


@router.patch("/appointments/{appointment_id}", response_model=Appointment)
async def update_appointment_status(
    appointment_id: int,
    req: StatusUpdate,
    service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return await service.update_status(appointment_id, req.status)
    except ServiceError as exc:
        raise http_error(exc) from exc
