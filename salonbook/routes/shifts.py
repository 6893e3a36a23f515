from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from salonbook.dependencies.services import (
    get_availability_service,
    get_branch_context,
    get_schedule_service,
)
from salonbook.routes.errors import http_error
from salonbook.schemas.shift import ScheduleResponse, Shift, ShiftState, ShiftUpsert
from salonbook.services import AvailabilityService, BranchContext, ScheduleService
from salonbook.services.exceptions import ServiceError

router = APIRouter()


@router.get("/shifts/resolve", response_model=ShiftState)
async def resolve_shift(
    employee_id: int = Query(...),
    date: date = Query(...),
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        return await service.shift_state(employee_id, date)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/shifts", response_model=List[Shift])
async def list_shifts(
    month: date = Query(..., description="Any day of the month"),
    branch_id: Optional[int] = Query(None),
    session: str = Query("default"),
    context: BranchContext = Depends(get_branch_context),
    service: ScheduleService = Depends(get_schedule_service),
):
    try:
        branch = await context.branch_id(session, branch_id)
        return await service.list_shifts(branch, month)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/shifts", response_model=List[Shift])
async def save_shifts(
    req: List[ShiftUpsert],
    service: ScheduleService = Depends(get_schedule_service),
):
    try:
        return await service.save_shifts(req)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/schedule", response_model=ScheduleResponse)
async def schedule(
    start: date = Query(...),
    days: int = Query(7, ge=1, le=42),
    branch_id: Optional[int] = Query(None),
    session: str = Query("default"),
    context: BranchContext = Depends(get_branch_context),
    service: ScheduleService = Depends(get_schedule_service),
):
    try:
        branch = await context.branch_id(session, branch_id)
        return await service.schedule(branch, start, days)
    except ServiceError as exc:
        raise http_error(exc) from exc
