from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from salonbook.dependencies.services import get_availability_service, get_branch_context
from salonbook.engine.wallclock import parse_hhmm
from salonbook.routes.errors import http_error
from salonbook.schemas.slot import BookingDraft, DayTimeline
from salonbook.services import AvailabilityService, BranchContext
from salonbook.services.exceptions import ServiceError

router = APIRouter()


@router.get("/day", response_model=DayTimeline)
async def day_timeline(
    date: date = Query(...),
    branch_id: Optional[int] = Query(None),
    include_off_duty: bool = Query(False),
    session: str = Query("default"),
    context: BranchContext = Depends(get_branch_context),
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        branch = await context.branch_id(session, branch_id)
        return await service.day_timeline(branch, date, include_off_duty=include_off_duty)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.get("/draft", response_model=Optional[BookingDraft])
async def cell_draft(
    employee_id: int = Query(...),
    date: date = Query(...),
    time: str = Query(..., description="Cell start, HH:MM"),
    service: AvailabilityService = Depends(get_availability_service),
):
    cell_time = parse_hhmm(time)
    if cell_time is None:
        raise HTTPException(status_code=422, detail="time must be HH:MM")
    try:
        return await service.cell_draft(employee_id, date, cell_time)
    except ServiceError as exc:
        raise http_error(exc) from exc
