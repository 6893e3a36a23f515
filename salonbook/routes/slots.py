from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from salonbook.dependencies.services import get_availability_service, get_grid
from salonbook.engine.grid import TimelineGrid
from salonbook.engine.layout import layout
from salonbook.routes.errors import http_error
from salonbook.schemas.slot import LayoutBlock, LayoutRequest, SlotListResponse
from salonbook.services import AvailabilityService
from salonbook.services.exceptions import ServiceError

router = APIRouter()


@router.get("/slots", response_model=SlotListResponse)
async def list_slots(
    employee_id: int = Query(...),
    service_id: int = Query(...),
    date: date = Query(..., description="Calendar day, YYYY-MM-DD"),
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        return await service.slots(employee_id, service_id, date)
    except ServiceError as exc:
        raise http_error(exc) from exc


@router.post("/layout", response_model=LayoutBlock)
async def layout_block(
    req: LayoutRequest,
    grid: TimelineGrid = Depends(get_grid),
):
    start_hour = req.timeline_start_hour if req.timeline_start_hour is not None else grid.start_hour
    try:
        return layout(
            req.start_time,
            req.end_time,
            start_hour,
            req.pixels_per_minute or grid.pixels_per_minute,
            timeline_end_hour=grid.end_hour,
            min_minutes=grid.step_minutes,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail="Timestamps must look like YYYY-MM-DDTHH:MM") from exc
