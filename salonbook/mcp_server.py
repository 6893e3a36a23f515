# salonbook/mcp_server.py
from __future__ import annotations

import datetime as dt
import logging

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import BaseModel, Field

from salonbook.config import get_settings
from salonbook.dependencies.services import get_api_client_cached
from salonbook.engine.grid import TimelineGrid
from salonbook.engine.layout import layout
from salonbook.schemas.shift import ShiftState
from salonbook.schemas.slot import LayoutBlock, LayoutRequest, SlotListResponse
from salonbook.services import (
    AppointmentService,
    AvailabilityService,
    DirectoryService,
    ScheduleService,
)

log = logging.getLogger("salonbook.mcp")

# Name shown to connecting clients
mcp = FastMCP("salonbook_mcp")


class SlotsGenerateInput(BaseModel):
    employee_id: int = Field(..., description="Employee ID")
    service_id: int = Field(..., description="Service ID")
    date: dt.date = Field(..., description="Calendar day, e.g. '2026-01-30'")


class ShiftResolveInput(BaseModel):
    employee_id: int
    date: dt.date


def _grid() -> TimelineGrid:
    return TimelineGrid.from_settings(get_settings())


def _availability_service() -> AvailabilityService:
    client = get_api_client_cached()
    directory = DirectoryService(client)
    return AvailabilityService(
        client,
        grid=_grid(),
        directory=directory,
        schedule=ScheduleService(client, directory=directory),
        appointments=AppointmentService(client),
    )


@mcp.tool(name="slots_generate", description="List bookable start times for an employee and service on a day")
async def slots_generate(input: SlotsGenerateInput, ctx: Context) -> SlotListResponse:
    log.debug("slots_generate input=%s", input.model_dump())
    out = await _availability_service().slots(input.employee_id, input.service_id, input.date)
    log.debug("slots_generate free=%s total=%s", out.free, out.total)
    return out


@mcp.tool(name="shift_resolve", description="Resolve whether an employee works on a day and their hours")
async def shift_resolve(input: ShiftResolveInput, ctx: Context) -> ShiftState:
    log.debug("shift_resolve input=%s", input.model_dump())
    out = await _availability_service().shift_state(input.employee_id, input.date)
    log.debug("shift_resolve output=%s", out.model_dump())
    return out


@mcp.tool(name="appointment_layout", description="Compute the calendar block position of an appointment")
async def appointment_layout(input: LayoutRequest, ctx: Context) -> LayoutBlock:
    log.debug("appointment_layout input=%s", input.model_dump())
    grid = _grid()
    start_hour = input.timeline_start_hour if input.timeline_start_hour is not None else grid.start_hour
    try:
        return layout(
            input.start_time,
            input.end_time,
            start_hour,
            input.pixels_per_minute or grid.pixels_per_minute,
            timeline_end_hour=grid.end_hour,
            min_minutes=grid.step_minutes,
        )
    except ValueError as exc:
        log.warning("appointment_layout rejected timestamps %r, %r", input.start_time, input.end_time)
        raise ToolError("Timestamps must look like YYYY-MM-DDTHH:MM") from exc


@mcp.tool(name="ping", description="Health check")
async def ping(message: str) -> str:
    log.debug("ping %s", message)
    return f"pong: {message}"
