import asyncio
import os
import sys
from datetime import date

import pytest
from mcp.server.fastmcp.exceptions import ToolError

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from salonbook.mcp_server import (
    ShiftResolveInput,
    SlotsGenerateInput,
    appointment_layout,
    ping,
    shift_resolve,
    slots_generate,
)
from salonbook.schemas.slot import LayoutRequest
from salonbook.services.mock_store import reset_mock_store


@pytest.fixture(autouse=True)
def _reset_store() -> None:
    reset_mock_store()
    yield
    reset_mock_store()


def test_slots_generate_tool() -> None:
    out = asyncio.run(
        slots_generate(SlotsGenerateInput(employee_id=5, service_id=202, date=date(2026, 1, 30)), None)
    )

    assert out.duration_minutes == 15
    assert out.total == 56
    # Eva works 10:00-19:00 with nothing booked
    assert out.free == 36


def test_shift_resolve_tool() -> None:
    out = asyncio.run(shift_resolve(ShiftResolveInput(employee_id=2, date=date(2026, 1, 31)), None))

    assert out.is_working is False
    assert out.shift_type == "day_off"


def test_appointment_layout_tool() -> None:
    out = asyncio.run(
        appointment_layout(
            LayoutRequest(start_time="2026-01-30T12:05:00Z", end_time="2026-01-30T13:05:00Z"),
            None,
        )
    )

    assert (out.top_offset_px, out.height_px) == (490, 120)


def test_appointment_layout_tool_rejects_malformed_timestamps() -> None:
    with pytest.raises(ToolError) as exc_info:
        asyncio.run(appointment_layout(LayoutRequest(start_time="soon", end_time="later"), None))

    assert "YYYY-MM-DDTHH:MM" in str(exc_info.value)


def test_ping_tool() -> None:
    assert asyncio.run(ping("hello")) == "pong: hello"
