from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List

from salonbook.clients.api import BookingApiClient
from salonbook.engine.layout import build_schedule
from salonbook.schemas.shift import ScheduleResponse, Shift, ShiftUpsert
from salonbook.services.directory import DirectoryService
from salonbook.services.exceptions import ServiceError
from salonbook.services.mock_store import ShiftRepository, get_mock_store
from salonbook.services.payloads import parse_list

logger = logging.getLogger(__name__)


def _months_between(start: date, end: date) -> List[date]:
    months = []
    cursor = start.replace(day=1)
    while cursor <= end:
        months.append(cursor)
        cursor = (cursor + timedelta(days=32)).replace(day=1)
    return months


class ScheduleService:
    """Shift lists per branch and month, and the owner's shift editor."""

    def __init__(
        self,
        client: BookingApiClient,
        *,
        directory: DirectoryService | None = None,
        repository: ShiftRepository | None = None,
    ) -> None:
        self._client = client
        self._directory = directory or DirectoryService(client)
        self._repository = repository
        if self._client.use_mock_data:
            self._repository = repository or get_mock_store().shifts

    async def list_shifts(self, branch_id: int, month: date) -> List[Shift]:
        logger.info("Listing shifts for branch %s in %s", branch_id, month.strftime("%Y-%m"))
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock shift repository not configured")
            return await self._repository.list(branch_id, month)

        data = await self._client.get(
            "/shifts", params={"branch_id": branch_id, "month": month.isoformat()}
        )
        return parse_list(Shift, data, "shift")

    async def shifts_between(self, branch_id: int, start: date, end: date) -> List[Shift]:
        shifts: List[Shift] = []
        for month in _months_between(start, end):
            shifts.extend(await self.list_shifts(branch_id, month))
        return shifts

    async def save_shifts(self, requests: List[ShiftUpsert]) -> List[Shift]:
        if not requests:
            return []
        logger.info("Saving %s shift(s)", len(requests))
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            if not self._repository:
                raise RuntimeError("Mock shift repository not configured")
            return await self._repository.upsert(requests)

        payload = []
        for request in requests:
            item = request.model_dump(exclude_none=True)
            # the booking API stores shift dates as midnight timestamps
            item["date"] = f"{request.date.isoformat()}T00:00:00Z"
            payload.append(item)
        try:
            data = await self._client.post("/shifts", payload)
        finally:
            self._client.invalidate("/shifts", "/slots")
        if isinstance(data, list):
            return parse_list(Shift, data, "shift")
        # Some deployments only acknowledge the write.
        return [Shift.model_validate(request.model_dump()) for request in requests]

    async def schedule(self, branch_id: int, start: date, days: int) -> ScheduleResponse:
        if days < 1:
            raise ServiceError("days must be at least 1")
        period = [start + timedelta(days=offset) for offset in range(days)]
        employees = await self._directory.list_employees(branch_id)
        shifts = await self.shifts_between(branch_id, period[0], period[-1])
        in_period = [shift for shift in shifts if period[0] <= shift.date <= period[-1]]
        return ScheduleResponse(
            branch_id=branch_id,
            start=start,
            days=days,
            employees=build_schedule(period, employees, in_period),
        )
