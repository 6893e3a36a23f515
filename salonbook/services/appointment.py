from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List

from salonbook.clients.api import BookingApiClient
from salonbook.schemas.appointment import Appointment, AppointmentStatus
from salonbook.services.exceptions import (
    BookingConflictError,
    DownstreamServiceError,
    NotFoundError,
)
from salonbook.services.mock_store import AppointmentRepository, get_mock_store
from salonbook.services.payloads import parse_list, parse_one

logger = logging.getLogger(__name__)


class AppointmentService:
    def __init__(
        self,
        client: BookingApiClient,
        *,
        repository: AppointmentRepository | None = None,
    ) -> None:
        self._client = client
        self._repository = repository
        if self._client.use_mock_data:
            self._repository = repository or get_mock_store().appointments

    def _mock_repository(self) -> AppointmentRepository:
        if not self._repository:
            raise RuntimeError("Mock appointment repository not configured")
        return self._repository

    async def list(self, employee_ids: Iterable[int], day: date) -> List[Appointment]:
        ids = sorted(set(employee_ids))
        if not ids:
            return []
        logger.info("Listing appointments for employees %s on %s", ids, day)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._mock_repository().list(ids, day)

        data = await self._client.get(
            "/appointments",
            params={
                "employee_ids": ",".join(str(item) for item in ids),
                "date": day.isoformat(),
            },
        )
        return parse_list(Appointment, data, "appointment")

    async def update_status(self, appointment_id: int, status: AppointmentStatus) -> Appointment:
        logger.info("Setting appointment %s status to %s", appointment_id, status)
        if self._client.use_mock_data:
            await self._client.simulate_latency()
            return await self._mock_repository().update_status(appointment_id, status)

        try:
            data = await self._client.patch(f"/appointments/{appointment_id}", {"status": status})
        except DownstreamServiceError as exc:
            if exc.status_code == 404:
                raise NotFoundError(f"Appointment '{appointment_id}' not found", cause=exc) from exc
            if exc.status_code == 409:
                raise BookingConflictError(str(exc), reason=str(exc), cause=exc) from exc
            raise
        finally:
            self._client.invalidate("/appointments", "/slots")
        return parse_one(Appointment, data, "appointment")
