from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import Depends

from salonbook.clients.api import BookingApiClient
from salonbook.config import Settings, get_settings
from salonbook.engine.grid import TimelineGrid
from salonbook.services import (
    AppointmentService,
    AvailabilityService,
    BookingService,
    BranchContext,
    DirectoryService,
    ScheduleService,
)
from salonbook.services.branch_context import SelectionStore

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_api_client_cached() -> BookingApiClient:
    settings = get_settings()
    logger.debug("Building booking API client for %s", settings.api_base_url)
    return BookingApiClient(
        settings.api_base_url,
        timeout=settings.api_timeout,
        use_mock_data=settings.use_mock_data,
        token=settings.api_token,
        cache_enabled=settings.cache_enabled,
        cache_ttl=settings.cache_ttl_seconds,
        cache_maxsize=settings.cache_max_entries,
    )


@lru_cache(maxsize=1)
def get_selection_store() -> SelectionStore:
    return SelectionStore()


def get_api_client(settings: Settings = Depends(get_settings)) -> BookingApiClient:
    return get_api_client_cached()


def get_grid(settings: Settings = Depends(get_settings)) -> TimelineGrid:
    return TimelineGrid.from_settings(settings)


def get_directory_service(
    client: BookingApiClient = Depends(get_api_client),
) -> DirectoryService:
    return DirectoryService(client)


def get_schedule_service(
    client: BookingApiClient = Depends(get_api_client),
    directory: DirectoryService = Depends(get_directory_service),
) -> ScheduleService:
    return ScheduleService(client, directory=directory)


def get_appointment_service(
    client: BookingApiClient = Depends(get_api_client),
) -> AppointmentService:
    return AppointmentService(client)


def get_availability_service(
    client: BookingApiClient = Depends(get_api_client),
    grid: TimelineGrid = Depends(get_grid),
    directory: DirectoryService = Depends(get_directory_service),
    schedule: ScheduleService = Depends(get_schedule_service),
    appointments: AppointmentService = Depends(get_appointment_service),
) -> AvailabilityService:
    return AvailabilityService(
        client,
        grid=grid,
        directory=directory,
        schedule=schedule,
        appointments=appointments,
    )


def get_booking_service(
    client: BookingApiClient = Depends(get_api_client),
    availability: AvailabilityService = Depends(get_availability_service),
    directory: DirectoryService = Depends(get_directory_service),
    appointments: AppointmentService = Depends(get_appointment_service),
) -> BookingService:
    return BookingService(
        client,
        availability=availability,
        directory=directory,
        appointments=appointments,
    )


def get_branch_context(
    directory: DirectoryService = Depends(get_directory_service),
    store: SelectionStore = Depends(get_selection_store),
) -> BranchContext:
    return BranchContext(directory, store)
