"""Service package public API definitions.

``salonbook.clients.api`` imports ``salonbook.services.exceptions``, which
executes this module first. Importing the service implementations eagerly here
would import the client again and cause a circular import, so they are loaded
lazily on first attribute access.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

__all__ = [
    "AppointmentService",
    "AvailabilityService",
    "BookingService",
    "BranchContext",
    "DirectoryService",
    "ScheduleService",
]

_SERVICE_MODULES = {
    "AppointmentService": "appointment",
    "AvailabilityService": "availability",
    "BookingService": "booking",
    "BranchContext": "branch_context",
    "DirectoryService": "directory",
    "ScheduleService": "schedule",
}


def __getattr__(name: str) -> Any:
    if name not in _SERVICE_MODULES:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

    module = import_module(f".{_SERVICE_MODULES[name]}", __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


if TYPE_CHECKING:  # pragma: no cover - import for static analysis only
    from .appointment import AppointmentService as AppointmentService
    from .availability import AvailabilityService as AvailabilityService
    from .booking import BookingService as BookingService
    from .branch_context import BranchContext as BranchContext
    from .directory import DirectoryService as DirectoryService
    from .schedule import ScheduleService as ScheduleService
