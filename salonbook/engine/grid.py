from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator, List

from salonbook.config import Settings


@dataclass(frozen=True)
class TimelineGrid:
    """Fixed day window shared by slot enumeration and the calendar timeline."""

    start_hour: int = 8
    end_hour: int = 22
    step_minutes: int = 15
    pixels_per_minute: int = 2
    default_booking_minutes: int = 60

    @classmethod
    def from_settings(cls, settings: Settings) -> "TimelineGrid":
        return cls(
            start_hour=settings.timeline_start_hour,
            end_hour=settings.timeline_end_hour,
            step_minutes=settings.slot_step_minutes,
            pixels_per_minute=settings.pixels_per_minute,
            default_booking_minutes=settings.default_booking_minutes,
        )

    @property
    def cell_count(self) -> int:
        return (self.end_hour - self.start_hour) * 60 // self.step_minutes

    @property
    def height_px(self) -> int:
        return self.cell_count * self.step_minutes * self.pixels_per_minute

    def minutes(self) -> Iterator[int]:
        """Minute-of-day of every cell start, end hour excluded."""

        first = self.start_hour * 60
        for index in range(self.cell_count):
            yield first + index * self.step_minutes

    def times(self) -> List[time]:
        return [time(minute // 60, minute % 60) for minute in self.minutes()]

    def starts_on(self, day: date) -> List[datetime]:
        midnight = datetime.combine(day, time())
        return [midnight + timedelta(minutes=minute) for minute in self.minutes()]
