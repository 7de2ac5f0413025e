"""
Weekly occupancy / availability for a therapist.

Inputs are plain snapshots (ORM rows or mappings both work through
`AppointmentSnapshot.from_record` / `WorkingHoursBlock.from_record`); nothing
here touches the database.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from ...shared.case_convert import snake_to_camel
from .time_utils import parse_time_to_minutes

CANCELLED = "cancelled"

# Appointments with neither a duration nor a usable start/end count as one hour
FALLBACK_APPOINTMENT_MINUTES = 60


def record_field(record: Any, name: str) -> Any:
    """Read a snake_case field from an ORM row or a mapping; mappings may use camelCase"""
    if isinstance(record, Mapping):
        value = record.get(name)
        return value if value is not None else record.get(snake_to_camel(name))
    return getattr(record, name, None)


def coerce_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


@dataclass(frozen=True)
class WorkingHoursBlock:
    day_of_week: int  # 0=Sunday .. 6=Saturday
    start_time: Optional[str]
    end_time: Optional[str]

    @classmethod
    def from_record(cls, record: Any) -> "WorkingHoursBlock":
        return cls(
            day_of_week=record_field(record, "day_of_week"),
            start_time=record_field(record, "start_time"),
            end_time=record_field(record, "end_time"),
        )

    def available_minutes(self) -> int:
        start = parse_time_to_minutes(self.start_time)
        end = parse_time_to_minutes(self.end_time)
        if start is None or end is None or end <= start:
            return 0
        return end - start


@dataclass(frozen=True)
class AppointmentSnapshot:
    date: Optional[date]
    status: str
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration_minutes: Optional[int] = None

    @classmethod
    def from_record(cls, record: Any) -> "AppointmentSnapshot":
        return cls(
            date=coerce_date(record_field(record, "date")),
            status=record_field(record, "status") or "pending",
            start_time=record_field(record, "start_time"),
            end_time=record_field(record, "end_time"),
            duration_minutes=record_field(record, "duration_minutes"),
        )

    def booked_minutes(self) -> int:
        if self.duration_minutes and self.duration_minutes > 0:
            return self.duration_minutes

        start = parse_time_to_minutes(self.start_time)
        end = parse_time_to_minutes(self.end_time)
        if start is not None and end is not None and end > start:
            return end - start

        return FALLBACK_APPOINTMENT_MINUTES


@dataclass(frozen=True)
class WeeklyStats:
    availability: int
    occupancy: int

    def to_dict(self) -> dict:
        return {"availability": self.availability, "occupancy": self.occupancy}


def week_bounds(reference: Union[date, datetime]) -> tuple[datetime, datetime]:
    """Monday 00:00:00.000 through Sunday 23:59:59.999 of the week containing `reference`"""
    day = reference.date() if isinstance(reference, datetime) else reference
    monday = day - timedelta(days=day.weekday())
    week_start = datetime(monday.year, monday.month, monday.day)
    week_end = week_start + timedelta(days=7) - timedelta(milliseconds=1)
    return week_start, week_end


def _round_half_up(value: float) -> int:
    # .5 rounds up, never to even
    return math.floor(value + 0.5)


def calculate_weekly_stats(
    appointments: Iterable[Any],
    schedule: Iterable[Any],
    reference_date: Optional[Union[date, datetime]] = None,
) -> WeeklyStats:
    """
    Percentage of the week's working minutes taken by non-cancelled appointments.

    Overlapping appointments are summed as-is; occupancy saturates at 100.
    """
    if reference_date is None:
        reference_date = datetime.now()

    available_minutes = sum(_as_block(block).available_minutes() for block in schedule)
    if available_minutes <= 0:
        return WeeklyStats(availability=0, occupancy=0)

    week_start, week_end = week_bounds(reference_date)

    booked_minutes = 0
    for record in appointments:
        appointment = _as_appointment(record)
        if appointment.status == CANCELLED or appointment.date is None:
            continue
        appointment_day = datetime(appointment.date.year, appointment.date.month, appointment.date.day)
        if week_start <= appointment_day <= week_end:
            booked_minutes += appointment.booked_minutes()

    occupancy = min(100, max(0, _round_half_up(booked_minutes / available_minutes * 100)))
    availability = max(0, min(100, 100 - occupancy))

    return WeeklyStats(availability=availability, occupancy=occupancy)


def _as_block(record: Any) -> WorkingHoursBlock:
    return record if isinstance(record, WorkingHoursBlock) else WorkingHoursBlock.from_record(record)


def _as_appointment(record: Any) -> AppointmentSnapshot:
    return record if isinstance(record, AppointmentSnapshot) else AppointmentSnapshot.from_record(record)
