"""Appointment domain schemas - Pydantic models for validation"""

import datetime
import re
from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ..scheduling.time_utils import add_minutes_to_time, parse_time_to_minutes

AppointmentStatus = Literal["pending", "confirmed", "cancelled"]
Frequency = Literal["puntual", "semanal", "quincenal"]
RecurringFrequency = Literal["semanal", "quincenal"]
SeriesScope = Literal["this_only", "this_and_future"]

DEFAULT_DURATION_MINUTES = 60
MAX_OCCURRENCES = 52

_CLOCK_TIME = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)(?::[0-5]\d)?$")

# Columns that cannot be cleared once an appointment exists
_REQUIRED_ON_UPDATE = ("therapistId", "clientId", "date", "status")


def _check_time(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    match = _CLOCK_TIME.match(v.strip())
    if not match:
        raise ValueError("Invalid time format. Use HH:MM")
    return f"{int(match.group(1)):02d}:{match.group(2)}"


class AppointmentCreate(BaseModel):
    """
    Schema for booking an appointment.

    endTime defaults to startTime + durationMinutes (or one hour). With a
    recurring frequency and occurrences > 1 a whole series is booked.
    """

    therapistId: str
    clientId: str
    date: datetime.date
    startTime: str
    endTime: Optional[str] = None
    durationMinutes: Optional[int] = None
    status: AppointmentStatus = "pending"
    notes: Optional[str] = None
    frequency: Frequency = "puntual"
    occurrences: int = 1

    @field_validator("startTime", "endTime")
    @classmethod
    def check_time(cls, v):
        return _check_time(v)

    @field_validator("durationMinutes")
    @classmethod
    def check_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("durationMinutes must be positive")
        return v

    @field_validator("occurrences")
    @classmethod
    def check_occurrences(cls, v):
        if v < 1 or v > MAX_OCCURRENCES:
            raise ValueError(f"occurrences must be between 1 and {MAX_OCCURRENCES}")
        return v

    @model_validator(mode="after")
    def fill_end_time(self):
        if self.endTime is None:
            self.endTime = add_minutes_to_time(
                self.startTime, self.durationMinutes or DEFAULT_DURATION_MINUTES
            )
        start = parse_time_to_minutes(self.startTime)
        end = parse_time_to_minutes(self.endTime)
        if end <= start:
            raise ValueError("endTime must be after startTime")
        if self.durationMinutes is None:
            self.durationMinutes = end - start
        return self


class AppointmentUpdate(BaseModel):
    """Schema for updating an appointment (or a series of appointments)"""

    therapistId: Optional[str] = None
    clientId: Optional[str] = None
    date: Optional[datetime.date] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    durationMinutes: Optional[int] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None

    @field_validator(*_REQUIRED_ON_UPDATE)
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("startTime", "endTime")
    @classmethod
    def check_time(cls, v):
        return _check_time(v)

    @field_validator("durationMinutes")
    @classmethod
    def check_duration(cls, v):
        if v is not None and v <= 0:
            raise ValueError("durationMinutes must be positive")
        return v


class FrequencyUpdate(BaseModel):
    frequency: RecurringFrequency
