"""Client domain schemas - Pydantic models for validation"""

import re
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_day_of_week, validate_email

_AVAILABILITY_TIME = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


class ClientCreate(BaseModel):
    """Schema for creating a new client"""

    firstName: str
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("firstName")
    @classmethod
    def require_first_name(cls, v):
        if not v or not v.strip():
            raise ValueError("firstName is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class ClientUpdate(BaseModel):
    """Schema for updating an existing client"""

    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class AvailabilityEntry(BaseModel):
    """One weekly availability block of a client"""

    dayOfWeek: int
    startTime: str
    endTime: str

    @field_validator("dayOfWeek")
    @classmethod
    def check_day(cls, v):
        return validate_day_of_week(v)

    @field_validator("startTime", "endTime")
    @classmethod
    def normalize_time(cls, v):
        match = _AVAILABILITY_TIME.match(v.strip())
        if not match:
            raise ValueError("Invalid time format. Use HH:MM")
        hours = min(23, max(0, int(match.group(1))))
        minutes = min(59, max(0, int(match.group(2))))
        return f"{hours:02d}:{minutes:02d}"
