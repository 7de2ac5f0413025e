"""Therapist domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email, validate_hex_color

DEFAULT_THERAPIST_COLOR = "#3B82F6"


class TherapistCreate(BaseModel):
    """Schema for creating a therapist together with their login account"""

    name: str
    specialty: str
    email: str
    phone: Optional[str] = None
    color: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None

    @field_validator("name", "specialty")
    @classmethod
    def require_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        email = validate_email(v)
        if not email:
            raise ValueError("Email is required to create the therapist's login")
        return email

    @field_validator("color")
    @classmethod
    def check_color(cls, v):
        if v is None or not v.strip():
            return DEFAULT_THERAPIST_COLOR
        return validate_hex_color(v)


class TherapistUpdate(BaseModel):
    """Schema for updating an existing therapist"""

    name: Optional[str] = None
    specialty: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    color: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("color")
    @classmethod
    def check_color(cls, v):
        return validate_hex_color(v)
