"""Account domain schemas - Pydantic models for validation"""

from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v) or v


class PasswordFlagUpdate(BaseModel):
    """Schema for toggling the must-change-password flag"""

    mustChangePassword: bool = False


class ChangePasswordRequest(BaseModel):
    password: str
    confirmPassword: str


class CreateAdminRequest(BaseModel):
    """Schema for bootstrapping the first admin account"""

    email: str
    password: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        email = validate_email(v)
        if not email:
            raise ValueError("Email is required")
        return email


class AccountUpdate(BaseModel):
    """Admin changes to a therapist's login account"""

    role: Optional[str] = None
    resetPassword: bool = False

    @field_validator("role")
    @classmethod
    def check_role(cls, v):
        if v is not None and v not in ("admin", "therapist"):
            raise ValueError("role must be 'admin' or 'therapist'")
        return v
