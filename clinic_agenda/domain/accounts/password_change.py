"""
Mandatory password change workflow.

The workflow validates locally, then runs two injected async collaborators
in order: one that stores the new password and one that clears the
must-change-password flag. It never retries and never rolls back.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Optional

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

PASSWORD_TOO_SHORT_MESSAGE = (
    f"Password must be at least {MIN_PASSWORD_LENGTH} characters long for better security."
)
PASSWORD_MISMATCH_MESSAGE = (
    "Passwords do not match. Make sure you type the same password in both fields."
)
GENERIC_RETRY_MESSAGE = "Please try again later."

PasswordChangeStatus = Literal["success", "validation-error", "error"]


@dataclass(frozen=True)
class PasswordUpdateResponse:
    """What the password updater reports back; `error` is None on success"""

    error: Optional[str] = None


@dataclass(frozen=True)
class PasswordChangeDependencies:
    update_user_password: Callable[[str], Awaitable[PasswordUpdateResponse]]
    mark_password_as_changed: Callable[[], Awaitable[None]]


@dataclass(frozen=True)
class PasswordChangeResult:
    status: PasswordChangeStatus
    message: Optional[str] = None

    @classmethod
    def success(cls) -> "PasswordChangeResult":
        return cls(status="success")

    @classmethod
    def validation_error(cls, message: str) -> "PasswordChangeResult":
        return cls(status="validation-error", message=message)

    @classmethod
    def error(cls, message: str) -> "PasswordChangeResult":
        return cls(status="error", message=message)


async def process_password_change(
    password: str,
    confirm_password: str,
    deps: PasswordChangeDependencies,
) -> PasswordChangeResult:
    if len(password) < MIN_PASSWORD_LENGTH:
        return PasswordChangeResult.validation_error(PASSWORD_TOO_SHORT_MESSAGE)

    if password != confirm_password:
        return PasswordChangeResult.validation_error(PASSWORD_MISMATCH_MESSAGE)

    try:
        response = await deps.update_user_password(password)
        if response.error:
            logger.warning(f"⚠️ Password update rejected: {response.error}")
            return PasswordChangeResult.error(response.error)

        await deps.mark_password_as_changed()
        return PasswordChangeResult.success()
    except Exception as e:
        logger.error(f"❌ Password change failed: {e}")
        return PasswordChangeResult.error(str(e) or GENERIC_RETRY_MESSAGE)
