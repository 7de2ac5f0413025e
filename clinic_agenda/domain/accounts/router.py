"""Account router - the signed-in user's profile and password"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, get_session_state
from ...database import get_db
from ...models import User
from ...session_state import SessionState
from .schemas import ChangePasswordRequest, PasswordFlagUpdate
from .service import AccountService, serialize_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["User"])


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """Dependency injection for AccountService"""
    return AccountService(db)


@router.get("")
async def get_profile(current_user: User = Depends(get_current_user)):
    """Get the current user's profile with resolved role"""
    return serialize_profile(current_user)


@router.patch("/password")
async def update_password_flag(
    data: PasswordFlagUpdate,
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    """Set or clear the must-change-password flag"""
    return service.set_must_change_password(current_user, data.mustChangePassword)


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    service: AccountService = Depends(get_account_service),
):
    result = await service.change_password(current_user, data.password, data.confirmPassword)
    if result.status == "validation-error":
        raise HTTPException(status_code=400, detail=result.message)
    if result.status == "error":
        raise HTTPException(status_code=500, detail=result.message)
    return {"status": result.status}


@router.get("/password-redirect")
async def password_redirect(
    pathname: Optional[str] = Query(None),
    state: SessionState = Depends(get_session_state),
    service: AccountService = Depends(get_account_service),
):
    """Where the client must go before showing `pathname`; redirectTo is null when nowhere"""
    return service.password_redirect(state, pathname)
