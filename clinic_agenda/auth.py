import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import ADMIN_EMAILS
from .database import get_db
from .domain.accounts.repository import UserRepository
from .models import User
from .security_utils import verify_access_token
from .session_state import AuthEvent, AuthSessionManager, SessionState

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401 rather than FastAPI's 403
security = HTTPBearer(auto_error=False)

ADMIN_ROLE = "admin"
THERAPIST_ROLE = "therapist"
CLIENT_ROLE = "client"
VALID_ROLES = (ADMIN_ROLE, THERAPIST_ROLE, CLIENT_ROLE)


def resolve_role(user: User) -> str:
    """Role from the users row, then the ADMIN_EMAILS list, then therapist"""
    if user.role in VALID_ROLES:
        return user.role
    if user.email and user.email.lower() in ADMIN_EMAILS:
        return ADMIN_ROLE
    return THERAPIST_ROLE


def is_admin(user: User) -> bool:
    return resolve_role(user) == ADMIN_ROLE


def _user_from_token(token: str, db: Session) -> Optional[User]:
    payload = verify_access_token(token)
    if not payload or not payload.get("sub"):
        return None
    return UserRepository.get_user_by_id(db, payload["sub"])


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the bearer access token"""

    if not credentials:
        logger.error("❌ No credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    user = _user_from_token(credentials.credentials, db)
    if not user:
        logger.warning("⚠️ Rejected invalid or expired access token")
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user but returns None instead of failing"""
    if not credentials:
        return None
    return _user_from_token(credentials.credentials, db)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    """
    Get current user and verify they are an admin.
    Use this dependency for every admin-only route.
    """
    if not is_admin(user):
        logger.warning(f"⚠️ User {user.email} attempted an admin-only action")
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


async def get_session_state(user: Optional[User] = Depends(get_optional_user)):
    """Resolve the caller's session through an AuthSessionManager scoped to the request"""
    manager = AuthSessionManager()
    manager.start()
    try:
        if user is not None:
            manager.handle_event(AuthEvent.SIGNED_IN, user)
        else:
            manager.handle_event(AuthEvent.SIGNED_OUT)
        state: SessionState = manager.state
        yield state
    finally:
        manager.close()
