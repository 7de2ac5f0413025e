"""
Security utilities
Password hashing and access token handling
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError
from jose import jwt as jose_jwt

# Password hashing
from passlib.context import CryptContext

from .config import ACCESS_TOKEN_ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# ============================================================================
# PASSWORD SECURITY
# ============================================================================


def hash_password_bcrypt(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password_bcrypt(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against bcrypt hash"""
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except Exception as e:
        logger.error(f"Password verification error: {e}")
        return False


# ============================================================================
# ACCESS TOKENS
# ============================================================================


def create_access_token(
    subject: str, extra_claims: Optional[dict[str, Any]] = None, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed access token for a user id

    Args:
        subject: User id stored in the `sub` claim
        extra_claims: Additional claims (email, role) to embed
        expires_delta: Token lifetime (default ACCESS_TOKEN_EXPIRE_MINUTES)
    """
    to_encode: dict[str, Any] = dict(extra_claims or {})
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"sub": subject, "exp": expire})
    return jose_jwt.encode(to_encode, SECRET_KEY, algorithm=ACCESS_TOKEN_ALGORITHM)


def verify_access_token(token: str) -> Optional[dict[str, Any]]:
    """
    Verify and decode an access token

    Returns:
        Decoded payload if valid, None if invalid or expired
    """
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[ACCESS_TOKEN_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None
