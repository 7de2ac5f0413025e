"""Account service - Business logic for login accounts, roles and passwords"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...auth import ADMIN_ROLE, THERAPIST_ROLE, resolve_role
from ...config import DEFAULT_THERAPIST_PASSWORD
from ...models import User
from ...security_utils import create_access_token, hash_password_bcrypt, verify_password_bcrypt
from ...session_state import SessionState
from ...shared.case_convert import to_camel_case
from .password_change import (
    PasswordChangeDependencies,
    PasswordChangeResult,
    PasswordUpdateResponse,
    process_password_change,
)
from .password_reset import determine_password_redirect
from .repository import UserRepository
from .schemas import AccountUpdate, CreateAdminRequest

logger = logging.getLogger(__name__)

PASSWORD_FLAG_FIELD = "must_change_password"


def serialize_account(user: User) -> dict:
    return {
        "userId": user.id,
        "email": user.email,
        "role": user.role or "therapist",
        "mustChangePassword": bool(user.must_change_password),
    }


def serialize_profile(user: User) -> dict:
    """Public profile with the resolved role; therapist id falls back to auth metadata"""
    metadata = user.user_metadata or {}
    return to_camel_case(
        {
            "id": user.id,
            "email": user.email,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "phone": user.phone,
            "role": resolve_role(user),
            "therapist_id": user.therapist_id or metadata.get("therapist_id"),
            "must_change_password": bool(user.must_change_password),
            "created_at": user.created_at,
        }
    )


class AccountService:
    """Service layer for account business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    # ------------------------------------------------------------------
    # Sign in
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> dict:
        user = self.repo.get_user_by_email(self.db, email)
        if not user or not verify_password_bcrypt(password, user.password_hash):
            logger.warning(f"⚠️ Failed login attempt for {email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")

        token = create_access_token(user.id, {"email": user.email, "role": resolve_role(user)})
        logger.info(f"✅ User signed in: {user.email}")
        return {"accessToken": token, "tokenType": "bearer", "user": serialize_profile(user)}

    # ------------------------------------------------------------------
    # Password flag and password change
    # ------------------------------------------------------------------

    def set_must_change_password(self, user: User, must_change_password: bool) -> dict:
        try:
            self.repo.update_user(self.db, user, must_change_password=must_change_password)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating password flag: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        self._mirror_metadata(user, **{PASSWORD_FLAG_FIELD: must_change_password})
        return {"mustChangePassword": must_change_password}

    async def change_password(self, user: User, password: str, confirm_password: str) -> PasswordChangeResult:
        async def update_user_password(new_password: str) -> PasswordUpdateResponse:
            try:
                self.repo.update_user(self.db, user, password_hash=hash_password_bcrypt(new_password))
            except SQLAlchemyError as e:
                self.db.rollback()
                return PasswordUpdateResponse(error=str(e))
            return PasswordUpdateResponse()

        async def mark_password_as_changed() -> None:
            try:
                self.set_must_change_password(user, False)
            except HTTPException as e:
                # Surface the storage message, not the HTTP rendering of it
                raise RuntimeError(e.detail) from e

        deps = PasswordChangeDependencies(
            update_user_password=update_user_password,
            mark_password_as_changed=mark_password_as_changed,
        )
        result = await process_password_change(password, confirm_password, deps)
        if result.status == "success":
            logger.info(f"✅ Password changed for {user.email}")
        return result

    def password_redirect(self, state: SessionState, pathname: Optional[str]) -> dict:
        must_change = bool(state.user and state.user.must_change_password)
        return {"redirectTo": determine_password_redirect(state.loading, must_change, pathname)}

    # ------------------------------------------------------------------
    # Account provisioning
    # ------------------------------------------------------------------

    def create_admin(self, data: CreateAdminRequest) -> dict:
        if self.repo.admin_exists(self.db):
            logger.warning("⚠️ Admin bootstrap attempted while an admin already exists")
            raise HTTPException(status_code=403, detail="An admin account already exists")
        if self.repo.get_user_by_email(self.db, data.email):
            raise HTTPException(status_code=409, detail="Email already registered")

        try:
            user = self.repo.create_user(
                self.db,
                email=data.email,
                password_hash=hash_password_bcrypt(data.password),
                first_name=data.firstName,
                last_name=data.lastName,
                role=ADMIN_ROLE,
                must_change_password=True,
                user_metadata={"role": ADMIN_ROLE, PASSWORD_FLAG_FIELD: True},
            )
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating admin: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"✅ Admin account created: {user.email}")
        return serialize_profile(user)

    @staticmethod
    def therapist_login_fields(
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> dict:
        """Columns of a new therapist login; the default password must be changed on first sign-in"""
        return {
            "email": email,
            "password_hash": hash_password_bcrypt(DEFAULT_THERAPIST_PASSWORD),
            "first_name": first_name,
            "last_name": last_name,
            "role": THERAPIST_ROLE,
            "must_change_password": True,
            "user_metadata": {"role": THERAPIST_ROLE, PASSWORD_FLAG_FIELD: True},
        }

    def get_therapist_account(self, therapist_id: str) -> Optional[User]:
        accounts = self.repo.get_accounts_for_therapist(self.db, therapist_id)
        return accounts[0] if accounts else None

    def update_therapist_account(self, therapist_id: str, data: AccountUpdate) -> dict:
        account = self.get_therapist_account(therapist_id)
        if not account:
            raise HTTPException(status_code=404, detail="Account not found")

        updates = {}
        if data.role is not None:
            updates["role"] = data.role
        if data.resetPassword:
            updates["password_hash"] = hash_password_bcrypt(DEFAULT_THERAPIST_PASSWORD)
            updates[PASSWORD_FLAG_FIELD] = True

        if not updates:
            raise HTTPException(status_code=400, detail="No changes provided")

        try:
            self.repo.update_user(self.db, account, **updates)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating account {account.id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        mirrored = {key: updates[key] for key in ("role", PASSWORD_FLAG_FIELD) if key in updates}
        self._mirror_metadata(account, **mirrored)
        logger.info(f"✅ Account {account.email} updated: {sorted(updates)}")
        return serialize_account(account)

    def _mirror_metadata(self, user: User, **entries) -> None:
        # The users columns are the source of truth; metadata is a convenience copy
        try:
            self.repo.merge_metadata(self.db, user, **entries)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Could not mirror {sorted(entries)} into user metadata: {str(e)}")
