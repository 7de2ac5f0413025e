"""Therapist service - Business logic for therapists, schedules and weekly stats"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...auth import is_admin
from ...models import Therapist, TherapistWorkingHours, User
from ...shared.case_convert import to_snake_case
from ..accounts.service import AccountService
from ..scheduling.stats import WeeklyStats, calculate_weekly_stats, week_bounds
from ..scheduling.working_hours import sanitize_working_hours_collection
from .repository import TherapistRepository
from .schemas import DEFAULT_THERAPIST_COLOR, TherapistCreate, TherapistUpdate

logger = logging.getLogger(__name__)

# Keys under which a schedule body may wrap its list of blocks
SLOT_CONTAINER_KEYS = ("slots", "data", "workingHours", "hours")


def extract_slots(payload: Any) -> Optional[list]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in SLOT_CONTAINER_KEYS:
            if isinstance(payload.get(key), list):
                return payload[key]
    return None


class TherapistService:
    """Service layer for therapist business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = TherapistRepository()

    def get_therapists(self) -> list[Therapist]:
        return self.repo.get_therapists(self.db)

    def get_therapist(self, therapist_id: str) -> Therapist:
        therapist = self.repo.get_therapist_by_id(self.db, therapist_id)
        if not therapist:
            raise HTTPException(status_code=404, detail="Therapist not found")
        return therapist

    def create_therapist(self, data: TherapistCreate) -> tuple[Therapist, User]:
        """Create the therapist record and a login account that must change its default password"""
        logger.info(f"📥 Creating therapist {data.name} ({data.email})")
        accounts = AccountService(self.db)
        if accounts.repo.get_user_by_email(self.db, data.email):
            logger.warning(f"⚠️ Therapist email already in use: {data.email}")
            raise HTTPException(
                status_code=409,
                detail="This email is already linked to another account. Use a different address.",
            )

        try:
            therapist, account = self.repo.create_therapist_with_login(
                self.db,
                therapist_data={
                    "name": data.name,
                    "specialty": data.specialty,
                    "email": data.email,
                    "phone": data.phone,
                    "color": data.color or DEFAULT_THERAPIST_COLOR,
                },
                login_data=accounts.therapist_login_fields(
                    data.email, first_name=data.firstName, last_name=data.lastName
                ),
            )
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating therapist: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"✅ Therapist {therapist.id} created with account {account.id}")
        return therapist, account

    def update_therapist(self, therapist_id: str, data: TherapistUpdate) -> Therapist:
        therapist = self.get_therapist(therapist_id)
        updates = to_snake_case(data.model_dump(exclude_unset=True))
        try:
            return self.repo.update_therapist(self.db, therapist, **updates)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating therapist {therapist_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

    def delete_therapist(self, therapist_id: str) -> dict:
        therapist = self.get_therapist(therapist_id)
        try:
            self.repo.delete_therapist(self.db, therapist)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error deleting therapist {therapist_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e
        logger.info(f"🗑️ Therapist {therapist_id} deleted")
        return {"success": True}

    # ------------------------------------------------------------------
    # Schedule
    # ------------------------------------------------------------------

    def ensure_schedule_access(self, user: User, therapist_id: str) -> None:
        """Admins manage every schedule; therapists only their own"""
        own_therapist_id = user.therapist_id or (user.user_metadata or {}).get("therapist_id")
        if is_admin(user) or own_therapist_id == therapist_id:
            return
        logger.warning(f"⚠️ User {user.email} denied access to schedule of {therapist_id}")
        raise HTTPException(status_code=403, detail="Forbidden")

    def get_schedule(self, user: User, therapist_id: str) -> list[TherapistWorkingHours]:
        self.ensure_schedule_access(user, therapist_id)
        self.get_therapist(therapist_id)
        return self.repo.get_working_hours(self.db, therapist_id)

    def replace_schedule(self, user: User, therapist_id: str, payload: Any) -> list[TherapistWorkingHours]:
        slots = extract_slots(payload)
        if slots is None:
            raise HTTPException(status_code=400, detail="Expected a list of schedule blocks")

        self.ensure_schedule_access(user, therapist_id)
        self.get_therapist(therapist_id)

        # The path decides the owner, whatever the body says
        owned_slots = [
            {**slot, "therapistId": None, "therapist_id": therapist_id}
            for slot in slots
            if isinstance(slot, dict)
        ]
        blocks = sanitize_working_hours_collection(owned_slots, owner_field="therapist_id")
        if not blocks and slots:
            raise HTTPException(
                status_code=422,
                detail="None of the submitted blocks has a valid day and times.",
            )

        try:
            schedule = self.repo.replace_working_hours(self.db, therapist_id, blocks)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error saving schedule for {therapist_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(
            f"📊 Schedule for {therapist_id}: requested={len(slots)} sanitized={len(blocks)} persisted={len(schedule)}"
        )
        return schedule

    def get_all_working_hours(self) -> list[TherapistWorkingHours]:
        return self.repo.get_working_hours(self.db)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_weekly_stats(self, therapist_id: str, reference_date: Optional[date] = None) -> WeeklyStats:
        self.get_therapist(therapist_id)
        reference = reference_date or date.today()
        week_start, week_end = week_bounds(reference)

        schedule = self.repo.get_working_hours(self.db, therapist_id)
        appointments = self.repo.get_appointments_between(
            self.db, therapist_id, week_start.date(), week_end.date()
        )
        return calculate_weekly_stats(appointments, schedule, reference)
