"""Therapist router - FastAPI endpoints for therapists, schedules, accounts and stats"""

import logging
from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import User
from ...shared.serializers import serialize_row, serialize_rows
from ..accounts.schemas import AccountUpdate
from ..accounts.service import AccountService, serialize_account
from .schemas import TherapistCreate, TherapistUpdate
from .service import TherapistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/therapists", tags=["Therapists"])
working_hours_router = APIRouter(prefix="/therapist-working-hours", tags=["Therapists"])


def get_therapist_service(db: Session = Depends(get_db)) -> TherapistService:
    """Dependency injection for TherapistService"""
    return TherapistService(db)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    return AccountService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("")
async def get_therapists(
    current_user: User = Depends(get_current_user),
    service: TherapistService = Depends(get_therapist_service),
):
    """Get all therapists ordered by name"""
    return serialize_rows(service.get_therapists())


@router.post("", status_code=201)
async def create_therapist(
    data: TherapistCreate,
    current_user: User = Depends(require_admin),
    service: TherapistService = Depends(get_therapist_service),
):
    """Create a therapist and their login account"""
    therapist, account = service.create_therapist(data)
    return serialize_row(therapist, account=serialize_account(account))


@router.get("/{therapist_id}")
async def get_therapist(
    therapist_id: str,
    current_user: User = Depends(get_current_user),
    service: TherapistService = Depends(get_therapist_service),
):
    return serialize_row(service.get_therapist(therapist_id))


@router.patch("/{therapist_id}")
async def update_therapist(
    therapist_id: str,
    data: TherapistUpdate,
    current_user: User = Depends(require_admin),
    service: TherapistService = Depends(get_therapist_service),
):
    return serialize_row(service.update_therapist(therapist_id, data))


@router.delete("/{therapist_id}")
async def delete_therapist(
    therapist_id: str,
    current_user: User = Depends(require_admin),
    service: TherapistService = Depends(get_therapist_service),
):
    return service.delete_therapist(therapist_id)


# ============================================================================
# SCHEDULE
# ============================================================================


@router.get("/{therapist_id}/schedule")
async def get_schedule(
    therapist_id: str,
    current_user: User = Depends(get_current_user),
    service: TherapistService = Depends(get_therapist_service),
):
    """Weekly working hours of a therapist (admins, or the therapist themself)"""
    return serialize_rows(service.get_schedule(current_user, therapist_id))


@router.put("/{therapist_id}/schedule")
async def replace_schedule(
    therapist_id: str,
    payload: Any = Body(...),
    current_user: User = Depends(get_current_user),
    service: TherapistService = Depends(get_therapist_service),
):
    """
    Replace the whole weekly schedule.
    Accepts a list of blocks or an object wrapping it under slots/data/workingHours/hours.
    """
    return serialize_rows(service.replace_schedule(current_user, therapist_id, payload))


# ============================================================================
# ACCOUNT & STATS
# ============================================================================


@router.get("/{therapist_id}/account")
async def get_account(
    therapist_id: str,
    current_user: User = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    account = accounts.get_therapist_account(therapist_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return serialize_account(account)


@router.patch("/{therapist_id}/account")
async def update_account(
    therapist_id: str,
    data: AccountUpdate,
    current_user: User = Depends(require_admin),
    accounts: AccountService = Depends(get_account_service),
):
    """Change the account role and/or reset its password to the default"""
    return accounts.update_therapist_account(therapist_id, data)


@router.get("/{therapist_id}/stats")
async def get_stats(
    therapist_id: str,
    referenceDate: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    service: TherapistService = Depends(get_therapist_service),
):
    """Weekly availability / occupancy percentages"""
    return service.get_weekly_stats(therapist_id, referenceDate).to_dict()


@working_hours_router.get("")
async def get_all_working_hours(
    current_user: User = Depends(get_current_user),
    service: TherapistService = Depends(get_therapist_service),
):
    return serialize_rows(service.get_all_working_hours())
