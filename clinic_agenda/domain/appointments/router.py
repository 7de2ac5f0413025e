"""Appointment router - FastAPI endpoints for appointments, series and occupancy"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import AppointmentCreate, AppointmentUpdate, FrequencyUpdate, SeriesScope
from .service import AppointmentService, serialize_appointment

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])
occupancy_router = APIRouter(prefix="/occupancy", tags=["Appointments"])


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("")
async def get_appointments(
    therapistId: Optional[str] = Query(None),
    clientId: Optional[str] = Query(None),
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Get appointments ordered by date and start time, optionally filtered"""
    appointments = service.get_appointments(therapistId, clientId, startDate, endDate)
    return [serialize_appointment(a) for a in appointments]


@router.post("", status_code=201)
async def create_appointment(
    data: AppointmentCreate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """
    Book an appointment. Returns 409 when it overlaps another non-cancelled
    appointment of the same therapist. For a recurring series the first
    appointment is returned with every occurrence under `series`.
    """
    appointments = service.create_appointment(data)
    payload = serialize_appointment(appointments[0])
    if len(appointments) > 1:
        payload["series"] = [serialize_appointment(a) for a in appointments]
    return payload


@router.get("/{appointment_id}")
async def get_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return serialize_appointment(service.get_appointment(appointment_id))


@router.patch("/{appointment_id}")
async def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return serialize_appointment(service.update_appointment(appointment_id, data))


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: str,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_appointment(appointment_id)


# ============================================================================
# SERIES
# ============================================================================


@router.patch("/{appointment_id}/series")
async def update_series(
    appointment_id: str,
    data: AppointmentUpdate,
    scope: SeriesScope = Query(...),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Edit this occurrence only, or this and every later occurrence of the series"""
    appointments = service.update_series(appointment_id, scope, data)
    if scope == "this_only":
        return serialize_appointment(appointments[0])
    return [serialize_appointment(a) for a in appointments]


@router.delete("/{appointment_id}/series", status_code=204)
async def delete_series(
    appointment_id: str,
    scope: SeriesScope = Query(...),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    service.delete_series(appointment_id, scope)
    return Response(status_code=204)


@router.patch("/{appointment_id}/frequency")
async def change_frequency(
    appointment_id: str,
    data: FrequencyUpdate,
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Respace this and later occurrences weekly (semanal) or fortnightly (quincenal)"""
    appointments = service.change_frequency(appointment_id, data.frequency)
    return [serialize_appointment(a) for a in appointments]


# ============================================================================
# OCCUPANCY
# ============================================================================


@occupancy_router.get("")
async def get_occupancy(
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    current_user: User = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Month grid: "therapistId|YYYY-MM-DD|hour" -> appointment id"""
    return service.get_occupancy(year, month)
