"""Appointment service - Booking, overlap checks and recurring series"""

import calendar
import logging
from datetime import date, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Appointment, Client, Therapist, generate_uuid
from ...shared.case_convert import to_snake_case
from ...shared.serializers import row_to_dict, serialize_row
from ..scheduling.occupancy import build_occupancy_grid
from ..scheduling.stats import FALLBACK_APPOINTMENT_MINUTES
from ..scheduling.time_utils import add_minutes_to_time, parse_time_to_minutes
from .repository import AppointmentRepository
from .schemas import AppointmentCreate, AppointmentUpdate, SeriesScope

logger = logging.getLogger(__name__)

FREQUENCY_INTERVAL_DAYS = {"semanal": 7, "quincenal": 14}

# Fields whose change can move an appointment onto another booking
_SLOT_FIELDS = ("therapist_id", "date", "start_time", "end_time", "duration_minutes", "status")


def serialize_appointment(appointment: Appointment) -> dict:
    """Appointment with its therapist and client embedded"""
    return serialize_row(
        appointment,
        therapist=row_to_dict(appointment.therapist) if appointment.therapist else None,
        client=row_to_dict(appointment.client) if appointment.client else None,
    )


def appointment_window(
    start_time: Optional[str], end_time: Optional[str], duration_minutes: Optional[int]
) -> Optional[tuple[int, int]]:
    """[start, end) in minutes, or None when the start does not parse"""
    start = parse_time_to_minutes(start_time)
    if start is None:
        return None
    end = parse_time_to_minutes(end_time)
    if end is None or end <= start:
        if duration_minutes and duration_minutes > 0:
            end = start + duration_minutes
        else:
            end = start + FALLBACK_APPOINTMENT_MINUTES
    return start, end


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()

    def get_appointments(
        self,
        therapist_id: Optional[str] = None,
        client_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Appointment]:
        return self.repo.get_appointments(self.db, therapist_id, client_id, start_date, end_date)

    def get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        return appointment

    # ------------------------------------------------------------------
    # Overlap
    # ------------------------------------------------------------------

    def ensure_no_overlap(
        self,
        therapist_id: str,
        day: date,
        start_time: Optional[str],
        end_time: Optional[str],
        duration_minutes: Optional[int],
        exclude_ids: tuple = (),
    ) -> None:
        window = appointment_window(start_time, end_time, duration_minutes)
        if window is None:
            return

        for other in self.repo.get_active_for_therapist_on(self.db, therapist_id, day, exclude_ids):
            other_window = appointment_window(other.start_time, other.end_time, other.duration_minutes)
            if other_window and window[0] < other_window[1] and other_window[0] < window[1]:
                logger.warning(
                    f"⚠️ Overlap for therapist {therapist_id} on {day}: {start_time} clashes with {other.id}"
                )
                raise HTTPException(
                    status_code=409,
                    detail="The therapist already has an appointment at that time",
                )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_appointment(self, data: AppointmentCreate) -> list[Appointment]:
        """Book one appointment, or a whole series for weekly/fortnightly frequencies"""
        if not self.db.get(Therapist, data.therapistId):
            raise HTTPException(status_code=404, detail="Therapist not found")
        if not self.db.get(Client, data.clientId):
            raise HTTPException(status_code=404, detail="Client not found")

        recurring = data.frequency in FREQUENCY_INTERVAL_DAYS
        occurrences = data.occurrences if recurring else 1
        series_id = generate_uuid() if recurring else None

        rows = []
        for index in range(occurrences):
            day = data.date
            if recurring:
                day = data.date + timedelta(days=index * FREQUENCY_INTERVAL_DAYS[data.frequency])
            if data.status != "cancelled":
                self.ensure_no_overlap(
                    data.therapistId, day, data.startTime, data.endTime, data.durationMinutes
                )
            rows.append(
                {
                    "therapist_id": data.therapistId,
                    "client_id": data.clientId,
                    "date": day,
                    "start_time": data.startTime,
                    "end_time": data.endTime,
                    "duration_minutes": data.durationMinutes,
                    "status": data.status,
                    "notes": data.notes,
                    "series_id": series_id,
                    "frequency": data.frequency,
                }
            )

        try:
            appointments = self.repo.create_appointments(self.db, rows)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error creating appointment: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(
            f"✅ Booked {len(appointments)} appointment(s) for therapist {data.therapistId} from {data.date}"
        )
        return appointments

    def _check_updated_slot(self, appointment: Appointment, updates: dict) -> None:
        if not any(field in updates for field in _SLOT_FIELDS):
            return

        merged = {field: updates.get(field, getattr(appointment, field)) for field in _SLOT_FIELDS}
        start = parse_time_to_minutes(merged["start_time"])
        end = parse_time_to_minutes(merged["end_time"])
        if start is not None and end is not None and end <= start:
            raise HTTPException(status_code=400, detail="endTime must be after startTime")

        if merged["status"] != "cancelled":
            self.ensure_no_overlap(
                merged["therapist_id"],
                merged["date"],
                merged["start_time"],
                merged["end_time"],
                merged["duration_minutes"],
                exclude_ids=(appointment.id,),
            )

    def update_appointment(self, appointment_id: str, data: AppointmentUpdate) -> Appointment:
        appointment = self.get_appointment(appointment_id)
        updates = to_snake_case(data.model_dump(exclude_unset=True))
        self._check_updated_slot(appointment, updates)
        return self._apply(appointment_id, [(appointment, updates)])[0]

    def delete_appointment(self, appointment_id: str) -> dict:
        appointment = self.get_appointment(appointment_id)
        try:
            self.repo.delete_appointment(self.db, appointment)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error deleting appointment {appointment_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e
        return {"success": True}

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    def update_series(
        self, appointment_id: str, scope: SeriesScope, data: AppointmentUpdate
    ) -> list[Appointment]:
        """
        Edit one occurrence or this and every later occurrence of its series.

        this_only detaches the appointment from its series. this_and_future
        shifts later dates by the same number of days and later start/end
        times by the same number of minutes as the edited appointment;
        other fields are copied as given.
        """
        appointment = self.get_appointment(appointment_id)
        updates = to_snake_case(data.model_dump(exclude_unset=True))
        updates.pop("series_id", None)

        if scope == "this_only":
            self._check_updated_slot(appointment, updates)
            detached = {**updates, "series_id": None, "frequency": "puntual"}
            return self._apply(appointment_id, [(appointment, detached)])

        if not appointment.series_id:
            self._check_updated_slot(appointment, updates)
            return self._apply(appointment_id, [(appointment, updates)])

        future = self.repo.get_series_from(self.db, appointment.series_id, appointment.date)
        if not future:
            return []

        requested_date = updates.pop("date", None)
        requested_start = updates.pop("start_time", None)
        requested_end = updates.pop("end_time", None)

        day_delta = (requested_date - appointment.date).days if requested_date else 0
        start_delta = self._minute_delta(appointment.start_time, requested_start)
        end_delta = self._minute_delta(appointment.end_time, requested_end)

        planned = []
        for item in future:
            item_updates = dict(updates)
            if requested_date:
                item_updates["date"] = item.date + timedelta(days=day_delta)
            if requested_start:
                item_updates["start_time"] = self._shift_time(item.start_time, start_delta, requested_start)
            if requested_end:
                item_updates["end_time"] = self._shift_time(item.end_time, end_delta, requested_end)
            planned.append((item, item_updates))

        logger.info(
            f"📊 Series {appointment.series_id}: updating {len(planned)} appointment(s) from {appointment.date}"
        )
        return self._apply(appointment_id, planned)

    def delete_series(self, appointment_id: str, scope: SeriesScope) -> int:
        appointment = self.get_appointment(appointment_id)
        # Deleted rows expire on commit; read what the log needs first
        series_id = appointment.series_id
        from_date = appointment.date
        try:
            if scope == "this_only" or not series_id:
                self.repo.delete_appointment(self.db, appointment)
                return 1
            deleted = self.repo.delete_series_from(self.db, series_id, from_date)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error deleting series of {appointment_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e

        logger.info(f"🗑️ Deleted {deleted} appointment(s) of series {series_id}")
        return deleted

    def change_frequency(self, appointment_id: str, frequency: str) -> list[Appointment]:
        """Respace this and later occurrences every 7 or 14 days starting at this appointment's date"""
        appointment = self.get_appointment(appointment_id)
        if not appointment.series_id:
            raise HTTPException(status_code=404, detail="Appointment not found or not part of a series")

        future = self.repo.get_series_from(self.db, appointment.series_id, appointment.date)
        interval = FREQUENCY_INTERVAL_DAYS[frequency]
        base_date = appointment.date
        planned = [
            (item, {"date": base_date + timedelta(days=index * interval), "frequency": frequency})
            for index, item in enumerate(future)
        ]
        return self._apply(appointment_id, planned)

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    def get_occupancy(self, year: int, month: int) -> dict:
        if month < 1 or month > 12:
            raise HTTPException(status_code=400, detail="month must be between 1 and 12")
        first_day = date(year, month, 1)
        last_day = date(year, month, calendar.monthrange(year, month)[1])
        appointments = self.repo.get_appointments(self.db, start_date=first_day, end_date=last_day)
        return {"year": year, "month": month, "slots": build_occupancy_grid(appointments, year, month)}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _minute_delta(original: Optional[str], requested: Optional[str]) -> Optional[int]:
        original_minutes = parse_time_to_minutes(original)
        requested_minutes = parse_time_to_minutes(requested)
        if original_minutes is None or requested_minutes is None:
            return None
        return requested_minutes - original_minutes

    @staticmethod
    def _shift_time(current: Optional[str], delta: Optional[int], requested: str) -> str:
        if delta is None or parse_time_to_minutes(current) is None:
            return requested
        return add_minutes_to_time(current, delta)

    def _apply(self, appointment_id: str, planned: list[tuple[Appointment, dict]]) -> list[Appointment]:
        try:
            return self.repo.apply_updates(self.db, planned)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error updating appointment {appointment_id}: {str(e)}")
            self.db.rollback()
            raise HTTPException(status_code=500, detail=str(e)) from e
