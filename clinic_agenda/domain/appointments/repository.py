"""Appointment repository - Database operations for appointments"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Appointment


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_appointments(
        db: Session,
        therapist_id: Optional[str] = None,
        client_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Appointment]:
        query = db.query(Appointment).options(
            joinedload(Appointment.therapist), joinedload(Appointment.client)
        )
        if therapist_id:
            query = query.filter(Appointment.therapist_id == therapist_id)
        if client_id:
            query = query.filter(Appointment.client_id == client_id)
        if start_date:
            query = query.filter(Appointment.date >= start_date)
        if end_date:
            query = query.filter(Appointment.date <= end_date)
        return query.order_by(Appointment.date.asc(), Appointment.start_time.asc()).all()

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: str) -> Optional[Appointment]:
        return (
            db.query(Appointment)
            .options(joinedload(Appointment.therapist), joinedload(Appointment.client))
            .filter(Appointment.id == appointment_id)
            .first()
        )

    @staticmethod
    def get_active_for_therapist_on(
        db: Session, therapist_id: str, day: date, exclude_ids: tuple = ()
    ) -> list[Appointment]:
        """Non-cancelled appointments of a therapist on one day"""
        query = db.query(Appointment).filter(
            Appointment.therapist_id == therapist_id,
            Appointment.date == day,
            Appointment.status != "cancelled",
        )
        if exclude_ids:
            query = query.filter(Appointment.id.notin_(exclude_ids))
        return query.all()

    @staticmethod
    def get_series_from(db: Session, series_id: str, from_date: date) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.series_id == series_id, Appointment.date >= from_date)
            .order_by(Appointment.date.asc(), Appointment.start_time.asc())
            .all()
        )

    @staticmethod
    def create_appointments(db: Session, rows: list[dict]) -> list[Appointment]:
        """Insert every row in one transaction"""
        appointments = [Appointment(**row) for row in rows]
        db.add_all(appointments)
        db.commit()
        for appointment in appointments:
            db.refresh(appointment)
        return appointments

    @staticmethod
    def apply_updates(db: Session, updates_by_appointment: list[tuple[Appointment, dict]]) -> list[Appointment]:
        """Apply per-appointment updates and commit them together"""
        for appointment, updates in updates_by_appointment:
            for key, value in updates.items():
                if hasattr(appointment, key):
                    setattr(appointment, key, value)

        db.commit()
        appointments = [appointment for appointment, _ in updates_by_appointment]
        for appointment in appointments:
            db.refresh(appointment)
        return appointments

    @staticmethod
    def delete_appointment(db: Session, appointment: Appointment) -> None:
        db.delete(appointment)
        db.commit()

    @staticmethod
    def delete_series_from(db: Session, series_id: str, from_date: date) -> int:
        deleted = (
            db.query(Appointment)
            .filter(Appointment.series_id == series_id, Appointment.date >= from_date)
            .delete(synchronize_session="fetch")
        )
        db.commit()
        return deleted
