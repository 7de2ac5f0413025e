"""Therapist repository - Database operations for therapists and their working hours"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Therapist, TherapistWorkingHours, User


class TherapistRepository:
    """Repository for therapist database operations"""

    @staticmethod
    def get_therapists(db: Session) -> list[Therapist]:
        return db.query(Therapist).order_by(Therapist.name.asc()).all()

    @staticmethod
    def get_therapist_by_id(db: Session, therapist_id: str) -> Optional[Therapist]:
        return db.query(Therapist).filter(Therapist.id == therapist_id).first()

    @staticmethod
    def create_therapist_with_login(db: Session, therapist_data: dict, login_data: dict) -> tuple[Therapist, User]:
        """Insert the therapist and its login account in one transaction"""
        therapist = Therapist(**therapist_data)
        db.add(therapist)
        db.flush()

        account = User(therapist_id=therapist.id, **login_data)
        db.add(account)
        db.commit()
        db.refresh(therapist)
        db.refresh(account)
        return therapist, account

    @staticmethod
    def update_therapist(db: Session, therapist: Therapist, **updates) -> Therapist:
        """Update a therapist with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(therapist, key):
                setattr(therapist, key, value)

        db.commit()
        db.refresh(therapist)
        return therapist

    @staticmethod
    def delete_therapist(db: Session, therapist: Therapist) -> None:
        db.delete(therapist)
        db.commit()

    # Working hours
    @staticmethod
    def get_working_hours(db: Session, therapist_id: Optional[str] = None) -> list[TherapistWorkingHours]:
        query = db.query(TherapistWorkingHours)
        if therapist_id is not None:
            query = query.filter(TherapistWorkingHours.therapist_id == therapist_id)
        return query.order_by(
            TherapistWorkingHours.therapist_id,
            TherapistWorkingHours.day_of_week,
            TherapistWorkingHours.start_time,
        ).all()

    @staticmethod
    def replace_working_hours(db: Session, therapist_id: str, blocks: list[dict]) -> list[TherapistWorkingHours]:
        """Delete every block of the therapist, then insert `blocks`, in one transaction"""
        db.query(TherapistWorkingHours).filter(
            TherapistWorkingHours.therapist_id == therapist_id
        ).delete(synchronize_session=False)

        for block in blocks:
            db.add(TherapistWorkingHours(**block))

        db.commit()
        return TherapistRepository.get_working_hours(db, therapist_id)

    # Appointments used by stats
    @staticmethod
    def get_appointments_between(
        db: Session, therapist_id: str, start: date, end: date
    ) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(
                Appointment.therapist_id == therapist_id,
                Appointment.date >= start,
                Appointment.date <= end,
            )
            .all()
        )
