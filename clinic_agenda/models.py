import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_uuid():
    """Generate a string UUID primary key"""
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    role = Column(String(20), nullable=True)  # admin, therapist, client
    therapist_id = Column(
        String(36), ForeignKey("therapists.id", ondelete="SET NULL"), nullable=True, index=True
    )
    must_change_password = Column(Boolean, default=False, nullable=False)
    # Auxiliary auth metadata (role, must_change_password mirror); users columns are the source of truth
    user_metadata = Column(JSON, default=dict, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    therapist = relationship("Therapist", back_populates="accounts")


class Therapist(Base):
    __tablename__ = "therapists"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False, index=True)
    specialty = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    color = Column(String(7), default="#3B82F6", nullable=False)  # #RRGGBB used by calendars
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    accounts = relationship("User", back_populates="therapist")
    working_hours = relationship("TherapistWorkingHours", back_populates="therapist", cascade="all")
    appointments = relationship("Appointment", back_populates="therapist", cascade="all")


class TherapistWorkingHours(Base):
    __tablename__ = "therapist_working_hours"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    therapist_id = Column(
        String(36), ForeignKey("therapists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday .. 6=Saturday
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)  # HH:MM
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    therapist = relationship("Therapist", back_populates="working_hours")


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    first_name = Column(String(255), nullable=True, index=True)
    last_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    availability = relationship("ClientAvailability", back_populates="client", cascade="all")
    appointments = relationship("Appointment", back_populates="client", cascade="all")


class ClientAvailability(Base):
    __tablename__ = "client_availability"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    client_id = Column(
        String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday .. 6=Saturday
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    client = relationship("Client", back_populates="availability")


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    therapist_id = Column(
        String(36), ForeignKey("therapists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    client_id = Column(
        String(36), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=True)  # HH:MM
    end_time = Column(String(5), nullable=True)  # HH:MM
    duration_minutes = Column(Integer, nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, confirmed, cancelled
    notes = Column(Text, nullable=True)
    series_id = Column(String(36), nullable=True, index=True)
    frequency = Column(String(20), default="puntual", nullable=False)  # puntual, semanal, quincenal
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    therapist = relationship("Therapist", back_populates="appointments")
    client = relationship("Client", back_populates="appointments")


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=True)  # loosely typed: bool, number, or string
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
