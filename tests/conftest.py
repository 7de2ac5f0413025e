"""Shared fixtures: in-memory database, API client and signed-in users."""

import os

# Configuration is read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_EMAILS", "director@clinic.test")
os.environ.setdefault("SECURITY_HEADERS_ENABLED", "true")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from clinic_agenda.database import Base, get_db  # noqa: E402
from clinic_agenda.main import app  # noqa: E402
from clinic_agenda.models import Client, Therapist, User  # noqa: E402
from clinic_agenda.security_utils import create_access_token, hash_password_bcrypt  # noqa: E402

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "correct-horse"


@pytest.fixture
def db_session():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory for stored users; returns (user, auth headers)"""

    def _make_user(email, role=None, therapist_id=None, must_change_password=False):
        user = User(
            email=email,
            password_hash=hash_password_bcrypt(TEST_PASSWORD),
            role=role,
            therapist_id=therapist_id,
            must_change_password=must_change_password,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        headers = {"Authorization": f"Bearer {create_access_token(user.id)}"}
        return user, headers

    return _make_user


@pytest.fixture
def admin_headers(make_user):
    _, headers = make_user("admin@clinic.test", role="admin")
    return headers


@pytest.fixture
def therapist(db_session):
    therapist = Therapist(name="Laura Gómez", specialty="Logopedia", email="laura@clinic.test")
    db_session.add(therapist)
    db_session.commit()
    db_session.refresh(therapist)
    return therapist


@pytest.fixture
def therapist_headers(make_user, therapist):
    _, headers = make_user("laura@clinic.test", role="therapist", therapist_id=therapist.id)
    return headers


@pytest.fixture
def patient(db_session):
    record = Client(first_name="Mario", last_name="Ruiz", email="mario@example.com")
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record
