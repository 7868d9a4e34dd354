import os

# Settings are read at import time, so they must be in place before dentalcare loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["DB_LOG_SLOW_QUERIES"] = "false"
os.environ.setdefault("FIREBASE_PROJECT_ID", "dentalcare-test")

from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi import Depends, Header  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from dentalcare.auth import get_current_user  # noqa: E402
from dentalcare.database import Base, get_db  # noqa: E402
from dentalcare.main import app  # noqa: E402
from dentalcare.models import User  # noqa: E402

MONDAY = "2024-01-01"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


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
    """TestClient whose identity comes from the X-Test-Uid header instead of a Firebase token"""

    def override_get_db():
        db_session.expire_all()
        yield db_session

    def override_current_user(
        x_test_uid: Optional[str] = Header(None),
        db: Session = Depends(get_db),
    ) -> Optional[User]:
        if not x_test_uid:
            return None
        user = db.query(User).filter(User.firebase_uid == x_test_uid).first()
        if not user:
            user = User(firebase_uid=x_test_uid, email=f"{x_test_uid}@example.com")
            db.add(user)
            db.commit()
            db.refresh(user)
        return user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_current_user
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def as_user(uid: str) -> dict:
    return {"X-Test-Uid": uid}


@pytest.fixture
def make_profile(client):
    """Create a profile for uid and return (headers, user_id)"""

    def _make(uid: str, role: str, **overrides):
        payload = {
            "role": role,
            "fullName": overrides.pop("fullName", f"{role.title()} {uid}"),
            "phoneNumber": overrides.pop("phoneNumber", "+1 555 010 0000"),
        }
        payload.update(overrides)
        headers = as_user(uid)
        response = client.post("/profiles", json=payload, headers=headers)
        assert response.status_code == 201, response.text
        return headers, response.json()["userId"]

    return _make


@pytest.fixture
def doctor(make_profile):
    return make_profile("doc-1", "doctor")


@pytest.fixture
def patient(make_profile):
    return make_profile("pat-1", "patient", age=30, gender="female")


@pytest.fixture
def book(client):
    """Book as the given patient headers; returns the raw response"""

    def _book(patient_headers, doctor_id, date=MONDAY, time="10:00", visit_type="checkup", **extra):
        payload = {
            "doctorId": doctor_id,
            "appointmentDate": date,
            "appointmentTime": time,
            "visitType": visit_type,
        }
        payload.update(extra)
        return client.post("/appointments", json=payload, headers=patient_headers)

    return _book
