import asyncio

import pytest
from fastapi import HTTPException

from dentalcare.auth import AuthContext, verify_firebase_token
from dentalcare.models import User, UserProfile


def context(role=None, user_id=1):
    user = User(id=user_id, firebase_uid=f"uid-{user_id}")
    profile = UserProfile(user_id=user_id, role=role, full_name="X", phone_number="5550100") if role else None
    return AuthContext(user, profile)


def test_anonymous_context():
    auth = AuthContext(None, None)

    assert auth.is_authenticated is False
    assert auth.user_id is None
    assert auth.is_doctor is False
    with pytest.raises(HTTPException) as exc:
        auth.require_user()
    assert exc.value.status_code == 401
    with pytest.raises(HTTPException) as exc:
        auth.require_doctor()
    assert exc.value.status_code == 401


def test_missing_profile_is_not_found():
    with pytest.raises(HTTPException) as exc:
        context().require_profile()
    assert exc.value.status_code == 404


def test_role_checks():
    doctor = context("doctor")
    patient = context("patient")

    assert doctor.require_doctor().role == "doctor"
    assert patient.require_patient().role == "patient"
    with pytest.raises(HTTPException) as exc:
        patient.require_doctor()
    assert exc.value.status_code == 403
    with pytest.raises(HTTPException) as exc:
        doctor.require_patient()
    assert exc.value.status_code == 403


def test_owner_check():
    auth = context("doctor", user_id=7)

    auth.require_owner(7)
    with pytest.raises(HTTPException) as exc:
        auth.require_owner(8)
    assert exc.value.status_code == 403


@pytest.mark.parametrize("token", ["not-a-jwt", "a.b.c", "e30.e30.sig"])
def test_malformed_tokens_are_rejected(token):
    with pytest.raises(HTTPException) as exc:
        asyncio.run(verify_firebase_token(token))
    assert exc.value.status_code == 401


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_security_headers_applied(client):
    response = client.get("/profiles/doctors")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
