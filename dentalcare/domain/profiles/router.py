"""Profile router - FastAPI endpoints for role selection and profiles"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...models import DoctorProfile, PatientProfile, UserProfile
from ...shared.validators import validate_iso_date
from .schemas import (
    DoctorProfileResponse,
    DoctorScheduleUpdate,
    DoctorStatusUpdate,
    DoctorWithProfileResponse,
    LeaveDayRequest,
    PatientProfileResponse,
    PatientProfileUpdate,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdate,
)
from .service import ProfileService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    """Dependency injection for ProfileService"""
    return ProfileService(db)


def to_profile_response(p: UserProfile) -> ProfileResponse:
    return ProfileResponse(
        id=p.id,
        userId=p.user_id,
        role=p.role,
        fullName=p.full_name,
        phoneNumber=p.phone_number,
        email=p.email,
        gender=p.gender,
        age=p.age,
        language=p.language,
        isActive=p.is_active,
        createdAt=p.created_at,
    )


def to_doctor_profile_response(d: DoctorProfile) -> DoctorProfileResponse:
    return DoctorProfileResponse(
        userId=d.user_id,
        specialization=d.specialization,
        licenseNumber=d.license_number,
        workingHours=d.working_hours,
        isOnline=d.is_online,
        sessionDuration=d.session_duration,
        leaveDays=d.leave_days or [],
    )


def to_patient_profile_response(p: PatientProfile) -> PatientProfileResponse:
    return PatientProfileResponse(
        userId=p.user_id,
        preferredDoctorId=p.preferred_doctor_id,
        medicalHistory=p.medical_history,
        emergencyContact=p.emergency_contact,
    )


# ============================================================================
# USER PROFILE
# ============================================================================


@router.get("/me", response_model=Optional[ProfileResponse])
async def get_current_user_profile(
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    """Current profile, null when anonymous or before role selection"""
    profile = service.get_current_profile(auth)
    return to_profile_response(profile) if profile else None


@router.post("", response_model=ProfileResponse, status_code=201)
async def create_user_profile(
    data: ProfileCreate,
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    """Select a role and create the profile"""
    return to_profile_response(service.create_profile(data, auth))


@router.patch("/me", response_model=ProfileResponse)
async def update_user_profile(
    data: ProfileUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return to_profile_response(service.update_profile(data, auth))


@router.get("/doctors", response_model=list[DoctorWithProfileResponse])
async def get_active_doctors(service: ProfileService = Depends(get_profile_service)):
    """All active doctors with their schedules, for patient booking"""
    return [
        DoctorWithProfileResponse(
            **to_profile_response(profile).model_dump(),
            doctorProfile=to_doctor_profile_response(doctor) if doctor else None,
        )
        for profile, doctor in service.get_active_doctors()
    ]


# ============================================================================
# DOCTOR PROFILE
# ============================================================================


@router.get("/doctor/me", response_model=DoctorProfileResponse)
async def get_my_doctor_profile(
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return to_doctor_profile_response(service.get_own_doctor_profile(auth))


@router.patch("/doctor/status", response_model=DoctorProfileResponse)
async def update_doctor_status(
    data: DoctorStatusUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return to_doctor_profile_response(service.update_doctor_status(data.isOnline, auth))


@router.put("/doctor/schedule", response_model=DoctorProfileResponse)
async def update_doctor_schedule(
    data: DoctorScheduleUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return to_doctor_profile_response(service.update_doctor_schedule(data, auth))


@router.post("/doctor/leave-days", response_model=DoctorProfileResponse)
async def add_leave_day(
    data: LeaveDayRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return to_doctor_profile_response(service.add_leave_day(data.date, auth))


@router.delete("/doctor/leave-days/{leave_date}", response_model=DoctorProfileResponse)
async def remove_leave_day(
    leave_date: str,
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    try:
        validate_iso_date(leave_date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return to_doctor_profile_response(service.remove_leave_day(leave_date, auth))


# ============================================================================
# PATIENT PROFILE
# ============================================================================


@router.get("/patient/me", response_model=PatientProfileResponse)
async def get_my_patient_profile(
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    return to_patient_profile_response(service.get_own_patient_profile(auth))


@router.put("/patient/medical-history", response_model=PatientProfileResponse)
async def update_my_patient_profile(
    data: PatientProfileUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: ProfileService = Depends(get_profile_service),
):
    """Update medical history, emergency contact or preferred doctor"""
    return to_patient_profile_response(service.update_patient_profile(data, auth))
