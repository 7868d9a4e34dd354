"""Profile service - Business logic for role selection and profile management"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import AuthContext
from ...config import DEFAULT_SESSION_DURATION
from ...models import (
    DoctorProfile,
    PatientProfile,
    UserProfile,
    default_medical_history,
    default_working_hours,
)
from .repository import ProfileRepository
from .schemas import (
    DoctorScheduleUpdate,
    PatientProfileUpdate,
    ProfileCreate,
    ProfileUpdate,
)

logger = logging.getLogger(__name__)


class ProfileService:
    """Service layer for profile business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ProfileRepository()

    def get_current_profile(self, auth: AuthContext) -> Optional[UserProfile]:
        """The caller's profile, or None for anonymous callers and new users"""
        return auth.profile if auth.is_authenticated else None

    def create_profile(self, data: ProfileCreate, auth: AuthContext) -> UserProfile:
        """Create the caller's profile plus the role-specific sub-profile"""
        user = auth.require_user()
        if auth.profile is not None:
            raise HTTPException(status_code=409, detail="Profile already exists")

        if data.role == "doctor":
            role_profile = DoctorProfile(
                user_id=user.id,
                working_hours=default_working_hours(),
                is_online=False,
                session_duration=DEFAULT_SESSION_DURATION,
                leave_days=[],
            )
        else:
            role_profile = PatientProfile(
                user_id=user.id,
                medical_history=default_medical_history(),
            )

        try:
            profile = self.repo.create_profile(
                self.db,
                user.id,
                role_profile,
                role=data.role,
                full_name=data.fullName,
                phone_number=data.phoneNumber,
                email=data.email,
                gender=data.gender,
                age=data.age,
                language=data.language,
                is_active=True,
            )
        except IntegrityError as e:
            # Two concurrent role selections for the same identity
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Profile already exists") from e

        logger.info(f"👤 Created {data.role} profile for user {user.id}")
        return profile

    def update_profile(self, data: ProfileUpdate, auth: AuthContext) -> UserProfile:
        profile = auth.require_profile()
        return self.repo.update(
            self.db,
            profile,
            full_name=data.fullName,
            phone_number=data.phoneNumber,
            email=data.email,
            language=data.language,
        )

    def get_active_doctors(self) -> list[tuple[UserProfile, Optional[DoctorProfile]]]:
        return self.repo.get_active_doctors(self.db)

    def _get_own_doctor_profile(self, auth: AuthContext) -> DoctorProfile:
        auth.require_doctor()
        doctor_profile = self.repo.get_doctor_profile(self.db, auth.user_id)
        if not doctor_profile:
            raise HTTPException(status_code=404, detail="Doctor profile not found")
        return doctor_profile

    def get_own_doctor_profile(self, auth: AuthContext) -> DoctorProfile:
        return self._get_own_doctor_profile(auth)

    def update_doctor_status(self, is_online: bool, auth: AuthContext) -> DoctorProfile:
        doctor_profile = self._get_own_doctor_profile(auth)
        doctor_profile.is_online = is_online
        self.db.commit()
        self.db.refresh(doctor_profile)
        logger.info(f"🟢 Doctor {auth.user_id} is now {'online' if is_online else 'offline'}")
        return doctor_profile

    def update_doctor_schedule(self, data: DoctorScheduleUpdate, auth: AuthContext) -> DoctorProfile:
        doctor_profile = self._get_own_doctor_profile(auth)
        working_hours = data.workingHours.model_dump() if data.workingHours else None
        return self.repo.update(
            self.db,
            doctor_profile,
            working_hours=working_hours,
            session_duration=data.sessionDuration,
            specialization=data.specialization,
            license_number=data.licenseNumber,
        )

    def add_leave_day(self, leave_date: str, auth: AuthContext) -> DoctorProfile:
        doctor_profile = self._get_own_doctor_profile(auth)
        # Assign a new list so the JSON column is flagged dirty
        doctor_profile.leave_days = sorted(set(doctor_profile.leave_days or []) | {leave_date})
        self.db.commit()
        self.db.refresh(doctor_profile)
        return doctor_profile

    def remove_leave_day(self, leave_date: str, auth: AuthContext) -> DoctorProfile:
        doctor_profile = self._get_own_doctor_profile(auth)
        if leave_date not in (doctor_profile.leave_days or []):
            raise HTTPException(status_code=404, detail="Leave day not found")
        doctor_profile.leave_days = [d for d in doctor_profile.leave_days if d != leave_date]
        self.db.commit()
        self.db.refresh(doctor_profile)
        return doctor_profile

    def _get_own_patient_profile(self, auth: AuthContext) -> PatientProfile:
        auth.require_patient()
        patient_profile = self.repo.get_patient_profile(self.db, auth.user_id)
        if not patient_profile:
            raise HTTPException(status_code=404, detail="Patient profile not found")
        return patient_profile

    def get_own_patient_profile(self, auth: AuthContext) -> PatientProfile:
        return self._get_own_patient_profile(auth)

    def update_patient_profile(self, data: PatientProfileUpdate, auth: AuthContext) -> PatientProfile:
        patient_profile = self._get_own_patient_profile(auth)

        if data.preferredDoctorId is not None:
            doctor = self.repo.get_profile_by_user_id(self.db, data.preferredDoctorId)
            if not doctor or doctor.role != "doctor":
                raise HTTPException(status_code=404, detail="Doctor not found")

        return self.repo.update(
            self.db,
            patient_profile,
            medical_history=data.medicalHistory.model_dump() if data.medicalHistory else None,
            emergency_contact=data.emergencyContact.model_dump() if data.emergencyContact else None,
            preferred_doctor_id=data.preferredDoctorId,
        )
