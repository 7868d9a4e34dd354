"""Profile repository - Database operations for user, doctor and patient profiles"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import DoctorProfile, PatientProfile, UserProfile


class ProfileRepository:
    """Repository for profile database operations"""

    @staticmethod
    def get_profile_by_user_id(db: Session, user_id: int) -> Optional[UserProfile]:
        return db.query(UserProfile).filter(UserProfile.user_id == user_id).first()

    @staticmethod
    def get_profiles_by_user_ids(db: Session, user_ids: set[int]) -> dict[int, UserProfile]:
        """Batch lookup keyed by user id"""
        if not user_ids:
            return {}
        profiles = db.query(UserProfile).filter(UserProfile.user_id.in_(user_ids)).all()
        return {p.user_id: p for p in profiles}

    @staticmethod
    def get_doctor_profile(db: Session, user_id: int) -> Optional[DoctorProfile]:
        return db.query(DoctorProfile).filter(DoctorProfile.user_id == user_id).first()

    @staticmethod
    def get_patient_profile(db: Session, user_id: int) -> Optional[PatientProfile]:
        return db.query(PatientProfile).filter(PatientProfile.user_id == user_id).first()

    @staticmethod
    def get_active_doctors(db: Session) -> list[tuple[UserProfile, Optional[DoctorProfile]]]:
        doctors = (
            db.query(UserProfile)
            .filter(UserProfile.role == "doctor", UserProfile.is_active.is_(True))
            .order_by(UserProfile.full_name.asc())
            .all()
        )
        doctor_profiles = {
            d.user_id: d
            for d in db.query(DoctorProfile)
            .filter(DoctorProfile.user_id.in_([p.user_id for p in doctors]))
            .all()
        }
        return [(p, doctor_profiles.get(p.user_id)) for p in doctors]

    @staticmethod
    def create_profile(db: Session, user_id: int, role_profile, **profile_data) -> UserProfile:
        """Insert the user profile and its role-specific profile in one commit"""
        profile = UserProfile(user_id=user_id, **profile_data)
        db.add(profile)
        db.add(role_profile)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def update(db: Session, instance, **updates):
        """Apply non-None updates to any profile row"""
        for key, value in updates.items():
            if value is not None and hasattr(instance, key):
                setattr(instance, key, value)

        db.commit()
        db.refresh(instance)
        return instance
