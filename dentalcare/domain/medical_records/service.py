"""Medical record service - Business logic for session records"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthContext
from ...models import MedicalRecord, UserProfile
from ...shared.validators import today_iso
from ..appointments.lifecycle import validate_status_transition
from ..appointments.repository import AppointmentRepository
from ..notifications.service import notify
from ..profiles.repository import ProfileRepository
from .repository import MedicalRecordRepository
from .schemas import MedicalRecordCreate

logger = logging.getLogger(__name__)


class MedicalRecordService:
    """Service layer for medical record business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = MedicalRecordRepository()
        self.appointments = AppointmentRepository()
        self.profiles = ProfileRepository()

    def create_record(self, data: MedicalRecordCreate, auth: AuthContext) -> MedicalRecord:
        """
        Record a session for an appointment and complete it.

        The record insert, the appointment's move to completed and the
        patient's session_summary notification commit together. An already
        completed appointment may receive further records.
        """
        auth.require_doctor("Only doctors can create medical records")

        appointment = self.appointments.get_appointment_by_id(self.db, data.appointmentId)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        auth.require_owner(appointment.doctor_id)

        if appointment.status != "completed" and not validate_status_transition(
            appointment.status, "completed"
        ):
            raise HTTPException(
                status_code=409,
                detail=f"Cannot record a session for a {appointment.status} appointment",
            )

        record = self.repo.create_record(
            self.db,
            patient_id=appointment.patient_id,
            doctor_id=auth.user_id,
            appointment_id=appointment.id,
            session_date=today_iso(),
            diagnosis=data.diagnosis,
            treatment=data.treatment,
            prescription=data.prescription,
            doctor_notes=data.doctorNotes,
            follow_up_required=data.followUpRequired,
            follow_up_date=data.followUpDate,
            attachments=data.attachments,
            teeth_chart=data.teethChart,
            symptoms=data.symptoms,
            vital_signs=data.vitalSigns.model_dump(exclude_none=True) if data.vitalSigns else None,
        )

        appointment.status = "completed"
        notify(
            self.db,
            appointment.patient_id,
            "session_summary",
            "Medical Record Created",
            "Your medical record has been updated after your recent visit.",
            related_appointment_id=appointment.id,
        )
        self.db.commit()
        self.db.refresh(record)

        logger.info(f"🦷 Medical record {record.id} created for appointment {appointment.id}")
        return record

    def get_patient_records(
        self, patient_id: int, auth: AuthContext
    ) -> list[tuple[MedicalRecord, Optional[UserProfile]]]:
        """Records newest first with the authoring doctor's profile"""
        if not auth.profile:
            return []
        if auth.is_patient and patient_id != auth.user_id:
            raise HTTPException(status_code=403, detail="Unauthorized")

        records = self.repo.get_patient_records(self.db, patient_id)
        doctors = self.profiles.get_profiles_by_user_ids(self.db, {r.doctor_id for r in records})
        return [(r, doctors.get(r.doctor_id)) for r in records]
