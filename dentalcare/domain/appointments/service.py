"""Appointment service - Business logic for availability, booking and lifecycle"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import AuthContext
from ...models import Appointment, UserProfile
from ...shared.validators import today_iso
from ..notifications.service import notify
from ..profiles.repository import ProfileRepository
from .availability import compute_open_slots
from .lifecycle import STATUS_NOTIFICATIONS, releases_slot, validate_status_transition
from .repository import AppointmentRepository
from .schemas import BookAppointmentRequest

logger = logging.getLogger(__name__)


class AppointmentService:
    """Service layer for appointment business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AppointmentRepository()
        self.profiles = ProfileRepository()

    def get_available_slots(self, doctor_id: int, date_str: str) -> list[str]:
        """Open session start times for doctor_id on date_str; empty for unknown doctors"""
        doctor_profile = self.profiles.get_doctor_profile(self.db, doctor_id)
        if not doctor_profile:
            return []

        return compute_open_slots(
            doctor_profile.working_hours,
            doctor_profile.session_duration,
            doctor_profile.leave_days,
            date_str,
            self.repo.get_booked_times(self.db, doctor_id, date_str),
        )

    def book_appointment(self, data: BookAppointmentRequest, auth: AuthContext) -> Appointment:
        """
        Create a pending appointment, reserve its slot and notify the doctor.

        All three writes commit together; losing the slot to another booking
        rolls everything back with 409.
        """
        auth.require_patient("Only patients can book appointments")

        doctor = self.profiles.get_profile_by_user_id(self.db, data.doctorId)
        if not doctor or doctor.role != "doctor":
            raise HTTPException(status_code=404, detail="Doctor not found")

        appointment = self.repo.create_appointment(
            self.db,
            patient_id=auth.user_id,
            doctor_id=data.doctorId,
            appointment_date=data.appointmentDate,
            appointment_time=data.appointmentTime,
            visit_type=data.visitType,
            status="pending",
            notes=data.notes,
            attachments=data.attachments,
        )

        try:
            reserved = self.repo.reserve_slot(
                self.db, data.doctorId, data.appointmentDate, data.appointmentTime, appointment.id
            )
        except IntegrityError:
            # Another booking inserted the same slot first
            reserved = False

        if not reserved:
            self.db.rollback()
            logger.info(
                f"⛔ Slot {data.appointmentDate} {data.appointmentTime} for doctor {data.doctorId} already booked"
            )
            raise HTTPException(status_code=409, detail="Time slot is already booked")

        notify(
            self.db,
            data.doctorId,
            "appointment_request",
            "New Appointment Request",
            f"You have a new appointment request for {data.appointmentDate} at {data.appointmentTime}",
            related_appointment_id=appointment.id,
        )
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"📅 Appointment {appointment.id} booked by patient {auth.user_id} with doctor {data.doctorId}")
        return appointment

    def get_my_appointments(self, auth: AuthContext) -> list[tuple[Appointment, Optional[UserProfile]]]:
        """Caller's appointments, newest first, each with the other party's profile"""
        if not auth.profile:
            return []

        if auth.is_doctor:
            appointments = self.repo.get_doctor_appointments(self.db, auth.user_id)
            other_ids = {a.patient_id for a in appointments}
        else:
            appointments = self.repo.get_patient_appointments(self.db, auth.user_id)
            other_ids = {a.doctor_id for a in appointments}

        profiles = self.profiles.get_profiles_by_user_ids(self.db, other_ids)
        return [
            (a, profiles.get(a.patient_id if auth.is_doctor else a.doctor_id))
            for a in appointments
        ]

    def get_today_appointments(self, auth: AuthContext) -> list[tuple[Appointment, Optional[UserProfile]]]:
        """Doctor's appointments for today ordered by time"""
        if not auth.is_authenticated:
            return []

        appointments = self.repo.get_doctor_appointments_on(self.db, auth.user_id, today_iso())
        profiles = self.profiles.get_profiles_by_user_ids(self.db, {a.patient_id for a in appointments})
        return [(a, profiles.get(a.patient_id)) for a in appointments]

    def update_status(self, appointment_id: int, new_status: str, auth: AuthContext) -> Appointment:
        """Apply a manual lifecycle transition as the appointment's doctor"""
        auth.require_user()

        appointment = self.repo.get_appointment_by_id(self.db, appointment_id)
        if not appointment:
            raise HTTPException(status_code=404, detail="Appointment not found")
        auth.require_owner(appointment.doctor_id)

        if not validate_status_transition(appointment.status, new_status):
            raise HTTPException(
                status_code=409,
                detail=f"Cannot change appointment status from {appointment.status} to {new_status}",
            )

        previous_status = appointment.status
        appointment.status = new_status

        if releases_slot(new_status):
            self.repo.release_slot(self.db, appointment)

        if new_status in STATUS_NOTIFICATIONS:
            notification_type, template = STATUS_NOTIFICATIONS[new_status]
            notify(
                self.db,
                appointment.patient_id,
                notification_type,
                "Appointment Update",
                template.format(date=appointment.appointment_date, time=appointment.appointment_time),
                related_appointment_id=appointment.id,
            )

        self.db.commit()
        self.db.refresh(appointment)

        logger.info(f"🔄 Appointment {appointment.id}: {previous_status} → {new_status}")
        return appointment
