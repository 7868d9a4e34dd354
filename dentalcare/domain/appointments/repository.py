"""Appointment repository - Database operations for appointments and slots"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AvailabilitySlot


class AppointmentRepository:
    """Repository for appointment and availability slot database operations"""

    @staticmethod
    def get_appointment_by_id(db: Session, appointment_id: int) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.id == appointment_id).first()

    @staticmethod
    def get_doctor_appointments(db: Session, doctor_id: int) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.doctor_id == doctor_id)
            .order_by(Appointment.created_at.desc(), Appointment.id.desc())
            .all()
        )

    @staticmethod
    def get_patient_appointments(db: Session, patient_id: int) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.patient_id == patient_id)
            .order_by(Appointment.created_at.desc(), Appointment.id.desc())
            .all()
        )

    @staticmethod
    def get_doctor_appointments_on(db: Session, doctor_id: int, date_str: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.doctor_id == doctor_id, Appointment.appointment_date == date_str)
            .order_by(Appointment.appointment_time.asc())
            .all()
        )

    @staticmethod
    def create_appointment(db: Session, **appointment_data) -> Appointment:
        """Stage the appointment and flush so its id is available (no commit)"""
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        db.flush()
        return appointment

    @staticmethod
    def get_booked_times(db: Session, doctor_id: int, date_str: str) -> set[str]:
        rows = (
            db.query(AvailabilitySlot.time_slot)
            .filter(
                AvailabilitySlot.doctor_id == doctor_id,
                AvailabilitySlot.date == date_str,
                AvailabilitySlot.is_booked.is_(True),
            )
            .all()
        )
        return {row.time_slot for row in rows}

    @staticmethod
    def get_slot(db: Session, doctor_id: int, date_str: str, time_slot: str) -> Optional[AvailabilitySlot]:
        return (
            db.query(AvailabilitySlot)
            .filter(
                AvailabilitySlot.doctor_id == doctor_id,
                AvailabilitySlot.date == date_str,
                AvailabilitySlot.time_slot == time_slot,
            )
            .first()
        )

    @staticmethod
    def reserve_slot(db: Session, doctor_id: int, date_str: str, time_slot: str, appointment_id: int) -> bool:
        """
        Reserve (doctor, date, time) for appointment_id if it is free.

        Flips an existing free row with a conditional UPDATE, otherwise inserts
        the row. A concurrent insert of the same triple surfaces as an
        IntegrityError on flush, which the caller treats as "already booked".

        Returns:
            bool: False when the slot is already booked
        """
        updated = (
            db.query(AvailabilitySlot)
            .filter(
                AvailabilitySlot.doctor_id == doctor_id,
                AvailabilitySlot.date == date_str,
                AvailabilitySlot.time_slot == time_slot,
                AvailabilitySlot.is_booked.is_(False),
            )
            .update(
                {AvailabilitySlot.is_booked: True, AvailabilitySlot.appointment_id: appointment_id},
                synchronize_session=False,
            )
        )
        if updated:
            return True

        if AppointmentRepository.get_slot(db, doctor_id, date_str, time_slot) is not None:
            return False

        db.add(
            AvailabilitySlot(
                doctor_id=doctor_id,
                date=date_str,
                time_slot=time_slot,
                is_booked=True,
                appointment_id=appointment_id,
            )
        )
        db.flush()
        return True

    @staticmethod
    def release_slot(db: Session, appointment: Appointment) -> int:
        """Re-open the slot held by appointment (no commit)"""
        return (
            db.query(AvailabilitySlot)
            .filter(
                AvailabilitySlot.doctor_id == appointment.doctor_id,
                AvailabilitySlot.date == appointment.appointment_date,
                AvailabilitySlot.time_slot == appointment.appointment_time,
                AvailabilitySlot.appointment_id == appointment.id,
            )
            .update(
                {AvailabilitySlot.is_booked: False, AvailabilitySlot.appointment_id: None},
                synchronize_session=False,
            )
        )
