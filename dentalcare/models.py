from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import func

from .database import Base

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def default_working_hours() -> dict:
    """Clinic defaults: weekdays 09-17, Saturday 09-14, Sunday off"""
    hours = {day: {"start": "09:00", "end": "17:00", "isWorking": True} for day in WEEKDAYS[:5]}
    hours["saturday"] = {"start": "09:00", "end": "14:00", "isWorking": True}
    hours["sunday"] = {"start": "09:00", "end": "14:00", "isWorking": False}
    return hours


def default_medical_history() -> dict:
    return {"allergies": [], "chronicDiseases": [], "specialNotes": ""}


class User(Base):
    """Authentication identity, created on the first verified request"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    firebase_uid = Column(String(255), unique=True, index=True, nullable=False)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class UserProfile(Base):
    __tablename__ = "user_profiles"
    __table_args__ = (Index("ix_user_profiles_role_active", "role", "is_active"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    role = Column(String(20), nullable=False, index=True)  # doctor, patient
    full_name = Column(String(255), nullable=False)
    phone_number = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)
    gender = Column(String(10), nullable=True)  # male, female
    age = Column(Integer, nullable=True)
    language = Column(String(5), default="en", nullable=False)  # en, ar
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class DoctorProfile(Base):
    __tablename__ = "doctor_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    specialization = Column(String(255), nullable=True)
    license_number = Column(String(100), nullable=True)
    # {"monday": {"start": "09:00", "end": "17:00", "isWorking": true}, ...}
    working_hours = Column(JSON, default=default_working_hours, nullable=False)
    is_online = Column(Boolean, default=False, nullable=False)
    session_duration = Column(Integer, default=30, nullable=False)  # minutes
    leave_days = Column(JSON, default=list, nullable=False)  # ISO date strings


class PatientProfile(Base):
    __tablename__ = "patient_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    preferred_doctor_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    medical_history = Column(JSON, default=default_medical_history, nullable=False)
    emergency_contact = Column(JSON, nullable=True)  # {name, phone, relationship}


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("ix_appointments_doctor_date", "doctor_id", "appointment_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    appointment_date = Column(String(10), nullable=False, index=True)  # YYYY-MM-DD
    appointment_time = Column(String(5), nullable=False)  # HH:MM
    visit_type = Column(String(20), nullable=False)
    # pending, confirmed, rejected, completed, cancelled, no_show
    status = Column(String(20), default="pending", nullable=False, index=True)
    notes = Column(Text, nullable=True)
    attachments = Column(JSON, nullable=True)  # storage keys
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class AvailabilitySlot(Base):
    """One bookable (doctor, date, time) unit; rows are created by the first booking"""

    __tablename__ = "availability_slots"
    __table_args__ = (
        UniqueConstraint("doctor_id", "date", "time_slot", name="uq_slot_doctor_date_time"),
        Index("ix_slots_doctor_date_booked", "doctor_id", "date", "is_booked"),
    )

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(String(10), nullable=False)
    time_slot = Column(String(5), nullable=False)
    is_booked = Column(Boolean, default=False, nullable=False)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)


class MedicalRecord(Base):
    __tablename__ = "medical_records"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False, index=True)
    session_date = Column(String(10), nullable=False)
    diagnosis = Column(Text, nullable=False)
    treatment = Column(Text, nullable=False)
    prescription = Column(Text, nullable=True)
    doctor_notes = Column(Text, nullable=False, default="")
    follow_up_required = Column(Boolean, default=False, nullable=False)
    follow_up_date = Column(String(10), nullable=True)
    attachments = Column(JSON, nullable=True)
    teeth_chart = Column(JSON, nullable=True)  # only the positions that were charted
    symptoms = Column(JSON, default=list, nullable=False)
    vital_signs = Column(JSON, nullable=True)  # {bloodPressure, heartRate, temperature}
    created_at = Column(DateTime, server_default=func.now())


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)

    # [{description, quantity, unitPrice, total}]
    items = Column(JSON, default=list, nullable=False)
    subtotal = Column(Float, nullable=False)
    tax = Column(Float, default=0)
    discount = Column(Float, default=0)
    total = Column(Float, nullable=False)

    status = Column(String(20), default="pending", nullable=False, index=True)  # pending, paid, overdue, cancelled
    issue_date = Column(String(10), nullable=False)
    due_date = Column(String(10), nullable=False)
    payment_method = Column(String(50), nullable=True)
    payment_date = Column(String(10), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class InventoryItem(Base):
    __tablename__ = "inventory_items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    # instruments, materials, medications, supplies, equipment
    category = Column(String(30), nullable=False, index=True)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    min_quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Float, nullable=False, default=0)
    supplier = Column(String(255), nullable=True)
    expiry_date = Column(String(10), nullable=True)
    batch_number = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default="in_stock", index=True)  # in_stock, low_stock
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class InventoryLog(Base):
    """Append-only record of a stock quantity change"""

    __tablename__ = "inventory_logs"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("inventory_items.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    operation = Column(String(10), nullable=False)  # add, subtract, set
    quantity_change = Column(Integer, nullable=False)
    previous_quantity = Column(Integer, nullable=False)
    new_quantity = Column(Integer, nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_read", "user_id", "is_read"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    is_read = Column(Boolean, default=False, nullable=False)
    related_appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # appointment_followup, medication, checkup, cleaning, custom
    type = Column(String(30), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    reminder_date = Column(String(10), nullable=False, index=True)
    # Date the recurrence is counted from; reminder_date holds the next occurrence
    anchor_date = Column(String(10), nullable=True)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_interval = Column(String(10), nullable=True)  # daily, weekly, monthly, yearly
    status = Column(String(20), default="active", nullable=False, index=True)  # active, completed, cancelled
    last_sent_date = Column(String(10), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
