"""Appointment domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_iso_date, validate_time_of_day
from ..profiles.schemas import ProfileResponse

VisitType = Literal["consultation", "pain", "cleaning", "filling", "extraction", "checkup", "other"]

# "completed" is reachable only through medical record creation
ManualStatus = Literal["confirmed", "rejected", "cancelled", "no_show"]


class BookAppointmentRequest(BaseModel):
    doctorId: int
    appointmentDate: str
    appointmentTime: str
    visitType: VisitType
    notes: Optional[str] = Field(default=None, max_length=2000)
    attachments: Optional[list[str]] = None

    @field_validator("appointmentDate")
    @classmethod
    def validate_date(cls, v):
        return validate_iso_date(v)

    @field_validator("appointmentTime")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)


class AppointmentStatusUpdate(BaseModel):
    status: ManualStatus


class AppointmentResponse(BaseModel):
    id: int
    patientId: int
    doctorId: int
    appointmentDate: str
    appointmentTime: str
    visitType: str
    status: str
    notes: Optional[str] = None
    attachments: Optional[list[str]] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class AppointmentWithUserResponse(AppointmentResponse):
    """Appointment plus the profile of the other party"""

    otherUser: Optional[ProfileResponse] = None


class AppointmentWithPatientResponse(AppointmentResponse):
    patient: Optional[ProfileResponse] = None


class BookAppointmentResponse(BaseModel):
    appointmentId: int
    status: str
