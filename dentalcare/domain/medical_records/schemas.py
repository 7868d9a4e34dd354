"""Medical record schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_iso_date
from ..profiles.schemas import ProfileResponse
from .dental_chart import validate_chart


class VitalSigns(BaseModel):
    bloodPressure: Optional[str] = None
    heartRate: Optional[float] = Field(default=None, gt=0)
    temperature: Optional[float] = Field(default=None, gt=0)


class MedicalRecordCreate(BaseModel):
    appointmentId: int
    diagnosis: str = Field(min_length=1)
    treatment: str = Field(min_length=1)
    prescription: Optional[str] = None
    doctorNotes: str = ""
    followUpRequired: bool = False
    followUpDate: Optional[str] = None
    attachments: Optional[list[str]] = None
    teethChart: Optional[dict[str, Optional[str]]] = None
    symptoms: list[str] = []
    vitalSigns: Optional[VitalSigns] = None

    @field_validator("followUpDate")
    @classmethod
    def validate_follow_up_date(cls, v):
        return validate_iso_date(v)

    @field_validator("teethChart")
    @classmethod
    def validate_teeth_chart(cls, v):
        return validate_chart(v)


class MedicalRecordResponse(BaseModel):
    id: int
    patientId: int
    doctorId: int
    appointmentId: int
    sessionDate: str
    diagnosis: str
    treatment: str
    prescription: Optional[str] = None
    doctorNotes: str
    followUpRequired: bool
    followUpDate: Optional[str] = None
    attachments: Optional[list[str]] = None
    teethChart: dict[str, str]
    symptoms: list[str]
    vitalSigns: Optional[dict] = None
    createdAt: Optional[datetime] = None
    doctor: Optional[ProfileResponse] = None


class MedicalRecordCreateResponse(BaseModel):
    recordId: int
    appointmentStatus: str
