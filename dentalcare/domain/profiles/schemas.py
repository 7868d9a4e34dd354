"""Profile domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_email, validate_iso_date, validate_phone, validate_time_of_day

Role = Literal["doctor", "patient"]
Language = Literal["en", "ar"]
Gender = Literal["male", "female"]


class ProfileCreate(BaseModel):
    """Schema for creating the caller's profile (role is fixed afterwards)"""

    role: Role
    fullName: str = Field(min_length=1, max_length=255)
    phoneNumber: str
    email: Optional[str] = None
    gender: Optional[Gender] = None
    age: Optional[int] = Field(default=None, ge=0, le=150)
    language: Language = "en"

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone_number(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        return validate_email(v)


class ProfileUpdate(BaseModel):
    """Schema for updating contact details; role cannot be changed"""

    fullName: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phoneNumber: Optional[str] = None
    email: Optional[str] = None
    language: Optional[Language] = None

    @field_validator("phoneNumber")
    @classmethod
    def validate_phone_number(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_address(cls, v):
        return validate_email(v)


class ProfileResponse(BaseModel):
    id: int
    userId: int
    role: str
    fullName: str
    phoneNumber: str
    email: Optional[str] = None
    gender: Optional[str] = None
    age: Optional[int] = None
    language: str
    isActive: bool
    createdAt: Optional[datetime] = None


class DayHours(BaseModel):
    start: str
    end: str
    isWorking: bool

    @field_validator("start", "end")
    @classmethod
    def validate_time(cls, v):
        return validate_time_of_day(v)

    @model_validator(mode="after")
    def check_order(self):
        if self.isWorking and self.start >= self.end:
            raise ValueError("Working day must start before it ends")
        return self


class WorkingHours(BaseModel):
    monday: DayHours
    tuesday: DayHours
    wednesday: DayHours
    thursday: DayHours
    friday: DayHours
    saturday: DayHours
    sunday: DayHours


class DoctorScheduleUpdate(BaseModel):
    workingHours: Optional[WorkingHours] = None
    sessionDuration: Optional[int] = Field(default=None, gt=0, le=480)
    specialization: Optional[str] = None
    licenseNumber: Optional[str] = None


class DoctorStatusUpdate(BaseModel):
    isOnline: bool


class LeaveDayRequest(BaseModel):
    date: str

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return validate_iso_date(v)


class DoctorProfileResponse(BaseModel):
    userId: int
    specialization: Optional[str] = None
    licenseNumber: Optional[str] = None
    workingHours: dict
    isOnline: bool
    sessionDuration: int
    leaveDays: list[str]


class DoctorWithProfileResponse(ProfileResponse):
    doctorProfile: Optional[DoctorProfileResponse] = None


class MedicalHistory(BaseModel):
    allergies: list[str] = []
    chronicDiseases: list[str] = []
    specialNotes: str = ""


class EmergencyContact(BaseModel):
    name: str
    phone: str
    relationship: str


class PatientProfileUpdate(BaseModel):
    medicalHistory: Optional[MedicalHistory] = None
    emergencyContact: Optional[EmergencyContact] = None
    preferredDoctorId: Optional[int] = None


class PatientProfileResponse(BaseModel):
    userId: int
    preferredDoctorId: Optional[int] = None
    medicalHistory: dict
    emergencyContact: Optional[dict] = None
