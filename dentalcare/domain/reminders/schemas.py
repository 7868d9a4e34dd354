"""Reminder domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...shared.validators import validate_iso_date
from ..profiles.schemas import ProfileResponse

ReminderType = Literal["appointment_followup", "medication", "checkup", "cleaning", "custom"]
RecurringInterval = Literal["daily", "weekly", "monthly", "yearly"]


class ReminderCreate(BaseModel):
    patientId: int
    type: ReminderType
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    reminderDate: str
    isRecurring: bool = False
    recurringInterval: Optional[RecurringInterval] = None

    @field_validator("reminderDate")
    @classmethod
    def validate_reminder_date(cls, v):
        return validate_iso_date(v)

    @model_validator(mode="after")
    def check_interval(self):
        if self.isRecurring and not self.recurringInterval:
            raise ValueError("Recurring reminders need a recurringInterval")
        return self


class ReminderStatusUpdate(BaseModel):
    status: Literal["completed", "cancelled"]


class ReminderResponse(BaseModel):
    id: int
    doctorId: int
    patientId: int
    type: str
    title: str
    message: str
    reminderDate: str
    isRecurring: bool
    recurringInterval: Optional[str] = None
    status: str
    lastSentDate: Optional[str] = None
    createdAt: Optional[datetime] = None


class ReminderWithPatientResponse(ReminderResponse):
    patient: Optional[ProfileResponse] = None
