"""Reminder router - FastAPI endpoints for patient reminders"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...models import Reminder
from ...shared.validators import validate_iso_date
from ..profiles.router import to_profile_response
from .schemas import ReminderCreate, ReminderResponse, ReminderStatusUpdate, ReminderWithPatientResponse
from .service import ReminderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["Reminders"])


def get_reminder_service(db: Session = Depends(get_db)) -> ReminderService:
    """Dependency injection for ReminderService"""
    return ReminderService(db)


def to_response(r: Reminder) -> dict:
    return {
        "id": r.id,
        "doctorId": r.doctor_id,
        "patientId": r.patient_id,
        "type": r.type,
        "title": r.title,
        "message": r.message,
        "reminderDate": r.reminder_date,
        "isRecurring": r.is_recurring,
        "recurringInterval": r.recurring_interval,
        "status": r.status,
        "lastSentDate": r.last_sent_date,
        "createdAt": r.created_at,
    }


@router.post("", response_model=ReminderResponse, status_code=201)
async def create_reminder(
    data: ReminderCreate,
    auth: AuthContext = Depends(get_auth_context),
    service: ReminderService = Depends(get_reminder_service),
):
    return ReminderResponse(**to_response(service.create_reminder(data, auth)))


@router.get("", response_model=list[ReminderWithPatientResponse])
async def get_doctor_reminders(
    auth: AuthContext = Depends(get_auth_context),
    service: ReminderService = Depends(get_reminder_service),
):
    return [
        ReminderWithPatientResponse(
            **to_response(reminder),
            patient=to_profile_response(patient) if patient else None,
        )
        for reminder, patient in service.get_doctor_reminders(auth)
    ]


@router.get("/due", response_model=list[ReminderResponse])
async def get_due_reminders(
    date: str = Query(...),
    auth: AuthContext = Depends(get_auth_context),
    service: ReminderService = Depends(get_reminder_service),
):
    """Caller's active reminders scheduled on a date"""
    try:
        validate_iso_date(date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return [ReminderResponse(**to_response(r)) for r in service.get_reminders_for_date(date, auth)]


@router.patch("/{reminder_id}/status", response_model=ReminderResponse)
async def update_reminder_status(
    reminder_id: int,
    data: ReminderStatusUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: ReminderService = Depends(get_reminder_service),
):
    return ReminderResponse(**to_response(service.update_status(reminder_id, data.status, auth)))
