"""Appointment router - FastAPI endpoints for availability, booking and lifecycle"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...config import BOOKING_RATE_LIMIT, BOOKING_RATE_WINDOW_SECONDS
from ...database import get_db
from ...models import Appointment
from ...rate_limiter import create_rate_limiter
from ...shared.validators import validate_iso_date
from ..profiles.router import to_profile_response
from .schemas import (
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentWithPatientResponse,
    AppointmentWithUserResponse,
    BookAppointmentRequest,
    BookAppointmentResponse,
)
from .service import AppointmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])

rate_limit_booking = create_rate_limiter(
    limit=BOOKING_RATE_LIMIT, window_seconds=BOOKING_RATE_WINDOW_SECONDS, key_prefix="booking"
)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db)


def to_response(a: Appointment) -> dict:
    return {
        "id": a.id,
        "patientId": a.patient_id,
        "doctorId": a.doctor_id,
        "appointmentDate": a.appointment_date,
        "appointmentTime": a.appointment_time,
        "visitType": a.visit_type,
        "status": a.status,
        "notes": a.notes,
        "attachments": a.attachments,
        "createdAt": a.created_at,
        "updatedAt": a.updated_at,
    }


@router.get("/slots", response_model=list[str])
async def get_available_slots(
    doctor_id: int = Query(...),
    date: str = Query(...),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Open session start times for a doctor on a date"""
    try:
        validate_iso_date(date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return service.get_available_slots(doctor_id, date)


@router.post("", response_model=BookAppointmentResponse, status_code=201)
async def book_appointment(
    data: BookAppointmentRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: AppointmentService = Depends(get_appointment_service),
    _: None = Depends(rate_limit_booking),
):
    appointment = service.book_appointment(data, auth)
    return BookAppointmentResponse(appointmentId=appointment.id, status=appointment.status)


@router.get("/mine", response_model=list[AppointmentWithUserResponse])
async def get_my_appointments(
    auth: AuthContext = Depends(get_auth_context),
    service: AppointmentService = Depends(get_appointment_service),
):
    return [
        AppointmentWithUserResponse(
            **to_response(appointment),
            otherUser=to_profile_response(other) if other else None,
        )
        for appointment, other in service.get_my_appointments(auth)
    ]


@router.get("/today", response_model=list[AppointmentWithPatientResponse])
async def get_today_appointments(
    auth: AuthContext = Depends(get_auth_context),
    service: AppointmentService = Depends(get_appointment_service),
):
    return [
        AppointmentWithPatientResponse(
            **to_response(appointment),
            patient=to_profile_response(patient) if patient else None,
        )
        for appointment, patient in service.get_today_appointments(auth)
    ]


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: int,
    data: AppointmentStatusUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Confirm, reject, cancel or mark no-show (appointment's doctor only)"""
    appointment = service.update_status(appointment_id, data.status, auth)
    return AppointmentResponse(**to_response(appointment))
