"""Medical record router - FastAPI endpoints for session records"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...config import RECORD_RATE_LIMIT, RECORD_RATE_WINDOW_SECONDS
from ...database import get_db
from ...rate_limiter import create_rate_limiter
from ..profiles.router import to_profile_response
from .dental_chart import expand_chart
from .schemas import MedicalRecordCreate, MedicalRecordCreateResponse, MedicalRecordResponse
from .service import MedicalRecordService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/medical-records", tags=["Medical Records"])

rate_limit_records = create_rate_limiter(
    limit=RECORD_RATE_LIMIT, window_seconds=RECORD_RATE_WINDOW_SECONDS, key_prefix="medical_record"
)


def get_medical_record_service(db: Session = Depends(get_db)) -> MedicalRecordService:
    """Dependency injection for MedicalRecordService"""
    return MedicalRecordService(db)


@router.post("", response_model=MedicalRecordCreateResponse, status_code=201)
async def create_medical_record(
    data: MedicalRecordCreate,
    auth: AuthContext = Depends(get_auth_context),
    service: MedicalRecordService = Depends(get_medical_record_service),
    _: None = Depends(rate_limit_records),
):
    """Record a session and mark its appointment completed"""
    record = service.create_record(data, auth)
    return MedicalRecordCreateResponse(recordId=record.id, appointmentStatus="completed")


@router.get("/patient/{patient_id}", response_model=list[MedicalRecordResponse])
async def get_patient_medical_records(
    patient_id: int,
    auth: AuthContext = Depends(get_auth_context),
    service: MedicalRecordService = Depends(get_medical_record_service),
):
    return [
        MedicalRecordResponse(
            id=r.id,
            patientId=r.patient_id,
            doctorId=r.doctor_id,
            appointmentId=r.appointment_id,
            sessionDate=r.session_date,
            diagnosis=r.diagnosis,
            treatment=r.treatment,
            prescription=r.prescription,
            doctorNotes=r.doctor_notes or "",
            followUpRequired=r.follow_up_required,
            followUpDate=r.follow_up_date,
            attachments=r.attachments,
            teethChart=expand_chart(r.teeth_chart),
            symptoms=r.symptoms or [],
            vitalSigns=r.vital_signs,
            createdAt=r.created_at,
            doctor=to_profile_response(doctor) if doctor else None,
        )
        for r, doctor in service.get_patient_records(patient_id, auth)
    ]
