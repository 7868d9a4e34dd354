"""Billing router - FastAPI endpoints for invoices"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...models import Invoice
from ..profiles.router import to_profile_response
from .ledger import effective_status
from .schemas import InvoiceCreate, InvoiceResponse, InvoiceStatusUpdate, InvoiceWithUserResponse
from .service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Billing"])


def get_billing_service(db: Session = Depends(get_db)) -> BillingService:
    """Dependency injection for BillingService"""
    return BillingService(db)


def to_response(i: Invoice) -> dict:
    return {
        "id": i.id,
        "invoiceNumber": i.invoice_number,
        "patientId": i.patient_id,
        "doctorId": i.doctor_id,
        "appointmentId": i.appointment_id,
        "items": i.items or [],
        "subtotal": i.subtotal,
        "tax": i.tax or 0,
        "discount": i.discount or 0,
        "total": i.total,
        "status": effective_status(i.status, i.due_date),
        "issueDate": i.issue_date,
        "dueDate": i.due_date,
        "paymentMethod": i.payment_method,
        "paymentDate": i.payment_date,
        "notes": i.notes,
        "createdAt": i.created_at,
        "updatedAt": i.updated_at,
    }


@router.post("", response_model=InvoiceResponse, status_code=201)
async def create_invoice(
    data: InvoiceCreate,
    auth: AuthContext = Depends(get_auth_context),
    service: BillingService = Depends(get_billing_service),
):
    return InvoiceResponse(**to_response(service.create_invoice(data, auth)))


@router.get("/mine", response_model=list[InvoiceWithUserResponse])
async def get_my_invoices(
    auth: AuthContext = Depends(get_auth_context),
    service: BillingService = Depends(get_billing_service),
):
    return [
        InvoiceWithUserResponse(
            **to_response(invoice),
            otherUser=to_profile_response(other) if other else None,
        )
        for invoice, other in service.get_my_invoices(auth)
    ]


@router.patch("/{invoice_id}/status", response_model=InvoiceResponse)
async def update_invoice_status(
    invoice_id: int,
    data: InvoiceStatusUpdate,
    auth: AuthContext = Depends(get_auth_context),
    service: BillingService = Depends(get_billing_service),
):
    """Set invoice status (issuing doctor only); paid notifies the patient"""
    return InvoiceResponse(**to_response(service.update_status(invoice_id, data, auth)))
