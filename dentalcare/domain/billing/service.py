"""Billing service - Business logic for invoices"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import AuthContext
from ...models import Invoice, UserProfile
from ...shared.validators import today_iso, utc_today
from ..appointments.repository import AppointmentRepository
from ..notifications.service import notify
from ..profiles.repository import ProfileRepository
from .ledger import compute_totals, effective_status, generate_invoice_number
from .repository import InvoiceRepository
from .schemas import InvoiceCreate, InvoiceStatusUpdate

logger = logging.getLogger(__name__)


def mark_overdue_invoices(db: Session, today: Optional[str] = None) -> int:
    """
    Persist the derived overdue status for every pending invoice past due.

    Called by the daily worker job; reads already report overdue through
    effective_status, this only makes the stored value agree.
    """
    today = today or today_iso()
    updated = 0
    for invoice in InvoiceRepository.get_pending_past_due(db, today):
        new_status = effective_status(invoice.status, invoice.due_date, today)
        if new_status != invoice.status:
            invoice.status = new_status
            updated += 1

    db.commit()
    if updated:
        logger.info(f"⏰ Marked {updated} invoice(s) overdue")
    return updated


class BillingService:
    """Service layer for invoice business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InvoiceRepository()
        self.profiles = ProfileRepository()
        self.appointments = AppointmentRepository()

    def create_invoice(self, data: InvoiceCreate, auth: AuthContext) -> Invoice:
        auth.require_doctor("Only doctors can create invoices")

        patient = self.profiles.get_profile_by_user_id(self.db, data.patientId)
        if not patient or patient.role != "patient":
            raise HTTPException(status_code=404, detail="Patient not found")

        if data.appointmentId is not None:
            appointment = self.appointments.get_appointment_by_id(self.db, data.appointmentId)
            if not appointment:
                raise HTTPException(status_code=404, detail="Appointment not found")
            auth.require_owner(appointment.doctor_id)

        items, subtotal, total = compute_totals(
            [item.model_dump() for item in data.items],
            tax=data.tax,
            discount=data.discount,
            subtotal=data.subtotal,
            total=data.total,
        )

        issue_date = utc_today()
        prefix = f"INV-{issue_date.year}-{auth.user_id:04d}-"
        sequence = self.repo.count_doctor_invoices_with_prefix(self.db, auth.user_id, prefix) + 1
        invoice_number = generate_invoice_number(issue_date.year, auth.user_id, sequence)

        try:
            invoice = self.repo.create_invoice(
                self.db,
                invoice_number=invoice_number,
                patient_id=data.patientId,
                doctor_id=auth.user_id,
                appointment_id=data.appointmentId,
                items=items,
                subtotal=subtotal,
                tax=data.tax,
                discount=data.discount,
                total=total,
                status="pending",
                issue_date=issue_date.isoformat(),
                due_date=data.dueDate,
                notes=data.notes,
            )
        except IntegrityError as e:
            # Concurrent invoice for the same doctor took this number
            self.db.rollback()
            raise HTTPException(status_code=409, detail="Invoice number conflict, please retry") from e

        notify(
            self.db,
            data.patientId,
            "invoice_created",
            "New Invoice",
            f"Invoice {invoice_number} has been created. Amount: ${total:.2f}",
        )
        self.db.commit()
        self.db.refresh(invoice)

        logger.info(f"🧾 Invoice {invoice_number} created by doctor {auth.user_id}")
        return invoice

    def get_my_invoices(self, auth: AuthContext) -> list[tuple[Invoice, Optional[UserProfile]]]:
        """Caller's invoices newest first, with the other party's profile"""
        if not auth.profile:
            return []

        if auth.is_doctor:
            invoices = self.repo.get_doctor_invoices(self.db, auth.user_id)
            other_ids = {i.patient_id for i in invoices}
        else:
            invoices = self.repo.get_patient_invoices(self.db, auth.user_id)
            other_ids = {i.doctor_id for i in invoices}

        profiles = self.profiles.get_profiles_by_user_ids(self.db, other_ids)
        return [
            (i, profiles.get(i.patient_id if auth.is_doctor else i.doctor_id))
            for i in invoices
        ]

    def update_status(self, invoice_id: int, data: InvoiceStatusUpdate, auth: AuthContext) -> Invoice:
        auth.require_user()

        invoice = self.repo.get_invoice_by_id(self.db, invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        auth.require_owner(invoice.doctor_id)

        invoice.status = data.status
        if data.paymentMethod is not None:
            invoice.payment_method = data.paymentMethod
        if data.paymentDate is not None:
            invoice.payment_date = data.paymentDate
        elif data.status == "paid" and not invoice.payment_date:
            invoice.payment_date = today_iso()

        if data.status == "paid":
            notify(
                self.db,
                invoice.patient_id,
                "payment_received",
                "Payment Received",
                f"Payment for invoice {invoice.invoice_number} has been received.",
            )

        self.db.commit()
        self.db.refresh(invoice)

        logger.info(f"💳 Invoice {invoice.invoice_number} status → {data.status}")
        return invoice
