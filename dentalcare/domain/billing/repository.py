"""Billing repository - Database operations for invoices"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Invoice


class InvoiceRepository:
    """Repository for invoice database operations"""

    @staticmethod
    def get_invoice_by_id(db: Session, invoice_id: int) -> Optional[Invoice]:
        return db.query(Invoice).filter(Invoice.id == invoice_id).first()

    @staticmethod
    def count_doctor_invoices_with_prefix(db: Session, doctor_id: int, prefix: str) -> int:
        return (
            db.query(Invoice)
            .filter(Invoice.doctor_id == doctor_id, Invoice.invoice_number.like(f"{prefix}%"))
            .count()
        )

    @staticmethod
    def create_invoice(db: Session, **invoice_data) -> Invoice:
        """Stage an invoice in the caller's transaction (no commit)"""
        invoice = Invoice(**invoice_data)
        db.add(invoice)
        db.flush()
        return invoice

    @staticmethod
    def get_doctor_invoices(db: Session, doctor_id: int) -> list[Invoice]:
        return (
            db.query(Invoice)
            .filter(Invoice.doctor_id == doctor_id)
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .all()
        )

    @staticmethod
    def get_patient_invoices(db: Session, patient_id: int) -> list[Invoice]:
        return (
            db.query(Invoice)
            .filter(Invoice.patient_id == patient_id)
            .order_by(Invoice.created_at.desc(), Invoice.id.desc())
            .all()
        )

    @staticmethod
    def get_pending_past_due(db: Session, today: str) -> list[Invoice]:
        return (
            db.query(Invoice)
            .filter(Invoice.status == "pending", Invoice.due_date < today)
            .all()
        )
