"""Analytics repository - windowed scans over appointments and invoices"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, Invoice


class AnalyticsRepository:
    """Read-only queries feeding the analytics reducers"""

    @staticmethod
    def get_doctor_appointments_since(db: Session, doctor_id: int, since: Optional[datetime] = None) -> list[Appointment]:
        query = db.query(Appointment).filter(Appointment.doctor_id == doctor_id)
        if since is not None:
            query = query.filter(Appointment.created_at >= since)
        return query.all()

    @staticmethod
    def get_doctor_invoices_since(db: Session, doctor_id: int, since: Optional[datetime] = None) -> list[Invoice]:
        query = db.query(Invoice).filter(Invoice.doctor_id == doctor_id)
        if since is not None:
            query = query.filter(Invoice.created_at >= since)
        return query.all()
