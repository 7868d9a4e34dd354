"""Analytics service - on-demand dashboard statistics for doctors"""

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...auth import AuthContext
from ..billing.ledger import effective_status, round_money
from ..profiles.repository import ProfileRepository
from .aggregations import PERIOD_DAYS, age_group, count_by, percentage, safe_average
from .repository import AnalyticsRepository
from .schemas import DashboardAnalytics, PatientAnalytics, TopPatient

logger = logging.getLogger(__name__)

NEW_PATIENT_WINDOW_DAYS = 30
TOP_PATIENTS_LIMIT = 10


def _utc_now() -> datetime:
    # Timestamps are stored naive in UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class AnalyticsService:
    """Full scans over the caller's appointments and invoices, never cached"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AnalyticsRepository()
        self.profiles = ProfileRepository()

    def get_dashboard(self, period: str, auth: AuthContext) -> Optional[DashboardAnalytics]:
        if not auth.is_doctor:
            return None

        since = _utc_now() - timedelta(days=PERIOD_DAYS[period])
        appointments = self.repo.get_doctor_appointments_since(self.db, auth.user_id, since)
        invoices = self.repo.get_doctor_invoices_since(self.db, auth.user_id, since)

        total = len(appointments)
        completed = sum(1 for a in appointments if a.status == "completed")
        cancelled = sum(1 for a in appointments if a.status in ("cancelled", "no_show"))

        statuses = [(i, effective_status(i.status, i.due_date)) for i in invoices]
        total_revenue = round_money(sum(i.total for i, s in statuses if s == "paid"))
        pending_revenue = round_money(sum(i.total for i, s in statuses if s == "pending"))

        return DashboardAnalytics(
            period=period,
            totalAppointments=total,
            completedAppointments=completed,
            cancelledAppointments=cancelled,
            completionRate=percentage(completed, total),
            totalRevenue=total_revenue,
            pendingRevenue=pending_revenue,
            averageRevenuePerAppointment=safe_average(total_revenue, completed),
            visitTypes=count_by(a.visit_type for a in appointments),
            dailyAppointments=dict(sorted(count_by(a.appointment_date for a in appointments).items())),
        )

    def get_patient_analytics(self, auth: AuthContext) -> Optional[PatientAnalytics]:
        if not auth.is_doctor:
            return None

        appointments = self.repo.get_doctor_appointments_since(self.db, auth.user_id)
        invoices = self.repo.get_doctor_invoices_since(self.db, auth.user_id)

        patient_ids = {a.patient_id for a in appointments}
        profiles = self.profiles.get_profiles_by_user_ids(self.db, patient_ids)

        visits = defaultdict(list)
        for a in appointments:
            if a.status == "completed":
                visits[a.patient_id].append(a.appointment_date)

        spent = defaultdict(float)
        for i in invoices:
            if i.status == "paid":
                spent[i.patient_id] += i.total

        new_since = _utc_now() - timedelta(days=NEW_PATIENT_WINDOW_DAYS)
        new_patients = sum(
            1 for p in profiles.values() if p.created_at is not None and p.created_at > new_since
        )

        top = [
            TopPatient(
                userId=patient_id,
                fullName=profiles[patient_id].full_name if patient_id in profiles else None,
                age=profiles[patient_id].age if patient_id in profiles else None,
                gender=profiles[patient_id].gender if patient_id in profiles else None,
                totalVisits=len(visits[patient_id]),
                lastVisit=max(visits[patient_id]) if visits[patient_id] else None,
                totalSpent=round_money(spent[patient_id]),
            )
            for patient_id in patient_ids
        ]
        top.sort(key=lambda p: (-p.totalVisits, p.userId))

        return PatientAnalytics(
            totalPatients=len(patient_ids),
            newPatientsThisMonth=new_patients,
            ageGroups=count_by(age_group(p.age) for p in profiles.values()),
            genderDistribution=count_by((p.gender for p in profiles.values()), missing="Unknown"),
            topPatients=top[:TOP_PATIENTS_LIMIT],
        )
