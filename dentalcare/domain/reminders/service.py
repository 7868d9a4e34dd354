"""Reminder service - Business logic for reminders and their daily dispatch"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthContext
from ...models import Reminder, UserProfile
from ...shared.validators import today_iso
from ..notifications.service import notify
from ..profiles.repository import ProfileRepository
from .recurrence import advance_past
from .repository import ReminderRepository
from .schemas import ReminderCreate

logger = logging.getLogger(__name__)


def dispatch_due_reminders(db: Session, today: Optional[str] = None) -> int:
    """
    Send every active reminder dated on or before today to its patient.

    Recurring reminders move to their next date after today; one-shot
    reminders become completed. Everything commits once at the end.

    Returns:
        Number of notifications sent
    """
    today = today or today_iso()
    sent = 0

    for reminder in ReminderRepository.get_due_reminders(db, today):
        notify(db, reminder.patient_id, "reminder", reminder.title, reminder.message)
        reminder.last_sent_date = today
        if reminder.is_recurring and reminder.recurring_interval:
            anchor = reminder.anchor_date or reminder.reminder_date
            reminder.reminder_date = advance_past(anchor, reminder.recurring_interval, today)
        else:
            reminder.status = "completed"
        sent += 1

    db.commit()
    if sent:
        logger.info(f"⏰ Dispatched {sent} reminder(s) for {today}")
    return sent


class ReminderService:
    """Service layer for reminder business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = ReminderRepository()
        self.profiles = ProfileRepository()

    def create_reminder(self, data: ReminderCreate, auth: AuthContext) -> Reminder:
        auth.require_doctor("Only doctors can create reminders")

        patient = self.profiles.get_profile_by_user_id(self.db, data.patientId)
        if not patient or patient.role != "patient":
            raise HTTPException(status_code=404, detail="Patient not found")

        reminder = self.repo.create_reminder(
            self.db,
            doctor_id=auth.user_id,
            patient_id=data.patientId,
            type=data.type,
            title=data.title,
            message=data.message,
            reminder_date=data.reminderDate,
            anchor_date=data.reminderDate if data.isRecurring else None,
            is_recurring=data.isRecurring,
            recurring_interval=data.recurringInterval if data.isRecurring else None,
            status="active",
        )
        logger.info(f"📝 Reminder {reminder.id} scheduled for {reminder.reminder_date}")
        return reminder

    def get_doctor_reminders(self, auth: AuthContext) -> list[tuple[Reminder, Optional[UserProfile]]]:
        """Doctor's active reminders, soonest first, with the patient's profile"""
        if not auth.is_doctor:
            return []

        reminders = self.repo.get_active_doctor_reminders(self.db, auth.user_id)
        patients = self.profiles.get_profiles_by_user_ids(self.db, {r.patient_id for r in reminders})
        return [(r, patients.get(r.patient_id)) for r in reminders]

    def get_reminders_for_date(self, date_str: str, auth: AuthContext) -> list[Reminder]:
        if not auth.is_doctor:
            return []
        return self.repo.get_active_reminders_on(self.db, date_str, doctor_id=auth.user_id)

    def update_status(self, reminder_id: int, new_status: str, auth: AuthContext) -> Reminder:
        auth.require_user()

        reminder = self.repo.get_reminder_by_id(self.db, reminder_id)
        if not reminder:
            raise HTTPException(status_code=404, detail="Reminder not found")
        auth.require_owner(reminder.doctor_id)

        if reminder.status != "active":
            raise HTTPException(
                status_code=409, detail=f"Cannot change a {reminder.status} reminder"
            )

        reminder.status = new_status
        self.db.commit()
        self.db.refresh(reminder)
        return reminder
