"""Reminder repository - Database operations for doctor-authored reminders"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Reminder


class ReminderRepository:
    """Repository for reminder database operations"""

    @staticmethod
    def create_reminder(db: Session, **reminder_data) -> Reminder:
        reminder = Reminder(**reminder_data)
        db.add(reminder)
        db.commit()
        db.refresh(reminder)
        return reminder

    @staticmethod
    def get_reminder_by_id(db: Session, reminder_id: int) -> Optional[Reminder]:
        return db.query(Reminder).filter(Reminder.id == reminder_id).first()

    @staticmethod
    def get_active_doctor_reminders(db: Session, doctor_id: int) -> list[Reminder]:
        return (
            db.query(Reminder)
            .filter(Reminder.doctor_id == doctor_id, Reminder.status == "active")
            .order_by(Reminder.reminder_date.asc(), Reminder.id.asc())
            .all()
        )

    @staticmethod
    def get_active_reminders_on(db: Session, date_str: str, doctor_id: Optional[int] = None) -> list[Reminder]:
        query = db.query(Reminder).filter(Reminder.reminder_date == date_str, Reminder.status == "active")
        if doctor_id is not None:
            query = query.filter(Reminder.doctor_id == doctor_id)
        return query.order_by(Reminder.id.asc()).all()

    @staticmethod
    def get_due_reminders(db: Session, today: str) -> list[Reminder]:
        """Active reminders dated on or before today"""
        return (
            db.query(Reminder)
            .filter(Reminder.status == "active", Reminder.reminder_date <= today)
            .order_by(Reminder.reminder_date.asc(), Reminder.id.asc())
            .all()
        )
