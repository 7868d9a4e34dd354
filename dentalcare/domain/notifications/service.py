"""
Notification service

Other domains never write notification rows themselves; they call notify()
inside their own transaction so the mailbox entry commits with the write
that caused it.
"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import AuthContext
from ...models import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = (
    "appointment_request",
    "appointment_confirmed",
    "appointment_rejected",
    "appointment_reminder",
    "appointment_cancelled",
    "session_summary",
    "invoice_created",
    "payment_received",
    "reminder",
    "low_stock",
)


def notify(
    db: Session,
    user_id: int,
    notification_type: str,
    title: str,
    message: str,
    related_appointment_id: Optional[int] = None,
) -> Notification:
    """Queue a mailbox entry for user_id; the caller commits"""
    if notification_type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {notification_type}")

    logger.info(f"🔔 Queued {notification_type} notification for user {user_id}")
    return NotificationRepository.add_notification(
        db, user_id, notification_type, title, message, related_appointment_id
    )


class NotificationService:
    """Read/mark-read operations on the caller's mailbox"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def get_my_notifications(
        self, auth: AuthContext, unread_only: bool = False, limit: Optional[int] = None
    ) -> list[Notification]:
        if not auth.is_authenticated:
            return []
        return self.repo.get_notifications(self.db, auth.user_id, unread_only, limit)

    def get_unread_count(self, auth: AuthContext) -> int:
        if not auth.is_authenticated:
            return 0
        return self.repo.count_unread(self.db, auth.user_id)

    def mark_read(self, notification_id: int, auth: AuthContext) -> Notification:
        auth.require_user()
        notification = self.repo.get_notification_by_id(self.db, notification_id)
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        auth.require_owner(notification.user_id)
        return self.repo.mark_read(self.db, notification)

    def mark_all_read(self, auth: AuthContext) -> dict:
        user = auth.require_user()
        updated = self.repo.mark_all_read(self.db, user.id)
        return {"message": "Notifications marked as read", "updatedCount": updated}
