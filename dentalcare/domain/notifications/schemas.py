"""Notification domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: int
    userId: int
    type: str
    title: str
    message: str
    isRead: bool
    relatedAppointmentId: Optional[int] = None
    createdAt: Optional[datetime] = None


class UnreadCountResponse(BaseModel):
    count: int
