"""Notification router - mailbox read endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import AuthContext, get_auth_context
from ...database import get_db
from ...models import Notification
from .schemas import NotificationResponse, UnreadCountResponse
from .service import NotificationService

router = APIRouter(prefix="/notifications", tags=["Notifications"])


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """Dependency injection for NotificationService"""
    return NotificationService(db)


def to_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=n.id,
        userId=n.user_id,
        type=n.type,
        title=n.title,
        message=n.message,
        isRead=n.is_read,
        relatedAppointmentId=n.related_appointment_id,
        createdAt=n.created_at,
    )


@router.get("", response_model=list[NotificationResponse])
async def get_my_notifications(
    unread_only: bool = Query(False),
    limit: Optional[int] = Query(None, ge=1, le=200),
    auth: AuthContext = Depends(get_auth_context),
    service: NotificationService = Depends(get_notification_service),
):
    """Newest first; empty for anonymous callers"""
    return [to_response(n) for n in service.get_my_notifications(auth, unread_only, limit)]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    auth: AuthContext = Depends(get_auth_context),
    service: NotificationService = Depends(get_notification_service),
):
    return UnreadCountResponse(count=service.get_unread_count(auth))


@router.post("/read-all")
async def mark_all_read(
    auth: AuthContext = Depends(get_auth_context),
    service: NotificationService = Depends(get_notification_service),
):
    return service.mark_all_read(auth)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    auth: AuthContext = Depends(get_auth_context),
    service: NotificationService = Depends(get_notification_service),
):
    return to_response(service.mark_read(notification_id, auth))
