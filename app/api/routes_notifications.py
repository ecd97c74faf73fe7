"""
Notification inbox routes
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.exceptions import NotFoundError
from app.schemas.user import AuthSession
from app.services.notification_service import NotificationService
from app.utils.security import get_current_session
from app.utils.responses import success_response

router = APIRouter()

def _check_owner(db: Session, notification_id: str, session: AuthSession):
    notification = NotificationService.get_notification(db, notification_id)
    # Someone else's notification is reported as missing
    if notification is None or notification.user_id != session.user.id:
        raise NotFoundError("Notification")

@router.get("")
async def list_notifications(
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    """The signed-in user's notifications, newest first"""
    return success_response(
        message="Notifications retrieved",
        data=NotificationService.get_user_notifications(db, session.user.id, limit=limit)
    )

@router.get("/unread-count")
async def unread_count(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    return success_response(
        message="Unread count retrieved",
        data={"unread_count": NotificationService.get_unread_notification_count(db, session.user.id)}
    )

@router.post("/read-all")
async def mark_all_read(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    updated = NotificationService.mark_all_notifications_as_read(db, session.user.id)
    return success_response(
        message=f"{updated} notifications marked as read",
        data={"updated": updated}
    )

@router.post("/{notification_id}/read")
async def mark_read(
    notification_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    _check_owner(db, notification_id, session)
    NotificationService.mark_notification_as_read(db, notification_id)
    return success_response(message="Notification marked as read")

@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    _check_owner(db, notification_id, session)
    NotificationService.delete_notification(db, notification_id)
    return success_response(message="Notification deleted")
