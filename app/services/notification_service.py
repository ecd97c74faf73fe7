"""
Notification outbox: per-user messages with read state
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidValueError, NotFoundError
from app.schemas.event import EventRecord
from app.schemas.notification import NotificationRecord, NotificationWithEvent
from app.services.repositories import NotificationRepo, collection, use_firestore
from app.utils.dates import sort_by_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = {
    "event_update",
    "event_reminder",
    "event_cancelled",
    "registration_confirmed",
    "new_opportunity",
}


class NotificationService:
    """Service for notification records"""

    @staticmethod
    def create_notification(
        db: Session,
        user_id: str,
        title: str,
        message: str,
        type: str,
        related_event_id: Optional[str] = None
    ) -> str:
        if type not in NOTIFICATION_TYPES:
            raise InvalidValueError(f"Unknown notification type '{type}'")

        return collection(db, "notifications").insert({
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": type,
            "related_event_id": related_event_id,
            "is_read": False,
            "created_at": utc_now_iso(),
        })

    @staticmethod
    def get_notification(db: Session, notification_id: str) -> Optional[NotificationRecord]:
        record = collection(db, "notifications").get(notification_id)
        return NotificationRecord(**record) if record else None

    @staticmethod
    def fan_out(db: Session, event_id: str, title: str, message: str, type: str) -> List[NotificationRecord]:
        """Insert one notification per non-cancelled registration of the event.

        Each insert is its own write: a failure part way leaves the earlier
        notifications in place.
        """
        registrations = [
            r for r in collection(db, "registrations").list(event_id=event_id)
            if r["status"] != "cancelled"
        ]

        created = []
        for registration in registrations:
            notification_id = NotificationService.create_notification(
                db,
                user_id=registration["user_id"],
                title=title,
                message=message,
                type=type,
                related_event_id=event_id
            )
            created.append(NotificationService.get_notification(db, notification_id))

        logger.info(f"Fan-out '{type}' for event {event_id}: {len(created)} notifications")
        return created

    @staticmethod
    def notify_event_attendees(db: Session, event_id: str, title: str, message: str, type: str) -> int:
        """Notify everyone registered for an event; returns the number sent"""
        return len(NotificationService.fan_out(db, event_id, title, message, type))

    @staticmethod
    def get_user_notifications(db: Session, user_id: str, limit: Optional[int] = None) -> List[NotificationWithEvent]:
        """Newest first, with the related event attached when it still exists"""
        records = sort_by_timestamp(
            collection(db, "notifications").list(user_id=user_id),
            "created_at",
            newest_first=True
        )
        if limit:
            records = records[:limit]

        events = collection(db, "events")
        results = []
        for record in records:
            related = events.get(record["related_event_id"]) if record.get("related_event_id") else None
            results.append(NotificationWithEvent(
                **record,
                related_event=EventRecord(**related) if related else None
            ))
        return results

    @staticmethod
    def get_unread_notification_count(db: Session, user_id: str) -> int:
        return collection(db, "notifications").count(user_id=user_id, is_read=False)

    @staticmethod
    def mark_notification_as_read(db: Session, notification_id: str) -> None:
        if not collection(db, "notifications").patch(notification_id, {"is_read": True}):
            raise NotFoundError("Notification")

    @staticmethod
    def mark_all_notifications_as_read(db: Session, user_id: str) -> int:
        if use_firestore():
            updated = NotificationRepo.mark_all_read_fs(user_id)
        else:
            updated = NotificationRepo.mark_all_read_sql(db, user_id)
        logger.info(f"Marked {updated} notifications read for user {user_id}")
        return updated

    @staticmethod
    def delete_notification(db: Session, notification_id: str) -> None:
        if not collection(db, "notifications").delete(notification_id):
            raise NotFoundError("Notification")
