"""
Post-commit delivery of queued notifications with real-time push
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from app.schemas.notification import NotificationRecord
from app.services.notification_service import NotificationService
from app.services.outbox import AttendeeBroadcast, Outbox, UserNotice
from app.services.repositories import use_firestore
from app.services.websocket_manager import WebSocketManager

logger = logging.getLogger(__name__)

class NotificationDispatcher:
    """Delivers an Outbox once the mutation that filled it has committed.

    A failing item is logged and skipped; the primary write is never undone.
    """

    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    async def deliver(self, db: Session, outbox: Outbox) -> int:
        """Create and push every pending notification; returns how many were created"""
        created: List[NotificationRecord] = []

        for item in outbox.drain():
            try:
                created.extend(self._materialize(db, item))
            except Exception:
                logger.exception(f"Dropping side effect {item!r}")
                if not use_firestore():
                    db.rollback()

        for notification in created:
            await self.push(db, notification)

        return len(created)

    def _materialize(self, db: Session, item) -> List[NotificationRecord]:
        if isinstance(item, AttendeeBroadcast):
            return NotificationService.fan_out(db, item.event_id, item.title, item.message, item.type)

        if isinstance(item, UserNotice):
            notification_id = NotificationService.create_notification(
                db,
                user_id=item.user_id,
                title=item.title,
                message=item.message,
                type=item.type,
                related_event_id=item.related_event_id
            )
            return [NotificationService.get_notification(db, notification_id)]

        raise TypeError(f"Unsupported outbox item {type(item).__name__}")

    async def push(self, db: Session, notification: NotificationRecord):
        """Send one notification and the recipient's new unread count"""
        if not self.websocket_manager.get_connection_count(notification.user_id):
            return

        message = {
            "type": "notification",
            "notification": notification.model_dump(),
            "unread_count": NotificationService.get_unread_notification_count(db, notification.user_id)
        }
        await self.websocket_manager.send_to_user(notification.user_id, message)
