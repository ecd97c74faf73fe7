"""
Notification-related Pydantic schemas
"""

from typing import Literal, Optional
from pydantic import BaseModel

from app.schemas.event import EventRecord

NotificationType = Literal[
    "event_update",
    "event_reminder",
    "event_cancelled",
    "registration_confirmed",
    "new_opportunity",
]

# Kinds an organizer may broadcast to everyone registered for an event
BroadcastType = Literal["event_update", "event_reminder", "event_cancelled"]

class NotificationRecord(BaseModel):
    id: str
    user_id: str
    title: str
    message: str
    type: NotificationType
    related_event_id: Optional[str] = None
    is_read: bool = False
    created_at: str

class NotificationWithEvent(NotificationRecord):
    related_event: Optional[EventRecord] = None

class NotifyAttendeesRequest(BaseModel):
    title: str
    message: str
    type: BroadcastType
