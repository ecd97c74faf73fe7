"""
Side effects queued by a mutation and delivered after its write has committed
"""

from dataclasses import dataclass
from typing import List, Optional, Union


@dataclass
class UserNotice:
    user_id: str
    title: str
    message: str
    type: str
    related_event_id: Optional[str] = None


@dataclass
class AttendeeBroadcast:
    """One notification per live registration of the event, resolved at delivery"""
    event_id: str
    title: str
    message: str
    type: str


class Outbox:
    def __init__(self):
        self.pending: List[Union[UserNotice, AttendeeBroadcast]] = []

    def notify_user(self, user_id: str, title: str, message: str, type: str, related_event_id: Optional[str] = None):
        self.pending.append(UserNotice(user_id, title, message, type, related_event_id))

    def notify_attendees(self, event_id: str, title: str, message: str, type: str):
        self.pending.append(AttendeeBroadcast(event_id, title, message, type))

    def drain(self) -> List[Union[UserNotice, AttendeeBroadcast]]:
        items, self.pending = self.pending, []
        return items

    def __len__(self) -> int:
        return len(self.pending)
