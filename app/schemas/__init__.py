"""
Pydantic schemas package
"""

from .common import *
from .user import *
from .event import *
from .registration import *
from .notification import *
from .analytics import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "UserCreate",
    "UserUpdate",
    "UserPublic",
    "SignUpRequest",
    "SignInRequest",
    "AuthSession",
    "OrganizerStats",
    "AttendeeStats",
    "AgendaItem",
    "EventCreate",
    "EventUpdate",
    "EventRecord",
    "EventDetail",
    "PublicEventItem",
    "OrganizerEventItem",
    "SpeakerCreate",
    "SpeakerRecord",
    "OpportunityCreate",
    "OpportunityRecord",
    "OpportunityActiveUpdate",
    "Feedback",
    "RegistrationRecord",
    "RegistrationWithUser",
    "RegistrationWithEvent",
    "RegistrationStatusUpdate",
    "NotificationRecord",
    "NotificationWithEvent",
    "NotifyAttendeesRequest",
    "EventAnalytics",
    "OrganizerSummary",
]
