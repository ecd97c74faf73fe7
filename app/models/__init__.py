"""
Database models package
"""

from .user import User
from .event import Event
from .speaker import Speaker
from .opportunity import Opportunity
from .registration import Registration
from .notification import Notification

__all__ = ["User", "Event", "Speaker", "Opportunity", "Registration", "Notification"]
