"""
Analytics read models
"""

from typing import Optional
from pydantic import BaseModel

from app.schemas.event import EventType

class EventAnalytics(BaseModel):
    """Per-event figures computed from the registration ledger at read time"""
    id: str
    title: str
    start_date: str
    category: str
    type: EventType
    price: Optional[float] = None
    registration_count: int
    attendee_count: int
    cancelled_count: int
    attendance_rate: float
    revenue: float
    average_rating: Optional[float] = None

class OrganizerSummary(BaseModel):
    total_events: int
    published_events: int
    total_registrations: int
    total_attendees: int
    total_revenue: float
    average_attendance_rate: float
