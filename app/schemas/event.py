"""
Event-related Pydantic schemas
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator

from app.schemas.user import UserPublic
from app.utils.dates import parse_timestamp

EventType = Literal["online", "in-person", "hybrid"]
EventStatus = Literal["draft", "published", "cancelled"]
OpportunityType = Literal["job", "internship", "volunteer", "collaboration", "mentorship"]


def _check_timestamp(value: Optional[str]) -> Optional[str]:
    if value is not None:
        parse_timestamp(value)
    return value


class AgendaItem(BaseModel):
    time: str
    topic: str
    speaker: Optional[str] = None
    duration: Optional[int] = None

class EventCreate(BaseModel):
    """Schema for creating an event"""
    title: str = Field(min_length=1)
    description: str
    type: EventType
    location: Optional[str] = None
    virtual_link: Optional[str] = None
    start_date: str
    end_date: str
    max_attendees: Optional[int] = Field(None, ge=0)
    category: str
    tags: List[str] = []
    image_url: Optional[str] = None
    is_public: bool = True
    registration_deadline: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    requirements: Optional[str] = None

    @field_validator("start_date", "end_date", "registration_deadline")
    @classmethod
    def check_timestamps(cls, value):
        return _check_timestamp(value)

class EventUpdate(BaseModel):
    """Partial event update; fields left as None are not applied"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    type: Optional[EventType] = None
    location: Optional[str] = None
    virtual_link: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    max_attendees: Optional[int] = Field(None, ge=0)
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    image_url: Optional[str] = None
    status: Optional[EventStatus] = None
    is_public: Optional[bool] = None
    registration_deadline: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = None
    requirements: Optional[str] = None
    agenda: Optional[List[AgendaItem]] = None

    @field_validator("start_date", "end_date", "registration_deadline")
    @classmethod
    def check_timestamps(cls, value):
        return _check_timestamp(value)

class EventRecord(BaseModel):
    """Event as persisted"""
    id: str
    title: str
    description: str
    organizer_id: str
    type: EventType
    location: Optional[str] = None
    virtual_link: Optional[str] = None
    start_date: str
    end_date: str
    max_attendees: Optional[int] = None
    category: str
    tags: List[str] = []
    image_url: Optional[str] = None
    status: EventStatus
    is_public: bool
    registration_deadline: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    requirements: Optional[str] = None
    agenda: List[AgendaItem] = []
    created_at: Optional[str] = None

class SpeakerCreate(BaseModel):
    name: str
    bio: str
    title: str
    company: Optional[str] = None
    profile_image: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    topic: str
    talk_description: Optional[str] = None

class SpeakerRecord(SpeakerCreate):
    id: str
    event_id: str

class OpportunityCreate(BaseModel):
    title: str
    description: str
    type: OpportunityType
    company: Optional[str] = None
    contact_email: Optional[str] = None
    application_url: Optional[str] = None
    requirements: Optional[List[str]] = None
    is_active: bool = True

class OpportunityRecord(OpportunityCreate):
    id: str
    event_id: str

class OpportunityActiveUpdate(BaseModel):
    is_active: bool

class EventDetail(EventRecord):
    """Single event with organizer, children and live counts"""
    organizer: Optional[UserPublic] = None
    speakers: List[SpeakerRecord] = []
    opportunities: List[OpportunityRecord] = []
    registration_count: int
    attendee_count: int

class PublicEventItem(EventRecord):
    """Event as listed to attendees"""
    organizer: Optional[UserPublic] = None
    registration_count: int

class OrganizerEventItem(EventRecord):
    """Event as listed on the organizer dashboard"""
    registration_count: int
    attendee_count: int
