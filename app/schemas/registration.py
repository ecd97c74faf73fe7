"""
Registration-related Pydantic schemas
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

from app.schemas.event import EventRecord
from app.schemas.user import UserPublic

RegistrationStatus = Literal["registered", "attended", "cancelled"]

class Feedback(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str
    would_recommend: bool

class RegistrationRecord(BaseModel):
    id: str
    event_id: str
    user_id: str
    status: RegistrationStatus
    registered_at: str
    checked_in_at: Optional[str] = None
    feedback: Optional[Feedback] = None

class RegistrationWithUser(RegistrationRecord):
    user: Optional[UserPublic] = None

class RegistrationWithEvent(RegistrationRecord):
    event: Optional[EventRecord] = None

class RegistrationStatusUpdate(BaseModel):
    status: RegistrationStatus
