"""
User and authentication Pydantic schemas
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field

Role = Literal["organizer", "attendee"]

class UserProfile(BaseModel):
    """Optional profile attributes shared by create and update"""
    bio: Optional[str] = None
    location: Optional[str] = None
    profile_image: Optional[str] = None
    company: Optional[str] = None
    skills: Optional[List[str]] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    github_url: Optional[str] = None
    website: Optional[str] = None

class UserCreate(UserProfile):
    """Profile-only account creation (no password)"""
    email: EmailStr
    name: str = Field(min_length=1)
    role: Role

class UserUpdate(UserProfile):
    """Partial profile update; unset fields are left untouched"""
    name: Optional[str] = Field(None, min_length=1)

class UserPublic(UserProfile):
    """User as exposed to clients, never carries the password hash"""
    id: str
    email: str
    name: str
    role: Role
    created_at: Optional[str] = None

class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: Role

class SignInRequest(BaseModel):
    email: EmailStr
    password: str

class AuthSession(BaseModel):
    """Authenticated session resolved from a bearer token"""
    user: UserPublic
    access_token: str
    token_type: str = "bearer"
    expires_at: str

class OrganizerStats(BaseModel):
    role: Literal["organizer"] = "organizer"
    events_organized: int
    total_attendees: int

class AttendeeStats(BaseModel):
    role: Literal["attendee"] = "attendee"
    events_attended: int
    events_registered: int
    total_events: int
