"""
User model
"""

from sqlalchemy import Column, String, Text, JSON

from app.core.db import Base, DocumentMixin

class User(Base, DocumentMixin):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    # Empty for legacy accounts created without a password
    password_hash = Column(String(255), nullable=True)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False)  # organizer, attendee
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    profile_image = Column(String(500), nullable=True)
    company = Column(String(255), nullable=True)
    skills = Column(JSON, nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    twitter_url = Column(String(500), nullable=True)
    github_url = Column(String(500), nullable=True)
    website = Column(String(500), nullable=True)
    created_at = Column(String(40), nullable=True)
