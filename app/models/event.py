"""
Event model
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Float, JSON, ForeignKey

from app.core.db import Base, DocumentMixin

class Event(Base, DocumentMixin):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    organizer_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # online, in-person, hybrid
    location = Column(String(255), nullable=True)
    virtual_link = Column(String(500), nullable=True)
    # ISO timestamps exactly as submitted
    start_date = Column(String(40), nullable=False, index=True)
    end_date = Column(String(40), nullable=False)
    max_attendees = Column(Integer, nullable=True)
    category = Column(String(100), nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    image_url = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="draft", index=True)
    is_public = Column(Boolean, nullable=False, default=True)
    registration_deadline = Column(String(40), nullable=True)
    price = Column(Float, nullable=True)
    currency = Column(String(10), nullable=True)
    requirements = Column(Text, nullable=True)
    agenda = Column(JSON, nullable=False, default=list)
    created_at = Column(String(40), nullable=True)
