"""
Speaker model
"""

from sqlalchemy import Column, String, Text, ForeignKey

from app.core.db import Base, DocumentMixin

class Speaker(Base, DocumentMixin):
    __tablename__ = "speakers"

    id = Column(String(32), primary_key=True)
    event_id = Column(String(32), ForeignKey("events.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    bio = Column(Text, nullable=False)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    profile_image = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    twitter_url = Column(String(500), nullable=True)
    topic = Column(String(255), nullable=False)
    talk_description = Column(Text, nullable=True)
