"""
Opportunity model
"""

from sqlalchemy import Column, String, Text, Boolean, JSON, ForeignKey

from app.core.db import Base, DocumentMixin

class Opportunity(Base, DocumentMixin):
    __tablename__ = "opportunities"

    id = Column(String(32), primary_key=True)
    event_id = Column(String(32), ForeignKey("events.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, index=True)  # job, internship, volunteer, collaboration, mentorship
    company = Column(String(255), nullable=True)
    contact_email = Column(String(255), nullable=True)
    application_url = Column(String(500), nullable=True)
    requirements = Column(JSON, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
