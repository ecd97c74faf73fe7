"""
Notification model
"""

from sqlalchemy import Column, String, Text, Boolean, ForeignKey, Index

from app.core.db import Base, DocumentMixin

class Notification(Base, DocumentMixin):
    __tablename__ = "notifications"

    id = Column(String(32), primary_key=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(40), nullable=False)
    # Not a foreign key: notifications outlive the events they mention
    related_event_id = Column(String(32), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(String(40), nullable=False, index=True)

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )
