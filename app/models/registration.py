"""
Registration model
"""

from sqlalchemy import Column, String, JSON, ForeignKey, Index, text

from app.core.db import Base, DocumentMixin

class Registration(Base, DocumentMixin):
    __tablename__ = "registrations"

    id = Column(String(32), primary_key=True)
    event_id = Column(String(32), ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="registered", index=True)  # registered, attended, cancelled
    registered_at = Column(String(40), nullable=False)
    checked_in_at = Column(String(40), nullable=True)
    feedback = Column(JSON, nullable=True)  # {rating, comment, would_recommend}

    # One live registration per (event, user); cancelled rows are kept as history
    __table_args__ = (
        Index(
            "uq_registrations_active_pair",
            "event_id",
            "user_id",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )
