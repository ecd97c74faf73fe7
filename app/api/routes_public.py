"""
Public API routes - no authentication required
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.exceptions import EventNotFoundError
from app.services.event_service import EventService
from app.utils.security import enforce_rate_limit
from app.utils.responses import success_response

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/events", dependencies=[Depends(enforce_rate_limit)])
async def list_public_events(
    category: Optional[str] = None,
    type: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    """Published public events, soonest first"""
    events = EventService.get_public_events(db, category=category, event_type=type, limit=limit)
    return success_response(
        message="Events retrieved successfully",
        data=events
    )

@router.get("/events/upcoming", dependencies=[Depends(enforce_rate_limit)])
async def list_upcoming_events(
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db)
):
    """Published public events that have not started yet"""
    events = EventService.get_upcoming_events(db, limit=limit)
    return success_response(
        message="Upcoming events retrieved successfully",
        data=events
    )

@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    db: Session = Depends(get_db)
):
    """Event page: organizer, speakers, opportunities and counts"""
    event = EventService.get_event_by_id(db, event_id)
    # Drafts and private events stay hidden from anonymous visitors
    if event is None or event.status != "published" or not event.is_public:
        raise EventNotFoundError()

    return success_response(
        message="Event retrieved successfully",
        data=event
    )
