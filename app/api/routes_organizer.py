"""
Organizer API routes - requires an organizer session
"""

from typing import Any, Dict
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.exceptions import EventNotFoundError, NotFoundError, PermissionDeniedError
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    OpportunityActiveUpdate,
    OpportunityCreate,
    SpeakerCreate,
)
from app.schemas.notification import NotifyAttendeesRequest
from app.schemas.registration import RegistrationStatusUpdate
from app.schemas.user import AuthSession
from app.services.analytics_service import AnalyticsService
from app.services.dispatcher import NotificationDispatcher
from app.services.event_service import EventService
from app.services.export_service import ExportService
from app.services.outbox import Outbox
from app.services.registration_service import RegistrationService
from app.services.websocket_manager import websocket_manager
from app.utils.security import require_organizer
from app.utils.responses import success_response

router = APIRouter()

dispatcher = NotificationDispatcher(websocket_manager)

def _owned_event(db: Session, event_id: str, session: AuthSession) -> Dict[str, Any]:
    """Load an event and make sure the signed-in organizer owns it"""
    event = EventService.get_event_record(db, event_id)
    if event is None:
        raise EventNotFoundError()
    if event["organizer_id"] != session.user.id:
        raise PermissionDeniedError("You can only manage your own events")
    return event

# -------- Events --------

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    """Create a new draft event"""
    event_id = EventService.create_event(db, session.user.id, event_data)
    return success_response(
        message="Event created successfully",
        data=EventService.get_event_by_id(db, event_id),
        status_code=201
    )

@router.get("/events")
async def list_my_events(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    """Dashboard list of the organizer's events"""
    return success_response(
        message="Events retrieved",
        data=EventService.get_events_by_organizer(db, session.user.id)
    )

@router.post("/events/publish-drafts")
async def publish_drafts(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    published = EventService.publish_all_draft_events(db, session.user.id)
    return success_response(
        message=f"{published} draft events published",
        data={"published": published}
    )

@router.get("/events/{event_id}")
async def get_event_details(
    event_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    _owned_event(db, event_id, session)
    return success_response(
        message="Event details retrieved",
        data=EventService.get_event_by_id(db, event_id)
    )

@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    update_data: EventUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    """Partially update an event and notify its registrants when relevant"""
    _owned_event(db, event_id, session)

    outbox = Outbox()
    event = EventService.update_event(db, event_id, update_data, outbox=outbox)
    await dispatcher.deliver(db, outbox)

    return success_response(
        message="Event updated successfully",
        data=event
    )

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    """Delete an event with its speakers, registrations and opportunities"""
    _owned_event(db, event_id, session)
    deleted = EventService.delete_event(db, event_id)
    return success_response(
        message="Event deleted successfully",
        data={"deleted": deleted}
    )

# -------- Speakers --------

@router.post("/events/{event_id}/speakers")
async def add_speaker(
    event_id: str,
    speaker_data: SpeakerCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    _owned_event(db, event_id, session)
    speaker_id = EventService.add_speaker(db, event_id, speaker_data)
    return success_response(
        message="Speaker added",
        data=EventService.get_speaker(db, speaker_id),
        status_code=201
    )

@router.delete("/speakers/{speaker_id}")
async def remove_speaker(
    speaker_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    speaker = EventService.get_speaker(db, speaker_id)
    if speaker is None:
        raise NotFoundError("Speaker")
    _owned_event(db, speaker.event_id, session)

    EventService.remove_speaker(db, speaker_id)
    return success_response(message="Speaker removed")

# -------- Opportunities --------

@router.post("/events/{event_id}/opportunities")
async def add_opportunity(
    event_id: str,
    opportunity_data: OpportunityCreate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    """Post an opportunity; active ones are announced to registrants"""
    _owned_event(db, event_id, session)

    outbox = Outbox()
    opportunity_id = EventService.add_opportunity(db, event_id, opportunity_data, outbox=outbox)
    await dispatcher.deliver(db, outbox)

    return success_response(
        message="Opportunity added",
        data=EventService.get_opportunity(db, opportunity_id),
        status_code=201
    )

@router.patch("/opportunities/{opportunity_id}")
async def set_opportunity_active(
    opportunity_id: str,
    update_data: OpportunityActiveUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    opportunity = EventService.get_opportunity(db, opportunity_id)
    if opportunity is None:
        raise NotFoundError("Opportunity")
    _owned_event(db, opportunity.event_id, session)

    return success_response(
        message="Opportunity updated",
        data=EventService.set_opportunity_active(db, opportunity_id, update_data.is_active)
    )

@router.delete("/opportunities/{opportunity_id}")
async def remove_opportunity(
    opportunity_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    opportunity = EventService.get_opportunity(db, opportunity_id)
    if opportunity is None:
        raise NotFoundError("Opportunity")
    _owned_event(db, opportunity.event_id, session)

    EventService.remove_opportunity(db, opportunity_id)
    return success_response(message="Opportunity removed")

# -------- Registrations --------

@router.get("/events/{event_id}/registrations")
async def list_registrations(
    event_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    _owned_event(db, event_id, session)
    return success_response(
        message="Registrations retrieved",
        data=RegistrationService.get_event_registrations(db, event_id)
    )

@router.patch("/registrations/{registration_id}")
async def update_registration_status(
    registration_id: str,
    update_data: RegistrationStatusUpdate,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    """Mark a registrant attended or cancelled"""
    registration = RegistrationService.get_registration(db, registration_id)
    if registration is None:
        raise NotFoundError("Registration")
    _owned_event(db, registration.event_id, session)

    outbox = Outbox()
    registration = RegistrationService.update_registration_status(
        db, registration_id, update_data.status, outbox=outbox
    )
    await dispatcher.deliver(db, outbox)

    return success_response(
        message="Registration updated",
        data=registration
    )

@router.post("/events/{event_id}/notify")
async def notify_attendees(
    event_id: str,
    notify_data: NotifyAttendeesRequest,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    """Send a message to everyone registered for the event"""
    _owned_event(db, event_id, session)

    outbox = Outbox()
    outbox.notify_attendees(event_id, notify_data.title, notify_data.message, notify_data.type)
    sent = await dispatcher.deliver(db, outbox)

    return success_response(
        message=f"Notification sent to {sent} attendees",
        data={"sent": sent}
    )

@router.get("/events/{event_id}/attendees.csv")
async def export_attendees_csv(
    event_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    _owned_event(db, event_id, session)
    return Response(
        content=ExportService.export_csv(db, event_id),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename=attendees_{event_id}.csv"}
    )

@router.get("/events/{event_id}/attendees.xlsx")
async def export_attendees_excel(
    event_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    _owned_event(db, event_id, session)
    return Response(
        content=ExportService.export_excel(db, event_id),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=attendees_{event_id}.xlsx"}
    )

# -------- Analytics --------

@router.get("/analytics")
async def get_event_analytics(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    return success_response(
        message="Analytics retrieved",
        data=AnalyticsService.get_event_analytics(db, session.user.id)
    )

@router.get("/summary")
async def get_summary(
    db: Session = Depends(get_db),
    session: AuthSession = Depends(require_organizer)
):
    return success_response(
        message="Summary retrieved",
        data=AnalyticsService.get_organizer_summary(db, session.user.id)
    )
