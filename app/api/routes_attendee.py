"""
Attendee-facing API routes
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.db import get_db
from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.schemas.registration import Feedback, RegistrationRecord
from app.schemas.user import AuthSession
from app.services.dispatcher import NotificationDispatcher
from app.services.outbox import Outbox
from app.services.registration_service import RegistrationService
from app.services.websocket_manager import websocket_manager
from app.utils.security import get_current_session
from app.utils.responses import success_response

router = APIRouter()

dispatcher = NotificationDispatcher(websocket_manager)

def _own_registration(db: Session, registration_id: str, session: AuthSession) -> RegistrationRecord:
    registration = RegistrationService.get_registration(db, registration_id)
    if registration is None:
        raise NotFoundError("Registration")
    if registration.user_id != session.user.id:
        raise PermissionDeniedError("This registration belongs to another user")
    return registration

@router.post("/events/{event_id}/register")
async def register_for_event(
    event_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    """Register the signed-in user for an event"""
    outbox = Outbox()
    registration_id = RegistrationService.register_for_event(db, event_id, session.user.id, outbox=outbox)
    await dispatcher.deliver(db, outbox)

    return success_response(
        message="Successfully registered!",
        data=RegistrationService.get_registration(db, registration_id),
        status_code=201
    )

@router.post("/registrations/{registration_id}/cancel")
async def cancel_registration(
    registration_id: str,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    _own_registration(db, registration_id, session)
    registration = RegistrationService.update_registration_status(db, registration_id, "cancelled")
    return success_response(
        message="Registration cancelled",
        data=registration
    )

@router.post("/registrations/{registration_id}/feedback")
async def submit_feedback(
    registration_id: str,
    feedback: Feedback,
    db: Session = Depends(get_db),
    session: AuthSession = Depends(get_current_session)
):
    """Rate an event you registered for"""
    _own_registration(db, registration_id, session)
    return success_response(
        message="Thanks for your feedback!",
        data=RegistrationService.submit_feedback(db, registration_id, feedback)
    )
