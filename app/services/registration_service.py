"""
Registration ledger: sign-ups for events and their lifecycle
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.exceptions import InvalidValueError, NotFoundError
from app.schemas.event import EventRecord
from app.schemas.registration import Feedback, RegistrationRecord, RegistrationWithEvent, RegistrationWithUser
from app.services.outbox import Outbox
from app.services.repositories import RegistrationRepo, collection, use_firestore
from app.services.user_service import to_public
from app.utils.dates import sort_by_timestamp, utc_now_iso

logger = logging.getLogger(__name__)

REGISTRATION_STATUSES = ("registered", "attended", "cancelled")


class RegistrationService:
    """Service for registrations"""

    @staticmethod
    def register_for_event(db: Session, event_id: str, user_id: str, outbox: Optional[Outbox] = None) -> str:
        """Register a user for an event.

        Rejects a second live registration for the same user and event, an
        unknown event, and a full event. The checks and the insert run as one
        store transaction.
        """
        registered_at = utc_now_iso()
        try:
            if use_firestore():
                registration_id = RegistrationRepo.register_fs(event_id, user_id, registered_at)
            else:
                registration_id = RegistrationRepo.register_sql(db, event_id, user_id, registered_at)
        except Exception as exc:
            logger.warning(f"Registration of user {user_id} for event {event_id} rejected: {exc}")
            raise

        logger.info(f"User {user_id} registered for event {event_id} ({registration_id})")

        if outbox is not None:
            event = collection(db, "events").get(event_id)
            outbox.notify_user(
                user_id,
                "Registration confirmed",
                f"You're registered for {event['title']}.",
                "registration_confirmed",
                related_event_id=event_id
            )
        return registration_id

    @staticmethod
    def get_registration(db: Session, registration_id: str) -> Optional[RegistrationRecord]:
        record = collection(db, "registrations").get(registration_id)
        return RegistrationRecord(**record) if record else None

    @staticmethod
    def update_registration_status(
        db: Session,
        registration_id: str,
        status: str,
        outbox: Optional[Outbox] = None
    ) -> RegistrationRecord:
        """Set a registration's status; marking it attended stamps the check-in time"""
        if status not in REGISTRATION_STATUSES:
            raise InvalidValueError(f"Unknown registration status '{status}'")

        updates = {"status": status}
        if status == "attended":
            updates["checked_in_at"] = utc_now_iso()

        if use_firestore():
            found = RegistrationRepo.update_status_fs(registration_id, updates)
        else:
            found = RegistrationRepo.update_status_sql(db, registration_id, updates)
        if not found:
            raise NotFoundError("Registration")

        registration = RegistrationService.get_registration(db, registration_id)
        logger.info(f"Registration {registration_id} set to {status}")

        if outbox is not None:
            event = collection(db, "events").get(registration.event_id)
            title = event["title"] if event else "your event"
            outbox.notify_user(
                registration.user_id,
                "Registration updated",
                f"Your registration for {title} is now {status}.",
                "event_update",
                related_event_id=registration.event_id
            )
        return registration

    @staticmethod
    def get_event_registrations(db: Session, event_id: str) -> List[RegistrationWithUser]:
        """Registrations of an event with their users, newest first"""
        users = collection(db, "users")
        records = sort_by_timestamp(
            collection(db, "registrations").list(event_id=event_id),
            "registered_at",
            newest_first=True
        )
        return [
            RegistrationWithUser(**record, user=to_public(users.get(record["user_id"])))
            for record in records
        ]

    @staticmethod
    def get_user_registrations(db: Session, user_id: str) -> List[RegistrationWithEvent]:
        events = collection(db, "events")
        records = sort_by_timestamp(
            collection(db, "registrations").list(user_id=user_id),
            "registered_at",
            newest_first=True
        )

        results = []
        for record in records:
            event = events.get(record["event_id"])
            results.append(RegistrationWithEvent(**record, event=EventRecord(**event) if event else None))
        return results

    @staticmethod
    def submit_feedback(db: Session, registration_id: str, feedback: Feedback) -> RegistrationRecord:
        registrations = collection(db, "registrations")
        if not registrations.patch(registration_id, {"feedback": feedback.model_dump()}):
            raise NotFoundError("Registration")

        logger.info(f"Feedback recorded for registration {registration_id} (rating {feedback.rating})")
        return RegistrationRecord(**registrations.get(registration_id))
