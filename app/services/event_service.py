"""
Event store: events, their speakers and opportunities, and event read models
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.core.exceptions import EventNotFoundError, NotFoundError
from app.schemas.event import (
    EventCreate,
    EventDetail,
    EventRecord,
    EventUpdate,
    OpportunityCreate,
    OpportunityRecord,
    OrganizerEventItem,
    PublicEventItem,
    SpeakerCreate,
    SpeakerRecord,
)
from app.services.outbox import Outbox
from app.services.repositories import EventRepo, collection, use_firestore
from app.services.user_service import UserService, to_public
from app.utils.dates import parse_timestamp, sort_by_timestamp, utc_now_iso

logger = logging.getLogger(__name__)


def registration_counts(registrations: List[Dict[str, Any]]) -> Tuple[int, int]:
    """(all registration rows, rows marked attended)"""
    attended = sum(1 for r in registrations if r["status"] == "attended")
    return len(registrations), attended


class EventService:
    """Service for event records and the views built on them"""

    @staticmethod
    def get_event_record(db: Session, event_id: str) -> Optional[Dict[str, Any]]:
        return collection(db, "events").get(event_id)

    @staticmethod
    def require_event(db: Session, event_id: str) -> Dict[str, Any]:
        event = EventService.get_event_record(db, event_id)
        if event is None:
            raise EventNotFoundError()
        return event

    @staticmethod
    def create_event(db: Session, organizer_id: str, data: EventCreate) -> str:
        """Create a draft event owned by ``organizer_id``"""
        if UserService.get_user_record(db, organizer_id) is None:
            raise NotFoundError("Organizer")

        fields = data.model_dump()
        fields.update({
            "organizer_id": organizer_id,
            "status": "draft",
            "agenda": [],
            "created_at": utc_now_iso(),
        })
        event_id = collection(db, "events").insert(fields)

        logger.info(f"Event {event_id} created by organizer {organizer_id}")
        return event_id

    @staticmethod
    def get_event_by_id(db: Session, event_id: str) -> Optional[EventDetail]:
        event = EventService.get_event_record(db, event_id)
        if event is None:
            return None

        registration_count, attendee_count = registration_counts(
            collection(db, "registrations").list(event_id=event_id)
        )
        return EventDetail(
            **event,
            organizer=UserService.get_user_by_id(db, event["organizer_id"]),
            speakers=[SpeakerRecord(**s) for s in collection(db, "speakers").list(event_id=event_id)],
            opportunities=[OpportunityRecord(**o) for o in collection(db, "opportunities").list(event_id=event_id)],
            registration_count=registration_count,
            attendee_count=attendee_count
        )

    @staticmethod
    def get_events_by_organizer(db: Session, organizer_id: str) -> List[OrganizerEventItem]:
        """Organizer dashboard list, newest start date first"""
        registrations = collection(db, "registrations")
        items = []
        for event in collection(db, "events").list(organizer_id=organizer_id):
            registration_count, attendee_count = registration_counts(registrations.list(event_id=event["id"]))
            items.append(OrganizerEventItem(
                **event,
                registration_count=registration_count,
                attendee_count=attendee_count
            ))
        return sort_by_timestamp(items, "start_date", newest_first=True)

    @staticmethod
    def _public_items(db: Session, events: List[Dict[str, Any]], limit: Optional[int]) -> List[PublicEventItem]:
        events = sort_by_timestamp(events, "start_date")
        if limit:
            events = events[:limit]

        users = collection(db, "users")
        registrations = collection(db, "registrations")
        return [
            PublicEventItem(
                **event,
                organizer=to_public(users.get(event["organizer_id"])),
                registration_count=registrations.count(event_id=event["id"])
            )
            for event in events
        ]

    @staticmethod
    def get_public_events(
        db: Session,
        category: Optional[str] = None,
        event_type: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[PublicEventItem]:
        """Published public events, soonest first"""
        filters = {"status": "published", "is_public": True}
        if category:
            filters["category"] = category
        if event_type:
            filters["type"] = event_type

        events = collection(db, "events").list(**filters)
        return EventService._public_items(db, events, limit)

    @staticmethod
    def get_upcoming_events(db: Session, limit: Optional[int] = None, now: Optional[datetime] = None) -> List[PublicEventItem]:
        """Published public events that have not started yet"""
        now = now or datetime.now(timezone.utc)
        events = [
            event for event in collection(db, "events").list(status="published", is_public=True)
            if parse_timestamp(event["start_date"]) >= now
        ]
        return EventService._public_items(db, events, limit)

    @staticmethod
    def update_event(
        db: Session,
        event_id: str,
        data: Union[EventUpdate, Dict[str, Any]],
        outbox: Optional[Outbox] = None
    ) -> EventRecord:
        """Apply a partial update; fields that are None are left untouched"""
        if isinstance(data, BaseModel):
            updates = data.model_dump(exclude_none=True)
        else:
            updates = {k: v for k, v in data.items() if v is not None}

        events = collection(db, "events")
        previous = events.get(event_id)
        if previous is None:
            raise EventNotFoundError()

        if updates:
            events.patch(event_id, updates)
        logger.info(f"Event {event_id} updated fields: {sorted(updates)}")

        event = EventRecord(**events.get(event_id))
        if outbox is not None and updates:
            if event.status == "cancelled" and previous["status"] != "cancelled":
                outbox.notify_attendees(
                    event_id,
                    "Event cancelled",
                    f"{event.title} has been cancelled.",
                    "event_cancelled"
                )
            elif previous["status"] == "published":
                outbox.notify_attendees(
                    event_id,
                    "Event updated",
                    f"{event.title} has been updated. Check the event page for details.",
                    "event_update"
                )
        return event

    @staticmethod
    def delete_event(db: Session, event_id: str) -> Dict[str, int]:
        """Delete an event together with its speakers, registrations and opportunities"""
        if use_firestore():
            deleted = EventRepo.delete_cascade_fs(event_id)
        else:
            deleted = EventRepo.delete_cascade_sql(db, event_id)

        logger.info(f"Event {event_id} deleted with children {deleted}")
        return deleted

    @staticmethod
    def publish_all_draft_events(db: Session, organizer_id: str) -> int:
        events = collection(db, "events")
        drafts = events.list(organizer_id=organizer_id, status="draft")
        for event in drafts:
            events.patch(event["id"], {"status": "published"})

        logger.info(f"Published {len(drafts)} draft events for organizer {organizer_id}")
        return len(drafts)

    # -------- Speakers --------

    @staticmethod
    def add_speaker(db: Session, event_id: str, data: SpeakerCreate) -> str:
        EventService.require_event(db, event_id)
        return collection(db, "speakers").insert({**data.model_dump(), "event_id": event_id})

    @staticmethod
    def get_speaker(db: Session, speaker_id: str) -> Optional[SpeakerRecord]:
        record = collection(db, "speakers").get(speaker_id)
        return SpeakerRecord(**record) if record else None

    @staticmethod
    def remove_speaker(db: Session, speaker_id: str) -> None:
        if not collection(db, "speakers").delete(speaker_id):
            raise NotFoundError("Speaker")

    # -------- Opportunities --------

    @staticmethod
    def add_opportunity(db: Session, event_id: str, data: OpportunityCreate, outbox: Optional[Outbox] = None) -> str:
        event = EventService.require_event(db, event_id)
        opportunity_id = collection(db, "opportunities").insert({**data.model_dump(), "event_id": event_id})

        if outbox is not None and data.is_active:
            outbox.notify_attendees(
                event_id,
                "New opportunity",
                f"{data.title} was posted for {event['title']}.",
                "new_opportunity"
            )
        return opportunity_id

    @staticmethod
    def get_opportunity(db: Session, opportunity_id: str) -> Optional[OpportunityRecord]:
        record = collection(db, "opportunities").get(opportunity_id)
        return OpportunityRecord(**record) if record else None

    @staticmethod
    def set_opportunity_active(db: Session, opportunity_id: str, is_active: bool) -> OpportunityRecord:
        opportunities = collection(db, "opportunities")
        if not opportunities.patch(opportunity_id, {"is_active": is_active}):
            raise NotFoundError("Opportunity")
        return OpportunityRecord(**opportunities.get(opportunity_id))

    @staticmethod
    def remove_opportunity(db: Session, opportunity_id: str) -> None:
        if not collection(db, "opportunities").delete(opportunity_id):
            raise NotFoundError("Opportunity")
