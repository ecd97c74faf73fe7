"""
User store: profiles, lookups and dashboard stats
"""

import logging
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.schemas.user import AttendeeStats, OrganizerStats, UserCreate, UserPublic, UserUpdate
from app.services.repositories import UserRepo, collection, use_firestore
from app.utils.dates import utc_now_iso

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "bio",
    "location",
    "profile_image",
    "company",
    "skills",
    "linkedin_url",
    "twitter_url",
    "github_url",
    "website",
)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def to_public(record: Optional[Dict[str, Any]]) -> Optional[UserPublic]:
    """Drop the password hash and anything else not meant for clients"""
    if record is None:
        return None
    return UserPublic(**{k: v for k, v in record.items() if k != "password_hash"})


class UserService:
    """Service for user records"""

    @staticmethod
    def create_user(db: Session, data: UserCreate, password_hash: Optional[str] = None) -> str:
        """Insert a user, rejecting an email that is already taken"""
        fields = {
            "email": normalize_email(data.email),
            "password_hash": password_hash,
            "name": data.name,
            "role": data.role,
            "created_at": utc_now_iso(),
        }
        for field in PROFILE_FIELDS:
            fields[field] = getattr(data, field)

        if use_firestore():
            user_id = UserRepo.create_fs(fields)
        else:
            user_id = UserRepo.create_sql(db, fields)

        logger.info(f"User {user_id} created with role {data.role}")
        return user_id

    @staticmethod
    def get_user_record(db: Session, user_id: str) -> Optional[Dict[str, Any]]:
        return collection(db, "users").get(user_id)

    @staticmethod
    def get_user_record_by_email(db: Session, email: str) -> Optional[Dict[str, Any]]:
        return collection(db, "users").first(email=normalize_email(email))

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[UserPublic]:
        return to_public(UserService.get_user_record(db, user_id))

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[UserPublic]:
        return to_public(UserService.get_user_record_by_email(db, email))

    @staticmethod
    def get_all_users(db: Session) -> List[UserPublic]:
        return [to_public(record) for record in collection(db, "users").all()]

    @staticmethod
    def update_user(db: Session, user_id: str, data: UserUpdate) -> UserPublic:
        updates = data.model_dump(exclude_none=True)
        users = collection(db, "users")
        if updates:
            found = users.patch(user_id, updates)
        else:
            found = users.get(user_id) is not None
        if not found:
            raise NotFoundError("User")

        logger.info(f"User {user_id} updated fields: {sorted(updates)}")
        return to_public(users.get(user_id))

    @staticmethod
    def get_user_stats(db: Session, user_id: str) -> Optional[Union[OrganizerStats, AttendeeStats]]:
        """Dashboard counters; organizers and attendees see different figures"""
        user = UserService.get_user_record(db, user_id)
        if user is None:
            return None

        registrations = collection(db, "registrations")

        if user["role"] == "organizer":
            events = collection(db, "events").list(organizer_id=user_id)
            total_attendees = sum(
                registrations.count(event_id=event["id"], status="attended")
                for event in events
            )
            return OrganizerStats(
                events_organized=len(events),
                total_attendees=total_attendees
            )

        own = registrations.list(user_id=user_id)
        return AttendeeStats(
            events_attended=sum(1 for r in own if r["status"] == "attended"),
            events_registered=sum(1 for r in own if r["status"] == "registered"),
            total_events=len(own)
        )
