"""
Repository layer abstracting storage (SQLAlchemy vs Firebase Firestore).

Both backends expose the same record contract: a record is a plain dict with a
string ``id``; collections support get / list-by-equality / insert / patch /
delete, each a single atomic write. Operations that must check an invariant and
write in one step (unique email, registration capacity, cascade delete) live in
the entity repositories below with one implementation per backend.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from sqlalchemy import func, insert, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from app.core.config import settings
from app.core.db import new_id
from app.core.exceptions import (
    DuplicateEmailError,
    DuplicateRegistrationError,
    EventFullError,
    EventNotFoundError,
)
from app.models import Event, Notification, Opportunity, Registration, Speaker, User
from app.services.firebase_client import get_firestore_client

logger = logging.getLogger(__name__)

MODELS = {
    "users": User,
    "events": Event,
    "speakers": Speaker,
    "opportunities": Opportunity,
    "registrations": Registration,
    "notifications": Notification,
}

# Collections whose records die with their event
EVENT_CHILDREN = ("speakers", "registrations", "opportunities")

FIRESTORE_BATCH_LIMIT = 500


def use_firestore() -> bool:
    return settings.USE_FIREBASE is True


# -------- Generic collections --------

class SqlCollection:
    """Record contract over one SQLAlchemy model"""

    def __init__(self, db: Session, name: str):
        self.db = db
        self.model = MODELS[name]

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        row = self.db.get(self.model, record_id)
        return row.to_dict() if row else None

    def list(self, **equals) -> List[Dict[str, Any]]:
        return [row.to_dict() for row in self.db.query(self.model).filter_by(**equals).all()]

    def first(self, **equals) -> Optional[Dict[str, Any]]:
        row = self.db.query(self.model).filter_by(**equals).first()
        return row.to_dict() if row else None

    def count(self, **equals) -> int:
        return self.db.query(self.model).filter_by(**equals).count()

    def all(self) -> List[Dict[str, Any]]:
        return self.list()

    def insert(self, fields: Dict[str, Any]) -> str:
        record_id = fields.get("id") or new_id()
        self.db.add(self.model(**{**fields, "id": record_id}))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        return record_id

    def patch(self, record_id: str, fields: Dict[str, Any]) -> bool:
        row = self.db.get(self.model, record_id)
        if row is None:
            return False
        for key, value in fields.items():
            setattr(row, key, value)
        self.db.commit()
        return True

    def delete(self, record_id: str) -> bool:
        row = self.db.get(self.model, record_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True


def _to_record(doc) -> Dict[str, Any]:
    data = doc.to_dict() or {}
    data["id"] = doc.id
    return data


class FirestoreCollection:
    """Record contract over one top-level Firestore collection"""

    def __init__(self, name: str):
        self.ref = get_firestore_client().collection(name)

    def _query(self, equals: Dict[str, Any]):
        query = self.ref
        for field, value in equals.items():
            query = query.where(field, "==", value)
        return query

    def get(self, record_id: str) -> Optional[Dict[str, Any]]:
        doc = self.ref.document(record_id).get()
        return _to_record(doc) if doc.exists else None

    def list(self, **equals) -> List[Dict[str, Any]]:
        return [_to_record(doc) for doc in self._query(equals).get()]

    def first(self, **equals) -> Optional[Dict[str, Any]]:
        docs = self._query(equals).limit(1).get()
        return _to_record(docs[0]) if docs else None

    def count(self, **equals) -> int:
        return len(self._query(equals).get())

    def all(self) -> List[Dict[str, Any]]:
        return self.list()

    def insert(self, fields: Dict[str, Any]) -> str:
        data = dict(fields)
        record_id = data.pop("id", None) or new_id()
        self.ref.document(record_id).set(data)
        return record_id

    def patch(self, record_id: str, fields: Dict[str, Any]) -> bool:
        ref = self.ref.document(record_id)
        if not ref.get().exists:
            return False
        ref.update(fields)
        return True

    def delete(self, record_id: str) -> bool:
        ref = self.ref.document(record_id)
        if not ref.get().exists:
            return False
        ref.delete()
        return True


def collection(db: Session, name: str):
    """Return the configured backend's view of a collection"""
    if use_firestore():
        return FirestoreCollection(name)
    return SqlCollection(db, name)


# -------- User repository --------

class UserRepo:
    @staticmethod
    def create_sql(db: Session, fields: Dict[str, Any]) -> str:
        if db.query(User).filter(User.email == fields["email"]).first():
            raise DuplicateEmailError()

        user = User(id=new_id(), **fields)
        db.add(user)
        try:
            db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent sign-up for the same email
            db.rollback()
            raise DuplicateEmailError() from exc
        return user.id

    @staticmethod
    def create_fs(fields: Dict[str, Any]) -> str:
        fs = get_firestore_client()
        users = fs.collection("users")
        new_ref = users.document(new_id())

        @firestore.transactional
        def _create(transaction):
            existing = users.where("email", "==", fields["email"]).limit(1).get(transaction=transaction)
            if existing:
                raise DuplicateEmailError()
            transaction.set(new_ref, fields)

        _create(fs.transaction())
        return new_ref.id


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def delete_cascade_sql(db: Session, event_id: str) -> Dict[str, int]:
        event = db.get(Event, event_id)
        if event is None:
            raise EventNotFoundError()

        deleted = {}
        for name in EVENT_CHILDREN:
            model = MODELS[name]
            deleted[name] = db.query(model).filter(model.event_id == event_id).delete(synchronize_session=False)
        db.delete(event)
        db.commit()
        return deleted

    @staticmethod
    def delete_cascade_fs(event_id: str) -> Dict[str, int]:
        fs = get_firestore_client()
        event_ref = fs.collection("events").document(event_id)
        if not event_ref.get().exists:
            raise EventNotFoundError()

        refs = []
        deleted = {}
        for name in EVENT_CHILDREN:
            docs = fs.collection(name).where("event_id", "==", event_id).get()
            deleted[name] = len(docs)
            refs.extend(doc.reference for doc in docs)
        refs.append(event_ref)

        # A batch is atomic; events with very large rosters span several
        for start in range(0, len(refs), FIRESTORE_BATCH_LIMIT):
            batch = fs.batch()
            for ref in refs[start:start + FIRESTORE_BATCH_LIMIT]:
                batch.delete(ref)
            batch.commit()
        return deleted


# -------- Registration repository --------

def _has_free_seat(event_id: str, max_attendees: int):
    """SQL condition that holds while the event has fewer live registrations than ``max_attendees``"""
    live = aliased(Registration)
    live_count = (
        select(func.count(live.id))
        .where(live.event_id == event_id, live.status != "cancelled")
        .scalar_subquery()
    )
    return live_count < max_attendees


class RegistrationRepo:
    @staticmethod
    def register_sql(db: Session, event_id: str, user_id: str, registered_at: str) -> str:
        try:
            existing = db.query(Registration).filter(
                Registration.event_id == event_id,
                Registration.user_id == user_id,
                Registration.status != "cancelled"
            ).first()
            if existing:
                raise DuplicateRegistrationError()

            # Lock the event row so concurrent registrations count one at a time
            event = db.query(Event).filter(Event.id == event_id).with_for_update().first()
            if not event:
                raise EventNotFoundError()

            registration_id = new_id()
            row = select(
                literal(registration_id),
                literal(event_id),
                literal(user_id),
                literal("registered"),
                literal(registered_at)
            )
            if event.max_attendees:
                # SQLite ignores FOR UPDATE: the seat count and the insert are one statement
                row = row.where(_has_free_seat(event_id, event.max_attendees))

            table = Registration.__table__
            result = db.execute(
                insert(table).from_select(["id", "event_id", "user_id", "status", "registered_at"], row)
            )
            if result.rowcount == 0:
                raise EventFullError()
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateRegistrationError() from exc
        except Exception:
            db.rollback()
            raise
        return registration_id

    @staticmethod
    def register_fs(event_id: str, user_id: str, registered_at: str) -> str:
        fs = get_firestore_client()
        registrations = fs.collection("registrations")
        event_ref = fs.collection("events").document(event_id)
        new_ref = registrations.document(new_id())

        @firestore.transactional
        def _register(transaction):
            active = [
                doc for doc in registrations.where("event_id", "==", event_id).get(transaction=transaction)
                if doc.to_dict().get("status") != "cancelled"
            ]
            if any(doc.to_dict().get("user_id") == user_id for doc in active):
                raise DuplicateRegistrationError()

            snapshot = event_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise EventNotFoundError()

            max_attendees = snapshot.to_dict().get("max_attendees")
            if max_attendees and len(active) >= max_attendees:
                raise EventFullError()

            transaction.set(new_ref, {
                "event_id": event_id,
                "user_id": user_id,
                "status": "registered",
                "registered_at": registered_at,
                "checked_in_at": None,
                "feedback": None,
            })

        _register(fs.transaction())
        return new_ref.id

    @staticmethod
    def update_status_sql(db: Session, registration_id: str, updates: Dict[str, Any]) -> bool:
        registration = db.get(Registration, registration_id)
        if registration is None:
            return False

        reviving = registration.status == "cancelled" and updates.get("status", "cancelled") != "cancelled"
        try:
            if not reviving:
                for key, value in updates.items():
                    setattr(registration, key, value)
                db.commit()
                return True

            live_sibling = db.query(Registration).filter(
                Registration.event_id == registration.event_id,
                Registration.user_id == registration.user_id,
                Registration.status != "cancelled",
                Registration.id != registration_id
            ).first()
            if live_sibling:
                raise DuplicateRegistrationError()

            # A revived row takes a seat again, under the same lock as a new registration
            event = db.query(Event).filter(Event.id == registration.event_id).with_for_update().first()

            table = Registration.__table__
            statement = update(table).where(table.c.id == registration_id).values(**updates)
            if event is not None and event.max_attendees:
                statement = statement.where(_has_free_seat(registration.event_id, event.max_attendees))
            if db.execute(statement).rowcount == 0:
                raise EventFullError()
            db.commit()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration for the same pair
            db.rollback()
            raise DuplicateRegistrationError() from exc
        except Exception:
            db.rollback()
            raise
        return True

    @staticmethod
    def update_status_fs(registration_id: str, updates: Dict[str, Any]) -> bool:
        fs = get_firestore_client()
        registrations = fs.collection("registrations")
        ref = registrations.document(registration_id)

        @firestore.transactional
        def _update(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                return False

            current = snapshot.to_dict()
            if current.get("status") == "cancelled" and updates.get("status", "cancelled") != "cancelled":
                live = [
                    doc for doc in registrations.where("event_id", "==", current["event_id"]).get(transaction=transaction)
                    if doc.id != registration_id and doc.to_dict().get("status") != "cancelled"
                ]
                if any(doc.to_dict().get("user_id") == current["user_id"] for doc in live):
                    raise DuplicateRegistrationError()

                event = fs.collection("events").document(current["event_id"]).get(transaction=transaction)
                max_attendees = event.to_dict().get("max_attendees") if event.exists else None
                if max_attendees and len(live) >= max_attendees:
                    raise EventFullError()

            transaction.update(ref, updates)
            return True

        return _update(fs.transaction())


# -------- Notification repository --------

class NotificationRepo:
    @staticmethod
    def mark_all_read_sql(db: Session, user_id: str) -> int:
        updated = db.query(Notification).filter(
            Notification.user_id == user_id,
            Notification.is_read.is_(False)
        ).update({Notification.is_read: True}, synchronize_session=False)
        db.commit()
        return updated

    @staticmethod
    def mark_all_read_fs(user_id: str) -> int:
        fs = get_firestore_client()
        docs = fs.collection("notifications").where("user_id", "==", user_id).where("is_read", "==", False).get()
        for start in range(0, len(docs), FIRESTORE_BATCH_LIMIT):
            batch = fs.batch()
            for doc in docs[start:start + FIRESTORE_BATCH_LIMIT]:
                batch.update(doc.reference, {"is_read": True})
            batch.commit()
        return len(docs)
