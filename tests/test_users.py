"""
Tests for user records, lookups and dashboard stats
"""

import threading

import pytest

from app.core.exceptions import DuplicateEmailError, NotFoundError
from app.schemas.user import UserCreate, UserUpdate
from app.services.registration_service import RegistrationService
from app.services.user_service import UserService
from conftest import make_event, make_published_event, make_user


class TestUserRecords:
    def test_create_and_lookup(self, db_session):
        user_id = make_user(db_session, "Ada@Example.com", role="organizer", company="Analytical")

        by_id = UserService.get_user_by_id(db_session, user_id)
        assert by_id.email == "ada@example.com"
        assert by_id.role == "organizer"
        assert by_id.company == "Analytical"

        by_email = UserService.get_user_by_email(db_session, "ADA@example.com")
        assert by_email.id == user_id

    def test_public_view_hides_password_hash(self, db_session):
        user_id = UserService.create_user(
            db_session,
            UserCreate(email="hash@example.com", name="Hash", role="attendee"),
            password_hash="$2b$04$notreal"
        )
        public = UserService.get_user_by_id(db_session, user_id)
        assert "password_hash" not in public.model_dump()

    def test_duplicate_email_rejected(self, db_session):
        make_user(db_session, "dup@example.com")
        with pytest.raises(DuplicateEmailError):
            make_user(db_session, "DUP@example.com")

    def test_concurrent_signups_with_same_email(self, session_factory):
        results = []
        barrier = threading.Barrier(2)

        def sign_up():
            db = session_factory()
            try:
                barrier.wait()
                results.append(make_user(db, "race@example.com"))
            except DuplicateEmailError as exc:
                results.append(exc)
            finally:
                db.close()

        threads = [threading.Thread(target=sign_up) for _ in range(2)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        created = [r for r in results if isinstance(r, str)]
        rejected = [r for r in results if isinstance(r, DuplicateEmailError)]
        assert len(created) == 1
        assert len(rejected) == 1

    def test_missing_user_returns_none(self, db_session):
        assert UserService.get_user_by_id(db_session, "missing") is None
        assert UserService.get_user_by_email(db_session, "nobody@example.com") is None

    def test_get_all_users(self, db_session, organizer_id, attendee_ids):
        users = UserService.get_all_users(db_session)
        assert {u.id for u in users} == {organizer_id, *attendee_ids}


class TestUpdateUser:
    def test_partial_update_keeps_other_fields(self, db_session):
        user_id = make_user(db_session, "grace@example.com", location="Arlington", bio="Compilers")

        updated = UserService.update_user(db_session, user_id, UserUpdate(bio="COBOL", skills=["cobol"]))

        assert updated.bio == "COBOL"
        assert updated.skills == ["cobol"]
        assert updated.location == "Arlington"

    def test_unknown_user_raises(self, db_session):
        with pytest.raises(NotFoundError):
            UserService.update_user(db_session, "missing", UserUpdate(bio="x"))


class TestUserStats:
    def test_organizer_stats(self, db_session, organizer_id, attendee_ids):
        first = make_published_event(db_session, organizer_id)
        make_event(db_session, organizer_id, title="Second")

        registration_ids = [
            RegistrationService.register_for_event(db_session, first, user_id)
            for user_id in attendee_ids[:3]
        ]
        RegistrationService.update_registration_status(db_session, registration_ids[0], "attended")

        stats = UserService.get_user_stats(db_session, organizer_id)
        assert stats.role == "organizer"
        assert stats.events_organized == 2
        assert stats.total_attendees == 1

    def test_attendee_stats(self, db_session, organizer_id, attendee_ids):
        user_id = attendee_ids[0]
        events = [make_published_event(db_session, organizer_id, title=f"E{i}") for i in range(3)]
        registration_ids = [RegistrationService.register_for_event(db_session, e, user_id) for e in events]
        RegistrationService.update_registration_status(db_session, registration_ids[0], "attended")
        RegistrationService.update_registration_status(db_session, registration_ids[1], "cancelled")

        stats = UserService.get_user_stats(db_session, user_id)
        assert stats.role == "attendee"
        assert stats.events_attended == 1
        assert stats.events_registered == 1
        assert stats.total_events == 3

    def test_unknown_user_has_no_stats(self, db_session):
        assert UserService.get_user_stats(db_session, "missing") is None
