"""
Tests for the registration ledger
"""

import threading

import pytest

from app.core.exceptions import (
    CapacityExceededError,
    DuplicateRegistrationError,
    EventFullError,
    EventNotFoundError,
    InvalidValueError,
    NotFoundError,
)
from app.schemas.registration import Feedback
from app.services.outbox import Outbox, UserNotice
from app.services.registration_service import RegistrationService
from app.services.repositories import collection
from conftest import make_published_event


class TestRegister:
    def test_register_creates_registered_row(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)

        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        registration = RegistrationService.get_registration(db_session, registration_id)
        assert registration.status == "registered"
        assert registration.event_id == event_id
        assert registration.user_id == attendee_ids[0]
        assert registration.registered_at
        assert registration.checked_in_at is None

    def test_duplicate_registration_rejected(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        with pytest.raises(DuplicateRegistrationError):
            RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        assert collection(db_session, "registrations").count(event_id=event_id) == 1

    def test_unknown_event(self, db_session, attendee_ids):
        with pytest.raises(EventNotFoundError):
            RegistrationService.register_for_event(db_session, "missing", attendee_ids[0])

    def test_capacity_enforced(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, max_attendees=2)
        RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        RegistrationService.register_for_event(db_session, event_id, attendee_ids[1])

        with pytest.raises(EventFullError) as exc_info:
            RegistrationService.register_for_event(db_session, event_id, attendee_ids[2])

        assert isinstance(exc_info.value, CapacityExceededError)
        assert exc_info.value.message == "Event is full"
        assert collection(db_session, "registrations").count(event_id=event_id) == 2

    def test_cancelled_rows_free_capacity(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, max_attendees=1)
        first = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        RegistrationService.update_registration_status(db_session, first, "cancelled")

        RegistrationService.register_for_event(db_session, event_id, attendee_ids[1])

        assert collection(db_session, "registrations").count(event_id=event_id, status="registered") == 1

    @pytest.mark.parametrize("max_attendees", [None, 0])
    def test_no_limit_when_max_attendees_unset(self, db_session, organizer_id, attendee_ids, max_attendees):
        event_id = make_published_event(db_session, organizer_id, max_attendees=max_attendees)

        for user_id in attendee_ids:
            RegistrationService.register_for_event(db_session, event_id, user_id)

        assert collection(db_session, "registrations").count(event_id=event_id) == len(attendee_ids)

    def test_reregister_after_cancel(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        first = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        RegistrationService.update_registration_status(db_session, first, "cancelled")

        second = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        assert second != first
        statuses = sorted(r["status"] for r in collection(db_session, "registrations").list(event_id=event_id))
        assert statuses == ["cancelled", "registered"]

    def test_confirmation_queued(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, title="PyData Night")
        outbox = Outbox()

        RegistrationService.register_for_event(db_session, event_id, attendee_ids[0], outbox=outbox)

        assert len(outbox) == 1
        notice = outbox.pending[0]
        assert isinstance(notice, UserNotice)
        assert notice.user_id == attendee_ids[0]
        assert notice.type == "registration_confirmed"
        assert notice.related_event_id == event_id
        assert "PyData Night" in notice.message

    def test_rejected_registration_queues_nothing(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, max_attendees=1)
        RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        outbox = Outbox()

        with pytest.raises(EventFullError):
            RegistrationService.register_for_event(db_session, event_id, attendee_ids[1], outbox=outbox)

        assert len(outbox) == 0

    def test_concurrent_registrations_for_last_seat(self, session_factory, organizer_id, attendee_ids):
        setup = session_factory()
        try:
            event_id = make_published_event(setup, organizer_id, max_attendees=1)
        finally:
            setup.close()

        results = []
        barrier = threading.Barrier(len(attendee_ids))

        def register(user_id):
            db = session_factory()
            try:
                barrier.wait()
                results.append(RegistrationService.register_for_event(db, event_id, user_id))
            except EventFullError as exc:
                results.append(exc)
            finally:
                db.close()

        threads = [threading.Thread(target=register, args=(user_id,)) for user_id in attendee_ids]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len([r for r in results if isinstance(r, str)]) == 1
        assert len([r for r in results if isinstance(r, EventFullError)]) == len(attendee_ids) - 1

        check = session_factory()
        try:
            assert collection(check, "registrations").count(event_id=event_id) == 1
        finally:
            check.close()


class TestUpdateStatus:
    def test_attended_stamps_check_in(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        registration = RegistrationService.update_registration_status(db_session, registration_id, "attended")

        assert registration.status == "attended"
        assert registration.checked_in_at is not None

    def test_cancelled_can_be_marked_attended(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        RegistrationService.update_registration_status(db_session, registration_id, "cancelled")

        registration = RegistrationService.update_registration_status(db_session, registration_id, "attended")

        assert registration.status == "attended"

    def test_reviving_cancelled_row_with_live_sibling_rejected(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        first = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        RegistrationService.update_registration_status(db_session, first, "cancelled")
        RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        with pytest.raises(DuplicateRegistrationError):
            RegistrationService.update_registration_status(db_session, first, "registered")

        assert RegistrationService.get_registration(db_session, first).status == "cancelled"

    def test_reviving_cancelled_row_respects_capacity(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, max_attendees=1)
        first = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        RegistrationService.update_registration_status(db_session, first, "cancelled")
        RegistrationService.register_for_event(db_session, event_id, attendee_ids[1])

        with pytest.raises(EventFullError):
            RegistrationService.update_registration_status(db_session, first, "attended")

        registrations = collection(db_session, "registrations")
        assert registrations.count(event_id=event_id) - registrations.count(event_id=event_id, status="cancelled") == 1
        assert RegistrationService.get_registration(db_session, first).status == "cancelled"

    def test_reviving_cancelled_row_with_free_seat(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, max_attendees=1)
        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        RegistrationService.update_registration_status(db_session, registration_id, "cancelled")

        registration = RegistrationService.update_registration_status(db_session, registration_id, "attended")

        assert registration.status == "attended"
        assert registration.checked_in_at is not None

    def test_unknown_registration(self, db_session):
        with pytest.raises(NotFoundError):
            RegistrationService.update_registration_status(db_session, "missing", "attended")

    def test_unknown_status(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        with pytest.raises(InvalidValueError):
            RegistrationService.update_registration_status(db_session, registration_id, "waitlisted")

    def test_registrant_notified(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        outbox = Outbox()

        RegistrationService.update_registration_status(db_session, registration_id, "attended", outbox=outbox)

        [notice] = outbox.pending
        assert notice.user_id == attendee_ids[0]
        assert notice.type == "event_update"


class TestRegistrationViews:
    def test_event_registrations_include_user(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        for user_id in attendee_ids[:2]:
            RegistrationService.register_for_event(db_session, event_id, user_id)

        registrations = RegistrationService.get_event_registrations(db_session, event_id)

        assert {r.user.id for r in registrations} == set(attendee_ids[:2])
        stamps = [r.registered_at for r in registrations]
        assert stamps == sorted(stamps, reverse=True)

    def test_user_registrations_include_event(self, db_session, organizer_id, attendee_ids):
        first = make_published_event(db_session, organizer_id, title="First")
        second = make_published_event(db_session, organizer_id, title="Second")
        RegistrationService.register_for_event(db_session, first, attendee_ids[0])
        RegistrationService.register_for_event(db_session, second, attendee_ids[0])

        registrations = RegistrationService.get_user_registrations(db_session, attendee_ids[0])

        assert {r.event.title for r in registrations} == {"First", "Second"}

    def test_submit_feedback(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])

        registration = RegistrationService.submit_feedback(
            db_session, registration_id, Feedback(rating=5, comment="Great talks", would_recommend=True)
        )

        assert registration.feedback.rating == 5
        assert registration.feedback.would_recommend is True

    def test_feedback_for_unknown_registration(self, db_session):
        with pytest.raises(NotFoundError):
            RegistrationService.submit_feedback(
                db_session, "missing", Feedback(rating=3, comment="", would_recommend=False)
            )
