"""
Tests for per-event analytics and the organizer summary
"""

import pytest

from app.core.exceptions import EventFullError
from app.schemas.registration import Feedback
from app.services.analytics_service import AnalyticsService
from app.services.registration_service import RegistrationService
from conftest import make_event, make_published_event, make_user


def register_all(db, event_id, user_ids):
    return [RegistrationService.register_for_event(db, event_id, user_id) for user_id in user_ids]


class TestEventAnalytics:
    def test_event_without_registrations(self, db_session, organizer_id):
        make_event(db_session, organizer_id, price=15.0)

        [analytics] = AnalyticsService.get_event_analytics(db_session, organizer_id)

        assert analytics.registration_count == 0
        assert analytics.attendance_rate == 0
        assert analytics.revenue == 0
        assert analytics.average_rating is None

    def test_revenue_counts_every_registration_row(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, price=20.0)
        registration_ids = register_all(db_session, event_id, attendee_ids[:4])
        RegistrationService.update_registration_status(db_session, registration_ids[0], "attended")
        RegistrationService.update_registration_status(db_session, registration_ids[1], "attended")
        RegistrationService.update_registration_status(db_session, registration_ids[2], "cancelled")

        [analytics] = AnalyticsService.get_event_analytics(db_session, organizer_id)

        assert analytics.registration_count == 4
        assert analytics.attendee_count == 2
        assert analytics.cancelled_count == 1
        assert analytics.attendance_rate == pytest.approx(50.0)
        assert analytics.revenue == pytest.approx(80.0)

    def test_full_event_keeps_revenue_after_cancellation(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id, max_attendees=1, price=10.0, currency="USD")
        registration_id = RegistrationService.register_for_event(db_session, event_id, attendee_ids[0])
        with pytest.raises(EventFullError):
            RegistrationService.register_for_event(db_session, event_id, attendee_ids[1])

        RegistrationService.update_registration_status(db_session, registration_id, "cancelled")

        [analytics] = AnalyticsService.get_event_analytics(db_session, organizer_id)
        assert analytics.registration_count == 1
        assert analytics.cancelled_count == 1
        assert analytics.revenue == pytest.approx(10.0)

    def test_free_event_has_no_revenue(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        register_all(db_session, event_id, attendee_ids[:2])

        [analytics] = AnalyticsService.get_event_analytics(db_session, organizer_id)

        assert analytics.price is None
        assert analytics.revenue == 0

    def test_average_rating_from_feedback(self, db_session, organizer_id, attendee_ids):
        event_id = make_published_event(db_session, organizer_id)
        first, second, _ = register_all(db_session, event_id, attendee_ids[:3])
        RegistrationService.submit_feedback(db_session, first, Feedback(rating=5, comment="", would_recommend=True))
        RegistrationService.submit_feedback(db_session, second, Feedback(rating=2, comment="", would_recommend=False))

        [analytics] = AnalyticsService.get_event_analytics(db_session, organizer_id)

        assert analytics.average_rating == pytest.approx(3.5)

    def test_newest_start_first_and_scoped_to_organizer(self, db_session, organizer_id):
        other_organizer = make_user(db_session, "other@example.com", role="organizer")
        old = make_event(db_session, organizer_id, start_date="2029-01-01T00:00:00Z")
        new = make_event(db_session, organizer_id, start_date="2030-01-01T00:00:00Z")
        make_event(db_session, other_organizer)

        analytics = AnalyticsService.get_event_analytics(db_session, organizer_id)

        assert [a.id for a in analytics] == [new, old]


class TestOrganizerSummary:
    def test_totals(self, db_session, organizer_id, attendee_ids):
        paid = make_published_event(db_session, organizer_id, price=10.0)
        make_event(db_session, organizer_id)
        registration_ids = register_all(db_session, paid, attendee_ids[:2])
        RegistrationService.update_registration_status(db_session, registration_ids[0], "attended")

        summary = AnalyticsService.get_organizer_summary(db_session, organizer_id)

        assert summary.total_events == 2
        assert summary.published_events == 1
        assert summary.total_registrations == 2
        assert summary.total_attendees == 1
        assert summary.total_revenue == pytest.approx(20.0)
        assert summary.average_attendance_rate == pytest.approx(25.0)

    def test_no_events(self, db_session, organizer_id):
        summary = AnalyticsService.get_organizer_summary(db_session, organizer_id)
        assert summary.total_events == 0
        assert summary.average_attendance_rate == 0
