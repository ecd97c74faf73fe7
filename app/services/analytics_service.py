"""
Analytics computed from the registration ledger at read time
"""

from typing import List

from sqlalchemy.orm import Session

from app.schemas.analytics import EventAnalytics, OrganizerSummary
from app.services.repositories import collection
from app.utils.dates import sort_by_timestamp


def attendance_rate(attendee_count: int, registration_count: int) -> float:
    if not registration_count:
        return 0.0
    return attendee_count / registration_count * 100


class AnalyticsService:

    @staticmethod
    def get_event_analytics(db: Session, organizer_id: str) -> List[EventAnalytics]:
        """Per-event figures for an organizer, newest start date first.

        ``registration_count`` and ``revenue`` include cancelled registrations.
        """
        registrations = collection(db, "registrations")
        events = sort_by_timestamp(
            collection(db, "events").list(organizer_id=organizer_id),
            "start_date",
            newest_first=True
        )

        results = []
        for event in events:
            rows = registrations.list(event_id=event["id"])
            attendee_count = sum(1 for r in rows if r["status"] == "attended")
            ratings = [r["feedback"]["rating"] for r in rows if r.get("feedback")]

            results.append(EventAnalytics(
                id=event["id"],
                title=event["title"],
                start_date=event["start_date"],
                category=event["category"],
                type=event["type"],
                price=event.get("price"),
                registration_count=len(rows),
                attendee_count=attendee_count,
                cancelled_count=sum(1 for r in rows if r["status"] == "cancelled"),
                attendance_rate=attendance_rate(attendee_count, len(rows)),
                revenue=(event.get("price") or 0) * len(rows),
                average_rating=sum(ratings) / len(ratings) if ratings else None
            ))
        return results

    @staticmethod
    def get_organizer_summary(db: Session, organizer_id: str) -> OrganizerSummary:
        analytics = AnalyticsService.get_event_analytics(db, organizer_id)
        published = collection(db, "events").count(organizer_id=organizer_id, status="published")

        total_registrations = sum(a.registration_count for a in analytics)
        total_attendees = sum(a.attendee_count for a in analytics)
        return OrganizerSummary(
            total_events=len(analytics),
            published_events=published,
            total_registrations=total_registrations,
            total_attendees=total_attendees,
            total_revenue=sum(a.revenue for a in analytics),
            average_attendance_rate=(
                sum(a.attendance_rate for a in analytics) / len(analytics) if analytics else 0.0
            )
        )
