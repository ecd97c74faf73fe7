"""
Attendee roster export (CSV / Excel)
"""

import io
from typing import Any, Dict, List

import pandas as pd
from sqlalchemy.orm import Session

from app.services.registration_service import RegistrationService

ROSTER_COLUMNS = ['Name', 'Email', 'Company', 'Location', 'Status', 'Registered At', 'Checked In At']


class ExportService:
    """Service for exporting an event's attendees"""

    @staticmethod
    def roster_rows(db: Session, event_id: str) -> List[Dict[str, Any]]:
        rows = []
        for registration in RegistrationService.get_event_registrations(db, event_id):
            user = registration.user
            rows.append({
                'Name': user.name if user else '',
                'Email': user.email if user else '',
                'Company': (user.company if user else None) or '',
                'Location': (user.location if user else None) or '',
                'Status': registration.status,
                'Registered At': registration.registered_at,
                'Checked In At': registration.checked_in_at or ''
            })
        return rows

    @staticmethod
    def roster_frame(db: Session, event_id: str) -> pd.DataFrame:
        return pd.DataFrame(ExportService.roster_rows(db, event_id), columns=ROSTER_COLUMNS)

    @staticmethod
    def export_csv(db: Session, event_id: str) -> bytes:
        df = ExportService.roster_frame(db, event_id)
        return df.to_csv(index=False).encode('utf-8')

    @staticmethod
    def export_excel(db: Session, event_id: str) -> bytes:
        df = ExportService.roster_frame(db, event_id)

        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            df.to_excel(writer, index=False, sheet_name='Attendees')

        return buffer.getvalue()
