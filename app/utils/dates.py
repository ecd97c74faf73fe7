"""
Timestamp helpers.

Timestamps are stored as ISO-8601 strings. Event dates are kept exactly as the
organizer submitted them, so ordering parses them first.
"""

from datetime import datetime, timezone


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO timestamp; naive values are read as UTC"""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def sort_by_timestamp(records: list, field: str, newest_first: bool = False) -> list:
    """Sort dict records (or models) by one of their ISO timestamp fields"""
    def key(record):
        value = record[field] if isinstance(record, dict) else getattr(record, field)
        return parse_timestamp(value)

    return sorted(records, key=key, reverse=newest_first)
