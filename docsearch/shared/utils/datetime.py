"""UTC datetime helpers for document timestamps.

Document created_at/updated_at and the date range filters are compared as
timezone-aware UTC values on every backend.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Normalize to aware UTC; naive values are taken to be UTC already.

    SQLite hands back naive datetimes for timezone-aware columns, so this is
    applied when rows are mapped to DTOs and when filter bounds are built.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)
