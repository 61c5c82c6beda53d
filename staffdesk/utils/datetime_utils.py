"""
Timezone-aware datetime helpers.
- Store and compute in UTC in DB.
- API responses expose datetimes as ISO-8601 with Z.
"""
from datetime import date, datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware)."""
    return datetime.now(UTC)


def today_utc() -> date:
    """Server calendar date in UTC; attendance rows are keyed on it."""
    return now_utc().date()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def iso_z(dt: Optional[datetime]) -> Optional[str]:
    """ISO-8601 with Z for UTC. Use for all API response datetime fields."""
    if dt is None:
        return None
    s = ensure_utc(dt).isoformat()
    if s.endswith("+00:00"):
        s = s[:-6] + "Z"
    return s
