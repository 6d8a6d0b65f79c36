"""Time helpers shared by services. All stored instants are timezone-aware UTC."""

from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from fitcore.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(moment: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (e.g. from SQLite) as UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def calendar_zone(name: Optional[str] = None) -> tzinfo:
    """Zone used to derive calendar days and hour-of-day."""
    zone_name = name or settings.FITCORE_TIMEZONE or "UTC"
    if zone_name.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(zone_name)
