"""Time helpers shared by services."""
from __future__ import annotations

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from study_planner.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def local_today() -> date:
    """Calendar date in the configured local timezone; day-based features count from it."""
    return datetime.now(ZoneInfo(settings.local_timezone)).date()


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes read back from the database as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
