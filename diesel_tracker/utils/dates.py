"""Utilitaires de dates / Date utilities."""

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from diesel_tracker.config import settings


def as_utc(value: datetime) -> datetime:
    """Ramener en UTC / Normalize to UTC.

    Une valeur naive (SQLite) est consideree UTC / A naive value (SQLite) is taken as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso_instant(value: datetime) -> str:
    """Instant ISO-8601 UTC en millisecondes / ISO-8601 UTC instant with milliseconds."""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def display_tz() -> tzinfo:
    """Fuseau configure / Configured display timezone."""
    return ZoneInfo(settings.TIMEZONE)
