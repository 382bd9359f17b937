"""Calendar store factory — creates the right store based on config."""

from __future__ import annotations

from calendar_importer.config import settings
from calendar_importer.ports.calendar_port import CalendarStore


def create_calendar_store(provider: str | None = None) -> CalendarStore:
    """Return the calendar store matching CALENDAR_PROVIDER (or `provider`).

    Every returned store also implements PermissionGate.
    """
    provider = (provider or settings.CALENDAR_PROVIDER).lower()

    if provider == "caldav":
        from calendar_importer.adapters.caldav_calendar import CalDAVCalendarStore

        return CalDAVCalendarStore()

    if provider == "google":
        from calendar_importer.adapters.google_calendar import GoogleCalendarStore

        return GoogleCalendarStore()

    if provider == "memory":
        from calendar_importer.adapters.memory_calendar import MemoryCalendarStore

        return MemoryCalendarStore()

    raise ValueError(f"Unknown CALENDAR_PROVIDER: {provider!r}")
