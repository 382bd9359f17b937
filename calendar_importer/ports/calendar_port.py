"""Calendar port — abstract interfaces for the destination calendar store.

Core modules depend on these protocols, never on a specific provider.
"""

from __future__ import annotations

from typing import Protocol

from calendar_importer.data.models import CalendarEvent, CalendarHandle


class CalendarError(Exception):
    """Raised when any calendar store operation fails."""


class CalendarStore(Protocol):
    """Blocking calendar store used by the importer.

    Implementations raise CalendarError from `save` when the store
    rejects an event.
    """

    def list_writable_calendars(self) -> list[CalendarHandle]: ...

    def default_calendar(self) -> CalendarHandle | None: ...

    def save(self, event: CalendarEvent, calendar: CalendarHandle) -> None: ...


class PermissionGate(Protocol):
    """Grants (or refuses) access to the calendar store."""

    def request_access(self) -> bool: ...
