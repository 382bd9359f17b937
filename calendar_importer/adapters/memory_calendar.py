"""In-memory calendar store — implements CalendarStore without any backend.

Used for dry runs: events are kept in process and discarded on exit.
"""

from __future__ import annotations

import logging

from calendar_importer.data.models import CalendarEvent, CalendarHandle
from calendar_importer.ports.calendar_port import CalendarError

logger = logging.getLogger(__name__)


class MemoryCalendarStore:
    """Dict-backed implementation of CalendarStore and PermissionGate."""

    def __init__(
        self,
        calendars: list[CalendarHandle] | None = None,
        default_id: str | None = None,
        grant_access: bool = True,
    ) -> None:
        if calendars is None:
            calendars = [CalendarHandle(id="local", title="Calendar")]
        self._calendars = list(calendars)
        self._default_id = default_id if default_id is not None else (
            self._calendars[0].id if self._calendars else None
        )
        self._grant_access = grant_access
        self.saved: dict[str, list[CalendarEvent]] = {cal.id: [] for cal in self._calendars}

    def request_access(self) -> bool:
        return self._grant_access

    def list_writable_calendars(self) -> list[CalendarHandle]:
        return [cal for cal in self._calendars if cal.writable]

    def default_calendar(self) -> CalendarHandle | None:
        for cal in self._calendars:
            if cal.id == self._default_id:
                return cal
        return None

    def save(self, event: CalendarEvent, calendar: CalendarHandle) -> None:
        if calendar.id not in self.saved:
            raise CalendarError(f"Calendar {calendar.id!r} does not exist.")
        if not calendar.writable:
            raise CalendarError(f"Calendar {calendar.title!r} is read-only.")
        if event.end < event.start:
            raise CalendarError(f"Event '{event.title}' ends before it starts.")
        self.saved[calendar.id].append(event)
        logger.debug("Stored '%s' in memory calendar '%s'", event.title, calendar.title)
