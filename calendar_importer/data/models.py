"""
ICS Calendar Importer — Data Models.

Value types shared between the core and the calendar store adapters.
Parsed ICS records live in core.ics_parser; these describe the destination side.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CalendarHandle:
    """A destination calendar exposed by a calendar store.

    `id` is whatever the provider uses to address the calendar
    (CalDAV collection URL, Google calendarId, ...).
    """

    id: str
    title: str
    writable: bool = True


@dataclass
class CalendarEvent:
    """A destination-native event, ready to be saved into a calendar."""

    title: str
    start: datetime
    end: datetime
    location: str | None = None
    notes: str | None = None
