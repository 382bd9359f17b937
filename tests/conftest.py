"""Shared test fixtures and configuration.

Sets up environment variables before any calendar_importer imports so the
settings singleton is deterministic, and provides a fake calendar store.
"""

import os

# Patch env vars BEFORE any calendar_importer imports
os.environ.setdefault("CALENDAR_PROVIDER", "memory")
os.environ.setdefault("CALDAV_URL", "")
os.environ.setdefault("TEXT_ENCODINGS", "utf-8,latin-1")

import pytest

from calendar_importer.data.models import CalendarHandle
from calendar_importer.ports.calendar_port import CalendarError


class FakeCalendarStore:
    """CalendarStore + PermissionGate double that records every save attempt.

    `fail_on` holds 1-based attempt numbers whose save raises CalendarError.
    """

    def __init__(self, calendars=None, default=None, fail_on=(), grant=True):
        self.calendars = calendars if calendars is not None else [
            CalendarHandle(id="work", title="Work"),
            CalendarHandle(id="home", title="Home"),
        ]
        self.default = default if default is not None else self.calendars[0] if self.calendars else None
        self.fail_on = set(fail_on)
        self.grant = grant
        self.attempts = []
        self.saved = []

    def request_access(self):
        return self.grant

    def list_writable_calendars(self):
        return list(self.calendars)

    def default_calendar(self):
        return self.default

    def save(self, event, calendar):
        self.attempts.append((event, calendar))
        if len(self.attempts) in self.fail_on:
            raise CalendarError("store rejected the event")
        self.saved.append((event, calendar))


@pytest.fixture
def fake_store():
    """Return a FakeCalendarStore where every save succeeds."""
    return FakeCalendarStore()


@pytest.fixture
def standup_ics():
    """A minimal single-event ICS document."""
    return (
        "BEGIN:VEVENT\n"
        "SUMMARY:Standup\n"
        "DTSTART:20251104T090000Z\n"
        "DTEND:20251104T093000Z\n"
        "LOCATION:Room A\n"
        "END:VEVENT"
    )
