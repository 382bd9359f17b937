"""Tests for the CalDAV calendar store.

All CalDAV client calls are mocked.
"""

import pytest
from unittest.mock import MagicMock, patch
from datetime import datetime, timedelta, timezone

from calendar_importer.adapters.caldav_calendar import (
    CalDAVCalendarStore,
    _build_vevent,
)
from calendar_importer.data.models import CalendarEvent, CalendarHandle
from calendar_importer.ports.calendar_port import CalendarError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_PATCH_CLIENT = "calendar_importer.adapters.caldav_calendar.caldav.DAVClient"

_START = datetime(2025, 11, 4, 9, 0, tzinfo=timezone.utc)


def _event(**overrides):
    fields = dict(
        title="Standup",
        start=_START,
        end=_START + timedelta(minutes=30),
        location="Room A",
        notes=None,
    )
    fields.update(overrides)
    return CalendarEvent(**fields)


def _mock_calendar(name, url):
    cal = MagicMock()
    cal.name = name
    cal.url = url
    cal.save_event = MagicMock()
    return cal


def _patched_client(calendars):
    """Patch DAVClient so principal().calendars() returns `calendars`."""
    client = MagicMock()
    client.principal.return_value.calendars.return_value = calendars
    return patch(_PATCH_CLIENT, return_value=client)


def _store(**kwargs):
    kwargs.setdefault("url", "https://dav.example.com/")
    kwargs.setdefault("username", "me")
    kwargs.setdefault("password", "secret")
    kwargs.setdefault("calendar_name", "")
    return CalDAVCalendarStore(**kwargs)


# ---------------------------------------------------------------------------
# Tests for _build_vevent
# ---------------------------------------------------------------------------


class TestBuildVevent:
    def test_builds_basic_vevent(self):
        result = _build_vevent(_event(), uid="test-uid")
        assert "BEGIN:VEVENT" in result
        assert "END:VEVENT" in result
        assert "SUMMARY:Standup" in result
        assert "UID:test-uid" in result
        assert "DTSTART:20251104T090000Z" in result
        assert "DTEND:20251104T093000Z" in result
        assert "LOCATION:Room A" in result

    def test_local_times_are_converted_to_utc(self):
        plus_two = timezone(timedelta(hours=2))
        start = datetime(2025, 11, 4, 11, 0, tzinfo=plus_two)
        result = _build_vevent(_event(start=start, end=start + timedelta(hours=1)))
        assert "DTSTART:20251104T090000Z" in result
        assert "DTEND:20251104T100000Z" in result

    def test_description_from_notes(self):
        result = _build_vevent(_event(notes="Bring coffee"))
        assert "DESCRIPTION:Bring coffee" in result

    def test_optional_fields_omitted(self):
        result = _build_vevent(_event(location=None, notes=None))
        assert "LOCATION" not in result
        assert "DESCRIPTION" not in result

    def test_generates_uid(self):
        assert "UID:" in _build_vevent(_event())


# ---------------------------------------------------------------------------
# Tests for CalDAVCalendarStore
# ---------------------------------------------------------------------------


class TestCalDAVAccess:
    def test_access_granted(self):
        with _patched_client([]):
            assert _store().request_access() is True

    def test_access_denied_on_connection_error(self):
        with patch(_PATCH_CLIENT, side_effect=Exception("401 Unauthorized")):
            assert _store().request_access() is False

    def test_access_denied_without_url(self):
        with patch(_PATCH_CLIENT) as client_cls:
            assert _store(url="").request_access() is False
        client_cls.assert_not_called()


class TestCalDAVCalendars:
    def test_lists_calendars(self):
        cals = [
            _mock_calendar("Personal", "https://dav.example.com/personal/"),
            _mock_calendar("Work", "https://dav.example.com/work/"),
        ]
        with _patched_client(cals):
            handles = _store().list_writable_calendars()
        assert handles == [
            CalendarHandle(id="https://dav.example.com/personal/", title="Personal"),
            CalendarHandle(id="https://dav.example.com/work/", title="Work"),
        ]

    def test_list_failure_raises_calendar_error(self):
        client = MagicMock()
        client.principal.return_value.calendars.side_effect = Exception("server down")
        with patch(_PATCH_CLIENT, return_value=client):
            with pytest.raises(CalendarError):
                _store().list_writable_calendars()

    def test_default_is_first_calendar(self):
        cals = [
            _mock_calendar("Personal", "u1"),
            _mock_calendar("Work", "u2"),
        ]
        with _patched_client(cals):
            assert _store().default_calendar().title == "Personal"

    def test_default_by_configured_name(self):
        cals = [
            _mock_calendar("Personal", "u1"),
            _mock_calendar("Work", "u2"),
        ]
        with _patched_client(cals):
            assert _store(calendar_name="Work").default_calendar().id == "u2"

    def test_default_name_not_found(self):
        with _patched_client([_mock_calendar("Personal", "u1")]):
            assert _store(calendar_name="Missing").default_calendar() is None

    def test_no_calendars(self):
        with _patched_client([]):
            assert _store().default_calendar() is None


class TestCalDAVSave:
    def test_save_success(self):
        work = _mock_calendar("Work", "u2")
        with _patched_client([_mock_calendar("Personal", "u1"), work]):
            store = _store()
            store.save(_event(), CalendarHandle(id="u2", title="Work"))
        work.save_event.assert_called_once()
        vcal = work.save_event.call_args[0][0]
        assert "SUMMARY:Standup" in vcal

    def test_save_failure_raises_calendar_error(self):
        work = _mock_calendar("Work", "u2")
        work.save_event.side_effect = Exception("server down")
        with _patched_client([work]):
            with pytest.raises(CalendarError, match="Failed to create event"):
                _store().save(_event(), CalendarHandle(id="u2", title="Work"))

    def test_save_unknown_calendar(self):
        with _patched_client([_mock_calendar("Work", "u2")]):
            with pytest.raises(CalendarError, match="not found"):
                _store().save(_event(), CalendarHandle(id="nope", title="Nope"))

    def test_connects_once(self):
        work = _mock_calendar("Work", "u2")
        with _patched_client([work]) as client_cls:
            store = _store()
            store.list_writable_calendars()
            store.save(_event(), CalendarHandle(id="u2", title="Work"))
            store.save(_event(), CalendarHandle(id="u2", title="Work"))
        client_cls.assert_called_once()
        assert work.save_event.call_count == 2
