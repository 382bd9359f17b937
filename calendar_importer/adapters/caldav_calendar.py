"""CalDAV calendar store — implements CalendarStore for CalDAV servers.

Supports iCloud, Nextcloud, Fastmail, and any CalDAV-compliant server.
The caldav library is synchronous, which is what the importer expects;
the import service moves the whole run onto a worker thread.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

import caldav
from icalendar import Calendar as iCalendar
from icalendar import Event as iEvent

from calendar_importer.config import settings
from calendar_importer.data.models import CalendarEvent, CalendarHandle
from calendar_importer.ports.calendar_port import CalendarError

logger = logging.getLogger(__name__)


def _build_vevent(event: CalendarEvent, uid: str | None = None) -> str:
    """Build an iCalendar VCALENDAR/VEVENT string for one event."""
    cal = iCalendar()
    cal.add("prodid", "-//ICS Calendar Importer//EN")
    cal.add("version", "2.0")

    vevent = iEvent()
    vevent.add("uid", uid or str(uuid.uuid4()))
    vevent.add("dtstamp", datetime.now(timezone.utc))
    vevent.add("summary", event.title)
    # Normalise to UTC so no VTIMEZONE component is needed
    vevent.add("dtstart", event.start.astimezone(timezone.utc))
    vevent.add("dtend", event.end.astimezone(timezone.utc))

    if event.location:
        vevent.add("location", event.location)
    if event.notes:
        vevent.add("description", event.notes)

    cal.add_component(vevent)
    return cal.to_ical().decode("utf-8")


def _handle_for(calendar: caldav.Calendar) -> CalendarHandle:
    return CalendarHandle(id=str(calendar.url), title=calendar.name or str(calendar.url))


class CalDAVCalendarStore:
    """CalDAV implementation of CalendarStore and PermissionGate."""

    def __init__(
        self,
        url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        calendar_name: str | None = None,
    ) -> None:
        self._url = url if url is not None else settings.CALDAV_URL
        self._username = username if username is not None else settings.CALDAV_USERNAME
        self._password = password if password is not None else settings.CALDAV_PASSWORD
        self._calendar_name = (
            calendar_name if calendar_name is not None else settings.CALDAV_CALENDAR_NAME
        )
        self._principal: caldav.Principal | None = None
        self._calendars: dict[str, caldav.Calendar] = {}

    def _get_principal(self) -> caldav.Principal:
        if self._principal is None:
            if not self._url:
                raise CalendarError("CALDAV_URL is not configured.")
            client = caldav.DAVClient(
                url=self._url,
                username=self._username,
                password=self._password,
            )
            self._principal = client.principal()
        return self._principal

    def _fetch_calendars(self) -> list[caldav.Calendar]:
        try:
            calendars = self._get_principal().calendars()
        except CalendarError:
            raise
        except Exception as exc:
            logger.error("CalDAV error (list calendars): %s", exc)
            raise CalendarError(f"Failed to list calendars: {exc}") from exc

        self._calendars = {str(cal.url): cal for cal in calendars}
        return calendars

    def request_access(self) -> bool:
        try:
            self._get_principal()
        except Exception as exc:
            logger.warning("CalDAV access check failed: %s", exc)
            return False
        return True

    def list_writable_calendars(self) -> list[CalendarHandle]:
        handles = [_handle_for(cal) for cal in self._fetch_calendars()]
        logger.info("Found %d CalDAV calendar(s)", len(handles))
        return handles

    def default_calendar(self) -> CalendarHandle | None:
        calendars = self._fetch_calendars()
        if not calendars:
            return None

        if self._calendar_name:
            for cal in calendars:
                if cal.name == self._calendar_name:
                    return _handle_for(cal)
            logger.warning(
                "Calendar '%s' not found. Available: %s",
                self._calendar_name,
                [c.name for c in calendars],
            )
            return None

        return _handle_for(calendars[0])

    def save(self, event: CalendarEvent, calendar: CalendarHandle) -> None:
        if calendar.id not in self._calendars:
            self._fetch_calendars()
        target = self._calendars.get(calendar.id)
        if target is None:
            raise CalendarError(f"Calendar '{calendar.title}' not found on the CalDAV server.")

        vcal = _build_vevent(event)
        try:
            target.save_event(vcal)
        except Exception as exc:
            logger.error("CalDAV error (save): %s", exc)
            raise CalendarError(f"Failed to create event: {exc}") from exc

        logger.info(
            "CalDAV event created: '%s' on %s in '%s'",
            event.title,
            event.start.isoformat(),
            calendar.title,
        )
