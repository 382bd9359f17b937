"""Google Calendar store — implements CalendarStore for the Google Calendar API.

All Google-specific logic lives here. Core modules never import this directly;
they depend on the CalendarStore protocol.
"""

from __future__ import annotations

import logging

from calendar_importer.data.models import CalendarEvent, CalendarHandle
from calendar_importer.integrations import google_auth
from calendar_importer.ports.calendar_port import CalendarError

logger = logging.getLogger(__name__)

_WRITABLE_ROLES = ("owner", "writer")


def _build_event_body(event: CalendarEvent) -> dict:
    """Construct a Google Calendar API event body from a CalendarEvent.

    Start and end are sent as RFC 3339 timestamps with their UTC offset,
    so no separate timeZone field is required.
    """
    body: dict = {
        "summary": event.title,
        "start": {"dateTime": event.start.isoformat()},
        "end": {"dateTime": event.end.isoformat()},
    }
    if event.location is not None:
        body["location"] = event.location
    if event.notes is not None:
        body["description"] = event.notes
    return body


def _handle_for(item: dict) -> CalendarHandle:
    return CalendarHandle(
        id=item["id"],
        title=item.get("summaryOverride") or item.get("summary") or item["id"],
        writable=item.get("accessRole") in _WRITABLE_ROLES,
    )


class GoogleCalendarStore:
    """Google Calendar implementation of CalendarStore and PermissionGate."""

    def __init__(self, service=None) -> None:
        self._service = service

    def _get_service(self):
        if self._service is None:
            self._service = google_auth.get_calendar_service()
        return self._service

    def _calendar_list(self) -> list[dict]:
        try:
            service = self._get_service()
            items: list[dict] = []
            page_token = None
            while True:
                result = service.calendarList().list(pageToken=page_token).execute()
                items.extend(result.get("items", []))
                page_token = result.get("nextPageToken")
                if not page_token:
                    return items
        except Exception as exc:
            logger.error("Google Calendar API error (calendarList): %s", exc)
            raise CalendarError(f"Failed to list calendars: {exc}") from exc

    def request_access(self) -> bool:
        try:
            self._get_service()
        except Exception as exc:
            logger.warning("Google Calendar authorization failed: %s", exc)
            return False
        return True

    def list_writable_calendars(self) -> list[CalendarHandle]:
        handles = [_handle_for(item) for item in self._calendar_list()]
        writable = [h for h in handles if h.writable]
        logger.info("Found %d writable Google calendar(s)", len(writable))
        return writable

    def default_calendar(self) -> CalendarHandle | None:
        for item in self._calendar_list():
            if item.get("primary"):
                return _handle_for(item)
        return None

    def save(self, event: CalendarEvent, calendar: CalendarHandle) -> None:
        body = _build_event_body(event)
        try:
            service = self._get_service()
            created = (
                service.events()
                .insert(calendarId=calendar.id, body=body)
                .execute()
            )
        except Exception as exc:
            logger.error("Google Calendar API error (insert): %s", exc)
            raise CalendarError(f"Failed to create event: {exc}") from exc

        logger.info(
            "Event created: '%s' on %s — %s",
            event.title,
            event.start.isoformat(),
            created.get("htmlLink", ""),
        )
