"""
ICS Calendar Importer — UI-Agnostic Import Service.

Orchestrates one import: decode file -> parse -> request calendar access ->
pick a calendar -> import -> summary message.

All observable state lives in an ImportSession that the front end
(CLI, GUI, bot) renders however it likes. Blocking work (parsing, store
calls) runs in a worker thread via asyncio.to_thread.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from calendar_importer.core.decoder import DEFAULT_ENCODINGS, DecodeError, decode_ics_bytes
from calendar_importer.core.ics_parser import parse_events
from calendar_importer.core.importer import import_events

if TYPE_CHECKING:
    from calendar_importer.core.ics_parser import EventRecord
    from calendar_importer.core.importer import ImportOutcome
    from calendar_importer.data.models import CalendarHandle
    from calendar_importer.ports.calendar_port import CalendarStore, PermissionGate

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


@dataclass
class ImportSession:
    parsed_events: list[EventRecord] = field(default_factory=list)
    calendars: list[CalendarHandle] = field(default_factory=list)
    selected_calendar_id: str | None = None
    is_processing: bool = False
    file_unreadable: bool = False
    access_granted: bool = False
    message: str | None = None
    last_outcome: ImportOutcome | None = None

    @property
    def selected_calendar(self) -> CalendarHandle | None:
        for cal in self.calendars:
            if cal.id == self.selected_calendar_id:
                return cal
        return None


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ImportService:
    """Drives an ImportSession against one calendar store."""

    def __init__(
        self,
        store: CalendarStore,
        gate: PermissionGate,
        encodings: Sequence[str] = DEFAULT_ENCODINGS,
    ) -> None:
        self.store = store
        self.gate = gate
        self.encodings = tuple(encodings)
        self.session = ImportSession()

    async def load_file(self, data: bytes) -> list[EventRecord]:
        """Decode and parse ICS bytes into the session.

        Returns the parsed events (empty when the file is unreadable).
        """
        session = self.session
        try:
            text = decode_ics_bytes(data, self.encodings)
        except DecodeError as exc:
            logger.error("Could not decode ICS file: %s", exc)
            session.parsed_events = []
            session.file_unreadable = True
            session.message = "Unable to read file contents."
            return []

        session.file_unreadable = False
        events = await asyncio.to_thread(parse_events, text)
        session.parsed_events = events
        session.message = (
            "No events found in ICS." if not events else f"Parsed {len(events)} event(s)."
        )
        return events

    async def request_access_and_load(self) -> bool:
        """Ask for calendar access and, if granted, load writable calendars."""
        granted = await asyncio.to_thread(self.gate.request_access)
        self.session.access_granted = granted
        if not granted:
            logger.warning("Calendar access denied")
            self.session.message = "Calendar access denied."
            return False

        await self.load_calendars()
        self.session.message = "Calendar access granted."
        return True

    async def load_calendars(self) -> list[CalendarHandle]:
        """Refresh the writable calendar list; preselect the store default."""
        session = self.session
        calendars = await asyncio.to_thread(self.store.list_writable_calendars)
        session.calendars = [cal for cal in calendars if cal.writable]

        if session.selected_calendar_id is None:
            default = await asyncio.to_thread(self.store.default_calendar)
            if default is not None:
                session.selected_calendar_id = default.id

        logger.info(
            "Loaded %d writable calendar(s); selected=%s",
            len(session.calendars),
            session.selected_calendar_id,
        )
        return session.calendars

    def select_calendar(self, calendar_id: str) -> CalendarHandle | None:
        """Select a destination by id or title. Returns None when unknown."""
        for cal in self.session.calendars:
            if calendar_id in (cal.id, cal.title):
                self.session.selected_calendar_id = cal.id
                return cal
        logger.warning("Unknown calendar %r", calendar_id)
        return None

    async def import_selected(self) -> ImportOutcome | None:
        """Import the parsed events into the selected calendar.

        Returns None (and sets a message) when no valid calendar is
        selected; the importer is not invoked in that case.
        """
        session = self.session
        calendar = session.selected_calendar
        if calendar is None:
            session.message = "No calendar selected."
            return None

        session.is_processing = True
        session.message = "Importing..."
        try:
            outcome = await asyncio.to_thread(
                import_events, list(session.parsed_events), calendar, self.store
            )
        finally:
            session.is_processing = False

        session.last_outcome = outcome
        session.message = f"Imported: {outcome.succeeded}. Failed: {outcome.failed}."
        return outcome
