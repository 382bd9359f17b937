"""
ICS Calendar Importer — Importer.

Saves parsed EventRecords into one destination calendar, one at a time.
A failed save is counted and skipped; it never stops the run and never
undoes earlier saves.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from calendar_importer.data.models import CalendarEvent

if TYPE_CHECKING:
    from calendar_importer.core.ics_parser import EventRecord
    from calendar_importer.data.models import CalendarHandle
    from calendar_importer.ports.calendar_port import CalendarStore

logger = logging.getLogger(__name__)

DEFAULT_DURATION = timedelta(hours=1)


@dataclass(frozen=True)
class ImportOutcome:
    attempted: int = 0
    succeeded: int = 0
    failed: int = 0


def to_calendar_event(record: EventRecord) -> CalendarEvent:
    """Map a parsed record onto a destination event, defaulting the end time."""
    return CalendarEvent(
        title=record.title,
        start=record.start,
        end=record.end if record.end is not None else record.start + DEFAULT_DURATION,
        location=record.location,
        notes=record.notes,
    )


def import_events(
    records: Iterable[EventRecord],
    destination: CalendarHandle,
    store: CalendarStore,
) -> ImportOutcome:
    """Save every record into `destination`, tallying the results.

    Blocking and strictly sequential. Callers on an event loop should
    run it with asyncio.to_thread.
    """
    succeeded = 0
    failed = 0

    for record in records:
        event = to_calendar_event(record)
        try:
            store.save(event, destination)
            succeeded += 1
        except Exception as exc:
            failed += 1
            logger.warning(
                "Failed to import '%s' (%s) into '%s': %s",
                record.title,
                record.start.isoformat(),
                destination.title,
                exc,
            )

    outcome = ImportOutcome(
        attempted=succeeded + failed,
        succeeded=succeeded,
        failed=failed,
    )
    logger.info(
        "Import into '%s' finished: %d attempted, %d succeeded, %d failed",
        destination.title,
        outcome.attempted,
        outcome.succeeded,
        outcome.failed,
    )
    return outcome
