"""
ICS Calendar Importer — ICS Parser.

Converts iCalendar (.ics) text into structured event records.
Only single, non-recurring VEVENTs are understood: start/end, summary,
location and description. Everything else in the file is ignored.

The parser is total: malformed blocks are dropped, never reported.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_BEGIN_MARKER = "BEGIN:VEVENT"
_END_MARKER = "END:VEVENT"
_FOLD_CHARS = (" ", "\t")

DEFAULT_TITLE = "Untitled"


# ---------------------------------------------------------------------------
# Parsed record
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EventRecord:
    """One VEVENT extracted from an ICS file.

    `end` stays None when the file has no usable DTEND; the importer
    fills in the default duration.
    """

    title: str
    start: datetime
    end: datetime | None = None
    location: str | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Date parsing
# ---------------------------------------------------------------------------

# (exact shape, strptime format, value is UTC)
_DATE_FORMATS = (
    (re.compile(r"\d{8}T\d{6}Z"), "%Y%m%dT%H%M%SZ", True),
    (re.compile(r"\d{8}T\d{6}"), "%Y%m%dT%H%M%S", False),
    (re.compile(r"\d{8}"), "%Y%m%d", False),
)


def parse_ics_date(raw: str) -> datetime | None:
    """Parse an ICS date value into an aware datetime.

    Accepts exactly three shapes, tried in order:
      20251104T090000Z  — UTC
      20251104T090000   — local system time
      20251104          — local midnight

    Returns None for anything else.
    """
    value = raw.strip()
    for pattern, fmt, is_utc in _DATE_FORMATS:
        if not pattern.fullmatch(value):
            continue
        try:
            parsed = datetime.strptime(value, fmt)
        except ValueError:
            return None
        if is_utc:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone()
    return None


# ---------------------------------------------------------------------------
# Block extraction
# ---------------------------------------------------------------------------


def _value_after_colon(line: str) -> str | None:
    """Return everything after the first ':' (parameters are discarded)."""
    _, sep, value = line.partition(":")
    return value if sep else None


def _parse_event_block(lines: list[str]) -> EventRecord | None:
    """Build an EventRecord from a block's logical lines.

    Each logical line is trimmed before matching. Repeated properties
    overwrite earlier ones. Returns None when DTSTART is missing or
    unparsable.
    """
    title = DEFAULT_TITLE
    dtstart_raw: str | None = None
    dtend_raw: str | None = None
    location: str | None = None
    notes: str | None = None

    for line in lines:
        line = line.strip()
        upper = line.upper()
        if upper.startswith("SUMMARY:"):
            title = line[len("SUMMARY:"):]
        elif upper.startswith("DTSTART"):
            value = _value_after_colon(line)
            if value is not None:
                dtstart_raw = value
        elif upper.startswith("DTEND"):
            value = _value_after_colon(line)
            if value is not None:
                dtend_raw = value
        elif upper.startswith("LOCATION:"):
            location = line[len("LOCATION:"):]
        elif upper.startswith("DESCRIPTION:"):
            notes = line[len("DESCRIPTION:"):]

    if dtstart_raw is None:
        logger.debug("Dropping VEVENT '%s': no DTSTART", title)
        return None
    start = parse_ics_date(dtstart_raw)
    if start is None:
        logger.debug("Dropping VEVENT '%s': bad DTSTART %r", title, dtstart_raw)
        return None

    end = parse_ics_date(dtend_raw) if dtend_raw is not None else None

    return EventRecord(
        title=title,
        start=start,
        end=end,
        location=location,
        notes=notes,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _split_lines(text: str) -> list[str]:
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def iter_events(text: str) -> Iterator[EventRecord]:
    """Yield EventRecords lazily, in the order their blocks appear."""
    block: list[str] | None = None

    for raw in _split_lines(text):
        if raw.startswith(_FOLD_CHARS):
            if block is None:
                continue
            # Folded line: drop the fold character and glue onto the previous line
            if block:
                block[-1] += raw[1:]
            else:
                block.append(raw[1:])
            continue

        marker = raw.upper()
        if marker.startswith(_BEGIN_MARKER):
            block = []
        elif marker.startswith(_END_MARKER):
            if block is None:
                continue
            record = _parse_event_block(block)
            block = None
            if record is not None:
                yield record
        elif block is not None:
            block.append(raw)


def parse_events(text: str) -> list[EventRecord]:
    """Parse every VEVENT in `text`.

    Never raises: blocks without a usable DTSTART and unterminated
    trailing blocks are silently skipped.
    """
    events = list(iter_events(text))
    logger.info("Parsed %d event(s) from ICS text", len(events))
    return events
