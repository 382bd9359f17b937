"""
ICS Calendar Importer — Command-line front end.

Thin rendering layer over ImportService: reads the file, prints the
session messages and the parsed events, and picks a calendar from flags.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from calendar_importer.adapters.calendar_factory import create_calendar_store
from calendar_importer.config import settings
from calendar_importer.core.import_service import ImportService

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNREADABLE = 1
EXIT_ACCESS_DENIED = 2
EXIT_NO_CALENDAR = 3


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ics-import",
        description="Import the events of an .ics file into a calendar.",
    )
    parser.add_argument("file", type=Path, help="Path to the .ics file")
    parser.add_argument(
        "--calendar",
        metavar="ID_OR_NAME",
        help="Destination calendar (default: the store's default calendar)",
    )
    parser.add_argument(
        "--list-calendars",
        action="store_true",
        help="Only list the writable calendars, do not import",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Import into an in-memory calendar instead of the configured store",
    )
    return parser


def _say(service: ImportService) -> None:
    if service.session.message:
        print(service.session.message)


async def run(args: argparse.Namespace) -> int:
    """Run one import described by parsed CLI arguments. Returns an exit code."""
    store = create_calendar_store("memory" if args.dry_run else None)
    service = ImportService(store, store, encodings=settings.TEXT_ENCODINGS)

    try:
        data = args.file.read_bytes()
    except OSError as exc:
        logger.error("Failed to load %s: %s", args.file, exc)
        print(f"Failed to load file: {exc}")
        return EXIT_UNREADABLE

    print(f"Selected File: {args.file.name}")
    events = await service.load_file(data)
    _say(service)
    if not events:
        return EXIT_UNREADABLE if service.session.file_unreadable else EXIT_OK

    for ev in events:
        line = f"  - {ev.title} @ {ev.start.isoformat()}"
        if ev.location:
            line += f" ({ev.location})"
        print(line)

    if not await service.request_access_and_load():
        _say(service)
        return EXIT_ACCESS_DENIED

    if args.list_calendars:
        for cal in service.session.calendars:
            marker = "*" if cal.id == service.session.selected_calendar_id else " "
            print(f"{marker} {cal.title} [{cal.id}]")
        return EXIT_OK

    if args.calendar and service.select_calendar(args.calendar) is None:
        print(f"Unknown calendar: {args.calendar}")
        return EXIT_NO_CALENDAR

    outcome = await service.import_selected()
    _say(service)
    if outcome is None:
        return EXIT_NO_CALENDAR
    return EXIT_OK


def main(argv: list[str] | None = None) -> None:
    """Entry point: configure logging, parse arguments and run the import."""
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = _create_parser().parse_args(argv)
    sys.exit(asyncio.run(run(args)))
