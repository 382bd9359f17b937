"""
ICS Calendar Importer — Entry Point.

Single entry point: `python main.py FILE.ics` imports the file's events.
Logging is configured by calendar_importer.cli.main, which the
`ics-import` console script calls as well.
"""

from calendar_importer.cli import main

if __name__ == "__main__":
    main()
