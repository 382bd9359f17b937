"""
ICS Calendar Importer — Centralized configuration.

Loads all settings from .env and validates them.
Every other module reads configuration through the `settings` singleton.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (one level up from calendar_importer/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_PROVIDERS = ("caldav", "google", "memory")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Calendar store: "caldav" | "google" | "memory"
    CALENDAR_PROVIDER: str = "caldav"

    # Google Calendar (only needed when CALENDAR_PROVIDER=google)
    GOOGLE_CREDENTIALS_PATH: str = "credentials.json"
    GOOGLE_TOKEN_PATH: str = "token.json"

    # CalDAV (only needed when CALENDAR_PROVIDER=caldav)
    CALDAV_URL: str = ""
    CALDAV_USERNAME: str = ""
    CALDAV_PASSWORD: str = ""
    CALDAV_CALENDAR_NAME: str = ""  # empty → first calendar is the default

    # Decoder fallback chain, tried in order
    TEXT_ENCODINGS: list[str] = ["utf-8", "latin-1"]

    LOG_LEVEL: str = "INFO"

    @field_validator("CALENDAR_PROVIDER", mode="before")
    @classmethod
    def parse_provider(cls, v: str) -> str:
        provider = (v or "caldav").strip().lower()
        if provider not in _PROVIDERS:
            raise ValueError(
                f"CALENDAR_PROVIDER must be one of {', '.join(_PROVIDERS)}, got {v!r}"
            )
        return provider

    @field_validator("TEXT_ENCODINGS", mode="before")
    @classmethod
    def parse_encodings(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip():
            return [enc.strip() for enc in v.split(",") if enc.strip()]
        return ["utf-8", "latin-1"]

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


def _load_settings() -> Settings:
    """Load settings from environment, exiting on invalid values."""
    try:
        return Settings(
            CALENDAR_PROVIDER=os.getenv("CALENDAR_PROVIDER", "caldav"),
            GOOGLE_CREDENTIALS_PATH=os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"),
            GOOGLE_TOKEN_PATH=os.getenv("GOOGLE_TOKEN_PATH", "token.json"),
            CALDAV_URL=os.getenv("CALDAV_URL", ""),
            CALDAV_USERNAME=os.getenv("CALDAV_USERNAME", ""),
            CALDAV_PASSWORD=os.getenv("CALDAV_PASSWORD", ""),
            CALDAV_CALENDAR_NAME=os.getenv("CALDAV_CALENDAR_NAME", ""),
            TEXT_ENCODINGS=os.getenv("TEXT_ENCODINGS", ""),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env:\n{exc}", file=sys.stderr)
        sys.exit(1)


# Singleton — imported by all other modules as:
#   from calendar_importer.config import settings
settings = _load_settings()
