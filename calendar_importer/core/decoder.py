"""Bytes → text for ICS files, with an encoding fallback chain."""

from __future__ import annotations

import logging
from collections.abc import Sequence

logger = logging.getLogger(__name__)

DEFAULT_ENCODINGS = ("utf-8", "latin-1")


class DecodeError(Exception):
    """Raised when the file cannot be decoded with any configured encoding."""


def decode_ics_bytes(data: bytes, encodings: Sequence[str] = DEFAULT_ENCODINGS) -> str:
    """Decode `data` with the first encoding in `encodings` that works.

    Raises:
        DecodeError: If every encoding fails (or none is configured).
    """
    for encoding in encodings:
        try:
            text = data.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            logger.debug("Decoding with %s failed: %s", encoding, exc)
            continue
        if encoding != encodings[0]:
            logger.info("Decoded ICS data using fallback encoding %s", encoding)
        return text

    raise DecodeError(
        f"Unable to decode {len(data)} bytes with any of: {', '.join(encodings) or '(none)'}"
    )
