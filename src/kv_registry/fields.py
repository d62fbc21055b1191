"""Field format rules shared by the parser, requests and CLI prompts."""

from __future__ import annotations

from typing import Optional

from .errors import InvalidArgumentError

RESERVED_PREFIX = "-"
LINE_BREAKS = ("\n", "\r")


def clean_field(text: Optional[str]) -> Optional[str]:
    """Return the trimmed field, or ``None`` if it is unusable.

    A field is unusable when it is blank, starts with a hyphen or contains a
    line break (every record must stay exactly two lines on disk).
    """
    if text is None:
        return None
    trimmed = text.strip()
    if not trimmed or trimmed.startswith(RESERVED_PREFIX):
        return None
    if any(brk in trimmed for brk in LINE_BREAKS):
        return None
    return trimmed


def require_field(text: Optional[str], label: str) -> str:
    cleaned = clean_field(text)
    if cleaned is None:
        raise InvalidArgumentError(f"Invalid {label} format: {text}")
    return cleaned
