"""Shared coercion helpers for payloads and user input."""

from __future__ import annotations

import math
import re

_YEAR_RE = re.compile(r"^\s*(\d{4})\s*$")


def coerce_int(value: object, default: int | None = None) -> int | None:
    """Best-effort parse integer value."""
    try:
        if value is None or isinstance(value, bool):
            return default
        return int(value)
    except (TypeError, ValueError):
        return default


def safe_float(value: object) -> float | None:
    """Parse a finite float, returning None for blanks, junk, NaN and inf."""
    try:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            parsed = float(text)
        else:
            parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def parse_year(value: object) -> int | None:
    """Extract a four-digit year from an int or a year-like string key."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _YEAR_RE.match(str(value))
    if match:
        return int(match.group(1))
    return None


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))
