"""Shared datetime utilities."""

from __future__ import annotations

from datetime import datetime, timezone

# Numeric timestamps below this are epoch seconds, above it epoch milliseconds.
EPOCH_MS_THRESHOLD = 10**12


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 datetime string, returning None on invalid input.

    Handles common variations:
    - Standard ISO format: 2026-02-12T10:30:00
    - With timezone Z suffix: 2026-02-12T10:30:00Z
    - With timezone offset: 2026-02-12T10:30:00+00:00

    Naive values are taken to be UTC. The result is always timezone-aware.
    """
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_iso(dt: datetime) -> str:
    """Format a datetime as a UTC ISO string with millisecond precision."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    text = dt.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def epoch_to_iso(value: float) -> str | None:
    """Convert epoch seconds or milliseconds to an ISO string."""
    seconds = value if value < EPOCH_MS_THRESHOLD else value / 1000
    try:
        return to_iso(datetime.fromtimestamp(seconds, tz=timezone.utc))
    except (OverflowError, OSError, ValueError):
        return None


def normalize_timestamp(value: object, fallback: str) -> str:
    """Normalize a log record timestamp, using ``fallback`` when unusable."""
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        parsed = parse_iso(value)
        return to_iso(parsed) if parsed else fallback
    if isinstance(value, (int, float)):
        return epoch_to_iso(value) or fallback
    return fallback
