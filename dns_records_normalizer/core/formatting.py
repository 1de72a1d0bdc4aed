"""
Text formatting for time values and unknown payloads.
"""

import dataclasses
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from typing import Any, Optional


def format_timestamp(value: Any) -> Optional[str]:
    """Render a point in time as sortable ISO-8601 text, or None when absent."""
    if not value:
        return None
    if isinstance(value, str):
        return datetime.fromisoformat(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Cannot format {type(value).__name__} as a timestamp")


def format_duration(value: Any) -> Optional[str]:
    """Render a duration as ``[-][d.]hh:mm:ss[.ffffff]``, or None when absent."""
    if not value:
        return None
    return _duration_text(value)


def format_required_duration(value: Any) -> str:
    """Like format_duration, but a missing value is an error and zero is kept."""
    if value is None:
        raise ValueError("duration value is missing")
    return _duration_text(value)


def _duration_text(value: Any) -> str:
    if isinstance(value, bool):
        raise TypeError("Cannot format bool as a duration")
    if isinstance(value, int):
        value = timedelta(seconds=value)
    if not isinstance(value, timedelta):
        raise TypeError(f"Cannot format {type(value).__name__} as a duration")

    sign = ""
    if value < timedelta(0):
        sign = "-"
        value = -value

    hours, remainder = divmod(value.seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    text = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if value.days:
        text = f"{value.days}.{text}"
    if value.microseconds:
        text = f"{text}.{value.microseconds:06d}"
    return sign + text


def render_payload(payload: Any) -> str:
    """
    Render an arbitrary payload as stable text.

    dnspython rdata objects use their zone-file presentation format. Dataclasses,
    mappings and plain objects become ``key=value`` pairs joined by ``"; "`` in
    attribute order. Anything else falls back to ``str()``.
    """
    to_text = getattr(payload, "to_text", None)
    if callable(to_text):
        return to_text()

    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        items = [(f.name, getattr(payload, f.name)) for f in dataclasses.fields(payload)]
    elif isinstance(payload, Mapping):
        items = list(payload.items())
    elif hasattr(payload, "__dict__") and vars(payload):
        items = [
            (key, value) for key, value in vars(payload).items() if not key.startswith("_")
        ]
    else:
        return str(payload)

    return "; ".join(f"{key}={value}" for key, value in items)
