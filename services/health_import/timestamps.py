"""
Timestamp resolution for export records.

Exports stamp samples as epoch seconds, epoch milliseconds, ISO-8601 strings,
other human date strings or numeric strings. Everything resolves to an
integer epoch-millisecond instant; anything that cannot be resolved takes the
caller's fallback instant instead of failing.
"""
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

from dateutil import parser as dtparser

from services.health_import.values import MISSING, is_number, parse_number_text

# Below this an epoch value is seconds (≈ year 2286), at or above it milliseconds.
SECONDS_EPOCH_CUTOFF = 10_000_000_000

TIMESTAMP_KEYS = (
    "ts",
    "timestamp",
    "time",
    "date",
    "datetime",
    "recordedAt",
    "recorded_at",
    "createdAt",
    "created_at",
    "startDate",
    "start_date",
    "endDate",
    "end_date",
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# Fields a date string leaves out are filled from here, never from "today".
_DATE_DEFAULTS = datetime(1970, 1, 1)


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _epoch_ms(value: float) -> Optional[int]:
    if not math.isfinite(value) or value <= 0:
        return None
    if value < SECONDS_EPOCH_CUTOFF:
        return _round_half_up(value * 1000)
    return _round_half_up(value)


def _parse_date_string(text: str) -> Optional[int]:
    text = text.strip()
    if not text:
        return None

    parsed: Optional[datetime] = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            parsed = dtparser.parse(text, default=_DATE_DEFAULTS)
        except (ValueError, OverflowError):
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    millis = (parsed - _EPOCH).total_seconds() * 1000
    if millis <= 0:
        return None
    return _round_half_up(millis)


def resolve_timestamp(raw: Any, fallback: int) -> int:
    """
    Resolve a raw timestamp field to epoch milliseconds.

    Args:
        raw: the field value (number, string, None or MISSING)
        fallback: instant used when ``raw`` is absent or unusable

    Returns:
        Epoch milliseconds. Never raises.
    """
    if raw is None or raw is MISSING or raw == "":
        return fallback

    if is_number(raw):
        try:
            resolved = _epoch_ms(float(raw))
        except OverflowError:
            return fallback
        return fallback if resolved is None else resolved

    if isinstance(raw, str):
        numeric = parse_number_text(raw)
        if numeric is not None:
            resolved = _epoch_ms(numeric)
            return fallback if resolved is None else resolved
        resolved = _parse_date_string(raw)
        return fallback if resolved is None else resolved

    return fallback


def read_first(record: Dict[str, Any], keys: Iterable[str]) -> Any:
    """Value of the first key present in ``record``, else MISSING."""
    for key in keys:
        if key in record:
            return record[key]
    return MISSING
