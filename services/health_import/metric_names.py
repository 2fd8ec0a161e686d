"""
Canonical metric identifiers for imported samples.

Raw field names ("heartRate", "step_count", "Weight (lbs)") fold to a
lowercase underscore token, which is then looked up in METRIC_ALIASES.
Tokens that already carry a namespace ("exercise.hr") pass through untouched;
unknown tokens are namespaced under "iphone." so they stay distinct.
"""
from __future__ import annotations

import re
from typing import Any

DEFAULT_METRIC = "iphone.imported_value"
FALLBACK_NAMESPACE = "iphone"

# Container keys that say nothing about the metric of the values beneath them.
GENERIC_HINT_KEYS = frozenset({"samples", "records", "entries", "items", "data", "values"})

METRIC_ALIASES = {
    # Cardio
    "heart_rate": "exercise.hr",
    "heartrate": "exercise.hr",
    "hr": "exercise.hr",
    "bpm": "exercise.hr",
    "resting_hr": "vitals.resting_hr",
    "resting_heartrate": "vitals.resting_hr",
    "hrv": "vitals.hrv",
    "hrv_score": "vitals.hrv",
    # Vitals
    "spo2": "vitals.spo2",
    "blood_oxygen": "vitals.spo2",
    "oxygen_saturation": "vitals.spo2",
    "respiratory_rate": "vitals.respiratory_rate",
    "breaths_per_minute": "vitals.respiratory_rate",
    "glucose": "vitals.glucose",
    # Activity
    "steps": "activity.steps",
    "step_count": "activity.steps",
    "active_calories": "activity.active_calories",
    "calories": "exercise.calories",
    "kcal": "exercise.calories",
    "energy_kcal": "exercise.calories",
    "distance_km": "exercise.distance",
    "distance_meters": "exercise.distance",
    "distance_miles": "exercise.distance",
    "pace_seconds_per_km": "exercise.pace",
    "pace_seconds": "exercise.pace",
    "seconds_per_km": "exercise.pace",
    "speed_mps": "exercise.pace",
    # Sleep
    "sleep_hours": "sleep.total_hours",
    "total_sleep_hours": "sleep.total_hours",
    "sleep_minutes": "sleep.total_hours",
    "total_sleep_minutes": "sleep.total_hours",
    "deep_sleep_hours": "sleep.deep_hours",
    "deep_sleep_minutes": "sleep.deep_hours",
    "rem_sleep_hours": "sleep.rem_hours",
    "rem_sleep_minutes": "sleep.rem_hours",
    "light_sleep_hours": "sleep.light_hours",
    "light_sleep_minutes": "sleep.light_hours",
    "awake_hours": "sleep.awake_hours",
    "awake_minutes": "sleep.awake_hours",
    # Body composition
    "weight_kg": "body.weight_kg",
    "weight_lbs": "body.weight_kg",
    "body_fat_percent": "body.body_fat_pct",
    "body_fat_percentage": "body.body_fat_pct",
}

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATOR_RUN_RE = re.compile(r"[^a-zA-Z0-9.]+")
_UNDERSCORE_RUN_RE = re.compile(r"_+")


def to_metric_token(value: Any) -> str:
    """Fold a raw name to a lowercase, underscore-separated token."""
    text = "" if value is None else str(value)
    text = _CAMEL_BOUNDARY_RE.sub(r"\1_\2", text)
    text = _SEPARATOR_RUN_RE.sub("_", text).lower()
    return _UNDERSCORE_RUN_RE.sub("_", text.strip("_"))


def normalize_metric_name(value: Any, fallback: str = DEFAULT_METRIC) -> str:
    token = to_metric_token(value)
    if not token:
        return fallback
    if "." in token:
        return token
    return METRIC_ALIASES.get(token, f"{FALLBACK_NAMESPACE}.{token}")


def is_generic_hint(metric_hint: str) -> bool:
    return to_metric_token(metric_hint) in GENERIC_HINT_KEYS
