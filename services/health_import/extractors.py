"""
Metric extraction from a single candidate record.

Three passes run per record, and the first pass to emit a canonical metric
owns it for that record:

1. the record's own ``value``, named by its ``metric`` or a non-generic hint
2. METRIC_EXTRACTORS, a fixed ordered table of alias readers with unit
   conversion (miles -> km, lb -> kg, minutes -> hours, speed -> pace)
3. a generic scan that turns any other numeric field into its own metric
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from services.health_import.metric_names import (
    DEFAULT_METRIC,
    is_generic_hint,
    normalize_metric_name,
)
from services.health_import.models import ExtractedSample
from services.health_import.timestamps import TIMESTAMP_KEYS
from services.health_import.values import MISSING, Reading, parse_numeric, pick_numeric

KM_PER_MILE = 1.60934
KG_PER_POUND = 0.453592

# Identifiers, metadata and container keys never become metrics in the generic scan.
GENERIC_IGNORED_KEYS = frozenset({
    "metric",
    "source",
    "sourceName",
    "source_name",
    "sourceBundle",
    "source_bundle",
    "device",
    "type",
    "unit",
    "uuid",
    "id",
    "name",
    "title",
    "notes",
    "metadata",
    "samples",
    "records",
    "entries",
    "items",
    "data",
})


@dataclass(frozen=True)
class MetricExtractor:
    metric: str
    read: Callable[[Dict[str, Any]], Reading]


def _scaled(reading: Reading, factor: float) -> Reading:
    if reading is MISSING or reading is None:
        return reading
    return reading * factor


def _aliases(*keys: str) -> Callable[[Dict[str, Any]], Reading]:
    return lambda record: pick_numeric(record, keys)


def read_distance_km(record: Dict[str, Any]) -> Reading:
    kilometers = pick_numeric(record, ("distanceKm", "distance_km", "kilometers"))
    if kilometers is not MISSING:
        return kilometers
    meters = pick_numeric(record, ("distanceMeters", "distance_meters", "meters"))
    if meters is not MISSING:
        return None if meters is None else meters / 1000
    miles = pick_numeric(record, ("distanceMiles", "distance_miles", "miles"))
    return _scaled(miles, KM_PER_MILE)


def read_pace_seconds_per_km(record: Dict[str, Any]) -> Reading:
    pace = pick_numeric(
        record,
        (
            "paceSecondsPerKm",
            "pace_seconds_per_km",
            "paceSeconds",
            "pace_seconds",
            "secondsPerKm",
            "seconds_per_km",
        ),
    )
    if pace is not MISSING:
        return pace
    speed_mps = pick_numeric(record, ("speedMps", "speed_mps"))
    if speed_mps is MISSING:
        return MISSING
    if speed_mps is None or not math.isfinite(speed_mps) or speed_mps <= 0:
        return None
    return 1000 / speed_mps


def read_weight_kg(record: Dict[str, Any]) -> Reading:
    kilograms = pick_numeric(record, ("weightKg", "weight_kg", "bodyMassKg", "body_mass_kg"))
    if kilograms is not MISSING:
        return kilograms
    pounds = pick_numeric(record, ("weightLbs", "weight_lbs", "weightPounds"))
    return _scaled(pounds, KG_PER_POUND)


def duration_hours(hours_keys: Sequence[str], minutes_keys: Sequence[str]) -> Callable[[Dict[str, Any]], Reading]:
    """Reader preferring an hours field, else the matching minutes field / 60."""

    def read(record: Dict[str, Any]) -> Reading:
        hours = pick_numeric(record, hours_keys)
        if hours is not MISSING:
            return hours
        minutes = pick_numeric(record, minutes_keys)
        if minutes is MISSING or minutes is None:
            return minutes
        return minutes / 60

    return read


METRIC_EXTRACTORS = (
    MetricExtractor(
        "exercise.hr",
        _aliases(
            "heartRate",
            "heart_rate",
            "hr",
            "bpm",
            "currentHeartRate",
            "current_heart_rate",
            "averageHeartRate",
            "avgHeartRate",
        ),
    ),
    MetricExtractor(
        "vitals.resting_hr",
        _aliases("restingHr", "resting_hr", "restingHeartRate", "resting_heartrate"),
    ),
    MetricExtractor("vitals.hrv", _aliases("hrv", "hrvScore", "heartRateVariability", "rmssd")),
    MetricExtractor("vitals.spo2", _aliases("spo2", "bloodOxygen", "oxygenSaturation")),
    MetricExtractor("vitals.respiratory_rate", _aliases("respiratoryRate", "breathsPerMinute")),
    MetricExtractor("activity.steps", _aliases("steps", "stepCount", "step_count")),
    MetricExtractor(
        "activity.active_calories",
        _aliases("activeCalories", "active_calories", "activeEnergyBurned", "active_energy_burned"),
    ),
    MetricExtractor("exercise.calories", _aliases("calories", "kcal", "energyKcal", "energy_kcal")),
    MetricExtractor("exercise.distance", read_distance_km),
    MetricExtractor("exercise.pace", read_pace_seconds_per_km),
    MetricExtractor(
        "sleep.total_hours",
        duration_hours(
            ("sleepHours", "sleep_hours", "totalSleepHours", "total_sleep_hours", "asleepHours", "asleep_hours"),
            (
                "sleepMinutes",
                "sleep_minutes",
                "totalSleepMinutes",
                "total_sleep_minutes",
                "asleepMinutes",
                "asleep_minutes",
            ),
        ),
    ),
    MetricExtractor(
        "sleep.deep_hours",
        duration_hours(
            ("deepSleepHours", "deep_sleep_hours", "sleepDeepHours", "sleep_deep_hours"),
            ("deepSleepMinutes", "deep_sleep_minutes", "sleepDeepMinutes", "sleep_deep_minutes"),
        ),
    ),
    MetricExtractor(
        "sleep.rem_hours",
        duration_hours(
            ("remSleepHours", "rem_sleep_hours", "sleepRemHours", "sleep_rem_hours"),
            ("remSleepMinutes", "rem_sleep_minutes", "sleepRemMinutes", "sleep_rem_minutes"),
        ),
    ),
    MetricExtractor(
        "sleep.light_hours",
        duration_hours(
            ("lightSleepHours", "light_sleep_hours", "sleepLightHours", "sleep_light_hours"),
            ("lightSleepMinutes", "light_sleep_minutes", "sleepLightMinutes", "sleep_light_minutes"),
        ),
    ),
    MetricExtractor(
        "sleep.awake_hours",
        duration_hours(
            ("awakeHours", "awake_hours", "wakeHours", "wake_hours"),
            ("awakeMinutes", "awake_minutes", "wakeMinutes", "wake_minutes"),
        ),
    ),
    MetricExtractor("body.weight_kg", read_weight_kg),
    MetricExtractor(
        "body.body_fat_pct",
        _aliases("bodyFatPercent", "body_fat_percent", "bodyFatPercentage"),
    ),
    MetricExtractor("vitals.glucose", _aliases("glucose", "glucoseMgDl", "glucose_mg_dl")),
)


def is_ignored_generic_key(key: str) -> bool:
    return key in GENERIC_IGNORED_KEYS or key in TIMESTAMP_KEYS


def _value_metric_name(record: Dict[str, Any], metric_hint: Optional[str]) -> Any:
    """
    Raw name for the record's own ``value`` field, or MISSING when the value
    has no name of its own and is left to the generic scan.
    """
    if "metric" in record:
        return record["metric"] if record["metric"] is not None else metric_hint
    if metric_hint and not is_generic_hint(metric_hint):
        return metric_hint
    return MISSING


def extract_samples(
    record: Dict[str, Any],
    ts: int,
    metric_hint: Optional[str] = None,
) -> List[ExtractedSample]:
    """
    Pull every (metric, value) reading out of ``record``, stamped with ``ts``.

    Metrics are canonical on the way out and unique within the record.
    """
    samples: List[ExtractedSample] = []
    seen_metrics = set()

    def emit(metric: str, value: Optional[float]) -> None:
        samples.append(ExtractedSample(metric=metric, ts=ts, value=value))
        seen_metrics.add(metric)

    value_name = _value_metric_name(record, metric_hint) if "value" in record else MISSING
    if value_name is not MISSING:
        explicit_value = parse_numeric(record["value"])
        if explicit_value is not None or record["value"] is None:
            emit(normalize_metric_name(value_name, DEFAULT_METRIC), explicit_value)

    for extractor in METRIC_EXTRACTORS:
        reading = extractor.read(record)
        if reading is MISSING or extractor.metric in seen_metrics:
            continue
        emit(extractor.metric, reading)

    for key, raw in record.items():
        if is_ignored_generic_key(key):
            continue
        if key == "value" and value_name is not MISSING:
            continue
        numeric = parse_numeric(raw)
        if numeric is None and raw is not None:
            continue
        metric = normalize_metric_name(key, DEFAULT_METRIC)
        if metric in seen_metrics:
            continue
        emit(metric, numeric)

    return samples
