"""
Record discovery over arbitrary export JSON.

Walks the parsed document depth-first and collects every object that looks
like it carries a sample, remembering the key of the enclosing container as a
metric hint. ``{"heartRate": [{"time": ..., "value": 72}]}`` yields the inner
object with hint "heartRate" even though it names no metric itself.

The walk is bounded by an explicit depth counter so pathological documents
cost at most MAX_SCAN_DEPTH levels of work.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from services.health_import.models import CandidateRecord
from services.health_import.timestamps import TIMESTAMP_KEYS
from services.health_import.values import parse_numeric

MAX_SCAN_DEPTH = 4


def _has_numeric_value(record: Dict[str, Any]) -> bool:
    return any(parse_numeric(value) is not None for value in record.values())


def looks_like_sample_record(record: Dict[str, Any]) -> bool:
    """
    Deliberately permissive: over-selected records produce nothing later
    because extraction ignores non-numeric fields.
    """
    if "metric" in record and "value" in record:
        return True
    if any(key in record for key in TIMESTAMP_KEYS) and _has_numeric_value(record):
        return True
    return _has_numeric_value(record)


def collect_candidate_records(
    value: Any,
    metric_hint: Optional[str] = None,
    depth: int = 0,
) -> List[CandidateRecord]:
    """
    Collect candidate sample records from ``value``.

    Args:
        value: any parsed JSON value
        metric_hint: key of the container ``value`` was found under
        depth: current nesting level; nothing past MAX_SCAN_DEPTH is visited

    Returns:
        Candidates in document order.
    """
    if depth > MAX_SCAN_DEPTH or value is None:
        return []

    if isinstance(value, list):
        candidates: List[CandidateRecord] = []
        for entry in value:
            if isinstance(entry, dict):
                candidates.extend(collect_candidate_records(entry, metric_hint, depth + 1))
                continue
            numeric = parse_numeric(entry)
            if numeric is not None:
                # Bare numbers carry no timestamp; they take the fallback instant.
                candidates.append(CandidateRecord(record={"value": numeric}, metric_hint=metric_hint))
        return candidates

    if not isinstance(value, dict):
        return []

    candidates = []
    if looks_like_sample_record(value):
        candidates.append(CandidateRecord(record=value, metric_hint=metric_hint))

    for key, nested in value.items():
        if isinstance(nested, (list, dict)):
            candidates.extend(collect_candidate_records(nested, key, depth + 1))

    return candidates
