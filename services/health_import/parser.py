"""
Health export import engine.

Converts a vendor JSON export (for example an iPhone health "export my data"
dump) into canonical per-metric stream batches, without knowing the export's
schema up front.

Pipeline:
    raw text -> json -> collect_candidate_records -> resolve_timestamp
             -> extract_samples -> assemble_batches -> ImportResult

Properties:
    - Pure: no IO, no module state. Same text (and same now_ms) gives the
      same result, so re-importing a file is idempotent.
    - All-or-nothing: either a non-empty ImportResult or a HealthImportError.
    - Records without a usable timestamp share one "now" captured per call.

Public API:
    parse_export_payload(raw_text, now_ms=None) -> ImportResult
    load_export_text(path) -> str
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

from services.health_import.assembler import assemble_batches, build_result
from services.health_import.discovery import collect_candidate_records
from services.health_import.errors import (
    EmptyExportFileError,
    EmptyPayloadError,
    InvalidJSONError,
    NoNumericSamplesError,
    NoRecordsFoundError,
)
from services.health_import.extractors import extract_samples
from services.health_import.metric_names import DEFAULT_METRIC, normalize_metric_name
from services.health_import.models import ExtractedSample, ImportResult
from services.health_import import timestamps

logger = logging.getLogger(__name__)


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_export_payload(raw_text: str, now_ms: Optional[int] = None) -> ImportResult:
    """
    Normalize a raw export document into stream batches.

    Args:
        raw_text: JSON text (object or array)
        now_ms: fallback instant for records with no usable timestamp;
            captured once from the clock when not given

    Returns:
        ImportResult with at least one batch

    Raises:
        EmptyPayloadError: text is empty or whitespace
        InvalidJSONError: text is not JSON
        NoRecordsFoundError: no sample-like objects anywhere in the document
        NoNumericSamplesError: records found but none yielded a sample
    """
    trimmed = (raw_text or "").strip()
    if not trimmed:
        raise EmptyPayloadError()

    try:
        parsed = json.loads(trimmed, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.debug(f"Import payload rejected as JSON: {e}")
        raise InvalidJSONError() from None

    if now_ms is None:
        now_ms = timestamps.now_ms()

    candidates = collect_candidate_records(parsed)
    if not candidates:
        raise NoRecordsFoundError()

    extracted: List[ExtractedSample] = []
    for candidate in candidates:
        raw_ts = timestamps.read_first(candidate.record, timestamps.TIMESTAMP_KEYS)
        ts = timestamps.resolve_timestamp(raw_ts, now_ms)
        for sample in extract_samples(candidate.record, ts, candidate.metric_hint):
            extracted.append(
                ExtractedSample(
                    metric=normalize_metric_name(sample.metric, DEFAULT_METRIC),
                    ts=sample.ts,
                    value=sample.value,
                )
            )

    batches = assemble_batches(extracted)
    if not batches:
        raise NoNumericSamplesError()

    result = build_result(batches)
    logger.info(
        f"Health export parsed: {result.sample_count} samples across {result.metric_count} metrics",
        extra={
            "extra_fields": {
                "candidates": len(candidates),
                "metric_count": result.metric_count,
                "sample_count": result.sample_count,
                "start_ts": result.start_ts,
                "end_ts": result.end_ts,
            }
        },
    )
    return result


def load_export_text(path: Union[str, Path]) -> str:
    """Read an export file as text. A blank file is an import error."""
    text = Path(path).read_text(encoding="utf-8-sig")
    if not text.strip():
        raise EmptyExportFileError()
    return text
