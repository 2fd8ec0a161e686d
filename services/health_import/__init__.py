"""
Health Export Import

Turns vendor health-app JSON exports into canonical stream batches:
- Timestamps in epoch seconds/ms, ISO-8601 or date strings → epoch ms
- Dozens of field-name conventions → canonical metrics ("exercise.hr")
- Unit conversion (miles → km, lb → kg, minutes → hours, speed → pace)
- Per-metric dedup and ordering

The only contract with the uploader is the output shape: one
``{"metric", "samples": [{"ts", "value"}]}`` payload per batch.
"""

from .errors import (
    HealthImportError,
    EmptyPayloadError,
    InvalidJSONError,
    NoRecordsFoundError,
    NoNumericSamplesError,
    EmptyExportFileError,
)
from .models import (
    CandidateRecord,
    ExtractedSample,
    StreamSample,
    StreamBatch,
    ImportResult,
)
from .metric_names import DEFAULT_METRIC, METRIC_ALIASES, normalize_metric_name
from .parser import parse_export_payload, load_export_text

__all__ = [
    'HealthImportError',
    'EmptyPayloadError',
    'InvalidJSONError',
    'NoRecordsFoundError',
    'NoNumericSamplesError',
    'EmptyExportFileError',
    'CandidateRecord',
    'ExtractedSample',
    'StreamSample',
    'StreamBatch',
    'ImportResult',
    'DEFAULT_METRIC',
    'METRIC_ALIASES',
    'normalize_metric_name',
    'parse_export_payload',
    'load_export_text',
]
