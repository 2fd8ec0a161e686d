"""
Data models for the health export import engine.

All models are plain dataclasses owned by the single parse call that built
them. ``ImportResult.to_dict()`` gives the camelCase wire shape the mobile
client and the stream store already speak.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class CandidateRecord:
    """A JSON object that may hold samples, plus the key it was found under."""
    record: Dict[str, Any]
    metric_hint: Optional[str] = None


@dataclass(frozen=True)
class ExtractedSample:
    """One (metric, ts, value) reading pulled from a record, before grouping."""
    metric: str
    ts: int
    value: Optional[float]


@dataclass(frozen=True)
class StreamSample:
    ts: int
    value: Optional[float]  # None = observed absence

    def to_dict(self) -> Dict[str, Any]:
        return {"ts": self.ts, "value": self.value}


@dataclass
class StreamBatch:
    """All samples for one canonical metric, sorted by ts, duplicates removed."""
    metric: str
    samples: List[StreamSample] = field(default_factory=list)

    def to_publish_payload(self) -> Dict[str, Any]:
        """Body for the stream store's publish endpoint (one batch per metric)."""
        return {
            "metric": self.metric,
            "samples": [sample.to_dict() for sample in self.samples],
        }


@dataclass
class ImportResult:
    batches: List[StreamBatch] = field(default_factory=list)
    metric_count: int = 0
    sample_count: int = 0
    start_ts: Optional[int] = None
    end_ts: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batches": [batch.to_publish_payload() for batch in self.batches],
            "metricCount": self.metric_count,
            "sampleCount": self.sample_count,
            "startTs": self.start_ts,
            "endTs": self.end_ts,
        }

    def summary(self) -> str:
        return f"Parsed {self.sample_count} samples across {self.metric_count} metrics."

    def import_window(self) -> Optional[Tuple[str, str]]:
        """
        (start, end) of the imported samples as ISO-8601 UTC strings.

        None when there are no samples, or when either end lies outside the
        range datetime can represent (e.g. microsecond epochs read as ms).
        """
        if self.start_ts is None or self.end_ts is None:
            return None
        start = _iso_utc(self.start_ts)
        end = _iso_utc(self.end_ts)
        if start is None or end is None:
            return None
        return (start, end)


def _iso_utc(ts_ms: int) -> Optional[str]:
    try:
        return datetime.fromtimestamp(ts_ms / 1000.0, tz=timezone.utc).isoformat()
    except (OverflowError, ValueError, OSError):
        return None
