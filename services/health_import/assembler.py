"""
Batch assembly: group extracted samples per metric, dedupe, sort, summarize.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Optional, Set, Tuple

from services.health_import.models import ExtractedSample, ImportResult, StreamBatch, StreamSample


def dedupe_and_sort_samples(samples: Iterable[StreamSample]) -> List[StreamSample]:
    """
    Drop non-finite timestamps, collapse identical (ts, value) pairs and sort
    by ts. The sort is stable, so ties keep discovery order.
    """
    seen: Set[Tuple[int, Optional[float]]] = set()
    normalized: List[StreamSample] = []
    for sample in samples:
        if not math.isfinite(sample.ts):
            continue
        ts = int(math.floor(sample.ts + 0.5))
        key = (ts, sample.value)
        if key in seen:
            continue
        seen.add(key)
        normalized.append(StreamSample(ts=ts, value=sample.value))
    normalized.sort(key=lambda s: s.ts)
    return normalized


def assemble_batches(extracted: Iterable[ExtractedSample]) -> List[StreamBatch]:
    """
    One batch per canonical metric, most-populated first.

    Metrics left with no samples after dedup are dropped.
    """
    grouped: Dict[str, List[StreamSample]] = {}
    for sample in extracted:
        grouped.setdefault(sample.metric, []).append(StreamSample(ts=sample.ts, value=sample.value))

    batches = [
        StreamBatch(metric=metric, samples=dedupe_and_sort_samples(samples))
        for metric, samples in grouped.items()
    ]
    batches = [batch for batch in batches if batch.samples]
    batches.sort(key=lambda batch: len(batch.samples), reverse=True)
    return batches


def build_result(batches: List[StreamBatch]) -> ImportResult:
    timestamps = [sample.ts for batch in batches for sample in batch.samples]
    return ImportResult(
        batches=batches,
        metric_count=len(batches),
        sample_count=len(timestamps),
        start_ts=min(timestamps) if timestamps else None,
        end_ts=max(timestamps) if timestamps else None,
    )
