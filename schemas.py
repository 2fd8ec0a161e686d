from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List


class HealthExportParseRequest(BaseModel):
    """Raw export text as pasted or read from the phone."""
    payload: str = Field(..., description="JSON document exported from the phone's health app")


class StreamSampleResponse(BaseModel):
    ts: int  # epoch milliseconds
    value: Optional[float] = None  # null = observed absence

    model_config = ConfigDict(from_attributes=True)


class StreamBatchResponse(BaseModel):
    """One metric's samples, in the shape the stream store accepts for publish."""
    metric: str
    samples: List[StreamSampleResponse]

    model_config = ConfigDict(from_attributes=True)


class HealthExportImportResponse(BaseModel):
    # camelCase to match the stream store and the mobile client
    batches: List[StreamBatchResponse]
    metricCount: int
    sampleCount: int
    startTs: Optional[int] = None
    endTs: Optional[int] = None
    summary: str
    importWindow: Optional[List[str]] = None  # [start, end] ISO-8601 UTC
