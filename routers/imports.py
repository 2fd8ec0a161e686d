"""
Health export import endpoints.

The mobile client pastes (or picks) a health-app JSON export; these routes
normalize it into per-metric stream batches and hand them back. Publishing
the batches to the stream store is the client's job (one POST per batch,
queued offline when the store is unreachable).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, File, UploadFile
from starlette.concurrency import run_in_threadpool

from core.config import settings
from core.exceptions import PayloadTooLargeError, ValidationError
from schemas import HealthExportImportResponse, HealthExportParseRequest
from services.health_import import (
    EmptyExportFileError,
    HealthImportError,
    ImportResult,
    parse_export_payload,
)


router = APIRouter(prefix="/v1/imports", tags=["imports"])
logger = logging.getLogger(__name__)


def _to_response(result: ImportResult) -> dict:
    body = result.to_dict()
    body["summary"] = result.summary()
    window = result.import_window()
    body["importWindow"] = list(window) if window else None
    return body


def _parse_or_422(raw_text: str) -> dict:
    try:
        result = parse_export_payload(raw_text)
    except HealthImportError as e:
        logger.info(f"Health export rejected: {e.code}")
        raise ValidationError(e.message, error_code=e.code)
    return _to_response(result)


@router.post("/health-export/parse", response_model=HealthExportImportResponse)
def parse_health_export(request: HealthExportParseRequest):
    """
    Normalize a pasted health export into stream batches.

    Plain ``def``: parsing is CPU-bound, so FastAPI runs it in the threadpool.
    """
    if len(request.payload.encode("utf-8")) > settings.IMPORT_MAX_PAYLOAD_BYTES:
        raise PayloadTooLargeError(settings.IMPORT_MAX_PAYLOAD_BYTES)
    return _parse_or_422(request.payload)


@router.post("/health-export/parse-file", response_model=HealthExportImportResponse)
async def parse_health_export_file(file: UploadFile = File(...)):
    """
    Normalize an uploaded export file (JSON or plain text) into stream batches.
    """
    chunks = []
    total = 0
    try:
        while True:
            chunk = await file.read(1024 * 1024)
            if not chunk:
                break
            total += len(chunk)
            if total > settings.IMPORT_MAX_PAYLOAD_BYTES:
                raise PayloadTooLargeError(settings.IMPORT_MAX_PAYLOAD_BYTES)
            chunks.append(chunk)
    finally:
        await file.close()

    try:
        text = b"".join(chunks).decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("Import file must be UTF-8 text.", error_code="invalid_encoding")

    if not text.strip():
        err = EmptyExportFileError()
        raise ValidationError(err.message, error_code=err.code)

    return await run_in_threadpool(_parse_or_422, text)
