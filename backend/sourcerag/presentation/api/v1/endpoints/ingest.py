"""Ingestion endpoints — PDF upload, web page and YouTube transcript."""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from sourcerag.config import get_settings
from sourcerag.application.schemas import IngestResponse, UrlIngestRequest
from sourcerag.application.services import IngestionService
from sourcerag.domain.entities import IngestionResult
from sourcerag.domain.exceptions import SourceRagError
from sourcerag.infrastructure.dependencies import (
    get_file_storage,
    get_ingestion_service,
    get_tenant_id,
)
from sourcerag.infrastructure.storage.local_file_storage import LocalFileStorage
from sourcerag.presentation.api.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ingest", tags=["Ingestion"])


def _to_response(result: IngestionResult, message: str) -> IngestResponse:
    return IngestResponse(message=message, **result.to_dict())


@router.post("/pdf", response_model=IngestResponse, response_model_exclude_none=True)
async def ingest_pdf(
    file: UploadFile = File(...),
    tenant_id: str = Depends(get_tenant_id),
    service: IngestionService = Depends(get_ingestion_service),
    storage: LocalFileStorage = Depends(get_file_storage),
) -> IngestResponse:
    """Upload a PDF and index its pages for the calling tenant.

    The upload is stored only for the duration of the ingestion.
    """
    filename = Path(file.filename or "upload.pdf").name
    content = await file.read()

    max_bytes = get_settings().max_upload_size_mb * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {get_settings().max_upload_size_mb} MB upload limit",
        )

    stored = await storage.store_file(content, filename, tenant_id)
    try:
        result = await service.ingest_pdf(stored.stored_path, tenant_id, display_name=filename)
    except SourceRagError as e:
        raise to_http_exception(e)
    finally:
        await storage.delete_file(stored.stored_path)

    return _to_response(result, "PDF ingested successfully")


@router.post("/web", response_model=IngestResponse, response_model_exclude_none=True)
async def ingest_web(
    body: UrlIngestRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestResponse:
    """Fetch a web page, including its outbound links, and index it."""
    try:
        result = await service.ingest_web(body.url, tenant_id)
    except SourceRagError as e:
        raise to_http_exception(e)
    return _to_response(result, "Website ingested successfully")


@router.post("/youtube", response_model=IngestResponse, response_model_exclude_none=True)
async def ingest_youtube(
    body: UrlIngestRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: IngestionService = Depends(get_ingestion_service),
) -> IngestResponse:
    """Fetch a YouTube transcript and index it."""
    try:
        result = await service.ingest_youtube(body.url, tenant_id)
    except SourceRagError as e:
        raise to_http_exception(e)
    return _to_response(result, "YouTube video ingested successfully")
