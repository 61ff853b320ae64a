"""Pydantic v2 schemas (DTOs) for ingestion endpoints."""

from pydantic import BaseModel, Field


class UrlIngestRequest(BaseModel):
    """Request body for web page and YouTube ingestion."""

    url: str = Field(..., min_length=1, description="http(s) URL of the page or video")


class IngestResponse(BaseModel):
    """Outcome of one ingestion. Counters are present only for their source type."""

    message: str
    success: bool
    chunks: int
    source_id: str
    pages: int | None = None
    links_extracted: int | None = None
