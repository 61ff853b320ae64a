"""Unit tests for TenantDeletionService and the end-to-end isolation scenario."""

import pytest

from sourcerag.application.services.filter_inference import KeywordFilterStrategy
from sourcerag.application.services.ingestion_service import IngestionService
from sourcerag.application.services.retrieval_service import RetrievalService
from sourcerag.application.services.tenant_deletion_service import TenantDeletionService
from sourcerag.application.interfaces.source_loader import LoadedSource, SourceLoader
from sourcerag.domain.entities import Document, SourceMetadata, SourceType
from sourcerag.domain.exceptions import IndexUnavailableError


class StaticLoader(SourceLoader):
    def __init__(self, source_type: SourceType, text: str):
        self._source_type = source_type
        self._text = text

    @property
    def source_type(self) -> SourceType:
        return self._source_type

    async def load(self, locator: str, **options) -> LoadedSource:
        if self._source_type is SourceType.PDF:
            source = SourceMetadata.for_pdf(locator)
        else:
            source = SourceMetadata.for_website(locator, "Site", 0)
        return LoadedSource(documents=[Document(text=self._text)], source=source)


class DownIndex:
    async def delete_by_tenant(self, tenant_id):
        raise IndexUnavailableError("delete", "connection refused")


@pytest.mark.asyncio
async def test_purge_removes_only_that_tenant(tenant_index, embedder):
    pdf = StaticLoader(SourceType.PDF, "Quarterly revenue grew.")
    ingestion = IngestionService([pdf], embedder, tenant_index)
    await ingestion.ingest_pdf("u1.pdf", "u1")
    await ingestion.ingest_pdf("u2.pdf", "u2")

    result = await TenantDeletionService(tenant_index).purge("u1")

    assert result.success
    assert result.deleted_count == 1
    assert await tenant_index.count("u1") == 0
    assert await tenant_index.count("u2") == 1


@pytest.mark.asyncio
async def test_purge_is_idempotent(tenant_index):
    service = TenantDeletionService(tenant_index)

    first = await service.purge("ghost")
    second = await service.purge("ghost")

    assert first.deleted_count == 0
    assert second.deleted_count == 0
    assert second.success


@pytest.mark.asyncio
async def test_search_after_purge_is_empty(tenant_index, embedder):
    ingestion = IngestionService([StaticLoader(SourceType.PDF, "Alpha beta gamma.")], embedder, tenant_index)
    await ingestion.ingest_pdf("a.pdf", "u1")
    retrieval = RetrievalService(embedder, tenant_index, KeywordFilterStrategy())

    await TenantDeletionService(tenant_index).purge("u1")

    assert await retrieval.retrieve("alpha beta", "u1") == []


@pytest.mark.asyncio
async def test_isolation_scenario_with_pdf_filter(tenant_index, embedder):
    """u1 ingests a PDF and a website, u2 a PDF; u1 asks about "the document"."""
    u1_pdf = IngestionService([StaticLoader(SourceType.PDF, "Roadmap for the launch.")], embedder, tenant_index)
    u1_web = IngestionService([StaticLoader(SourceType.WEBSITE, "Launch blog post.")], embedder, tenant_index)
    await u1_pdf.ingest_pdf("plan.pdf", "u1")
    await u1_web.ingest_web("https://blog.example", "u1")
    await u1_pdf.ingest_pdf("other.pdf", "u2")
    retrieval = RetrievalService(embedder, tenant_index, KeywordFilterStrategy())

    results = await retrieval.retrieve("What does the document say about the launch?", "u1")

    assert results
    assert {(r.chunk.tenant_id, r.chunk.source_type) for r in results} == {("u1", "pdf")}


@pytest.mark.asyncio
async def test_purge_errors_propagate():
    with pytest.raises(IndexUnavailableError):
        await TenantDeletionService(DownIndex()).purge("u1")
