"""Unit tests for the QueryService — retrieve → synthesize, blocking and streaming."""

import pytest

from sourcerag.application.services.answer_synthesizer import (
    NO_RELEVANT_INFORMATION_ANSWER,
    AnswerSynthesizer,
)
from sourcerag.application.services.filter_inference import KeywordFilterStrategy
from sourcerag.application.services.query_service import QueryService
from sourcerag.application.services.retrieval_service import RetrievalService
from sourcerag.application.services.source_tagger import SourceTagger
from sourcerag.domain.entities import Document, SourceMetadata, StreamEventKind
from sourcerag.domain.exceptions import RetrievalTimeoutError


# ── Helpers ──────────────────────────────────────────────────────────


def _build_service(index, embedder, chat_provider, *, timeout_seconds: float = 30.0) -> QueryService:
    retrieval = RetrievalService(
        embedder, index, KeywordFilterStrategy(), timeout_seconds=timeout_seconds
    )
    return QueryService(retrieval, AnswerSynthesizer(chat_provider, "test-model"))


async def _ingest(index, embedder, tenant_id: str, source: SourceMetadata, text: str) -> None:
    chunks = SourceTagger().tag([Document(text=text)], tenant_id, source)
    vectors = await embedder.embed_documents([c.content for c in chunks])
    await index.add([c.with_embedding(v) for c, v in zip(chunks, vectors)])


# ── Blocking mode ────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_query_returns_answer_and_distinct_sources(tenant_index, embedder, chat_provider):
    pdf = SourceMetadata.for_pdf("handbook.pdf")
    await _ingest(tenant_index, embedder, "u1", pdf, "Vacation policy is 25 days.")
    await _ingest(tenant_index, embedder, "u1", pdf, "Vacation requests go to HR.")
    service = _build_service(tenant_index, embedder, chat_provider)

    result = await service.query("How many vacation days?", "u1")

    assert result.answer == chat_provider.answer
    assert result.sources == ['PDF file: "handbook.pdf"']
    assert result.chunk_count == 2


@pytest.mark.asyncio
async def test_query_with_no_content_returns_fixed_answer(tenant_index, embedder, chat_provider):
    service = _build_service(tenant_index, embedder, chat_provider)

    result = await service.query("Anything?", "u1")

    assert result.answer == NO_RELEVANT_INFORMATION_ANSWER
    assert result.sources == []
    assert chat_provider.complete_calls == []


@pytest.mark.asyncio
async def test_other_tenants_content_never_reaches_the_prompt(tenant_index, embedder, chat_provider):
    await _ingest(tenant_index, embedder, "u2", SourceMetadata.for_pdf("secret.pdf"), "Top secret plan.")
    service = _build_service(tenant_index, embedder, chat_provider)

    result = await service.query("What is the secret plan?", "u1")

    assert result.answer == NO_RELEVANT_INFORMATION_ANSWER
    assert chat_provider.complete_calls == []


@pytest.mark.asyncio
async def test_query_timeout_propagates_without_answer(make_tenant_index, embedder, chat_provider):
    service = _build_service(make_tenant_index(search_delay=1.0), embedder, chat_provider, timeout_seconds=0.05)

    with pytest.raises(RetrievalTimeoutError):
        await service.query("Anything?", "u1")
    assert chat_provider.complete_calls == []


# ── Streaming mode ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_stream_query_delivers_fragments_then_done(tenant_index, embedder, chat_provider):
    await _ingest(tenant_index, embedder, "u1", SourceMetadata.for_pdf("a.pdf"), "The answer is 42.")
    service = _build_service(tenant_index, embedder, chat_provider)

    stream = await service.stream_query("What is the answer?", "u1")
    events = [event async for event in stream]

    assert events[-1].kind is StreamEventKind.DONE
    assert "".join(e.content for e in events) == "According to the PDF, 42."


@pytest.mark.asyncio
async def test_stream_query_reports_retrieval_timeout_as_error_event(make_tenant_index, embedder, chat_provider):
    service = _build_service(make_tenant_index(search_delay=1.0), embedder, chat_provider, timeout_seconds=0.05)

    stream = await service.stream_query("Anything?", "u1")
    events = [event async for event in stream]

    assert len(events) == 1
    assert events[0].kind is StreamEventKind.ERROR
    assert events[0].error_kind == "RetrievalTimeoutError"
    assert chat_provider.stream_calls == []
