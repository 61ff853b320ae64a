"""Query service — retrieve → synthesize, in blocking or streaming mode."""

import logging

from sourcerag.application.services.answer_stream import AnswerStream
from sourcerag.application.services.answer_synthesizer import AnswerSynthesizer
from sourcerag.application.services.retrieval_service import RetrievalService
from sourcerag.domain.entities import QueryAnswer, ScoredChunk
from sourcerag.domain.exceptions import SourceRagError

logger = logging.getLogger(__name__)


class QueryService:
    """Application facade for answering a tenant's question from its own content."""

    def __init__(self, retrieval: RetrievalService, synthesizer: AnswerSynthesizer):
        self._retrieval = retrieval
        self._synthesizer = synthesizer

    async def query(self, question: str, tenant_id: str) -> QueryAnswer:
        """Blocking mode: the full answer plus the sources it drew on.

        Raises:
            RetrievalTimeoutError, EmbeddingServiceError, IndexUnavailableError,
            GenerationServiceError: Propagated from retrieval / synthesis.
        """
        chunks = await self._retrieval.retrieve(question, tenant_id)
        answer = await self._synthesizer.synthesize(question, chunks)
        return QueryAnswer(
            question=question,
            answer=answer,
            sources=_distinct_sources(chunks),
            chunk_count=len(chunks),
        )

    async def stream_query(self, question: str, tenant_id: str) -> AnswerStream:
        """Streaming mode. Retrieval failures are delivered as the stream's error event."""
        try:
            chunks = await self._retrieval.retrieve(question, tenant_id)
        except SourceRagError as e:
            logger.error("Retrieval failed for streaming query: %s", e)
            return AnswerStream.from_error(e)
        return self._synthesizer.stream(question, chunks)


def _distinct_sources(chunks: list[ScoredChunk]) -> list[str]:
    """Source descriptions in first-seen retrieval order."""
    return list(dict.fromkeys(scored.chunk.source_description for scored in chunks))
