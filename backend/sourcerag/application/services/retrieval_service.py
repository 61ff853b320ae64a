"""Retrieval service — filtered, time-bounded nearest-neighbour search.

Flow:
  1. Filter inference: tenant scope plus an optional source-type hint.
  2. Embed the question.
  3. Search the tenant index with a fixed candidate count.

Steps 2 and 3 share one time bound. Hitting it is terminal for the query;
nothing is retried here, the caller may re-issue the question.
"""

import asyncio
import logging
from collections import Counter

from sourcerag.application.interfaces.embedding_provider import EmbeddingProvider
from sourcerag.application.interfaces.filter_strategy import FilterInferenceStrategy
from sourcerag.application.interfaces.tenant_index import TenantIndex
from sourcerag.domain.entities import RetrievalFilter, ScoredChunk
from sourcerag.domain.exceptions import RetrievalTimeoutError
from sourcerag.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("QueryService")

_DEFAULT_K = 15  # headroom for multi-source coverage and citation diversity
_DEFAULT_TIMEOUT_SECONDS = 30.0


class RetrievalService:
    """Application service that turns a question into ranked tenant chunks."""

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        tenant_index: TenantIndex,
        filter_strategy: FilterInferenceStrategy,
        *,
        k: int = _DEFAULT_K,
        timeout_seconds: float = _DEFAULT_TIMEOUT_SECONDS,
    ):
        self._embedding_provider = embedding_provider
        self._index = tenant_index
        self._filter_strategy = filter_strategy
        self._k = k
        self._timeout_seconds = timeout_seconds

    async def retrieve(self, question: str, tenant_id: str) -> list[ScoredChunk]:
        """Return ranked chunks for the question; an empty list means "nothing relevant".

        Raises:
            RetrievalTimeoutError: If embedding + search exceed the time bound.
        """
        retrieval_filter = self._filter_strategy.infer(question, tenant_id)
        plog.step_start(
            PipelineStage.RETRIEVE,
            f"Querying: {question!r}",
            filter=retrieval_filter.describe(),
            k=self._k,
        )

        try:
            results = await asyncio.wait_for(
                self._search(question, retrieval_filter),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            error = RetrievalTimeoutError(self._timeout_seconds)
            plog.step_error(PipelineStage.RETRIEVE, "Error during retrieval", error=error)
            raise error from exc

        plog.step_complete(
            PipelineStage.RETRIEVE,
            f"Successfully retrieved {len(results)} chunks",
        )
        self._log_source_distribution(results)
        return results

    async def _search(
        self, question: str, retrieval_filter: RetrievalFilter
    ) -> list[ScoredChunk]:
        query_vector = await self._embedding_provider.embed_query(question)
        return await self._index.search(query_vector, self._k, retrieval_filter)

    @staticmethod
    def _log_source_distribution(results: list[ScoredChunk]) -> None:
        """Log each retrieved chunk's source and how many chunks each source contributed."""
        if not results:
            return

        for i, scored in enumerate(results):
            logger.debug("  [%d] %s (score=%.3f)", i, scored.chunk.source_description, scored.score)

        distribution = Counter(scored.chunk.source_description for scored in results)
        logger.info("Source distribution:")
        for source, count in distribution.most_common():
            logger.info("  - %s: %d chunks", source, count)
