"""Ingestion service — turns one raw source into indexed tenant chunks.

Pipeline: Fetch/Parse (adapter) → Chunk → Tag → Embed → Index

Adapters are selected by ``SourceType`` from a registry; every source type
leaves the pipeline in the same tagged-chunk shape. A failure at any stage
is reported as a failure, never as a partial chunk count.
"""

import logging
import time
from typing import Any

from sourcerag.application.interfaces.embedding_provider import EmbeddingProvider
from sourcerag.application.interfaces.source_loader import LoadedSource, SourceLoader
from sourcerag.application.interfaces.tenant_index import TenantIndex
from sourcerag.application.services.chunker import TextChunker
from sourcerag.application.services.source_tagger import SourceTagger
from sourcerag.domain.entities import Chunk, IngestionResult, SourceType
from sourcerag.domain.exceptions import IngestionError, SourceRagError
from sourcerag.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("IngestionService")

_DEFAULT_EMBEDDING_BATCH_SIZE = 50


class IngestionService:
    """Application service orchestrating the write path for all source types."""

    def __init__(
        self,
        loaders: list[SourceLoader],
        embedding_provider: EmbeddingProvider,
        tenant_index: TenantIndex,
        *,
        chunker: TextChunker | None = None,
        tagger: SourceTagger | None = None,
        embedding_batch_size: int = _DEFAULT_EMBEDDING_BATCH_SIZE,
    ):
        if embedding_batch_size <= 0:
            raise ValueError("embedding_batch_size must be positive")
        self._loaders: dict[SourceType, SourceLoader] = {
            loader.source_type: loader for loader in loaders
        }
        self._embedding_provider = embedding_provider
        self._index = tenant_index
        self._chunker = chunker or TextChunker()
        self._tagger = tagger or SourceTagger()
        self._batch_size = embedding_batch_size

    @property
    def supported_source_types(self) -> list[SourceType]:
        return list(self._loaders)

    # ── Convenience entry points ─────────────────────────────────────

    async def ingest_pdf(
        self, file_path: str, tenant_id: str, *, display_name: str | None = None
    ) -> IngestionResult:
        options = {"display_name": display_name} if display_name else {}
        return await self.ingest(SourceType.PDF, file_path, tenant_id, **options)

    async def ingest_web(self, url: str, tenant_id: str) -> IngestionResult:
        return await self.ingest(SourceType.WEBSITE, url, tenant_id)

    async def ingest_youtube(self, url: str, tenant_id: str) -> IngestionResult:
        return await self.ingest(SourceType.YOUTUBE, url, tenant_id)

    # ── Pipeline ─────────────────────────────────────────────────────

    async def ingest(
        self,
        source_type: SourceType | str,
        locator: str,
        tenant_id: str,
        **load_options: Any,
    ) -> IngestionResult:
        """Run the full pipeline for one source.

        ``load_options`` are passed through to the loader (e.g. the PDF
        ``display_name``).

        Raises:
            IngestionError: Unknown source type, fetch/parse failure, no
                extractable text, or any other failure after loading.
            EmbeddingServiceError: The embedding provider failed.
            IndexUnavailableError: The tenant index could not be reached.
        """
        try:
            source_type = SourceType(source_type)
        except ValueError:
            raise IngestionError(
                f"No loader registered for source type '{source_type}'",
                source_type=str(source_type),
                locator=locator,
            ) from None
        if not tenant_id:
            raise IngestionError("tenant_id is required", source_type=source_type.value, locator=locator)

        loader = self._loaders.get(source_type)
        if loader is None:
            raise IngestionError(
                f"No loader registered for source type '{source_type.value}'",
                source_type=source_type.value,
                locator=locator,
            )

        plog.separator(f"Ingest {source_type.value}: {locator}")
        pipeline_start = time.perf_counter()

        with plog.timed_step(PipelineStage.FETCH, f"Loading {source_type.value}", locator=locator):
            try:
                loaded = await loader.load(locator, **load_options)
            except SourceRagError:
                raise
            except Exception as e:
                raise IngestionError(
                    f"Failed to load {source_type.value} source: {e}",
                    source_type=source_type.value,
                    locator=locator,
                ) from e

        if not loaded.has_text:
            error = IngestionError(
                f"No extractable text found in {source_type.value} source",
                source_type=source_type.value,
                locator=locator,
            )
            plog.step_error(PipelineStage.FETCH, "Nothing to index", error=error)
            raise error

        try:
            chunk_count = await self._index_loaded(loaded, tenant_id)
        except SourceRagError:
            raise
        except Exception as e:
            plog.step_error(PipelineStage.PIPELINE, f"Ingestion failed for {locator}", error=e)
            raise IngestionError(
                f"Failed to ingest {source_type.value} source: {e}",
                source_type=source_type.value,
                locator=locator,
            ) from e

        elapsed = time.perf_counter() - pipeline_start
        plog.step_complete(
            PipelineStage.COMPLETE,
            f"Successfully added {chunk_count} chunks to collection",
            source_id=loaded.source.source_id,
        )
        plog.stats(chunks=chunk_count, total_time=f"{elapsed:.2f}s", **loaded.counters)

        return IngestionResult(
            source_type=source_type,
            source_id=loaded.source.source_id,
            chunk_count=chunk_count,
            counters=dict(loaded.counters),
        )

    async def _index_loaded(self, loaded: LoadedSource, tenant_id: str) -> int:
        with plog.timed_step(PipelineStage.CHUNK, "Splitting documents"):
            pieces = self._chunker.split_documents(loaded.documents)
        plog.detail(f"Split into {len(pieces)} chunks")

        chunks = self._tagger.tag(pieces, tenant_id, loaded.source)
        plog.step_complete(
            PipelineStage.TAG,
            "Tagged chunks",
            tenant_id=tenant_id,
            source=loaded.source.source_description,
        )

        with plog.timed_step(PipelineStage.EMBED, f"Embedding {len(chunks)} chunks"):
            embedded = await self._embed(chunks)

        with plog.timed_step(PipelineStage.INDEX, f"Writing {len(embedded)} chunks"):
            return await self._index.add(embedded)

    async def _embed(self, chunks: list[Chunk]) -> list[Chunk]:
        """Embed chunk contents in batches, preserving order."""
        embedded: list[Chunk] = []
        for start in range(0, len(chunks), self._batch_size):
            batch = chunks[start : start + self._batch_size]
            vectors = await self._embedding_provider.embed_documents([c.content for c in batch])
            if len(vectors) != len(batch):
                raise IngestionError(
                    f"Embedding provider returned {len(vectors)} vectors for {len(batch)} chunks"
                )
            embedded.extend(
                chunk.with_embedding(vector) for chunk, vector in zip(batch, vectors)
            )
            logger.debug("Embedded batch %d-%d", start, start + len(batch))
        return embedded
