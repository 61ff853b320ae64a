"""Source tagger — stamps provenance onto chunk text and metadata."""

import logging

from sourcerag.domain.entities import Chunk, Document, SourceMetadata

logger = logging.getLogger(__name__)


def source_header(source: SourceMetadata) -> str:
    """The literal header every chunk of ``source`` starts with."""
    return f"[SOURCE: {source.source_description}]\n\n"


class SourceTagger:
    """Turns chunked documents into tenant-owned, source-tagged chunks.

    The header is written into the content itself (not only the metadata)
    because the generation model only ever sees chunk content.
    """

    def tag(
        self,
        documents: list[Document],
        tenant_id: str,
        source: SourceMetadata,
    ) -> list[Chunk]:
        if not tenant_id:
            raise ValueError("tenant_id is required to tag chunks")

        header = source_header(source)
        source_fields = source.as_metadata()

        chunks = [
            Chunk(
                content=header + doc.text,
                metadata={**doc.attributes, "tenant_id": tenant_id, **source_fields},
            )
            for doc in documents
        ]

        logger.info(
            "Tagged %d chunks for tenant %s with source %s",
            len(chunks),
            tenant_id,
            source.source_id,
        )
        return chunks
