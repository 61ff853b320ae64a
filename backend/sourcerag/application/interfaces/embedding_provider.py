"""Port for the embedding model shared by ingestion and retrieval."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Chunks and questions must be embedded by the same model.

    Failures surface as ``EmbeddingServiceError``.
    """

    @property
    @abstractmethod
    def dimensions(self) -> int:
        ...

    @abstractmethod
    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Vectors for a batch of chunk texts, index-aligned with ``texts``."""
        ...

    @abstractmethod
    async def embed_query(self, text: str) -> list[float]:
        ...
