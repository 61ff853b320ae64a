"""Abstract interface (port) for the tenant-partitioned vector index."""

from abc import ABC, abstractmethod

from sourcerag.domain.entities import Chunk, RetrievalFilter, ScoredChunk


class TenantIndex(ABC):
    """Port for chunk persistence, filtered similarity search and tenant purge.

    Entries are immutable once written; the only removal path is
    ``delete_by_tenant``.
    """

    @property
    @abstractmethod
    def ready(self) -> bool:
        """Whether the collection has been reached and set up at least once."""
        ...

    @abstractmethod
    async def connect(self) -> None:
        """Establish the connection and make sure the collection exists."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the index."""
        ...

    @abstractmethod
    async def add(self, chunks: list[Chunk]) -> int:
        """Append embedded chunks. Returns the number of entries written.

        Safe to call concurrently for different tenants or sources; each
        entry carries its own ``tenant_id``.
        """
        ...

    @abstractmethod
    async def search(
        self,
        query_vector: list[float],
        k: int,
        retrieval_filter: RetrievalFilter,
    ) -> list[ScoredChunk]:
        """Return up to ``k`` chunks matching the filter, by descending similarity."""
        ...

    @abstractmethod
    async def delete_by_tenant(self, tenant_id: str) -> int:
        """Remove every entry of a tenant. Returns the number removed (0 is fine)."""
        ...

    @abstractmethod
    async def count(self, tenant_id: str | None = None) -> int:
        """Count entries, optionally for a single tenant."""
        ...
