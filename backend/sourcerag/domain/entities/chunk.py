"""Domain entities for indexed chunks — the only unit stored in the tenant index."""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class Chunk:
    """An immutable piece of tagged text, optionally carrying its embedding.

    ``content`` already includes the ``[SOURCE: ...]`` header. ``metadata``
    is copied on construction and exposed read-only. The embedding is
    computed once; ``with_embedding`` returns a new chunk instead of
    mutating this one.
    """

    content: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    embedding: tuple[float, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))
        object.__setattr__(self, "embedding", tuple(self.embedding))

    @property
    def tenant_id(self) -> str:
        return self.metadata.get("tenant_id", "")

    @property
    def source_type(self) -> str | None:
        return self.metadata.get("source_type")

    @property
    def source_description(self) -> str:
        return (
            self.metadata.get("source_description")
            or self.metadata.get("source_type")
            or "unknown"
        )

    def with_embedding(self, embedding: list[float] | tuple[float, ...]) -> "Chunk":
        return replace(self, embedding=tuple(float(v) for v in embedding))


@dataclass(frozen=True)
class ScoredChunk:
    """A chunk returned from a similarity search."""

    chunk: Chunk
    score: float  # cosine similarity, higher is closer
