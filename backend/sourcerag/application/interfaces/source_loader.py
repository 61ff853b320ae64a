"""Abstract interface (port) for source adapters — one implementation per source type."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from sourcerag.domain.entities import Document, SourceMetadata, SourceType


@dataclass
class LoadedSource:
    """Normalized output of a source adapter, ready for chunking."""

    documents: list[Document]
    source: SourceMetadata
    counters: dict[str, int] = field(default_factory=dict)

    @property
    def has_text(self) -> bool:
        return any(doc.text.strip() for doc in self.documents)


class SourceLoader(ABC):
    """Port for fetching and parsing a raw source into documents."""

    @property
    @abstractmethod
    def source_type(self) -> SourceType:
        ...

    @abstractmethod
    async def load(self, locator: str, **options: Any) -> LoadedSource:
        """Fetch and parse the resource at ``locator`` (file path or URL).

        Raises:
            IngestionError: If the resource is unreachable, of the wrong
                type, corrupt, or has no usable content.
        """
        ...
