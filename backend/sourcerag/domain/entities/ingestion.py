"""Domain entities for ingestion and deletion outcomes."""

from dataclasses import dataclass, field
from typing import Any

from .source import SourceType


@dataclass
class IngestionResult:
    """Outcome of ingesting one source for one tenant."""

    source_type: SourceType
    source_id: str
    chunk_count: int
    counters: dict[str, int] = field(default_factory=dict)  # pages, links_extracted
    success: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "chunks": self.chunk_count,
            "source_id": self.source_id,
            **self.counters,
        }


@dataclass
class PurgeResult:
    """Outcome of removing every index entry of a tenant."""

    tenant_id: str
    deleted_count: int
    success: bool = True
