"""Domain entity for the structured predicate applied to every search."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .source import SourceType


@dataclass(frozen=True)
class RetrievalFilter:
    """Exact-match filter built fresh for each query.

    ``tenant_id`` is always required; ``source_type`` narrows the search to
    one kind of source when the question hints at it.
    """

    tenant_id: str
    source_type: SourceType | None = None

    def __post_init__(self) -> None:
        if not self.tenant_id:
            raise ValueError("RetrievalFilter requires a tenant_id")

    def matches(self, metadata: Mapping[str, Any]) -> bool:
        """Evaluate the predicate against a chunk's metadata."""
        if metadata.get("tenant_id") != self.tenant_id:
            return False
        if self.source_type is not None:
            return metadata.get("source_type") == self.source_type.value
        return True

    def describe(self) -> str:
        if self.source_type is None:
            return f"tenant_id={self.tenant_id}"
        return f"tenant_id={self.tenant_id}, source_type={self.source_type.value}"
