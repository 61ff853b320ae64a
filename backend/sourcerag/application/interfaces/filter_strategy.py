"""Abstract interface (port) for deriving a retrieval filter from a question."""

from abc import ABC, abstractmethod

from sourcerag.domain.entities import RetrievalFilter


class FilterInferenceStrategy(ABC):
    """Port — swap the keyword heuristic for a classifier without touching retrieval."""

    @abstractmethod
    def infer(self, question: str, tenant_id: str) -> RetrievalFilter:
        """Build the filter for one query. Must always scope to ``tenant_id``."""
        ...
