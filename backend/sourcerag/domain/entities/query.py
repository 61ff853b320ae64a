"""Domain entities for answered questions."""

from dataclasses import dataclass, field


@dataclass
class QueryAnswer:
    """A complete answer plus the sources the context was drawn from."""

    question: str
    answer: str
    sources: list[str] = field(default_factory=list)  # distinct source descriptions, retrieval order
    chunk_count: int = 0
