"""Keyword-based filter inference — narrows retrieval to one source type.

A cheap heuristic: the question is lowercased and scanned for hint words.
The first rule that matches wins, in the fixed order youtube > website > pdf.
A question that merely mentions "document" in passing will still be
narrowed to PDFs; that is accepted behavior for this strategy.
"""

import logging

from sourcerag.application.interfaces.filter_strategy import FilterInferenceStrategy
from sourcerag.domain.entities import RetrievalFilter, SourceType

logger = logging.getLogger(__name__)

# ── Hint rules, evaluated in priority order ─────────────────────────
_HINT_RULES: tuple[tuple[SourceType, tuple[str, ...]], ...] = (
    (SourceType.YOUTUBE, ("youtube", "video")),
    (SourceType.WEBSITE, ("website", "web page")),
    (SourceType.PDF, ("pdf", "document")),
)


class KeywordFilterStrategy(FilterInferenceStrategy):
    """Infers a source-type restriction from keywords in the question."""

    def __init__(
        self,
        rules: tuple[tuple[SourceType, tuple[str, ...]], ...] = _HINT_RULES,
    ):
        self._rules = rules

    def infer(self, question: str, tenant_id: str) -> RetrievalFilter:
        source_type = self.detect_source_type(question)
        if source_type is not None:
            logger.info("Filtering for %s sources only", source_type.value)
        return RetrievalFilter(tenant_id=tenant_id, source_type=source_type)

    def detect_source_type(self, question: str) -> SourceType | None:
        lowered = question.lower()
        for source_type, keywords in self._rules:
            if any(keyword in lowered for keyword in keywords):
                return source_type
        return None
