"""Text chunker — splits normalized document text into overlapping chunks.

Chunks are cut at the most natural boundary available inside the size
window (paragraph, then line, then sentence, then word) and fall back to a
hard cut. Consecutive chunks always share exactly ``chunk_overlap``
characters, so the original text can be rebuilt from the chunk sequence by
dropping each chunk's leading overlap.
"""

import logging

from sourcerag.domain.entities import Document

logger = logging.getLogger(__name__)

# ── Chunking constants ──────────────────────────────────────────────
_DEFAULT_CHUNK_SIZE = 1000  # ~250 tokens (rough 4:1 char-to-token ratio)
_DEFAULT_CHUNK_OVERLAP = 200  # Overlap for context continuity
_SEPARATORS = ("\n\n", "\n", ". ", "? ", "! ", " ")


class TextChunker:
    """Recursive-style character splitter with a hard size bound."""

    def __init__(
        self,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = _DEFAULT_CHUNK_OVERLAP,
    ):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split(self, text: str) -> list[str]:
        """Split text into ordered, overlapping chunks.

        Returns an empty list for empty or whitespace-only input.
        """
        if not text or not text.strip():
            return []
        return [text[start:end] for start, end in self._spans(text)]

    def split_documents(self, documents: list[Document]) -> list[Document]:
        """Split each document, copying its attributes onto every piece.

        Each piece gets a ``chunk_index`` counting from zero within its
        source document.
        """
        pieces: list[Document] = []
        for doc in documents:
            for index, part in enumerate(self.split(doc.text)):
                pieces.append(
                    Document(text=part, attributes={**doc.attributes, "chunk_index": index})
                )
        logger.debug("Split %d documents into %d chunks", len(documents), len(pieces))
        return pieces

    # ── Private helpers ──────────────────────────────────────────────

    def _spans(self, text: str) -> list[tuple[int, int]]:
        """Compute ``(start, end)`` offsets for every chunk."""
        spans: list[tuple[int, int]] = []
        length = len(text)
        start = 0

        while True:
            hard_end = min(start + self._chunk_size, length)
            if hard_end >= length:
                spans.append((start, length))
                break

            end = self._boundary_before(text, start, hard_end)
            spans.append((start, end))
            start = end - self._chunk_overlap

        return spans

    def _boundary_before(self, text: str, start: int, hard_end: int) -> int:
        """Find the best cut point in ``(start + overlap, hard_end]``.

        The cut must leave room for progress after stepping back by the
        overlap, and should not produce chunks shorter than half the
        configured size when a hard cut would do better.
        """
        floor = start + max(self._chunk_overlap + 1, self._chunk_size // 2)
        if floor >= hard_end:
            return hard_end

        for sep in _SEPARATORS:
            pos = text.rfind(sep, floor, hard_end)
            if pos == -1:
                continue
            cut = pos + len(sep)
            if cut <= hard_end:
                return cut
        return hard_end
