"""Shared fakes for the engine's ports.

The fakes are deliberately small: an in-memory tenant index with real
cosine ranking and filter semantics, a deterministic bag-of-words
embedder, and a scriptable chat provider.
"""

import asyncio
import math

import pytest

from sourcerag.application.interfaces import (
    ChatProvider,
    EmbeddingProvider,
    TenantIndex,
)
from sourcerag.domain.entities import (
    ChatCompletionResult,
    ChatMessage,
    Chunk,
    RetrievalFilter,
    ScoredChunk,
    TokenUsage,
)
from sourcerag.domain.exceptions import GenerationServiceError


# ── Fakes ────────────────────────────────────────────────────────────


class FakeEmbeddingProvider(EmbeddingProvider):
    """Deterministic embedder: each word bumps one of ``dims`` buckets."""

    def __init__(self, dims: int = 16, delay: float = 0.0):
        self._dims = dims
        self._delay = delay
        self.document_calls: list[list[str]] = []
        self.query_calls: list[str] = []

    @property
    def dimensions(self) -> int:
        return self._dims

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * self._dims
        for word in text.lower().split():
            vector[sum(ord(c) for c in word) % self._dims] += 1.0
        if not any(vector):
            vector[0] = 1.0
        return vector

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.document_calls.append(list(texts))
        return [self._vector(t) for t in texts]

    async def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        if self._delay:
            await asyncio.sleep(self._delay)
        return self._vector(text)


class InMemoryTenantIndex(TenantIndex):
    """TenantIndex kept in a list; ranks by cosine similarity."""

    def __init__(self, search_delay: float = 0.0):
        self.entries: list[Chunk] = []
        self.search_calls: list[tuple[int, RetrievalFilter]] = []
        self.connected = False
        self.closed = False
        self._search_delay = search_delay

    @property
    def ready(self) -> bool:
        return self.connected

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.closed = True

    async def add(self, chunks: list[Chunk]) -> int:
        for chunk in chunks:
            if not chunk.embedding:
                raise ValueError("Cannot index a chunk without an embedding")
        self.entries.extend(chunks)
        return len(chunks)

    async def search(self, query_vector, k, retrieval_filter) -> list[ScoredChunk]:
        self.search_calls.append((k, retrieval_filter))
        if self._search_delay:
            await asyncio.sleep(self._search_delay)
        scored = [
            ScoredChunk(chunk=chunk, score=_cosine(query_vector, chunk.embedding))
            for chunk in self.entries
            if retrieval_filter.matches(chunk.metadata)
        ]
        scored.sort(key=lambda s: s.score, reverse=True)
        return scored[:k]

    async def delete_by_tenant(self, tenant_id: str) -> int:
        before = len(self.entries)
        self.entries = [c for c in self.entries if c.tenant_id != tenant_id]
        return before - len(self.entries)

    async def count(self, tenant_id: str | None = None) -> int:
        if tenant_id is None:
            return len(self.entries)
        return sum(1 for c in self.entries if c.tenant_id == tenant_id)


class FakeChatProvider(ChatProvider):
    """Chat provider with canned output.

    ``fragments`` are streamed one by one; ``fail_after`` raises a
    GenerationServiceError after that many fragments; ``hang`` blocks the
    stream until it is cancelled.
    """

    def __init__(
        self,
        answer: str = "According to the PDF, the answer is 42.",
        fragments: list[str] | None = None,
        fail_after: int | None = None,
        hang: bool = False,
    ):
        self.answer = answer
        self.fragments = fragments if fragments is not None else ["According to ", "the PDF, ", "42."]
        self.fail_after = fail_after
        self.hang = hang
        self.complete_calls: list[list[ChatMessage]] = []
        self.stream_calls: list[list[ChatMessage]] = []
        self.stream_cancelled = False

    @property
    def provider_name(self) -> str:
        return "fake"

    async def complete(self, messages, model, *, temperature=None, max_tokens=None):
        self.complete_calls.append(messages)
        return ChatCompletionResult(
            model=model or "test-model",
            content=self.answer,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
            provider=self.provider_name,
        )

    async def stream(self, messages, model, *, temperature=None, max_tokens=None):
        self.stream_calls.append(messages)
        try:
            for i, fragment in enumerate(self.fragments):
                if self.fail_after is not None and i == self.fail_after:
                    raise GenerationServiceError("fake", 500, "model crashed")
                yield fragment
            if self.hang:
                await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.stream_cancelled = True
            raise


def _cosine(a, b) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def tenant_index() -> InMemoryTenantIndex:
    return InMemoryTenantIndex()


@pytest.fixture
def chat_provider() -> FakeChatProvider:
    return FakeChatProvider()


@pytest.fixture
def make_chat_provider():
    return FakeChatProvider


@pytest.fixture
def make_tenant_index():
    return InMemoryTenantIndex


@pytest.fixture
def make_embedder():
    return FakeEmbeddingProvider
