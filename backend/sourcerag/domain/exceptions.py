"""Domain-specific exceptions — framework-independent.

Every error raised by the ingestion and query engine derives from
``SourceRagError`` so callers can map the whole family in one place.
``kind`` is the stable error name reported to the outer layers.
"""


class SourceRagError(Exception):
    """Base class for all engine errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def kind(self) -> str:
        return type(self).__name__


class IngestionError(SourceRagError):
    """Raised when a source cannot be fetched, parsed, or indexed.

    Covers unreachable URLs, corrupt or non-PDF uploads, missing
    transcripts and failures part-way through the chunk/tag/write pipeline.
    """

    def __init__(
        self,
        message: str,
        *,
        source_type: str | None = None,
        locator: str | None = None,
    ):
        self.source_type = source_type
        self.locator = locator
        super().__init__(message)


class RetrievalTimeoutError(SourceRagError):
    """Raised when the vector search exceeds its time bound."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Retrieval timeout after {timeout_seconds:g}s")


class EmbeddingServiceError(SourceRagError):
    """Raised when the embedding provider returns an error or is unreachable."""

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{provider}] {status_code}: {message}")


class GenerationServiceError(SourceRagError):
    """Raised when the generation provider returns an error.

    Provider-agnostic — works for OpenRouter, OpenAI, or any
    OpenAI-compatible endpoint.
    """

    def __init__(self, provider: str, status_code: int, message: str):
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"[{provider}] {status_code}: {message}")


class IndexUnavailableError(SourceRagError):
    """Raised when the backing vector store cannot be reached."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Tenant index unavailable during {operation}: {message}")
