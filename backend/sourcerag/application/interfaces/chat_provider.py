"""Port for the answer generator."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from sourcerag.domain.entities import ChatMessage, ChatCompletionResult


class ChatProvider(ABC):
    """Turns a prompt into an answer, whole or as a fragment stream.

    Adapters raise ``GenerationServiceError`` for any provider failure,
    including one reported part-way through a stream.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        ...

    @abstractmethod
    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        ...

    @abstractmethod
    def stream(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """Yield answer text fragments in generation order."""
        ...
