"""OpenRouter embedding adapter — implements the EmbeddingProvider port.

Calls the OpenAI-compatible ``/embeddings`` endpoint. Default model:
openai/text-embedding-3-small (1536 dimensions).
"""

import logging
from typing import Any

import httpx

from sourcerag.application.interfaces.embedding_provider import EmbeddingProvider
from sourcerag.domain.exceptions import EmbeddingServiceError
from sourcerag.infrastructure.openrouter.base import (
    DEFAULT_APP_NAME,
    DEFAULT_BASE_URL,
    OpenRouterHttpAdapter,
    error_message,
)

logger = logging.getLogger(__name__)


class OpenRouterEmbeddingProvider(OpenRouterHttpAdapter, EmbeddingProvider):
    """Embeds chunk texts and questions with one remote model."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        app_name: str = DEFAULT_APP_NAME,
        model: str = "openai/text-embedding-3-small",
        model_dimensions: int = 1536,
        http_client: httpx.AsyncClient | None = None,
    ):
        super().__init__(api_key, base_url, app_name, http_client)
        self._model = model
        self._dimensions = model_dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """One vector per text, in input order. An empty batch makes no request."""
        if not texts:
            return []

        body: dict[str, Any] = {
            "model": self._model,
            "input": texts,
            "dimensions": self._dimensions,
        }
        async with self._client() as client:
            try:
                response = await client.post(
                    self._endpoint("embeddings"), headers=self._headers(), json=body
                )
            except httpx.HTTPError as e:
                logger.error("Embedding request failed: %s", e)
                raise EmbeddingServiceError(self.provider_name, 503, str(e) or type(e).__name__) from e

        if response.status_code != 200:
            message = error_message(response.content)[:500]
            logger.error("Embedding API error %d: %s", response.status_code, message)
            raise EmbeddingServiceError(self.provider_name, response.status_code, message)

        items = response.json().get("data") or []
        if len(items) != len(texts):
            raise EmbeddingServiceError(
                self.provider_name,
                502,
                f"Expected {len(texts)} embeddings, got {len(items)}",
            )

        vectors = [item["embedding"] for item in sorted(items, key=lambda item: item.get("index", 0))]
        logger.info("Generated %d embeddings (model=%s, dims=%d)", len(vectors), self._model, len(vectors[0]))
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        (vector,) = await self.embed_documents([text])
        return vector
