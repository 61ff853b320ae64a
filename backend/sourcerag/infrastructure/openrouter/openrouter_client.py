"""OpenRouter chat adapter — implements the ChatProvider port.

Works against any OpenAI-compatible ``/chat/completions`` endpoint, for
both JSON responses and SSE streaming.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx

from sourcerag.application.interfaces.chat_provider import ChatProvider
from sourcerag.domain.entities import ChatCompletionResult, ChatMessage, TokenUsage
from sourcerag.domain.exceptions import GenerationServiceError
from sourcerag.infrastructure.openrouter.base import (
    OpenRouterHttpAdapter,
    error_message,
    status_code,
)

logger = logging.getLogger(__name__)

_DATA_PREFIX = "data:"
_DONE_MARKER = "[DONE]"


class OpenRouterClient(OpenRouterHttpAdapter, ChatProvider):
    """Generation adapter.

    ``stream`` yields the text of each ``choices[0].delta.content`` as it
    arrives. Keepalive comments (``: OPENROUTER PROCESSING``) and empty
    deltas produce nothing; ``data: [DONE]`` ends the stream.
    """

    async def complete(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> ChatCompletionResult:
        body = _request_body(messages, model, temperature=temperature, max_tokens=max_tokens)

        async with self._client() as client:
            try:
                response = await client.post(
                    self._endpoint("chat/completions"), headers=self._headers(), json=body
                )
            except httpx.HTTPError as e:
                raise self._unreachable(e) from e

        if response.status_code != 200:
            raise self._http_error(response.status_code, response.content)
        return self._to_result(response.json())

    async def stream(
        self,
        messages: list[ChatMessage],
        model: str,
        *,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        body = _request_body(
            messages, model, temperature=temperature, max_tokens=max_tokens, stream=True
        )

        async with self._client() as client:
            try:
                async with client.stream(
                    "POST", self._endpoint("chat/completions"), headers=self._headers(), json=body
                ) as response:
                    if response.status_code != 200:
                        raise self._http_error(response.status_code, await response.aread())

                    async for line in response.aiter_lines():
                        if not line.startswith(_DATA_PREFIX):
                            continue  # blank separators and ": keepalive" comments
                        data = line[len(_DATA_PREFIX):].strip()
                        if data == _DONE_MARKER:
                            return
                        fragment = self._delta_text(data)
                        if fragment:
                            yield fragment
            except httpx.HTTPError as e:
                raise self._unreachable(e) from e

    # ── Response parsing ─────────────────────────────────────────────

    def _delta_text(self, data: str) -> str:
        try:
            event = json.loads(data)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed stream chunk: %r", data[:200])
            return ""

        self._raise_embedded_error(event)
        choices = event.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("delta") or {}).get("content") or ""

    def _to_result(self, data: dict[str, Any]) -> ChatCompletionResult:
        self._raise_embedded_error(data)

        choices = data.get("choices") or []
        if not choices:
            raise GenerationServiceError(self.provider_name, 500, "No choices in response")

        choice = choices[0]
        usage = data.get("usage") or {}
        return ChatCompletionResult(
            model=data.get("model", ""),
            content=(choice.get("message") or {}).get("content") or "",
            finish_reason=choice.get("finish_reason") or "stop",
            usage=TokenUsage(
                prompt_tokens=usage.get("prompt_tokens", 0),
                completion_tokens=usage.get("completion_tokens", 0),
                total_tokens=usage.get("total_tokens", 0),
                cost=usage.get("cost"),
            ),
            provider=self.provider_name,
        )

    # ── Errors ───────────────────────────────────────────────────────

    def _raise_embedded_error(self, data: dict[str, Any]) -> None:
        """OpenRouter reports some failures inside a 200 body or mid-stream."""
        error = data.get("error")
        if not error:
            return
        if not isinstance(error, dict):
            raise GenerationServiceError(self.provider_name, 500, str(error))
        raise GenerationServiceError(
                self.provider_name,
                status_code(error.get("code")),
                error.get("message", "Unknown error"),
            )

    def _http_error(self, code: int, body: bytes) -> GenerationServiceError:
        message = error_message(body)
        logger.error("Chat API error %d: %s", code, message[:500])
        return GenerationServiceError(self.provider_name, code, message)

    def _unreachable(self, error: httpx.HTTPError) -> GenerationServiceError:
        logger.error("Chat request failed: %s", error)
        return GenerationServiceError(self.provider_name, 503, str(error) or type(error).__name__)


def _request_body(
    messages: list[ChatMessage],
    model: str,
    *,
    temperature: float | None,
    max_tokens: int | None,
    stream: bool = False,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "model": model,
        "messages": [{"role": m.role, "content": m.content} for m in messages],
    }
    optional = {"stream": stream or None, "temperature": temperature, "max_tokens": max_tokens}
    body.update({key: value for key, value in optional.items() if value is not None})
    return body
