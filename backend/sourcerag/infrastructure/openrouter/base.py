"""Shared HTTP plumbing for the OpenRouter (OpenAI-compatible) adapters."""

import json
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_APP_NAME = "Source-Aware RAG"


class OpenRouterHttpAdapter:
    """Holds credentials and hands out an httpx client per call.

    An injected ``http_client`` is reused and never closed here (tests pass
    one backed by ``httpx.MockTransport``); otherwise a client is opened for
    the call and closed afterwards.
    """

    provider = "openrouter"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        app_name: str = DEFAULT_APP_NAME,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 120.0,
    ):
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._app_name = app_name
        self._http_client = http_client
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return self.provider

    def _endpoint(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "X-Title": self._app_name,
        }

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client


def error_message(body: bytes) -> str:
    """Best-effort human message from an error response body."""
    try:
        data = json.loads(body)
    except ValueError:
        return body.decode(errors="replace")
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return error["message"]
    if isinstance(error, str):
        return error
    return body.decode(errors="replace")


def status_code(code) -> int:
    """Coerce a provider error code to an int status; anything odd is 500."""
    try:
        return int(code)
    except (TypeError, ValueError):
        return 500
