"""Unit tests for the OpenRouterClient and OpenRouterEmbeddingProvider."""

import json

import httpx
import pytest

from sourcerag.domain.entities import ChatMessage
from sourcerag.domain.exceptions import EmbeddingServiceError, GenerationServiceError
from sourcerag.infrastructure.openrouter import OpenRouterClient, OpenRouterEmbeddingProvider

_QUESTION = [ChatMessage(role="user", content="What is 42?")]


def _json_client(payload: dict, status: int = 200, seen: list | None = None) -> httpx.AsyncClient:
    """An AsyncClient whose every request gets ``payload`` back."""

    def reply(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=payload)

    return httpx.AsyncClient(transport=httpx.MockTransport(reply))


def _sse_client(*lines: str) -> httpx.AsyncClient:
    stream_body = ("\n".join(lines) + "\n").encode()

    def reply(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=stream_body, headers={"content-type": "text/event-stream"})

    return httpx.AsyncClient(transport=httpx.MockTransport(reply))


def _completion(text: str) -> dict:
    return {
        "id": "gen-1",
        "model": "openai/gpt-4o-mini",
        "choices": [{"message": {"role": "assistant", "content": text}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15, "cost": 0.0001},
    }


def _delta(content: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]})


# ── complete ──


@pytest.mark.asyncio
async def test_complete_parses_response():
    seen: list[httpx.Request] = []
    client = OpenRouterClient(api_key="test-key", http_client=_json_client(_completion("The answer is 42."), seen=seen))

    result = await client.complete(messages=_QUESTION, model="openai/gpt-4o-mini", temperature=0.0)

    assert result.content == "The answer is 42."
    assert result.model == "openai/gpt-4o-mini"
    assert result.usage.total_tokens == 15
    assert result.usage.cost == 0.0001
    assert result.provider == "openrouter"

    (request,) = seen
    assert request.headers["Authorization"] == "Bearer test-key"
    sent = json.loads(request.content)
    assert sent["messages"] == [{"role": "user", "content": "What is 42?"}]
    assert sent["temperature"] == 0.0
    assert "stream" not in sent


@pytest.mark.asyncio
async def test_complete_rate_limited():
    client = OpenRouterClient(
        api_key="test-key",
        http_client=_json_client({"error": {"code": 429, "message": "Rate limit exceeded"}}, status=429),
    )

    with pytest.raises(GenerationServiceError) as exc_info:
        await client.complete(messages=_QUESTION, model="openai/gpt-4o-mini")

    assert exc_info.value.status_code == 429
    assert "Rate limit" in exc_info.value.message


@pytest.mark.asyncio
async def test_complete_network_failure_is_503():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = OpenRouterClient(api_key="k", http_client=httpx.AsyncClient(transport=httpx.MockTransport(refuse)))

    with pytest.raises(GenerationServiceError) as exc_info:
        await client.complete(messages=_QUESTION, model="m")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_complete_without_choices_raises():
    client = OpenRouterClient(api_key="k", http_client=_json_client({"model": "m", "choices": []}))

    with pytest.raises(GenerationServiceError, match="No choices"):
        await client.complete(messages=_QUESTION, model="m")


# ── stream ──


@pytest.mark.asyncio
async def test_stream_yields_fragments_until_done():
    client = OpenRouterClient(
        api_key="k",
        http_client=_sse_client(_delta("Hello"), "", _delta(" world"), "", "data: [DONE]", _delta("after done")),
    )

    fragments = [f async for f in client.stream(messages=_QUESTION, model="openai/gpt-4o-mini")]

    assert fragments == ["Hello", " world"]


@pytest.mark.asyncio
async def test_stream_skips_keepalive_and_empty_deltas():
    client = OpenRouterClient(
        api_key="k",
        http_client=_sse_client(
            ": OPENROUTER PROCESSING",
            "data: " + json.dumps({"choices": [{"delta": {"role": "assistant"}}]}),
            _delta("Hi"),
            "data: not-json",
            "data: [DONE]",
        ),
    )

    fragments = [f async for f in client.stream(messages=_QUESTION, model="m")]

    assert fragments == ["Hi"]


@pytest.mark.asyncio
async def test_stream_error_chunk_raises_after_partial_output():
    client = OpenRouterClient(
        api_key="k",
        http_client=_sse_client(
            _delta("partial"),
            "data: " + json.dumps({"error": {"code": 502, "message": "upstream died"}}),
        ),
    )

    received = []
    with pytest.raises(GenerationServiceError) as exc_info:
        async for fragment in client.stream(messages=_QUESTION, model="m"):
            received.append(fragment)

    assert received == ["partial"]
    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_stream_http_error_status_raises():
    client = OpenRouterClient(api_key="bad", http_client=_json_client({"error": {"message": "bad key"}}, status=401))

    with pytest.raises(GenerationServiceError) as exc_info:
        async for _ in client.stream(messages=_QUESTION, model="m"):
            pass

    assert exc_info.value.status_code == 401
    assert "bad key" in exc_info.value.message


# ── embeddings ──


@pytest.mark.asyncio
async def test_embed_documents_orders_by_index():
    seen: list[httpx.Request] = []
    unordered = {"data": [{"index": 1, "embedding": [0.0, 1.0]}, {"index": 0, "embedding": [1.0, 0.0]}]}
    provider = OpenRouterEmbeddingProvider(
        api_key="k", model_dimensions=2, http_client=_json_client(unordered, seen=seen)
    )

    vectors = await provider.embed_documents(["first", "second"])

    assert vectors == [[1.0, 0.0], [0.0, 1.0]]
    sent = json.loads(seen[0].content)
    assert sent["input"] == ["first", "second"]
    assert sent["dimensions"] == 2
    assert seen[0].url.path.endswith("/embeddings")


@pytest.mark.asyncio
async def test_embed_documents_empty_input_makes_no_request():
    seen: list[httpx.Request] = []
    provider = OpenRouterEmbeddingProvider(api_key="k", http_client=_json_client({}, seen=seen))

    assert await provider.embed_documents([]) == []
    assert seen == []


@pytest.mark.asyncio
async def test_embedding_error_status_raises():
    provider = OpenRouterEmbeddingProvider(api_key="k", http_client=_json_client({"error": "overloaded"}, status=503))

    with pytest.raises(EmbeddingServiceError) as exc_info:
        await provider.embed_query("hello")

    assert exc_info.value.status_code == 503
    assert "overloaded" in exc_info.value.message


@pytest.mark.asyncio
async def test_embedding_count_mismatch_raises():
    provider = OpenRouterEmbeddingProvider(
        api_key="k", http_client=_json_client({"data": [{"index": 0, "embedding": [1.0]}]})
    )

    with pytest.raises(EmbeddingServiceError) as exc_info:
        await provider.embed_documents(["a", "b"])

    assert exc_info.value.status_code == 502
