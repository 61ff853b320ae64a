"""Chat endpoints — answer a question in one response or as Server-Sent Events."""

import json
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from sourcerag.application.schemas import ChatRequest, ChatResponse
from sourcerag.application.services import AnswerStream, QueryService
from sourcerag.domain.exceptions import SourceRagError
from sourcerag.infrastructure.dependencies import get_query_service, get_tenant_id
from sourcerag.presentation.api.errors import to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: QueryService = Depends(get_query_service),
) -> ChatResponse:
    """Answer a question from the tenant's own sources."""
    try:
        answer = await service.query(body.question, tenant_id)
    except SourceRagError as e:
        raise to_http_exception(e)
    return ChatResponse(answer=answer.answer, sources=answer.sources)


@router.post("/stream")
async def chat_stream(
    body: ChatRequest,
    tenant_id: str = Depends(get_tenant_id),
    service: QueryService = Depends(get_query_service),
) -> StreamingResponse:
    """Stream the answer via Server-Sent Events (SSE).

    Each event is a ``data: {...}`` line: ``{"content": ...}`` fragments,
    then ``{"done": true}`` or ``{"error": ...}``. Failures after the
    response has started are reported in-band, never as an HTTP status.
    """
    stream = await service.stream_query(body.question, tenant_id)

    return StreamingResponse(
        _sse_events(stream),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


async def _sse_events(stream: AnswerStream):
    # Closing the stream cancels generation when the client disconnects.
    try:
        async for event in stream:
            yield f"data: {json.dumps(event.to_payload())}\n\n"
    finally:
        await stream.aclose()
