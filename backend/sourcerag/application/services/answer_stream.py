"""Answer stream — producer/consumer channel for incremental answers.

A producer task drains the provider's fragment iterator into a bounded
queue. The consumer iterates ``StreamEvent`` objects: any number of
fragments followed by exactly one terminal ``done`` or ``error`` event.
Closing the stream cancels the producer and closes the provider's
iterator, which releases the in-flight provider request.
"""

import asyncio
import logging
import time
from collections.abc import AsyncIterator

from sourcerag.domain.entities import StreamEvent, StreamEventKind
from sourcerag.domain.exceptions import GenerationServiceError, SourceRagError
from sourcerag.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)

_DEFAULT_MAX_BUFFERED = 64


class AnswerStream:
    """Single-consumer, forward-only stream of answer events.

    Usage:
        async with synthesizer.stream(question, chunks) as stream:
            async for event in stream:
                ...

    When ``pipeline_log`` is given, the GENERATE step is logged when the
    producer starts and again when it ends (done, error or cancelled).
    """

    def __init__(
        self,
        fragments: AsyncIterator[str] | None = None,
        *,
        max_buffered: int = _DEFAULT_MAX_BUFFERED,
        pipeline_log: PipelineLogger | None = None,
    ):
        self._fragments = fragments
        self._queue: asyncio.Queue[StreamEvent] = asyncio.Queue(maxsize=max_buffered)
        self._producer: asyncio.Task | None = None
        self._pending: list[StreamEvent] = []
        self._finished = False
        self._consumed = False
        self._plog = pipeline_log

    # ── Factories ────────────────────────────────────────────────────

    @classmethod
    def from_text(cls, text: str) -> "AnswerStream":
        """A stream that delivers one fixed answer and completes."""
        stream = cls()
        stream._pending = [StreamEvent.fragment(text), StreamEvent.done()]
        return stream

    @classmethod
    def from_error(cls, error: Exception) -> "AnswerStream":
        """A stream that fails immediately with ``error``."""
        stream = cls()
        stream._pending = [_error_event(error)]
        return stream

    # ── Consumer API ─────────────────────────────────────────────────

    def __aiter__(self) -> AsyncIterator[StreamEvent]:
        if self._consumed:
            raise RuntimeError("AnswerStream supports a single consumer")
        self._consumed = True
        return self._events()

    async def _events(self) -> AsyncIterator[StreamEvent]:
        try:
            if self._fragments is None:
                for event in self._pending:
                    yield event
                return
            if self._finished:
                return

            self._start()
            while True:
                event = await self._queue.get()
                yield event
                if event.is_terminal:
                    return
        finally:
            self._finished = True
            await self._cancel_producer()

    async def collect(self) -> str:
        """Drain the stream into the full answer text.

        Raises:
            GenerationServiceError: If the stream ends with an error event.
        """
        parts: list[str] = []
        async for event in self:
            if event.kind is StreamEventKind.FRAGMENT:
                parts.append(event.content)
            elif event.kind is StreamEventKind.ERROR:
                raise GenerationServiceError(
                    "stream", 0, event.error or "Unknown streaming error"
                )
        return "".join(parts)

    async def aclose(self) -> None:
        """Stop the stream early; the provider call is cancelled and closed."""
        self._finished = True
        if self._producer is None:
            await self._close_fragments()
        else:
            await self._cancel_producer()

    @property
    def closed(self) -> bool:
        return self._finished

    async def __aenter__(self) -> "AnswerStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ── Producer ─────────────────────────────────────────────────────

    def _start(self) -> None:
        if self._producer is None:
            if self._plog:
                self._plog.step_start(PipelineStage.GENERATE, "Streaming answer")
            self._producer = asyncio.create_task(self._produce())

    async def _produce(self) -> None:
        started = time.perf_counter()
        sent = 0
        try:
            async for text in self._fragments:
                if text:
                    sent += 1
                    await self._queue.put(StreamEvent.fragment(text))
        except asyncio.CancelledError:
            logger.debug("Answer stream producer cancelled after %d fragments", sent)
            if self._plog:
                self._plog.detail(f"Streaming answer cancelled after {sent} fragments ({_elapsed(started)})")
            raise
        except Exception as e:
            logger.error("Error in streaming: %s", e)
            if self._plog:
                self._plog.step_error(
                    PipelineStage.GENERATE, f"Streaming answer failed after {_elapsed(started)}", error=e
                )
            await self._queue.put(_error_event(e))
        else:
            if self._plog:
                self._plog.step_complete(
                    PipelineStage.GENERATE, f"Streamed {sent} fragments ({_elapsed(started)})"
                )
            await self._queue.put(StreamEvent.done())
        finally:
            await self._close_fragments()

    async def _close_fragments(self) -> None:
        # Suspended provider generators hold an open HTTP response until closed.
        close = getattr(self._fragments, "aclose", None)
        if close is not None:
            await close()

    async def _cancel_producer(self) -> None:
        producer = self._producer
        if producer is None or producer.done():
            return
        producer.cancel()
        try:
            await producer
        except asyncio.CancelledError:
            pass


def _elapsed(started: float) -> str:
    return f"{time.perf_counter() - started:.2f}s"


def _error_event(error: Exception) -> StreamEvent:
    if isinstance(error, SourceRagError):
        return StreamEvent.failure(error.message, error_kind=error.kind)
    return StreamEvent.failure(str(error) or type(error).__name__, error_kind=type(error).__name__)
