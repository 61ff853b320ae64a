"""Answer synthesizer — grounds the generation model in retrieved chunks.

The prompt is fixed; only ``{context}`` and ``{question}`` vary. Context is
the retrieved chunk contents in retrieval order, each still carrying its
``[SOURCE: ...]`` header, so the model can attribute and separate sources.
"""

import logging

from sourcerag.application.interfaces.chat_provider import ChatProvider
from sourcerag.application.services.answer_stream import AnswerStream
from sourcerag.domain.entities import ChatMessage, ScoredChunk
from sourcerag.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("QueryService")

NO_RELEVANT_INFORMATION_ANSWER = "I couldn't find any relevant information in your documents."

# ── Answer prompt ───────────────────────────────────────────────────

_ANSWER_PROMPT = """\
You are a helpful and conversational AI assistant. Answer questions based on the provided context.

CRITICAL RULES:
1. Each context chunk starts with [SOURCE: ...] and that header tells you WHERE the information comes from
2. If the question asks about a SPECIFIC source (e.g., "the YouTube video", "the website"), use ONLY chunks from that source
3. NEVER mix information from different sources; treat each source as completely separate
4. When answering, cite which source you're using naturally (e.g., "According to the YouTube video...", "The website mentions...")
5. Pay special attention to the source description in [SOURCE: ...] to differentiate between similar content from different sources
6. If you have information from MULTIPLE sources, mention ALL of them in your answer

CONTEXTUAL NUANCE & REFERENCES:
- Be alert for references that modify meaning (e.g., "Section A says X, but later it is clarified that Y")
- If one part of the context modifies, updates, or contradicts another part, treat the modifying/later information as the current truth
- Explain this distinction to the user: "The document initially states X, but later clarifies that Y..."

HANDLING MISSING INFORMATION:
- If you cannot find specific information, be helpful and say what you DO know
- Instead of just saying "I don't have that information", explain what information IS available
- For example:
  BAD: "I don't have that information in the website"
  GOOD: "I don't see specific pricing information on the website, but it mentions [related info]. The website does include these links: [list relevant links]"

<context>
{context}
</context>

Question: {question}

Remember: Be conversational, helpful, and cite your sources naturally. Each [SOURCE: ...] header indicates a DIFFERENT source.
"""

_PROMPT_HEAD, _rest = _ANSWER_PROMPT.split("{context}")
_PROMPT_MIDDLE, _PROMPT_TAIL = _rest.split("{question}")


class AnswerSynthesizer:
    """Produces answers from a question and its retrieved chunks.

    Two delivery modes share one prompt:
      - ``synthesize`` returns the complete answer string.
      - ``stream`` returns an ``AnswerStream`` of incremental fragments.

    With no chunks the provider is never called; both modes deliver
    ``NO_RELEVANT_INFORMATION_ANSWER``.
    """

    def __init__(
        self,
        chat_provider: ChatProvider,
        model: str,
        *,
        temperature: float | None = None,
    ):
        self._chat_provider = chat_provider
        self._model = model
        self._temperature = temperature

    @staticmethod
    def build_prompt(question: str, chunks: list[ScoredChunk]) -> str:
        context = "\n\n".join(scored.chunk.content for scored in chunks)
        # Spliced, not format()ed: chunk text may contain braces.
        return _PROMPT_HEAD + context + _PROMPT_MIDDLE + question + _PROMPT_TAIL

    async def synthesize(self, question: str, chunks: list[ScoredChunk]) -> str:
        """Complete-string mode.

        Raises:
            GenerationServiceError: If the provider fails.
        """
        if not chunks:
            logger.info("No chunks retrieved — returning fixed answer")
            return NO_RELEVANT_INFORMATION_ANSWER

        messages = self._messages(question, chunks)
        with plog.timed_step(
            PipelineStage.GENERATE,
            "Generating answer",
            model=self._model,
            chunks=len(chunks),
        ):
            result = await self._chat_provider.complete(
                messages, self._model, temperature=self._temperature
            )
        return result.content

    def stream(self, question: str, chunks: list[ScoredChunk]) -> AnswerStream:
        """Incremental mode. The provider request starts on first iteration."""
        if not chunks:
            logger.info("No chunks retrieved — streaming fixed answer")
            return AnswerStream.from_text(NO_RELEVANT_INFORMATION_ANSWER)

        plog.detail("Prepared streaming request", model=self._model, chunks=len(chunks))
        fragments = self._chat_provider.stream(
            self._messages(question, chunks),
            self._model,
            temperature=self._temperature,
        )
        return AnswerStream(fragments, pipeline_log=plog)

    def _messages(self, question: str, chunks: list[ScoredChunk]) -> list[ChatMessage]:
        return [ChatMessage(role="user", content=self.build_prompt(question, chunks))]
