"""Prompt messages and completion results exchanged with the generation model."""

from dataclasses import dataclass, field


@dataclass
class ChatMessage:
    role: str  # system, user or assistant
    content: str = ""


@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0
    cost: float | None = None  # USD, only when the provider reports it


@dataclass
class ChatCompletionResult:
    """One non-streamed answer, with the usage the provider billed for it."""

    model: str
    content: str
    finish_reason: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    provider: str = ""
