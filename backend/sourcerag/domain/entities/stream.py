"""Domain entity for incremental answer delivery."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StreamEventKind(str, Enum):
    FRAGMENT = "fragment"
    DONE = "done"
    ERROR = "error"


@dataclass(frozen=True)
class StreamEvent:
    """One message on an answer stream.

    A stream carries any number of fragments followed by exactly one
    terminal event (``done`` or ``error``).
    """

    kind: StreamEventKind
    content: str = ""
    error: str | None = None
    error_kind: str | None = None

    @classmethod
    def fragment(cls, content: str) -> "StreamEvent":
        return cls(kind=StreamEventKind.FRAGMENT, content=content)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(kind=StreamEventKind.DONE)

    @classmethod
    def failure(cls, message: str, error_kind: str | None = None) -> "StreamEvent":
        return cls(kind=StreamEventKind.ERROR, error=message, error_kind=error_kind)

    @property
    def is_terminal(self) -> bool:
        return self.kind is not StreamEventKind.FRAGMENT

    def to_payload(self) -> dict[str, Any]:
        """Wire shape consumed by the chat UI."""
        if self.kind is StreamEventKind.FRAGMENT:
            return {"content": self.content}
        if self.kind is StreamEventKind.DONE:
            return {"done": True}
        return {"error": self.error or "Unknown streaming error"}
