from .chat_message import ChatMessage, TokenUsage, ChatCompletionResult
from .chunk import Chunk, ScoredChunk
from .document import Document
from .ingestion import IngestionResult, PurgeResult
from .query import QueryAnswer
from .retrieval import RetrievalFilter
from .source import SourceMetadata, SourceType, new_source_id
from .stream import StreamEvent, StreamEventKind

__all__ = [
    "ChatMessage",
    "TokenUsage",
    "ChatCompletionResult",
    "Chunk",
    "ScoredChunk",
    "Document",
    "IngestionResult",
    "PurgeResult",
    "QueryAnswer",
    "RetrievalFilter",
    "SourceMetadata",
    "SourceType",
    "new_source_id",
    "StreamEvent",
    "StreamEventKind",
]
