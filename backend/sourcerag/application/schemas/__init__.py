from .chat import ChatRequest, ChatResponse
from .ingest import IngestResponse, UrlIngestRequest
from .tenant import DeleteDataResponse

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "IngestResponse",
    "UrlIngestRequest",
    "DeleteDataResponse",
]
