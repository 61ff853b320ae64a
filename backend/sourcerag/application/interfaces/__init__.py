from .chat_provider import ChatProvider
from .embedding_provider import EmbeddingProvider
from .filter_strategy import FilterInferenceStrategy
from .source_loader import LoadedSource, SourceLoader
from .tenant_index import TenantIndex

__all__ = [
    "ChatProvider",
    "EmbeddingProvider",
    "FilterInferenceStrategy",
    "LoadedSource",
    "SourceLoader",
    "TenantIndex",
]
