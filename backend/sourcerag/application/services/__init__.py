from .answer_stream import AnswerStream
from .answer_synthesizer import NO_RELEVANT_INFORMATION_ANSWER, AnswerSynthesizer
from .chunker import TextChunker
from .filter_inference import KeywordFilterStrategy
from .ingestion_service import IngestionService
from .query_service import QueryService
from .retrieval_service import RetrievalService
from .source_tagger import SourceTagger, source_header
from .tenant_deletion_service import TenantDeletionService

__all__ = [
    "AnswerStream",
    "AnswerSynthesizer",
    "NO_RELEVANT_INFORMATION_ANSWER",
    "TextChunker",
    "KeywordFilterStrategy",
    "IngestionService",
    "QueryService",
    "RetrievalService",
    "SourceTagger",
    "source_header",
    "TenantDeletionService",
]
