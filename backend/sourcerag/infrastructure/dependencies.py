"""FastAPI dependency injection — wires infrastructure to the application layer.

The tenant index is a long-lived client created in the application
lifespan and stored on ``app.state``; everything else is cheap and built
per request.
"""

from fastapi import Depends, Header, HTTPException, Request, status

from sourcerag.config import get_settings
from sourcerag.application.interfaces import ChatProvider, EmbeddingProvider, TenantIndex
from sourcerag.application.services import (
    AnswerSynthesizer,
    IngestionService,
    KeywordFilterStrategy,
    QueryService,
    RetrievalService,
    TenantDeletionService,
    TextChunker,
)
from sourcerag.infrastructure.loaders import (
    PdfSourceLoader,
    WebSourceLoader,
    YouTubeSourceLoader,
)
from sourcerag.infrastructure.openrouter import OpenRouterClient, OpenRouterEmbeddingProvider
from sourcerag.infrastructure.storage.local_file_storage import LocalFileStorage


# ── Request identity ─────────────────────────────────────────────────


async def get_tenant_id(
    x_tenant_id: str | None = Header(default=None, alias="X-Tenant-ID"),
) -> str:
    """The authenticated tenant, as asserted by the upstream auth layer."""
    if not x_tenant_id or not x_tenant_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return x_tenant_id.strip()


# ── Infrastructure ───────────────────────────────────────────────────


def get_tenant_index(request: Request) -> TenantIndex:
    """The shared tenant index client created at startup."""
    return request.app.state.tenant_index


def get_embedding_provider() -> EmbeddingProvider:
    settings = get_settings()
    return OpenRouterEmbeddingProvider(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
        model=settings.embedding_model,
        model_dimensions=settings.embedding_dimensions,
    )


def get_chat_provider() -> ChatProvider:
    settings = get_settings()
    return OpenRouterClient(
        api_key=settings.openrouter_api_key,
        base_url=settings.openrouter_base_url,
        app_name=settings.openrouter_app_name,
    )


def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage(upload_dir=get_settings().upload_dir)


# ── Application services ─────────────────────────────────────────────


def get_ingestion_service(
    tenant_index: TenantIndex = Depends(get_tenant_index),
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider),
) -> IngestionService:
    """Provides an IngestionService with all three source loaders registered."""
    settings = get_settings()
    loaders = [
        PdfSourceLoader(),
        WebSourceLoader(
            timeout=settings.web_fetch_timeout,
            user_agent=settings.web_user_agent,
        ),
        YouTubeSourceLoader(language=settings.transcript_language),
    ]
    return IngestionService(
        loaders,
        embedding_provider,
        tenant_index,
        chunker=TextChunker(settings.chunk_size, settings.chunk_overlap),
        embedding_batch_size=settings.embedding_batch_size,
    )


def get_query_service(
    tenant_index: TenantIndex = Depends(get_tenant_index),
    embedding_provider: EmbeddingProvider = Depends(get_embedding_provider),
    chat_provider: ChatProvider = Depends(get_chat_provider),
) -> QueryService:
    """Provides a QueryService: keyword filter inference → retrieval → synthesis."""
    settings = get_settings()
    retrieval = RetrievalService(
        embedding_provider,
        tenant_index,
        KeywordFilterStrategy(),
        k=settings.retrieval_k,
        timeout_seconds=settings.retrieval_timeout_seconds,
    )
    synthesizer = AnswerSynthesizer(
        chat_provider,
        settings.chat_model,
        temperature=settings.chat_temperature,
    )
    return QueryService(retrieval, synthesizer)


def get_tenant_deletion_service(
    tenant_index: TenantIndex = Depends(get_tenant_index),
) -> TenantDeletionService:
    return TenantDeletionService(tenant_index)
