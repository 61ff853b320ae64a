"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sourcerag.config import Settings, get_settings
from sourcerag.application.interfaces import TenantIndex
from sourcerag.infrastructure.database.repositories import PgVectorTenantIndex
from sourcerag.infrastructure.logging.log_config import setup_logging
from sourcerag.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


def _pgvector_index(settings: Settings) -> TenantIndex:
    echo_sql = settings.app_env == "development" and settings.log_level_sql.upper() == "DEBUG"
    return PgVectorTenantIndex(
        settings.database_url,
        collection_name=settings.collection_name,
        echo=echo_sql,
    )


async def _open_index(index: TenantIndex) -> None:
    # Schema setup is retried on first use, so a dead database only degrades /health.
    try:
        await index.connect()
    except Exception:
        logger.exception("Tenant index not reachable at startup")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging(settings)
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    index = getattr(app.state, "tenant_index", None) or _pgvector_index(settings)
    await _open_index(index)
    app.state.tenant_index = index

    if not settings.openrouter_api_key.strip():
        logger.warning("OPENROUTER_API_KEY is empty; ingestion and chat requests will fail upstream")

    yield

    await index.close()


def create_app(tenant_index: TenantIndex | None = None) -> FastAPI:
    """Build the API. ``tenant_index`` swaps out pgvector, e.g. for an in-memory index."""
    settings = get_settings()

    app = FastAPI(title=settings.app_title, version=settings.app_version, lifespan=lifespan)
    if tenant_index is not None:
        app.state.tenant_index = tenant_index

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(api_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("sourcerag.main:app", host="0.0.0.0", port=8020, reload=True)
