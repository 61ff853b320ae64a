"""Health check endpoint — reports liveness without touching the vector store."""

from fastapi import APIRouter, Request

from sourcerag.config import get_settings

router = APIRouter(tags=["Health"])


def _index_state(index) -> str:
    if index is None:
        return "not_initialized"
    return "ready" if index.ready else "unavailable"


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Returns the application health status and the state of the tenant index.

    ``unavailable`` means the index is attached but its schema setup has not
    succeeded yet; it is retried on the next index operation.
    """
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "collection": settings.collection_name,
        "index": _index_state(getattr(request.app.state, "tenant_index", None)),
    }
