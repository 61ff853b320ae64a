"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from sourcerag.presentation.api.v1.endpoints.health import router as health_router
from sourcerag.presentation.api.v1.endpoints.ingest import router as ingest_router
from sourcerag.presentation.api.v1.endpoints.chat import router as chat_router
from sourcerag.presentation.api.v1.endpoints.tenant import router as tenant_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(ingest_router)
router.include_router(chat_router)
router.include_router(tenant_router)
